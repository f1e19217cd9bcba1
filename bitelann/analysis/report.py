"""
Tabular and JSON reports of derived temperature sweeps.

Values are converted from SI to the units the quantities are usually
plotted in (mΩ cm, μV/K, S/cm, mW/m/K²).
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import numpy as np

from ..inference.predictor import DerivedSweep
from ..uncertainty.propagation import QUANTITIES, DerivedQuantity


@dataclass(frozen=True)
class DisplayUnit:
    label: str
    unit: str
    scale: float


DISPLAY_UNITS: Dict[str, DisplayUnit] = {
    "resistivity": DisplayUnit("Electrical resistivity", "mΩ cm", 1e5),
    "seebeck": DisplayUnit("Seebeck coefficient", "μV/K", 1e6),
    "thermal_conductivity": DisplayUnit("Thermal conductivity", "W/m/K", 1.0),
    "electrical_conductivity": DisplayUnit("Electrical conductivity", "S/cm", 1e-2),
    "power_factor": DisplayUnit("Power factor", "mW/m/K²", 1e3),
    "figure_of_merit": DisplayUnit("Figure of merit zT", "1", 1.0),
}


def to_display(name: str, quantity: DerivedQuantity) -> DerivedQuantity:
    """Convert a quantity from SI to its display unit."""
    return quantity.scaled(DISPLAY_UNITS[name].scale)


def _json_number(value: float) -> Optional[float]:
    value = float(value)
    return value if math.isfinite(value) else None


def sweep_to_records(
    temperatures: Sequence[float],
    derived: DerivedSweep,
    quantities: Sequence[str] = QUANTITIES,
) -> List[Dict]:
    """
    Build JSON-ready rows, one per temperature node.

    Args:
        temperatures: Temperature nodes in °C
        derived: Result of ``ThermoelectricPredictor.derive``
        quantities: Quantities to include

    Returns:
        List of {"temperature": T, <quantity>: {"value", "lower", "upper"}}
        in display units, with NaN and inf mapped to None
    """
    records = []
    for i, temperature in enumerate(temperatures):
        record = {"temperature": float(temperature)}
        for name in quantities:
            quantity = to_display(name, derived[name][i])
            record[name] = {
                "value": _json_number(quantity.value),
                "lower": _json_number(quantity.lower),
                "upper": _json_number(quantity.upper),
            }
        records.append(record)
    return records


def format_table(
    temperatures: Sequence[float],
    derived: DerivedSweep,
    quantities: Sequence[str] = QUANTITIES,
    show_bounds: bool = True,
) -> str:
    """
    Render a fixed-width text table in display units.

    Missing bounds are printed as ``-``.
    """
    width = 30 if show_bounds else 12

    header = f"{'T [°C]':>8}"
    for name in quantities:
        unit = DISPLAY_UNITS[name]
        header += f"  {(name + ' [' + unit.unit + ']'):>{width}}"

    lines = [header, "-" * len(header)]
    for i, temperature in enumerate(temperatures):
        row = f"{float(temperature):>8.1f}"
        for name in quantities:
            quantity = to_display(name, derived[name][i])
            cell = _format_number(quantity.value)
            if show_bounds:
                cell += f" [{_format_number(quantity.lower)}, {_format_number(quantity.upper)}]"
            row += f"  {cell:>{width}}"
        lines.append(row)

    return "\n".join(lines)


def _format_number(value: float) -> str:
    if np.isnan(value):
        return "-"
    return f"{value:.4g}"
