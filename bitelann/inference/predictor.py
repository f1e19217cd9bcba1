"""
Temperature-sweep inference for the BiTe property models.

Evaluates a fixed material descriptor over a temperature grid and converts
the predicted means/stds into every thermoelectric quantity with its
confidence interval.
"""

import logging
import numpy as np
import torch
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from ..models.descriptor import CarrierType, CrystalAxis, build_descriptor
from ..models.property_model import MeanPropertyModel, PropertyPrediction, load_property_model
from ..uncertainty.propagation import QUANTITIES, DerivedQuantity, propagate_node
from ..utils.config import PredictionConfig, load_model_config
from .torch_export import TorchPropertyModel


logger = logging.getLogger(__name__)


def temperature_grid(
    min_temp: float = 0.0,
    max_temp: float = 300.0,
    n_nodes: int = 100,
) -> np.ndarray:
    """
    Evenly spaced temperature nodes in °C.

    Args:
        min_temp: First node
        max_temp: Last node (exact)
        n_nodes: Number of nodes

    Returns:
        Array of shape (n_nodes,)
    """
    if n_nodes < 2:
        raise ValueError(f"n_nodes must be at least 2, got {n_nodes}")
    grid = np.linspace(min_temp, max_temp, n_nodes)
    grid[-1] = max_temp
    return grid


@dataclass
class SweepResult:
    """
    Base-channel predictions over a temperature grid.

    ``mean`` and ``std`` have shape (n_nodes, 3) with columns
    (resistivity, Seebeck coefficient, thermal conductivity).
    ``std`` is None for mean-only models.
    """
    temperatures: np.ndarray
    mean: np.ndarray
    std: Optional[np.ndarray] = None
    label: str = ""

    @classmethod
    def allocate(cls, temperatures: np.ndarray, with_std: bool) -> 'SweepResult':
        temperatures = np.asarray(temperatures, dtype=np.float64)
        n = temperatures.size
        return cls(
            temperatures=temperatures.copy(),
            mean=np.full((n, 3), np.nan),
            std=np.full((n, 3), np.nan) if with_std else None,
        )

    def clear(self) -> None:
        """Reset every prediction to NaN."""
        self.mean.fill(np.nan)
        if self.std is not None:
            self.std.fill(np.nan)

    @property
    def n_nodes(self) -> int:
        return self.temperatures.size

    @property
    def resistivity(self) -> np.ndarray:
        return self.mean[:, 0]

    @property
    def seebeck(self) -> np.ndarray:
        return self.mean[:, 1]

    @property
    def thermal_conductivity(self) -> np.ndarray:
        return self.mean[:, 2]


@dataclass
class DerivedSweep:
    """One list of DerivedQuantity per quantity, aligned with ``temperatures``."""
    temperatures: np.ndarray
    quantities: Dict[str, List[DerivedQuantity]] = field(default_factory=dict)

    def __getitem__(self, name: str) -> List[DerivedQuantity]:
        return self.quantities[name]

    def values(self, name: str) -> np.ndarray:
        return np.array([q.value for q in self.quantities[name]])

    def lower(self, name: str) -> np.ndarray:
        return np.array([q.lower for q in self.quantities[name]])

    def upper(self, name: str) -> np.ndarray:
        return np.array([q.upper for q in self.quantities[name]])


class ThermoelectricPredictor:
    """
    Sweep a property model over temperature and derive figures of merit.

    The predictor holds no state between sweeps; each sweep fills its own
    SweepResult (or one passed in through ``out``).
    """

    def __init__(
        self,
        model: MeanPropertyModel,
        temperatures: Optional[np.ndarray] = None,
    ):
        """
        Initialize predictor.

        Args:
            model: Mean-only or mean+std property model
            temperatures: Default temperature grid (0-300 °C, 100 nodes if omitted)
        """
        self.model = model
        self.temperatures = (
            np.asarray(temperatures, dtype=np.float64)
            if temperatures is not None else temperature_grid()
        )
        self._torch_model = None

    @classmethod
    def from_json(
        cls,
        model_path: Optional[Path] = None,
        temperatures: Optional[np.ndarray] = None,
    ) -> 'ThermoelectricPredictor':
        """Load weights from a JSON file (the packaged mean+std model by default)."""
        return cls(load_property_model(load_model_config(model_path)), temperatures)

    @classmethod
    def from_config(cls, config: PredictionConfig) -> 'ThermoelectricPredictor':
        grid = temperature_grid(config.min_temp, config.max_temp, config.n_temp_nodes)
        return cls.from_json(config.model_path, grid)

    @property
    def has_std(self) -> bool:
        return self.model.has_std

    def predict(
        self,
        composition: float,
        carrier_type: Union[str, CarrierType],
        axis: Union[str, CrystalAxis],
        temperature: float,
    ) -> PropertyPrediction:
        """Predict the base channels at a single temperature (°C)."""
        return self.model.evaluate(build_descriptor(composition, carrier_type, axis, temperature))

    def sweep(
        self,
        composition: float,
        carrier_type: Union[str, CarrierType],
        axis: Union[str, CrystalAxis],
        temperatures: Optional[Sequence[float]] = None,
        out: Optional[SweepResult] = None,
        batched: bool = False,
    ) -> SweepResult:
        """
        Predict the base channels over a temperature grid.

        Args:
            composition: Composition fraction x
            carrier_type: p-type or n-type
            axis: a-axis or c-axis
            temperatures: Grid in °C (predictor default if omitted)
            out: Previous result whose arrays are reused (must match the grid size)
            batched: Evaluate all nodes in one pass through the torch model

        Returns:
            SweepResult; all NaN when the composition is not finite
        """
        grid = self.temperatures if temperatures is None else np.asarray(temperatures, dtype=np.float64)

        if out is None:
            result = SweepResult.allocate(grid, with_std=self.has_std)
        else:
            if out.n_nodes != grid.size or (out.std is not None) != self.has_std:
                raise ValueError(
                    f"Output buffer has {out.n_nodes} nodes (std={out.std is not None}), "
                    f"sweep needs {grid.size} nodes (std={self.has_std})"
                )
            result = out
            result.temperatures[:] = grid
            result.clear()

        carrier_type = CarrierType.parse(carrier_type)
        axis = CrystalAxis.parse(axis)
        result.label = f"{carrier_type.label}, x={composition:.2f}, {axis.label}"

        if not np.isfinite(composition):
            logger.debug("Composition %r is not finite; sweep left empty", composition)
            return result

        logger.debug("Sweeping %d temperature nodes for %s", grid.size, result.label)

        if batched:
            self._sweep_batched(composition, carrier_type, axis, result)
            return result

        descriptor = build_descriptor(composition, carrier_type, axis)
        for i, temperature in enumerate(grid):
            descriptor[-1] = temperature
            prediction = self.model.evaluate(descriptor)
            result.mean[i] = prediction.mean.array
            if result.std is not None:
                result.std[i] = prediction.std.array

        return result

    def _sweep_batched(
        self,
        composition: float,
        carrier_type: CarrierType,
        axis: CrystalAxis,
        result: SweepResult,
    ) -> None:
        if self._torch_model is None:
            self._torch_model = TorchPropertyModel(self.model).eval()

        descriptors = np.tile(build_descriptor(composition, carrier_type, axis), (result.n_nodes, 1))
        descriptors[:, -1] = result.temperatures

        with torch.no_grad():
            outputs = self._torch_model(torch.from_numpy(descriptors))

        if self.has_std:
            mean, std = outputs
            result.mean[:] = mean.numpy()
            result.std[:] = std.numpy()
        else:
            result.mean[:] = outputs.numpy()

    def derive(
        self,
        sweep: SweepResult,
        show_tep_ci: Union[bool, Sequence[bool]] = True,
        show_zt_ci: Union[bool, Sequence[bool]] = True,
    ) -> DerivedSweep:
        """
        Compute every thermoelectric quantity with its 95% interval per node.

        Args:
            sweep: Result of ``sweep``
            show_tep_ci: Show intervals for ρ, S, κ and σ (one flag or one per node)
            show_zt_ci: Show intervals for the power factor and zT (one flag or one per node)

        Returns:
            DerivedSweep keyed by quantity name
        """
        shape = sweep.temperatures.shape
        tep_flags = np.broadcast_to(np.asarray(show_tep_ci, dtype=bool), shape)
        zt_flags = np.broadcast_to(np.asarray(show_zt_ci, dtype=bool), shape)

        std = sweep.std
        if std is None:
            # Mean-only models have no intervals to draw
            std = np.full_like(sweep.mean, np.nan)
            tep_flags = zt_flags = np.zeros(shape, dtype=bool)

        derived = DerivedSweep(
            temperatures=sweep.temperatures.copy(),
            quantities={name: [] for name in QUANTITIES},
        )
        for i, temperature in enumerate(sweep.temperatures):
            node = propagate_node(
                sweep.mean[i], std[i], temperature, bool(tep_flags[i]), bool(zt_flags[i]),
            )
            for name, quantity in node.to_dict().items():
                derived.quantities[name].append(quantity)

        return derived
