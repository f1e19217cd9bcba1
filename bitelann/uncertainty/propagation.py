"""
Confidence intervals for thermoelectric properties.

Every interval is a two-sided 95% Gaussian interval, mean ± 1.96·std, on the
base channels (resistivity ρ, Seebeck coefficient S, thermal conductivity κ).
Derived quantities use interval arithmetic:

    electrical conductivity  σ  = 1/ρ            [1/ρ_upper, 1/ρ_lower]
    power factor             PF = S²/ρ           [S²_min/ρ_upper, S²_max/ρ_lower]
    figure of merit          zT = S²/(ρκ)·T_abs  [S²_min/(ρ_upper κ_upper)·T_abs,
                                                  S²_max/(ρ_lower κ_lower)·T_abs]

S² bounds are the min/max of the squared mean and squared interval ends,
with the minimum forced to zero when the Seebeck interval straddles zero.

Unavailable bounds are NaN. Division by zero gives ±inf and is passed through.
"""

import numpy as np
from dataclasses import dataclass, replace
from typing import Dict, Sequence, Tuple


CI_Z_SCORE = 1.96
CELSIUS_TO_KELVIN = 273.15
UNAVAILABLE = float("nan")

QUANTITIES = (
    "resistivity",
    "seebeck",
    "thermal_conductivity",
    "electrical_conductivity",
    "power_factor",
    "figure_of_merit",
)


@dataclass(frozen=True)
class DerivedQuantity:
    """A value with (possibly unavailable) lower and upper confidence bounds."""
    value: float
    lower: float = UNAVAILABLE
    upper: float = UNAVAILABLE

    @property
    def has_interval(self) -> bool:
        return not (np.isnan(self.lower) or np.isnan(self.upper))

    def scaled(self, factor: float) -> 'DerivedQuantity':
        """Multiply value and bounds by a unit conversion factor."""
        return replace(
            self,
            value=self.value * factor,
            lower=self.lower * factor,
            upper=self.upper * factor,
        )

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.value, self.lower, self.upper)


def _divide(numerator: float, denominator: float) -> float:
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.divide(np.float64(numerator), np.float64(denominator)))


def confidence_interval(mean: float, std: float, z: float = CI_Z_SCORE) -> Tuple[float, float]:
    """
    Two-sided Gaussian confidence interval.

    Args:
        mean: Predicted mean
        std: Predicted standard deviation
        z: Standard score (1.96 for 95%)

    Returns:
        (lower, upper) = (mean - z·std, mean + z·std)
    """
    return mean - z * std, mean + z * std


def squared_interval(mean: float, std: float, z: float = CI_Z_SCORE) -> Tuple[float, float]:
    """
    Bounds of x² for x in the confidence interval of (mean, std).

    Returns:
        (lower, upper) bounds of the square. The lower bound is 0 when the
        interval contains zero, since x² attains its minimum there.
    """
    lower, upper = confidence_interval(mean, std, z)
    candidates = np.array([mean * mean, lower * lower, upper * upper], dtype=np.float64)

    lower_sq = float(np.min(candidates))
    upper_sq = float(np.max(candidates))
    if lower < 0 < upper:
        lower_sq = 0.0

    return lower_sq, upper_sq


def _positive_quantity(mean: float, std: float, show_ci: bool) -> DerivedQuantity:
    lower, upper = confidence_interval(mean, std)
    # Intervals reaching below zero are hidden, not clamped
    if not show_ci or lower < 0:
        return DerivedQuantity(mean)
    return DerivedQuantity(mean, lower, upper)


def resistivity(mean: float, std: float, show_ci: bool = True) -> DerivedQuantity:
    """Electrical resistivity ρ [Ohm m] with its interval (hidden if ρ_lower < 0)."""
    return _positive_quantity(mean, std, show_ci)


def thermal_conductivity(mean: float, std: float, show_ci: bool = True) -> DerivedQuantity:
    """Thermal conductivity κ [W/(m K)] with its interval (hidden if κ_lower < 0)."""
    return _positive_quantity(mean, std, show_ci)


def seebeck_coefficient(mean: float, std: float, show_ci: bool = True) -> DerivedQuantity:
    """Seebeck coefficient S [V/K]; negative values are physical and kept."""
    if not show_ci:
        return DerivedQuantity(mean)
    lower, upper = confidence_interval(mean, std)
    return DerivedQuantity(mean, lower, upper)


def electrical_conductivity(
    resistivity_mean: float,
    resistivity_std: float,
    show_ci: bool = True,
) -> DerivedQuantity:
    """
    Electrical conductivity σ = 1/ρ [S/m].

    Bounds swap because 1/ρ decreases with ρ. They are unavailable when
    ``show_ci`` is false or ρ_lower < 0.
    """
    value = _divide(1.0, resistivity_mean)

    rho_lower, rho_upper = confidence_interval(resistivity_mean, resistivity_std)
    if not show_ci or rho_lower < 0:
        return DerivedQuantity(value)

    return DerivedQuantity(value, _divide(1.0, rho_upper), _divide(1.0, rho_lower))


def power_factor(
    seebeck_mean: float,
    seebeck_std: float,
    resistivity_mean: float,
    resistivity_std: float,
    show_ci: bool = True,
) -> DerivedQuantity:
    """
    Power factor PF = S²/ρ [W/(m K²)].

    The interval needs a positive resistivity interval; it is unavailable
    when ρ_lower < 0 or ``show_ci`` is false.
    """
    value = _divide(seebeck_mean * seebeck_mean, resistivity_mean)
    if not show_ci:
        return DerivedQuantity(value)

    rho_lower, rho_upper = confidence_interval(resistivity_mean, resistivity_std)
    if rho_lower < 0:
        return DerivedQuantity(value)

    s2_lower, s2_upper = squared_interval(seebeck_mean, seebeck_std)
    return DerivedQuantity(
        value,
        _divide(s2_lower, rho_upper),
        _divide(s2_upper, rho_lower),
    )


def figure_of_merit(
    seebeck_mean: float,
    seebeck_std: float,
    resistivity_mean: float,
    resistivity_std: float,
    thermal_conductivity_mean: float,
    thermal_conductivity_std: float,
    temperature: float,
    show_ci: bool = True,
) -> DerivedQuantity:
    """
    Dimensionless figure of merit zT = S²/(ρκ)·(T + 273.15).

    Args:
        seebeck_mean, seebeck_std: Seebeck coefficient [V/K]
        resistivity_mean, resistivity_std: Electrical resistivity [Ohm m]
        thermal_conductivity_mean, thermal_conductivity_std: Thermal conductivity [W/(m K)]
        temperature: Temperature in °C
        show_ci: Whether to compute the interval

    Returns:
        DerivedQuantity; bounds are unavailable when ``show_ci`` is false or
        either denominator interval reaches below zero.
    """
    absolute_temperature = temperature + CELSIUS_TO_KELVIN
    value = _divide(
        seebeck_mean * seebeck_mean,
        resistivity_mean * thermal_conductivity_mean,
    ) * absolute_temperature
    if not show_ci:
        return DerivedQuantity(value)

    rho_lower, rho_upper = confidence_interval(resistivity_mean, resistivity_std)
    kappa_lower, kappa_upper = confidence_interval(thermal_conductivity_mean, thermal_conductivity_std)
    if rho_lower < 0 or kappa_lower < 0:
        return DerivedQuantity(value)

    s2_lower, s2_upper = squared_interval(seebeck_mean, seebeck_std)
    return DerivedQuantity(
        value,
        _divide(s2_lower, rho_upper * kappa_upper) * absolute_temperature,
        _divide(s2_upper, rho_lower * kappa_lower) * absolute_temperature,
    )


@dataclass(frozen=True)
class DerivedProperties:
    """All six quantities at one temperature node."""
    resistivity: DerivedQuantity
    seebeck: DerivedQuantity
    thermal_conductivity: DerivedQuantity
    electrical_conductivity: DerivedQuantity
    power_factor: DerivedQuantity
    figure_of_merit: DerivedQuantity

    def to_dict(self) -> Dict[str, DerivedQuantity]:
        return {name: getattr(self, name) for name in QUANTITIES}


def propagate_node(
    mean: Sequence[float],
    std: Sequence[float],
    temperature: float,
    show_tep_ci: bool = True,
    show_zt_ci: bool = True,
) -> DerivedProperties:
    """
    Compute every quantity with its interval at one temperature node.

    Args:
        mean: (ρ, S, κ) means in physical units
        std: (ρ, S, κ) standard deviations in physical units
        temperature: Node temperature in °C
        show_tep_ci: Show intervals for ρ, S, κ and σ
        show_zt_ci: Show intervals for the power factor and zT

    Returns:
        DerivedProperties for the node
    """
    rho, seebeck, kappa = (float(v) for v in mean)
    rho_std, seebeck_std, kappa_std = (float(v) for v in std)

    return DerivedProperties(
        resistivity=resistivity(rho, rho_std, show_tep_ci),
        seebeck=seebeck_coefficient(seebeck, seebeck_std, show_tep_ci),
        thermal_conductivity=thermal_conductivity(kappa, kappa_std, show_tep_ci),
        electrical_conductivity=electrical_conductivity(rho, rho_std, show_tep_ci),
        power_factor=power_factor(seebeck, seebeck_std, rho, rho_std, show_zt_ci),
        figure_of_merit=figure_of_merit(
            seebeck, seebeck_std, rho, rho_std, kappa, kappa_std, temperature, show_zt_ci,
        ),
    )
