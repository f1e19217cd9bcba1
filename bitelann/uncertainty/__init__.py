# Uncertainty Module
from .propagation import (
    CI_Z_SCORE,
    CELSIUS_TO_KELVIN,
    QUANTITIES,
    UNAVAILABLE,
    DerivedQuantity,
    DerivedProperties,
    confidence_interval,
    squared_interval,
    resistivity,
    seebeck_coefficient,
    thermal_conductivity,
    electrical_conductivity,
    power_factor,
    figure_of_merit,
    propagate_node,
)

__all__ = [
    "CI_Z_SCORE",
    "CELSIUS_TO_KELVIN",
    "QUANTITIES",
    "UNAVAILABLE",
    "DerivedQuantity",
    "DerivedProperties",
    "confidence_interval",
    "squared_interval",
    "resistivity",
    "seebeck_coefficient",
    "thermal_conductivity",
    "electrical_conductivity",
    "power_factor",
    "figure_of_merit",
    "propagate_node",
]
