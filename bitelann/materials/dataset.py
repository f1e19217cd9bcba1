"""
Experimental thermoelectric measurements of BiTe-based samples.

Each sample is keyed by a name such as "p-type, x=0.20, a-axis" and holds
measured values at a handful of temperatures:
- Electrical resistivity ρ [Ohm m]
- Seebeck coefficient S [V/K]
- Thermal conductivity κ [W/(m·K)]

The measurements are used to compare against model predictions only; they
are never fed back into the networks.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Union
import json
from pathlib import Path

import numpy as np

from ..models.descriptor import CarrierType, CrystalAxis
from ..uncertainty.propagation import CELSIUS_TO_KELVIN
from ..utils.config import DEFAULT_DATASET_PATH


DEFAULT_SAMPLE = "n-type, x=0.50, a-axis"

TEMPERATURE_KEY = "temperature [degC]"
RESISTIVITY_KEY = "electrical_resistivity [Ohm m]"
SEEBECK_KEY = "Seebeck_coefficient [V/K]"
THERMAL_CONDUCTIVITY_KEY = "thermal_conductivity [W/m/K]"


@dataclass
class ExperimentalSample:
    """Measured properties of one sample."""
    name: str
    descriptor: np.ndarray             # [x, isP, isN, isA, isC]
    temperatures: np.ndarray           # °C
    resistivity: np.ndarray            # Ohm m
    seebeck: np.ndarray                # V/K
    thermal_conductivity: np.ndarray   # W/(m·K)

    @classmethod
    def from_dict(cls, name: str, data: Dict) -> 'ExperimentalSample':
        sample = cls(
            name=name,
            descriptor=np.asarray(data["input"], dtype=np.float64),
            temperatures=np.asarray(data[TEMPERATURE_KEY], dtype=np.float64),
            resistivity=np.asarray(data[RESISTIVITY_KEY], dtype=np.float64),
            seebeck=np.asarray(data[SEEBECK_KEY], dtype=np.float64),
            thermal_conductivity=np.asarray(data[THERMAL_CONDUCTIVITY_KEY], dtype=np.float64),
        )
        n = sample.temperatures.size
        if not (sample.resistivity.size == sample.seebeck.size == sample.thermal_conductivity.size == n):
            raise ValueError(f"Sample '{name}': property lists must match the temperature list")
        if sample.descriptor.size != 5:
            raise ValueError(f"Sample '{name}': input must have 5 entries, got {sample.descriptor.size}")
        return sample

    @property
    def composition(self) -> float:
        return float(self.descriptor[0])

    @property
    def carrier_type(self) -> CarrierType:
        return CarrierType.P if self.descriptor[1] > self.descriptor[2] else CarrierType.N

    @property
    def axis(self) -> CrystalAxis:
        return CrystalAxis.A if self.descriptor[3] > self.descriptor[4] else CrystalAxis.C

    @property
    def electrical_conductivity(self) -> np.ndarray:
        """σ = 1/ρ [S/m]."""
        return 1.0 / self.resistivity

    @property
    def power_factor(self) -> np.ndarray:
        """PF = S²/ρ [W/(m·K²)]."""
        return self.seebeck ** 2 / self.resistivity

    @property
    def figure_of_merit(self) -> np.ndarray:
        """zT = S²/(ρκ)·T with T in kelvin."""
        absolute_temperature = self.temperatures + CELSIUS_TO_KELVIN
        return self.seebeck ** 2 / (self.resistivity * self.thermal_conductivity) * absolute_temperature

    def to_dict(self) -> dict:
        """Convert to the JSON layout used by the data file."""
        return {
            "input": self.descriptor.tolist(),
            TEMPERATURE_KEY: self.temperatures.tolist(),
            RESISTIVITY_KEY: self.resistivity.tolist(),
            SEEBECK_KEY: self.seebeck.tolist(),
            THERMAL_CONDUCTIVITY_KEY: self.thermal_conductivity.tolist(),
        }


class ExperimentalDataset:
    """
    Named collection of experimental samples.

    Loads the packaged measurements by default.
    """

    def __init__(self, data_path: Optional[Path] = None):
        """
        Initialize the dataset.

        Args:
            data_path: JSON file of samples (packaged data if omitted)
        """
        self.data_path = Path(data_path) if data_path is not None else DEFAULT_DATASET_PATH
        self._samples: Dict[str, ExperimentalSample] = {}
        self._load(self.data_path)

    def _load(self, path: Path) -> None:
        if not path.exists():
            raise FileNotFoundError(f"Dataset file not found: {path}")

        with open(path, 'r', encoding='utf-8') as f:
            raw = json.load(f)

        for name, data in raw.items():
            self._samples[name] = ExperimentalSample.from_dict(name, data)

    def get(self, name: str) -> Optional[ExperimentalSample]:
        """
        Get sample by name.

        Args:
            name: Sample name, e.g. "p-type, x=0.20, a-axis"

        Returns:
            Sample or None if not found
        """
        return self._samples.get(name)

    def get_or_raise(self, name: str) -> ExperimentalSample:
        """
        Get sample by name or raise error.

        Raises:
            KeyError: If the sample is not found
        """
        sample = self.get(name)
        if sample is None:
            available = ", ".join(list(self._samples.keys())[:10])
            raise KeyError(
                f"Sample '{name}' not found. "
                f"Available samples include: {available}..."
            )
        return sample

    def search(self, query: str) -> List[ExperimentalSample]:
        """Samples whose name contains ``query`` (case-insensitive)."""
        query = query.lower()
        return [
            sample for name, sample in self._samples.items()
            if query in name.lower()
        ]

    def filter(
        self,
        carrier_type: Optional[Union[str, CarrierType]] = None,
        axis: Optional[Union[str, CrystalAxis]] = None,
    ) -> List[ExperimentalSample]:
        """
        Samples matching a carrier type and/or crystal axis.

        Args:
            carrier_type: p-type or n-type (any if None)
            axis: a-axis or c-axis (any if None)
        """
        if carrier_type is not None:
            carrier_type = CarrierType.parse(carrier_type)
        if axis is not None:
            axis = CrystalAxis.parse(axis)

        return [
            sample for sample in self._samples.values()
            if (carrier_type is None or sample.carrier_type is carrier_type)
            and (axis is None or sample.axis is axis)
        ]

    def list_all(self) -> List[str]:
        """Get list of all sample names."""
        return list(self._samples.keys())

    def __len__(self) -> int:
        return len(self._samples)

    def __contains__(self, name: str) -> bool:
        return name in self._samples

    def __iter__(self) -> Iterator[ExperimentalSample]:
        return iter(self._samples.values())

    def __repr__(self) -> str:
        return f"ExperimentalDataset({len(self)} samples)"


# Global dataset instance
_dataset: Optional[ExperimentalDataset] = None


def get_dataset() -> ExperimentalDataset:
    """Get global experimental dataset instance."""
    global _dataset
    if _dataset is None:
        _dataset = ExperimentalDataset()
    return _dataset
