"""
Descriptor encoding for the BiTe property models.

A descriptor is the 6-vector

    [composition x, is p-type, is n-type, is a-axis, is c-axis, temperature (°C)]

Carrier type and crystal axis are one-hot pairs. The models do not check that
the flags are exclusive; ``build_descriptor`` always produces valid pairs.
"""

from enum import Enum
from typing import List, Union


DESCRIPTOR_SIZE = 6
TEMPERATURE_INDEX = 5


class CarrierType(Enum):
    P = "p"
    N = "n"

    @classmethod
    def parse(cls, value: Union[str, 'CarrierType']) -> 'CarrierType':
        """Accept a member or one of "p", "p-type", "n", "n-type"."""
        if isinstance(value, CarrierType):
            return value
        key = str(value).strip().lower()
        if key.endswith("-type"):
            key = key[:-len("-type")]
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown carrier type: {value!r}. Use 'p-type' or 'n-type'") from None

    @property
    def label(self) -> str:
        return f"{self.value}-type"


class CrystalAxis(Enum):
    A = "a"
    C = "c"

    @classmethod
    def parse(cls, value: Union[str, 'CrystalAxis']) -> 'CrystalAxis':
        """Accept a member or one of "a", "a-axis", "c", "c-axis"."""
        if isinstance(value, CrystalAxis):
            return value
        key = str(value).strip().lower()
        if key.endswith("-axis"):
            key = key[:-len("-axis")]
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown crystal axis: {value!r}. Use 'a-axis' or 'c-axis'") from None

    @property
    def label(self) -> str:
        return f"{self.value}-axis"


def build_descriptor(
    composition: float,
    carrier_type: Union[str, CarrierType],
    axis: Union[str, CrystalAxis],
    temperature: float = 0.0,
) -> List[float]:
    """
    Encode a material and temperature as a model descriptor.

    Args:
        composition: Composition fraction x
        carrier_type: p-type or n-type
        axis: a-axis or c-axis
        temperature: Temperature in °C

    Returns:
        6-element descriptor list
    """
    carrier_type = CarrierType.parse(carrier_type)
    axis = CrystalAxis.parse(axis)

    return [
        float(composition),
        1.0 if carrier_type is CarrierType.P else 0.0,
        1.0 if carrier_type is CarrierType.N else 0.0,
        1.0 if axis is CrystalAxis.A else 0.0,
        1.0 if axis is CrystalAxis.C else 0.0,
        float(temperature),
    ]
