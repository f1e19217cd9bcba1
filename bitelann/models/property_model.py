"""
Physical-unit property models built on latent-space networks.

Input scaling:
    temperature (°C) / 300, other descriptor entries unchanged

Output scaling (mean):
    resistivity          = softplus(y0) * 1e-5   [Ohm m]
    Seebeck coefficient  = y1 * 1e-4             [V/K]
    thermal conductivity = softplus(y2)          [W/(m K)]

Output scaling (std):
    y0 * 1e-5, y1 * 1e-4, y2 (already positive through the std dictionary's
    final softplus layer)
"""

import logging
import numpy as np
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ..exceptions import ConfigShapeError, ShapeError
from .activations import softplus
from .descriptor import DESCRIPTOR_SIZE, TEMPERATURE_INDEX
from .latent import LatentSpaceNetwork
from .matrix import Matrix
from .network import FeedForwardNetwork, VectorLike, as_column


logger = logging.getLogger(__name__)

TEMPERATURE_SCALE = 300.0
RESISTIVITY_SCALE = 1e-5
SEEBECK_SCALE = 1e-4

EMBEDDING_INPUT_SIZE = DESCRIPTOR_SIZE - 1

RESISTIVITY, SEEBECK, THERMAL_CONDUCTIVITY = 0, 1, 2
CHANNEL_NAMES = ("resistivity", "seebeck", "thermal_conductivity")
CHANNEL_UNITS = ("Ohm m", "V/K", "W/m/K")


@dataclass
class PropertyPrediction:
    """Mean (and optional std) of the three base channels in physical units."""
    mean: Matrix
    std: Optional[Matrix] = None

    @property
    def resistivity(self) -> float:
        return self.mean.get(RESISTIVITY, 0)

    @property
    def seebeck(self) -> float:
        return self.mean.get(SEEBECK, 0)

    @property
    def thermal_conductivity(self) -> float:
        return self.mean.get(THERMAL_CONDUCTIVITY, 0)

    @property
    def resistivity_std(self) -> float:
        return self._std(RESISTIVITY)

    @property
    def seebeck_std(self) -> float:
        return self._std(SEEBECK)

    @property
    def thermal_conductivity_std(self) -> float:
        return self._std(THERMAL_CONDUCTIVITY)

    def _std(self, channel: int) -> float:
        if self.std is None:
            raise AttributeError("This prediction has no standard deviation (mean-only model)")
        return self.std.get(channel, 0)

    def to_dict(self) -> Dict[str, float]:
        """Flatten to ``{channel: value}`` (std entries use a ``_std`` suffix)."""
        result = {name: float(self.mean.array[i]) for i, name in enumerate(CHANNEL_NAMES)}
        if self.std is not None:
            result.update({
                f"{name}_std": float(self.std.array[i]) for i, name in enumerate(CHANNEL_NAMES)
            })
        return result


def scale_input(descriptor: VectorLike) -> Tuple[Matrix, float]:
    """
    Split a 6-element descriptor into the network descriptor and scaled temperature.

    Returns:
        (5-element descriptor prefix, temperature / 300)

    Raises:
        ShapeError: If the descriptor is not a 6-element vector
    """
    x = as_column(descriptor)
    if x.cols != 1 or x.rows != DESCRIPTOR_SIZE:
        raise ShapeError(f"Descriptor must be a ({DESCRIPTOR_SIZE}, 1) vector, got {x.shape}")

    prefix = Matrix.column(x.array[:TEMPERATURE_INDEX])
    temperature = x.array[TEMPERATURE_INDEX] / TEMPERATURE_SCALE
    return prefix, temperature


def scale_mean_output(raw: Matrix) -> Matrix:
    """Convert a raw mean-dictionary output to physical units (in place)."""
    with np.errstate(over="ignore", invalid="ignore"):
        raw.array[RESISTIVITY] = softplus(raw.array[RESISTIVITY]) * RESISTIVITY_SCALE
        raw.array[SEEBECK] *= SEEBECK_SCALE
        raw.array[THERMAL_CONDUCTIVITY] = softplus(raw.array[THERMAL_CONDUCTIVITY])
    return raw


def scale_std_output(raw: Matrix) -> Matrix:
    """Convert a raw std-dictionary output to physical units (in place)."""
    raw.array[RESISTIVITY] *= RESISTIVITY_SCALE
    raw.array[SEEBECK] *= SEEBECK_SCALE
    return raw


def _network(config: Dict[str, Any], *keys: str, input_size: int) -> FeedForwardNetwork:
    for key in keys:
        if key in config:
            return FeedForwardNetwork.from_config(input_size, config[key])
    raise ConfigShapeError(f"Model config has none of the keys {list(keys)}")


def _check_channels(dictionary: FeedForwardNetwork, name: str) -> None:
    if dictionary.output_size != len(CHANNEL_NAMES):
        raise ConfigShapeError(
            f"{name} dictionary has {dictionary.output_size} outputs, "
            f"expected {len(CHANNEL_NAMES)} ({', '.join(CHANNEL_NAMES)})"
        )


class MeanPropertyModel:
    """Mean-only property model: one embedding and one mean dictionary."""

    def __init__(self, embedding: FeedForwardNetwork, mean_dictionary: FeedForwardNetwork):
        """
        Raises:
            ConfigShapeError: If the networks do not chain or the dictionary
                does not produce one output per base channel
        """
        _check_channels(mean_dictionary, "Mean")
        self.mean_lann = LatentSpaceNetwork(embedding, mean_dictionary)

        # Last evaluation result; None until evaluate() is called
        self.mean_output: Optional[Matrix] = None
        self.std_output: Optional[Matrix] = None

    @property
    def embedding(self) -> FeedForwardNetwork:
        return self.mean_lann.embedding

    @property
    def has_std(self) -> bool:
        return False

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'MeanPropertyModel':
        """
        Build from ``{"embeddingNet": ..., "dictionaryNet": ...}``.

        ``meanDictionaryNet`` is accepted in place of ``dictionaryNet`` so a
        mean+std configuration can also be loaded as a mean-only model.
        """
        embedding = _network(config, "embeddingNet", input_size=EMBEDDING_INPUT_SIZE)
        mean_dictionary = _network(
            config, "dictionaryNet", "meanDictionaryNet",
            input_size=embedding.output_size + 1,
        )
        model = cls(embedding, mean_dictionary)
        logger.info("Mean-only property model initialized.")
        return model

    def evaluate(self, descriptor: VectorLike) -> PropertyPrediction:
        """
        Predict the base channels for one descriptor.

        Args:
            descriptor: 6-element descriptor ``[x, isP, isN, isA, isC, T(°C)]``

        Returns:
            PropertyPrediction with the mean in physical units
        """
        prefix, temperature = scale_input(descriptor)
        mean = scale_mean_output(self.mean_lann.evaluate(prefix, temperature))

        self.mean_output = mean
        return PropertyPrediction(mean=mean)


class PropertyModel(MeanPropertyModel):
    """
    Mean and standard-deviation property model.

    The mean and std latent-space networks share one embedding network
    and differ only in their dictionary networks.
    """

    def __init__(
        self,
        embedding: FeedForwardNetwork,
        mean_dictionary: FeedForwardNetwork,
        std_dictionary: FeedForwardNetwork,
    ):
        super().__init__(embedding, mean_dictionary)
        _check_channels(std_dictionary, "Std")
        self.std_lann = LatentSpaceNetwork(embedding, std_dictionary)

    @property
    def has_std(self) -> bool:
        return True

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'PropertyModel':
        """Build from ``{"embeddingNet", "meanDictionaryNet", "stdDictionaryNet"}``."""
        embedding = _network(config, "embeddingNet", input_size=EMBEDDING_INPUT_SIZE)
        dictionary_inputs = embedding.output_size + 1
        mean_dictionary = _network(config, "meanDictionaryNet", input_size=dictionary_inputs)
        std_dictionary = _network(config, "stdDictionaryNet", input_size=dictionary_inputs)
        model = cls(embedding, mean_dictionary, std_dictionary)
        logger.info("Mean+std property model initialized.")
        return model

    def evaluate(self, descriptor: VectorLike) -> PropertyPrediction:
        """
        Predict mean and standard deviation of the base channels.

        Args:
            descriptor: 6-element descriptor ``[x, isP, isN, isA, isC, T(°C)]``

        Returns:
            PropertyPrediction with mean and std in physical units
        """
        prefix, temperature = scale_input(descriptor)

        # The shared embedding only needs to run once
        latent = self.mean_lann.embed(prefix)
        mean = scale_mean_output(self.mean_lann.decode(latent, temperature))
        std = scale_std_output(self.std_lann.decode(latent, temperature))

        self.mean_output = mean
        self.std_output = std
        return PropertyPrediction(mean=mean, std=std)


def load_property_model(config: Dict[str, Any]) -> MeanPropertyModel:
    """Build the model variant matching the keys of a configuration dictionary."""
    if "stdDictionaryNet" in config:
        return PropertyModel.from_config(config)
    if "dictionaryNet" in config or "meanDictionaryNet" in config:
        return MeanPropertyModel.from_config(config)
    raise ConfigShapeError(
        "Model config must contain 'dictionaryNet' (mean-only) or "
        "'meanDictionaryNet' and 'stdDictionaryNet' (mean+std)"
    )
