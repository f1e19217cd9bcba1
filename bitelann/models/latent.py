"""
Latent-space neural network (LANN).

The property surface is factored into two sub-networks:

    latent = embedding(descriptor)
    output = dictionary([latent, temperature])

The embedding only sees the composition/axis descriptor, so one embedding can
serve several dictionaries (e.g. a mean and a standard-deviation head).
"""

import numpy as np

from ..exceptions import ConfigShapeError
from .matrix import Matrix
from .network import FeedForwardNetwork, VectorLike


class LatentSpaceNetwork:
    """
    Embedding network followed by a temperature-conditioned dictionary network.

    Both networks are held by reference; two LatentSpaceNetworks built from the
    same embedding share it.
    """

    def __init__(self, embedding: FeedForwardNetwork, dictionary: FeedForwardNetwork):
        if embedding.output_size + 1 != dictionary.input_size:
            raise ConfigShapeError(
                f"Dictionary input size ({dictionary.input_size}) must equal the "
                f"embedding output size plus one ({embedding.output_size + 1})"
            )
        self.embedding = embedding
        self.dictionary = dictionary

    @property
    def input_size(self) -> int:
        return self.embedding.input_size

    @property
    def output_size(self) -> int:
        return self.dictionary.output_size

    def embed(self, descriptor: VectorLike) -> Matrix:
        """Map a descriptor to its latent vector."""
        return self.embedding.evaluate(descriptor)

    def decode(self, latent: Matrix, temperature: float) -> Matrix:
        """Append the temperature to a latent vector and run the dictionary network."""
        conditioned = np.append(latent.array, np.float64(temperature))
        return self.dictionary.evaluate(conditioned)

    def evaluate(self, descriptor: VectorLike, temperature: float) -> Matrix:
        """
        Predict the raw network output for one descriptor and temperature.

        Args:
            descriptor: Composition/axis descriptor of length ``input_size``
            temperature: Temperature scalar appended to the latent vector

        Returns:
            Dictionary network output
        """
        return self.decode(self.embed(descriptor), temperature)
