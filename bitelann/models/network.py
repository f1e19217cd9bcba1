"""
Fully connected feed-forward network evaluated from trained weights.

Each layer computes

    y = activation(W @ x + b)

with W shaped (outputs, inputs) and b shaped (outputs, 1). The weights are
loaded once from configuration data and never modified.
"""

import logging
import numpy as np
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Union

from ..exceptions import ConfigShapeError, ShapeError
from .activations import Activation
from .matrix import Matrix


logger = logging.getLogger(__name__)

VectorLike = Union[Matrix, Sequence[float], np.ndarray]


def as_column(values: VectorLike) -> Matrix:
    """Return ``values`` as a column-vector Matrix (Matrix inputs are not copied)."""
    if isinstance(values, Matrix):
        return values
    return Matrix.column(values)


@dataclass(frozen=True)
class Layer:
    """One affine transform followed by an elementwise activation."""
    weight: Matrix      # (outputs, inputs)
    bias: Matrix        # (outputs, 1)
    activation: Activation

    def __post_init__(self):
        if self.bias.cols != 1 or self.bias.rows != self.weight.rows:
            raise ConfigShapeError(
                f"Bias shape {self.bias.shape} does not match weight shape {self.weight.shape}"
            )

    @property
    def input_size(self) -> int:
        return self.weight.cols

    @property
    def output_size(self) -> int:
        return self.weight.rows

    def forward(self, x: np.ndarray) -> np.ndarray:
        """Apply the layer to a 1-D array of length ``input_size``."""
        pre = self.weight.to_numpy() @ x + self.bias.array
        return self.activation(pre)


def _build_weight(values: Any, outputs: int, layer_index: int) -> Matrix:
    """Accept a flat row-major list or a nested (outputs x inputs) list."""
    try:
        array = np.asarray(values, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise ConfigShapeError(f"Layer {layer_index}: weights are not a numeric matrix ({e})") from e

    if array.size == 0:
        raise ConfigShapeError(f"Layer {layer_index}: weight matrix is empty")
    if array.ndim == 2:
        if array.shape[0] != outputs:
            raise ConfigShapeError(
                f"Layer {layer_index}: weight has {array.shape[0]} rows "
                f"but bias has {outputs} entries"
            )
        return Matrix.from_numpy(array)

    if array.ndim != 1 or array.size % outputs != 0:
        raise ConfigShapeError(
            f"Layer {layer_index}: cannot shape {array.size} weights into "
            f"{outputs} output rows"
        )
    return Matrix(outputs, array.size // outputs, array)


class FeedForwardNetwork:
    """
    Ordered stack of affine layers evaluated left to right.

    Construction mirrors the model configuration format: one weight, one bias
    and one activation name per layer.
    """

    def __init__(
        self,
        input_size: int,
        weights: Sequence[Any],
        biases: Sequence[Sequence[float]],
        activations: Sequence[Union[str, Activation]],
    ):
        """
        Build the network from trained weights.

        Args:
            input_size: Length of the input vector accepted by ``evaluate``
            weights: Per-layer weight matrices, flat row-major or nested
            biases: Per-layer bias vectors
            activations: Per-layer activation names ("linear", "elu", "softplus")

        Raises:
            ConfigShapeError: If the three lists differ in length or layer sizes do not chain
            UnknownActivationError: If an activation name is not recognized
        """
        if not (len(weights) == len(biases) == len(activations)):
            raise ConfigShapeError(
                f"weights ({len(weights)}), biases ({len(biases)}) and "
                f"activations ({len(activations)}) must have the same length"
            )
        if len(weights) == 0:
            raise ConfigShapeError("A network needs at least one layer")

        self.input_size = int(input_size)

        layers: List[Layer] = []
        expected_inputs = self.input_size
        for i, (w, b, name) in enumerate(zip(weights, biases, activations)):
            if len(b) == 0:
                raise ConfigShapeError(f"Layer {i}: bias vector is empty")
            bias = Matrix.column(b)
            weight = _build_weight(w, bias.rows, i)
            if weight.cols != expected_inputs:
                raise ConfigShapeError(
                    f"Layer {i} expects {weight.cols} inputs but receives {expected_inputs}"
                )
            layers.append(Layer(
                weight=weight.freeze(),
                bias=bias.freeze(),
                activation=Activation.from_name(name),
            ))
            expected_inputs = weight.rows

        self.layers = tuple(layers)
        self.output_size = expected_inputs

        logger.debug(
            "Built network %s",
            " -> ".join(str(n) for n in [self.input_size] + [layer.output_size for layer in self.layers]),
        )

    @classmethod
    def from_config(cls, input_size: int, config: Dict[str, Any]) -> 'FeedForwardNetwork':
        """
        Build a network from a ``{weightsArray, biasesArray, activationArray}`` dictionary.
        """
        try:
            return cls(
                input_size,
                config["weightsArray"],
                config["biasesArray"],
                config["activationArray"],
            )
        except KeyError as e:
            raise ConfigShapeError(f"Network config is missing {e.args[0]!r}") from None

    @property
    def num_layers(self) -> int:
        return len(self.layers)

    def evaluate(self, input_vector: VectorLike) -> Matrix:
        """
        Run the network on one input vector.

        Args:
            input_vector: Column Matrix or sequence of length ``input_size``

        Returns:
            Output column vector of length ``output_size``

        Raises:
            ShapeError: If the input length differs from ``input_size``
        """
        x = as_column(input_vector)
        if x.cols != 1 or x.rows != self.input_size:
            raise ShapeError(
                f"Network expects a ({self.input_size}, 1) input, got {x.shape}"
            )

        current = x.array
        # non-finite inputs propagate as NaN/inf
        with np.errstate(over="ignore", invalid="ignore"):
            for layer in self.layers:
                current = layer.forward(current)

        return Matrix.column(current)

    def __repr__(self) -> str:
        sizes = [self.input_size] + [layer.output_size for layer in self.layers]
        acts = [layer.activation.value for layer in self.layers]
        return f"FeedForwardNetwork(sizes={sizes}, activations={acts})"
