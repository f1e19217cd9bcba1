"""
Elementwise activation functions used by the latent-space networks.

    linear(x)   = x
    elu(x)      = x            if x > 0
                  exp(x) - 1   otherwise
    softplus(x) = ln(1 + exp(x))
"""

import numpy as np
from enum import Enum
from typing import Callable, Dict, Union

from ..exceptions import UnknownActivationError


ArrayLike = Union[float, np.ndarray]


def linear(x: ArrayLike) -> ArrayLike:
    return x


def elu(x: ArrayLike) -> ArrayLike:
    """Exponential linear unit with alpha = 1."""
    x = np.asarray(x, dtype=np.float64)
    # exp only sees the non-positive branch, so large inputs do not overflow
    return np.where(x > 0, x, np.expm1(np.minimum(x, 0.0)))


def softplus(x: ArrayLike) -> ArrayLike:
    """ln(1 + exp(x)), evaluated without overflow for large x."""
    # NaN propagates without a RuntimeWarning
    with np.errstate(invalid="ignore"):
        return np.logaddexp(0.0, x)


class Activation(str, Enum):
    """Closed set of activation functions selectable per layer."""
    LINEAR = "linear"
    ELU = "elu"
    SOFTPLUS = "softplus"

    @classmethod
    def from_name(cls, name: Union[str, 'Activation']) -> 'Activation':
        """
        Look up an activation by name.

        Args:
            name: Activation name (case-insensitive) or an Activation member

        Returns:
            Matching Activation

        Raises:
            UnknownActivationError: If the name is not recognized
        """
        if isinstance(name, Activation):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            valid = ", ".join(member.value for member in cls)
            raise UnknownActivationError(
                f"Unknown activation: {name!r}. Must be one of: {valid}"
            ) from None

    def __call__(self, x: ArrayLike) -> ArrayLike:
        return _FUNCTIONS[self](x)


_FUNCTIONS: Dict[Activation, Callable[[ArrayLike], ArrayLike]] = {
    Activation.LINEAR: linear,
    Activation.ELU: elu,
    Activation.SOFTPLUS: softplus,
}
