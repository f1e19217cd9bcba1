"""
Exceptions raised by the inference engine.

All of them are ``ValueError`` subclasses so callers that already guard
against bad arguments keep working.
"""


class LannError(Exception):
    """Base class for latent-space network errors."""


class ShapeError(LannError, ValueError):
    """A vector or matrix index does not match the declared shape."""


class ConfigShapeError(LannError, ValueError):
    """Model configuration data is malformed (list lengths or layer sizes disagree)."""


class UnknownActivationError(LannError, ValueError):
    """An activation name is not one of the supported functions."""
