# Models Module
from .matrix import Matrix
from .activations import Activation, linear, elu, softplus
from .network import FeedForwardNetwork, Layer
from .latent import LatentSpaceNetwork
from .descriptor import CarrierType, CrystalAxis, build_descriptor
from .property_model import (
    MeanPropertyModel,
    PropertyModel,
    PropertyPrediction,
    load_property_model,
)

__all__ = [
    # Primitives
    "Matrix",
    "Activation",
    "linear",
    "elu",
    "softplus",
    # Networks
    "FeedForwardNetwork",
    "Layer",
    "LatentSpaceNetwork",
    # Descriptors
    "CarrierType",
    "CrystalAxis",
    "build_descriptor",
    # Property models
    "MeanPropertyModel",
    "PropertyModel",
    "PropertyPrediction",
    "load_property_model",
]
