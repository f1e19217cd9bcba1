# BiTe Latent-Space Neural Network
"""
Latent-space neural network inference for thermoelectric properties of
BiTe-based materials.

Modules:
    models: Matrix primitive, activations, feed-forward and latent-space networks,
        and the physical-unit property models
    uncertainty: Confidence intervals for base and derived thermoelectric quantities
    inference: Temperature sweeps, batched torch runtime and ONNX export
    materials: Experimental dataset used for overlay comparison
    analysis: Model-vs-experiment metrics, display units and reports
    utils: Configuration and logging
"""

__version__ = "0.2.0"
__author__ = "BiTe LANN Team"
