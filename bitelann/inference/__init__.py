# Inference Module
from .predictor import ThermoelectricPredictor, SweepResult, DerivedSweep, temperature_grid
from .torch_export import TorchPropertyModel, to_torch_sequential, export_to_onnx, verify_onnx_export

__all__ = [
    "ThermoelectricPredictor",
    "SweepResult",
    "DerivedSweep",
    "temperature_grid",
    "TorchPropertyModel",
    "to_torch_sequential",
    "export_to_onnx",
    "verify_onnx_export",
]
