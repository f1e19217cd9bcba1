"""
PyTorch mirror of the property models for batched inference and ONNX export.

The trained weights are copied into float64 ``nn.Linear`` layers, so the
torch model reproduces the numpy evaluator to floating-point tolerance while
evaluating a whole temperature grid in one pass.
"""

import logging
import torch
import torch.nn as nn
import torch.nn.functional as F
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np

from ..models.activations import Activation
from ..models.descriptor import DESCRIPTOR_SIZE, TEMPERATURE_INDEX
from ..models.network import FeedForwardNetwork
from ..models.property_model import (
    RESISTIVITY_SCALE,
    SEEBECK_SCALE,
    TEMPERATURE_SCALE,
    MeanPropertyModel,
)


logger = logging.getLogger(__name__)

_ACTIVATION_MODULES = {
    Activation.LINEAR: nn.Identity,
    Activation.ELU: nn.ELU,
    Activation.SOFTPLUS: nn.Softplus,
}


def to_torch_sequential(network: FeedForwardNetwork) -> nn.Sequential:
    """
    Mirror a FeedForwardNetwork as a frozen float64 ``nn.Sequential``.

    Args:
        network: Network with trained weights

    Returns:
        Sequential of Linear + activation modules
    """
    modules = []
    for layer in network.layers:
        linear = nn.Linear(layer.input_size, layer.output_size, dtype=torch.float64)
        with torch.no_grad():
            linear.weight.copy_(torch.from_numpy(layer.weight.to_numpy().copy()))
            linear.bias.copy_(torch.from_numpy(layer.bias.array.copy()))
        modules.append(linear)
        modules.append(_ACTIVATION_MODULES[layer.activation]())

    sequential = nn.Sequential(*modules)
    sequential.requires_grad_(False)
    return sequential


class TorchPropertyModel(nn.Module):
    """
    Batched property model.

    Input: descriptors [N, 6] (temperature in °C in the last column)
    Output: mean [N, 3], plus std [N, 3] when the source model has a std head
    """

    def __init__(self, model: MeanPropertyModel):
        super().__init__()

        self.embedding = to_torch_sequential(model.embedding)
        self.mean_dictionary = to_torch_sequential(model.mean_lann.dictionary)
        self.std_dictionary = (
            to_torch_sequential(model.std_lann.dictionary) if model.has_std else None
        )

        self.register_buffer(
            'std_scale',
            torch.tensor([RESISTIVITY_SCALE, SEEBECK_SCALE, 1.0], dtype=torch.float64),
        )

    @property
    def has_std(self) -> bool:
        return self.std_dictionary is not None

    def forward(
        self,
        descriptors: torch.Tensor,
    ) -> Union[torch.Tensor, Tuple[torch.Tensor, torch.Tensor]]:
        prefix = descriptors[:, :TEMPERATURE_INDEX]
        temperature = descriptors[:, TEMPERATURE_INDEX:TEMPERATURE_INDEX + 1] / TEMPERATURE_SCALE

        latent = self.embedding(prefix)
        conditioned = torch.cat([latent, temperature], dim=1)

        raw_mean = self.mean_dictionary(conditioned)
        mean = torch.stack([
            F.softplus(raw_mean[:, 0]) * RESISTIVITY_SCALE,
            raw_mean[:, 1] * SEEBECK_SCALE,
            F.softplus(raw_mean[:, 2]),
        ], dim=1)

        if self.std_dictionary is None:
            return mean

        std = self.std_dictionary(conditioned) * self.std_scale
        return mean, std


def export_to_onnx(
    model: Union[MeanPropertyModel, TorchPropertyModel],
    output_path: Path,
    opset_version: int = 17,
    dynamic_batch: bool = True,
    batch_size: int = 4,
) -> Path:
    """
    Export a property model to ONNX format.

    Args:
        model: Property model or its torch mirror
        output_path: Path to save ONNX model
        opset_version: ONNX opset version
        dynamic_batch: Whether to use dynamic batch size
        batch_size: Batch size of the example input used for tracing

    Returns:
        Path to exported ONNX model
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if not isinstance(model, TorchPropertyModel):
        model = TorchPropertyModel(model)
    model.eval()

    dummy_descriptors = torch.zeros(batch_size, DESCRIPTOR_SIZE, dtype=torch.float64)
    dummy_descriptors[:, 0] = 0.5
    dummy_descriptors[:, 1] = 1.0
    dummy_descriptors[:, 3] = 1.0
    dummy_descriptors[:, 5] = torch.linspace(0.0, 300.0, batch_size, dtype=torch.float64)

    input_names = ['descriptors']
    output_names = ['mean', 'std'] if model.has_std else ['mean']

    dynamic_axes = None
    if dynamic_batch:
        dynamic_axes = {name: {0: 'batch_size'} for name in input_names + output_names}

    logger.info("Exporting model to %s", output_path)

    torch.onnx.export(
        model,
        (dummy_descriptors,),
        str(output_path),
        input_names=input_names,
        output_names=output_names,
        dynamic_axes=dynamic_axes,
        opset_version=opset_version,
        do_constant_folding=True,
    )

    logger.info("Model exported to %s", output_path)
    return output_path


def verify_onnx_export(
    onnx_path: Path,
    model: Union[MeanPropertyModel, TorchPropertyModel],
    descriptors: Optional[np.ndarray] = None,
    rtol: float = 1e-6,
    atol: float = 1e-12,
) -> bool:
    """
    Check that an exported ONNX model matches the torch mirror.

    Args:
        onnx_path: Path to ONNX model
        model: Property model or its torch mirror
        descriptors: [N, 6] inputs to compare on (the export example input if omitted)
        rtol: Relative tolerance
        atol: Absolute tolerance

    Returns:
        True if every output matches
    """
    import onnx
    import onnxruntime as ort

    onnx.checker.check_model(onnx.load(str(onnx_path)))

    if not isinstance(model, TorchPropertyModel):
        model = TorchPropertyModel(model)
    model.eval()

    if descriptors is None:
        descriptors = np.zeros((4, DESCRIPTOR_SIZE))
        descriptors[:, 0] = 0.5
        descriptors[:, 1] = 1.0
        descriptors[:, 3] = 1.0
        descriptors[:, 5] = np.linspace(0.0, 300.0, 4)
    descriptors = np.asarray(descriptors, dtype=np.float64)

    with torch.no_grad():
        expected = model(torch.from_numpy(descriptors))
    if not isinstance(expected, tuple):
        expected = (expected,)

    session = ort.InferenceSession(str(onnx_path), providers=['CPUExecutionProvider'])
    actual = session.run(None, {'descriptors': descriptors})

    matches = all(
        np.allclose(a, e.numpy(), rtol=rtol, atol=atol)
        for a, e in zip(actual, expected)
    )
    if matches:
        logger.info("ONNX verification passed")
    else:
        logger.warning("ONNX outputs differ from the torch model")
    return matches
