"""
ONNX Export Script

Exports the BiTe property model to ONNX format for deployment.
"""

import argparse
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from bitelann.inference import TorchPropertyModel, export_to_onnx, verify_onnx_export
from bitelann.models import load_property_model
from bitelann.utils import load_model_config, setup_logging


def parse_args():
    parser = argparse.ArgumentParser(description="Export property model to ONNX")
    parser.add_argument(
        "--model",
        type=Path,
        default=None,
        help="Model weight JSON (packaged mean+std model if omitted)"
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("outputs/bite_lann.onnx"),
        help="Output ONNX path"
    )
    parser.add_argument(
        "--opset",
        type=int,
        default=17,
        help="ONNX opset version"
    )
    parser.add_argument(
        "--static-batch",
        action="store_true",
        help="Disable the dynamic batch dimension"
    )
    parser.add_argument(
        "--verify",
        action="store_true",
        help="Compare ONNX Runtime outputs with the torch model after export"
    )
    return parser.parse_args()


def main():
    args = parse_args()
    setup_logging()

    print("=" * 60)
    print("ONNX EXPORT")
    print("=" * 60)

    print(f"Loading model from {args.model or 'packaged weights'}")
    model = TorchPropertyModel(load_property_model(load_model_config(args.model)))

    num_params = sum(p.numel() for p in model.parameters())
    print(f"Model parameters: {num_params:,}")
    print(f"Outputs: {'mean, std' if model.has_std else 'mean'}")

    print(f"\nExporting to {args.output}")
    onnx_path = export_to_onnx(
        model,
        args.output,
        opset_version=args.opset,
        dynamic_batch=not args.static_batch,
    )

    if args.verify:
        print("\nVerifying with ONNX Runtime...")
        ok = verify_onnx_export(onnx_path, model)
        print(f"Verification {'passed' if ok else 'FAILED'}")

    print("\n" + "=" * 60)
    print("EXPORT COMPLETE")
    print("=" * 60)
    print(f"ONNX model: {onnx_path}")


if __name__ == "__main__":
    main()
