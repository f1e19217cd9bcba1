"""
Evaluation Script for the BiTe Property Model

Compares model predictions against every experimental sample:
- Mean absolute error per channel
- Relative L2 error per channel
- 95% interval coverage (mean+std model only)
"""

import argparse
from pathlib import Path
import json
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from bitelann.analysis import compare_dataset, summarize
from bitelann.inference import ThermoelectricPredictor
from bitelann.materials import ExperimentalDataset
from bitelann.utils import PredictionConfig, setup_logging


def parse_args():
    parser = argparse.ArgumentParser(description="Evaluate BiTe property model")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to prediction config YAML"
    )
    parser.add_argument(
        "--model",
        type=Path,
        default=None,
        help="Model weight JSON (overrides config)"
    )
    parser.add_argument(
        "--dataset",
        type=Path,
        default=None,
        help="Experimental dataset JSON (overrides config)"
    )
    parser.add_argument(
        "--filter",
        type=str,
        default=None,
        help="Only evaluate samples whose name contains this text"
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Save metrics as JSON"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print metrics for every sample"
    )
    return parser.parse_args()


def main():
    args = parse_args()
    config = PredictionConfig.from_yaml(args.config) if args.config else PredictionConfig()
    setup_logging(config.log_level)

    print("=" * 60)
    print("BiTe PROPERTY MODEL EVALUATION")
    print("=" * 60)

    model_path = args.model or config.model_path
    dataset_path = args.dataset or config.dataset_path

    predictor = ThermoelectricPredictor.from_json(model_path)
    dataset = ExperimentalDataset(dataset_path)

    samples = list(dataset)
    if args.filter:
        samples = dataset.search(args.filter)
    print(f"Model: {'mean+std' if predictor.has_std else 'mean-only'}")
    print(f"Samples: {len(samples)}")

    comparisons = compare_dataset(predictor, samples)

    if args.verbose:
        print()
        for comparison in comparisons:
            print(comparison.summary())

    summary = summarize(comparisons)

    print("\n" + "=" * 60)
    print("SUMMARY")
    print("=" * 60)
    for channel, metrics in summary.items():
        print(f"{channel}:")
        print(f"  MAE:      {metrics.mae:.4e}")
        print(f"  Rel L2:   {metrics.relative_l2:.4f}")
        print(f"  Coverage: {metrics.coverage:.2%}")

    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        results = {
            "summary": {channel: vars(m) for channel, m in summary.items()},
            "samples": {
                c.name: {channel: vars(m) for channel, m in c.metrics.items()}
                for c in comparisons
            },
        }
        with open(args.output, 'w', encoding='utf-8') as f:
            json.dump(results, f, indent=2)
        print(f"\nSaved metrics to {args.output}")


if __name__ == "__main__":
    main()
