"""
Prediction Script

Sweeps the property model over temperature for one BiTe composition and
prints every thermoelectric quantity with its 95% confidence interval.
"""

import argparse
from pathlib import Path
import json
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from bitelann.analysis import format_table, sweep_to_records
from bitelann.inference import ThermoelectricPredictor, temperature_grid
from bitelann.materials import DEFAULT_SAMPLE, ExperimentalDataset
from bitelann.utils import PredictionConfig, setup_logging


def parse_args():
    parser = argparse.ArgumentParser(description="Predict BiTe thermoelectric properties")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to prediction config YAML"
    )
    parser.add_argument(
        "--sample",
        type=str,
        default=None,
        help=f"Take composition, type and axis from a dataset sample (e.g. '{DEFAULT_SAMPLE}')"
    )
    parser.add_argument(
        "--composition",
        type=float,
        default=0.5,
        help="Composition fraction x"
    )
    parser.add_argument(
        "--type",
        dest="carrier_type",
        choices=["p", "n"],
        default="n",
        help="Carrier type"
    )
    parser.add_argument(
        "--axis",
        choices=["a", "c"],
        default="a",
        help="Crystal axis"
    )
    parser.add_argument(
        "--model",
        type=Path,
        default=None,
        help="Model weight JSON (overrides config)"
    )
    parser.add_argument(
        "--min-temp",
        type=float,
        default=None,
        help="First temperature node in °C (overrides config)"
    )
    parser.add_argument(
        "--max-temp",
        type=float,
        default=None,
        help="Last temperature node in °C (overrides config)"
    )
    parser.add_argument(
        "--nodes",
        type=int,
        default=None,
        help="Number of temperature nodes (overrides config)"
    )
    parser.add_argument(
        "--no-tep-ci",
        action="store_true",
        help="Hide intervals for resistivity, Seebeck and conductivities"
    )
    parser.add_argument(
        "--no-zt-ci",
        action="store_true",
        help="Hide intervals for power factor and zT"
    )
    parser.add_argument(
        "--batched",
        action="store_true",
        help="Evaluate the grid in one torch pass"
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Save the derived sweep as JSON"
    )
    return parser.parse_args()


def build_config(args) -> PredictionConfig:
    config = PredictionConfig.from_yaml(args.config) if args.config else PredictionConfig()

    return config.with_overrides(
        model_path=args.model,
        min_temp=args.min_temp,
        max_temp=args.max_temp,
        n_temp_nodes=args.nodes,
        show_tep_ci=False if args.no_tep_ci else None,
        show_zt_ci=False if args.no_zt_ci else None,
        batched=True if args.batched else None,
    )


def main():
    args = parse_args()
    config = build_config(args)
    setup_logging(config.log_level)

    print("=" * 60)
    print("BiTe THERMOELECTRIC PREDICTION")
    print("=" * 60)

    composition, carrier_type, axis = args.composition, args.carrier_type, args.axis
    if args.sample is not None:
        sample = ExperimentalDataset(config.dataset_path).get_or_raise(args.sample)
        composition, carrier_type, axis = sample.composition, sample.carrier_type, sample.axis

    predictor = ThermoelectricPredictor.from_json(
        config.model_path,
        temperature_grid(config.min_temp, config.max_temp, config.n_temp_nodes),
    )
    print(f"Model: {'mean+std' if predictor.has_std else 'mean-only'}")

    sweep = predictor.sweep(composition, carrier_type, axis, batched=config.batched)
    derived = predictor.derive(sweep, config.show_tep_ci, config.show_zt_ci)

    print(f"Material: {sweep.label}")
    print(f"Temperature nodes: {sweep.n_nodes} ({config.min_temp:.1f} - {config.max_temp:.1f} °C)\n")

    print(format_table(sweep.temperatures, derived, quantities=(
        "resistivity", "seebeck", "thermal_conductivity",
    )))
    print()
    print(format_table(sweep.temperatures, derived, quantities=(
        "electrical_conductivity", "power_factor", "figure_of_merit",
    )))

    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        with open(args.output, 'w', encoding='utf-8') as f:
            json.dump({
                "material": sweep.label,
                "has_std": predictor.has_std,
                "records": sweep_to_records(sweep.temperatures, derived),
            }, f, indent=2, ensure_ascii=False)
        print(f"\nSaved sweep to {args.output}")

    print("\n" + "=" * 60)
    print("PREDICTION COMPLETE")
    print("=" * 60)


if __name__ == "__main__":
    main()
