"""
Compare model predictions against experimental measurements.

For every sample the model is evaluated at the measured temperatures and
scored per base channel with:
- Mean absolute error
- Relative L2 error ||pred - meas||_2 / ||meas||_2
- Coverage: fraction of measurements inside the 95% prediction interval
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Dict, Iterable, List
from tqdm import tqdm

from ..inference.predictor import ThermoelectricPredictor
from ..materials.dataset import ExperimentalSample
from ..models.property_model import CHANNEL_NAMES
from ..uncertainty.propagation import CI_Z_SCORE, confidence_interval


@dataclass
class ChannelMetrics:
    """Error metrics for one base channel."""
    mae: float
    relative_l2: float
    coverage: float    # NaN when the model has no std head


@dataclass
class SampleComparison:
    """Per-channel metrics for one experimental sample."""
    name: str
    n_points: int
    metrics: Dict[str, ChannelMetrics] = field(default_factory=dict)

    def __getitem__(self, channel: str) -> ChannelMetrics:
        return self.metrics[channel]

    def summary(self) -> str:
        lines = [f"{self.name} ({self.n_points} points):"]
        for channel, m in self.metrics.items():
            lines.append(
                f"  {channel:<22} MAE: {m.mae:.3e}  Rel L2: {m.relative_l2:.4f}  "
                f"Coverage: {m.coverage:.2f}"
            )
        return "\n".join(lines)


def compute_mae(prediction: np.ndarray, ground_truth: np.ndarray) -> float:
    """Mean absolute error."""
    return float(np.mean(np.abs(np.asarray(prediction) - np.asarray(ground_truth))))


def compute_relative_l2(prediction: np.ndarray, ground_truth: np.ndarray) -> float:
    """
    Compute Relative L2 Error.

    rel_l2 = ||pred - gt||_2 / ||gt||_2

    Args:
        prediction: Predicted values
        ground_truth: Ground truth values

    Returns:
        Relative L2 error
    """
    prediction = np.asarray(prediction, dtype=np.float64)
    ground_truth = np.asarray(ground_truth, dtype=np.float64)

    error_norm = np.linalg.norm((prediction - ground_truth).flatten())
    gt_norm = np.linalg.norm(ground_truth.flatten())

    if gt_norm < 1e-30:
        return float(error_norm)

    return float(error_norm / gt_norm)


def compute_coverage(
    mean: np.ndarray,
    std: np.ndarray,
    measured: np.ndarray,
    z: float = CI_Z_SCORE,
) -> float:
    """
    Fraction of measurements inside mean ± z·std.

    Returns:
        Coverage in [0, 1]
    """
    lower, upper = confidence_interval(np.asarray(mean), np.asarray(std), z)
    measured = np.asarray(measured)
    inside = (measured >= lower) & (measured <= upper)
    return float(np.mean(inside))


def compare_sample(
    predictor: ThermoelectricPredictor,
    sample: ExperimentalSample,
) -> SampleComparison:
    """
    Evaluate the model at a sample's measured temperatures and score it.

    Args:
        predictor: Predictor wrapping the property model
        sample: Experimental sample

    Returns:
        SampleComparison with metrics for every base channel
    """
    sweep = predictor.sweep(
        sample.composition,
        sample.carrier_type,
        sample.axis,
        temperatures=sample.temperatures,
    )

    measured = {
        "resistivity": sample.resistivity,
        "seebeck": sample.seebeck,
        "thermal_conductivity": sample.thermal_conductivity,
    }

    comparison = SampleComparison(name=sample.name, n_points=sample.temperatures.size)
    for i, channel in enumerate(CHANNEL_NAMES):
        prediction = sweep.mean[:, i]
        coverage = np.nan
        if sweep.std is not None:
            coverage = compute_coverage(prediction, sweep.std[:, i], measured[channel])

        comparison.metrics[channel] = ChannelMetrics(
            mae=compute_mae(prediction, measured[channel]),
            relative_l2=compute_relative_l2(prediction, measured[channel]),
            coverage=coverage,
        )

    return comparison


def compare_dataset(
    predictor: ThermoelectricPredictor,
    samples: Iterable[ExperimentalSample],
    show_progress: bool = True,
) -> List[SampleComparison]:
    """
    Run ``compare_sample`` over every sample.

    Args:
        predictor: Predictor wrapping the property model
        samples: Dataset or any iterable of samples
        show_progress: Show a tqdm progress bar

    Returns:
        One SampleComparison per sample
    """
    samples = list(samples)
    return [
        compare_sample(predictor, sample)
        for sample in tqdm(samples, desc="Comparing samples", disable=not show_progress)
    ]


def summarize(comparisons: List[SampleComparison]) -> Dict[str, ChannelMetrics]:
    """
    Average the metrics of several comparisons per channel.

    Coverage is weighted by the number of measured points.
    """
    if not comparisons:
        raise ValueError("No comparisons to summarize")

    weights = np.array([c.n_points for c in comparisons], dtype=np.float64)
    summary = {}
    for channel in CHANNEL_NAMES:
        coverage = np.array([c[channel].coverage for c in comparisons])
        summary[channel] = ChannelMetrics(
            mae=float(np.mean([c[channel].mae for c in comparisons])),
            relative_l2=float(np.mean([c[channel].relative_l2 for c in comparisons])),
            coverage=_weighted_mean(coverage, weights),
        )
    return summary


def _weighted_mean(values: np.ndarray, weights: np.ndarray) -> float:
    if np.all(np.isnan(values)):
        return float("nan")
    mask = ~np.isnan(values)
    return float(np.sum(values[mask] * weights[mask]) / np.sum(weights[mask]))
