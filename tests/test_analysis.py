"""
Unit tests for model-vs-experiment comparison and reports.
"""

import json
import math

import pytest
import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from bitelann.analysis import (
    DISPLAY_UNITS,
    compare_dataset,
    compare_sample,
    compute_coverage,
    compute_mae,
    compute_relative_l2,
    format_table,
    summarize,
    sweep_to_records,
    to_display,
)
from bitelann.inference import ThermoelectricPredictor
from bitelann.uncertainty import QUANTITIES, DerivedQuantity


class TestMetrics:
    """Test the error metrics."""

    def test_mae(self):
        assert compute_mae([1.0, 2.0, 3.0], [1.5, 2.0, 2.0]) == pytest.approx(0.5)

    def test_relative_l2(self):
        assert compute_relative_l2([3.0, 4.0], [0.0, 0.0]) == pytest.approx(5.0)
        assert compute_relative_l2([1.1, 2.2], [1.0, 2.0]) == pytest.approx(0.1)

    def test_coverage(self):
        mean = np.array([1.0, 1.0, 1.0, 1.0])
        std = np.array([0.5, 0.5, 0.5, 0.5])
        measured = np.array([1.0, 1.9, 0.0, 3.0])

        assert compute_coverage(mean, std, measured) == pytest.approx(0.5)


class TestComparison:
    """Test comparison against the packaged measurements."""

    def test_compare_sample(self, predictor, dataset):
        sample = dataset.get("p-type, x=0.20, a-axis")
        comparison = compare_sample(predictor, sample)

        assert comparison.name == sample.name
        assert comparison.n_points == 7
        for channel in ("resistivity", "seebeck", "thermal_conductivity"):
            metrics = comparison[channel]
            assert metrics.relative_l2 < 0.05
            assert 0.0 <= metrics.coverage <= 1.0
        assert comparison["resistivity"].mae < 1e-6
        assert "Coverage" in comparison.summary()

    def test_mean_only_has_nan_coverage(self, packaged_mean_model, dataset):
        predictor = ThermoelectricPredictor(packaged_mean_model)
        comparison = compare_sample(predictor, dataset.get("n-type, x=0.50, a-axis"))

        assert math.isnan(comparison["seebeck"].coverage)
        assert math.isfinite(comparison["seebeck"].mae)

    def test_compare_dataset(self, predictor, dataset):
        samples = dataset.filter(carrier_type="p", axis="a")
        comparisons = compare_dataset(predictor, samples, show_progress=False)

        assert [c.name for c in comparisons] == [s.name for s in samples]

        summary = summarize(comparisons)
        assert set(summary) == {"resistivity", "seebeck", "thermal_conductivity"}
        assert 0.0 <= summary["thermal_conductivity"].coverage <= 1.0

    def test_summarize_empty(self):
        with pytest.raises(ValueError):
            summarize([])


class TestReport:
    """Test display units and rendered reports."""

    @pytest.fixture
    def derived(self, predictor):
        sweep = predictor.sweep(0.2, "p", "a", temperatures=[25.0, 150.0, 300.0])
        return sweep, predictor.derive(sweep)

    def test_display_units(self):
        assert set(DISPLAY_UNITS) == set(QUANTITIES)
        assert DISPLAY_UNITS["resistivity"].unit == "mΩ cm"
        assert DISPLAY_UNITS["seebeck"].scale == 1e6

    def test_to_display(self):
        q = to_display("resistivity", DerivedQuantity(1e-5, 0.8e-5, 1.2e-5))

        assert q.value == pytest.approx(1.0)
        assert q.lower == pytest.approx(0.8)
        assert q.upper == pytest.approx(1.2)

    def test_records(self, derived):
        sweep, result = derived
        records = sweep_to_records(sweep.temperatures, result)

        assert len(records) == 3
        assert records[0]["temperature"] == 25.0
        assert records[0]["seebeck"]["value"] == pytest.approx(sweep.seebeck[0] * 1e6)
        assert records[0]["power_factor"]["value"] == pytest.approx(
            sweep.seebeck[0] ** 2 / sweep.resistivity[0] * 1e3
        )
        json.dumps(records)

    def test_records_map_nan_to_none(self, predictor):
        sweep = predictor.sweep(0.2, "p", "a", temperatures=[25.0])
        result = predictor.derive(sweep, show_tep_ci=False, show_zt_ci=False)
        record = sweep_to_records(sweep.temperatures, result)[0]

        assert record["figure_of_merit"]["lower"] is None
        assert record["figure_of_merit"]["value"] is not None

    def test_format_table(self, derived):
        sweep, result = derived
        table = format_table(sweep.temperatures, result)
        lines = table.splitlines()

        assert len(lines) == 5
        assert "seebeck [μV/K]" in lines[0]
        assert lines[2].strip().startswith("25.0")

    def test_format_table_without_bounds(self, derived):
        sweep, result = derived
        table = format_table(sweep.temperatures, result, quantities=("figure_of_merit",), show_bounds=False)

        assert "[" not in table.splitlines()[2]
