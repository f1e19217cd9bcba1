"""
Unit tests for the experimental dataset.
"""

import json

import pytest
import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from bitelann.materials import DEFAULT_SAMPLE, ExperimentalDataset, ExperimentalSample, get_dataset
from bitelann.models import CarrierType, CrystalAxis


class TestExperimentalDataset:
    """Test the packaged measurements."""

    def test_dataset_loads(self, dataset):
        assert len(dataset) == 28
        assert DEFAULT_SAMPLE in dataset

    def test_get_sample(self, dataset):
        sample = dataset.get("p-type, x=0.20, a-axis")

        assert sample.composition == pytest.approx(0.2)
        assert sample.carrier_type is CarrierType.P
        assert sample.axis is CrystalAxis.A
        np.testing.assert_array_equal(sample.temperatures, [25, 50, 100, 150, 200, 250, 300])
        assert sample.resistivity[0] == pytest.approx(5.46e-6)
        assert sample.seebeck[0] == pytest.approx(1.55e-4)
        assert sample.thermal_conductivity[0] == pytest.approx(1.59506)

    def test_get_missing(self, dataset):
        assert dataset.get("x-type") is None

    def test_get_or_raise(self, dataset):
        with pytest.raises(KeyError):
            dataset.get_or_raise("x-type")

    def test_search(self, dataset):
        results = dataset.search("X=0.30")

        assert {s.name for s in results} == {
            "p-type, x=0.30, a-axis", "p-type, x=0.30, c-axis",
            "n-type, x=0.30, a-axis", "n-type, x=0.30, c-axis",
        }

    def test_filter(self, dataset):
        assert len(dataset.filter(carrier_type="p-type")) == 10
        assert len(dataset.filter(carrier_type="n")) == 18
        assert len(dataset.filter(axis="c-axis")) == 14
        assert len(dataset.filter("n", "a")) == 9
        assert all(s.axis is CrystalAxis.C for s in dataset.filter(axis=CrystalAxis.C))

    def test_iteration(self, dataset):
        assert [s.name for s in dataset] == dataset.list_all()

    def test_long_series(self, dataset):
        assert dataset.get("n-type, x=0.30, a-axis").temperatures.size == 35

    def test_global_instance(self):
        assert get_dataset() is get_dataset()


class TestExperimentalSample:
    """Test per-sample derived quantities and validation."""

    def test_derived_quantities(self, dataset):
        sample = dataset.get("p-type, x=0.20, a-axis")

        np.testing.assert_allclose(sample.electrical_conductivity, 1.0 / sample.resistivity)
        np.testing.assert_allclose(sample.power_factor, sample.seebeck ** 2 / sample.resistivity)
        assert sample.figure_of_merit[0] == pytest.approx(
            1.55e-4 ** 2 / (5.46e-6 * 1.59506) * 298.15
        )

    def test_round_trip(self, dataset):
        sample = dataset.get(DEFAULT_SAMPLE)
        restored = ExperimentalSample.from_dict(sample.name, sample.to_dict())

        np.testing.assert_array_equal(restored.seebeck, sample.seebeck)
        np.testing.assert_array_equal(restored.descriptor, sample.descriptor)

    def test_length_mismatch(self):
        data = {
            "input": [0.2, 1, 0, 1, 0],
            "temperature [degC]": [25, 50],
            "electrical_resistivity [Ohm m]": [1e-5],
            "Seebeck_coefficient [V/K]": [1e-4, 1e-4],
            "thermal_conductivity [W/m/K]": [1.0, 1.0],
        }
        with pytest.raises(ValueError):
            ExperimentalSample.from_dict("bad", data)

    def test_short_descriptor(self):
        data = {
            "input": [0.2, 1, 0, 1],
            "temperature [degC]": [25],
            "electrical_resistivity [Ohm m]": [1e-5],
            "Seebeck_coefficient [V/K]": [1e-4],
            "thermal_conductivity [W/m/K]": [1.0],
        }
        with pytest.raises(ValueError):
            ExperimentalSample.from_dict("bad", data)

    def test_custom_file(self, tmp_path, dataset):
        path = tmp_path / "data.json"
        sample = dataset.get(DEFAULT_SAMPLE)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump({sample.name: sample.to_dict()}, f)

        custom = ExperimentalDataset(path)

        assert len(custom) == 1
        assert custom.list_all() == [DEFAULT_SAMPLE]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ExperimentalDataset(tmp_path / "missing.json")
