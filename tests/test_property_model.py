"""
Unit tests for the physical-unit property models.
"""

import math

import pytest
import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from bitelann.exceptions import ConfigShapeError, ShapeError
from bitelann.models import (
    CarrierType,
    CrystalAxis,
    FeedForwardNetwork,
    MeanPropertyModel,
    PropertyModel,
    build_descriptor,
    load_property_model,
)


def softplus(x):
    return math.log1p(math.exp(x))


# Reference outputs of the packaged weights
REFERENCE = [
    (
        [0.2, 1.0, 0.0, 1.0, 0.0, 25.0],
        (5.392470490968546e-06, 1.527617684785307e-04, 1.5906109627585474),
        (9.725069685471173e-07, 1.8657728608003428e-06, 0.02270473832064975),
    ),
    (
        [0.5, 0.0, 1.0, 1.0, 0.0, 150.0],
        (1.5450295581287083e-05, -1.7359577466734922e-04, 1.008604486479319),
        (6.55470483267627e-07, 6.7928600218528245e-06, 0.03429522426466846),
    ),
]


class TestDescriptor:
    """Test descriptor encoding."""

    def test_build_descriptor(self):
        assert build_descriptor(0.2, "p-type", "a-axis", 25.0) == [0.2, 1.0, 0.0, 1.0, 0.0, 25.0]
        assert build_descriptor(0.5, CarrierType.N, CrystalAxis.C) == [0.5, 0.0, 1.0, 0.0, 1.0, 0.0]

    @pytest.mark.parametrize("text,member", [("p", CarrierType.P), ("N-type", CarrierType.N)])
    def test_parse_carrier_type(self, text, member):
        assert CarrierType.parse(text) is member

    def test_parse_errors(self):
        with pytest.raises(ValueError):
            CarrierType.parse("x-type")
        with pytest.raises(ValueError):
            CrystalAxis.parse("b-axis")

    def test_labels(self):
        assert CarrierType.P.label == "p-type"
        assert CrystalAxis.C.label == "c-axis"


class TestTinyPropertyModel:
    """Test input and output scaling on hand-built networks."""

    def test_mean_scaling(self, tiny_config):
        model = PropertyModel.from_config(tiny_config)
        prediction = model.evaluate([0.2, 1.0, 0.0, 1.0, 0.0, 150.0])

        # raw dictionary output is (x, isP, T/300) = (0.2, 1.0, 0.5)
        assert prediction.resistivity == pytest.approx(softplus(0.2) * 1e-5)
        assert prediction.seebeck == pytest.approx(1.0 * 1e-4)
        assert prediction.thermal_conductivity == pytest.approx(softplus(0.5))

    def test_std_scaling(self, tiny_config):
        prediction = PropertyModel.from_config(tiny_config).evaluate([0.2, 1.0, 0.0, 1.0, 0.0, 150.0])

        assert prediction.resistivity_std == pytest.approx(1e-5)
        assert prediction.seebeck_std == pytest.approx(1e-4)
        assert prediction.thermal_conductivity_std == pytest.approx(1.0)

    def test_mean_only(self, tiny_mean_config):
        model = MeanPropertyModel.from_config(tiny_mean_config)
        prediction = model.evaluate([0.2, 0.0, 1.0, 1.0, 0.0, 0.0])

        assert not model.has_std
        assert prediction.std is None
        assert prediction.seebeck == pytest.approx(0.0)
        with pytest.raises(AttributeError):
            prediction.seebeck_std

    def test_to_dict(self, tiny_config):
        result = PropertyModel.from_config(tiny_config).evaluate([0.2, 1.0, 0.0, 1.0, 0.0, 0.0]).to_dict()

        assert set(result) == {
            "resistivity", "seebeck", "thermal_conductivity",
            "resistivity_std", "seebeck_std", "thermal_conductivity_std",
        }

    def test_outputs_start_unset(self, tiny_config):
        model = PropertyModel.from_config(tiny_config)

        assert model.mean_output is None
        assert model.std_output is None

        prediction = model.evaluate([0.2, 1.0, 0.0, 1.0, 0.0, 0.0])
        assert model.mean_output == prediction.mean
        assert model.std_output == prediction.std

    def test_mean_only_never_sets_std_output(self, tiny_mean_config):
        model = MeanPropertyModel.from_config(tiny_mean_config)
        model.evaluate([0.2, 1.0, 0.0, 1.0, 0.0, 0.0])

        assert model.mean_output is not None
        assert model.std_output is None

    def test_embedding_shared(self, tiny_config):
        model = PropertyModel.from_config(tiny_config)
        assert model.mean_lann.embedding is model.std_lann.embedding

    def test_descriptor_must_have_six_entries(self, tiny_config):
        model = PropertyModel.from_config(tiny_config)

        with pytest.raises(ShapeError):
            model.evaluate([0.2, 1.0, 0.0, 1.0, 0.0])

    def test_nan_descriptor(self, tiny_config):
        prediction = PropertyModel.from_config(tiny_config).evaluate([np.nan, 1.0, 0.0, 1.0, 0.0, 0.0])
        assert np.isnan(prediction.resistivity)

    def test_mismatched_std_output(self, tiny_config):
        tiny_config["stdDictionaryNet"] = {
            "weightsArray": [[0.0] * 6],
            "biasesArray": [[1.0, 1.0]],
            "activationArray": ["softplus"],
        }
        with pytest.raises(ConfigShapeError):
            PropertyModel.from_config(tiny_config)

    def test_two_channel_dictionaries_rejected(self, tiny_config, tiny_mean_config):
        two_channels = {
            "weightsArray": [[1.0, 0.0, 0.0, 0.0, 1.0, 0.0]],
            "biasesArray": [[0.0, 0.0]],
            "activationArray": ["linear"],
        }
        tiny_config["meanDictionaryNet"] = two_channels
        tiny_config["stdDictionaryNet"] = two_channels
        tiny_mean_config["dictionaryNet"] = two_channels

        with pytest.raises(ConfigShapeError, match="3"):
            PropertyModel.from_config(tiny_config)
        with pytest.raises(ConfigShapeError):
            MeanPropertyModel.from_config(tiny_mean_config)

    def test_std_dictionary_channels_checked(self, tiny_config):
        model = PropertyModel.from_config(tiny_config)
        two_channels = FeedForwardNetwork(3, [[0.0] * 6], [[1.0, 1.0]], ["softplus"])

        with pytest.raises(ConfigShapeError, match="Std"):
            PropertyModel(model.embedding, model.mean_lann.dictionary, two_channels)

    def test_dictionary_input_mismatch(self, tiny_mean_config):
        tiny_mean_config["dictionaryNet"] = {
            "weightsArray": [[1.0, 0.0, 0.0, 0.0]],
            "biasesArray": [[0.0]],
            "activationArray": ["linear"],
        }
        with pytest.raises(ConfigShapeError):
            MeanPropertyModel.from_config(tiny_mean_config)


class TestLoadPropertyModel:
    """Test variant selection from configuration keys."""

    def test_mean_std_variant(self, tiny_config):
        assert isinstance(load_property_model(tiny_config), PropertyModel)

    def test_mean_only_variant(self, tiny_mean_config):
        model = load_property_model(tiny_mean_config)

        assert isinstance(model, MeanPropertyModel)
        assert not isinstance(model, PropertyModel)

    def test_unknown_layout(self, tiny_embedding_config):
        with pytest.raises(ConfigShapeError):
            load_property_model({"embeddingNet": tiny_embedding_config})

    def test_missing_embedding(self, tiny_dictionary_config):
        with pytest.raises(ConfigShapeError):
            load_property_model({"dictionaryNet": tiny_dictionary_config})


class TestPackagedModel:
    """Test the trained weights shipped with the package."""

    @pytest.mark.parametrize("descriptor,mean,std", REFERENCE)
    def test_reference_values(self, packaged_model, descriptor, mean, std):
        prediction = packaged_model.evaluate(descriptor)

        np.testing.assert_allclose(prediction.mean.array, mean, rtol=1e-9)
        np.testing.assert_allclose(prediction.std.array, std, rtol=1e-9)

    @pytest.mark.parametrize("descriptor,mean,std", REFERENCE)
    def test_mean_only_matches(self, packaged_mean_model, descriptor, mean, std):
        prediction = packaged_mean_model.evaluate(descriptor)
        np.testing.assert_allclose(prediction.mean.array, mean, rtol=1e-9)

    def test_deterministic(self, packaged_model):
        descriptor = build_descriptor(0.35, "n", "c", 210.0)
        first = packaged_model.evaluate(descriptor)
        second = packaged_model.evaluate(descriptor)

        assert first.mean == second.mean
        assert first.std == second.std

    def test_results_are_independent(self, packaged_model):
        first = packaged_model.evaluate(build_descriptor(0.2, "p", "a", 25.0))
        saved = first.mean.clone()
        packaged_model.evaluate(build_descriptor(0.5, "n", "c", 300.0))

        assert first.mean == saved

    def test_close_to_experiment(self, packaged_model):
        # Measured "p-type, x=0.20, a-axis" at 25 °C
        prediction = packaged_model.evaluate(build_descriptor(0.2, "p", "a", 25.0))

        assert prediction.resistivity == pytest.approx(5.46e-6, rel=0.05)
        assert prediction.seebeck == pytest.approx(1.55e-4, rel=0.05)
        assert prediction.thermal_conductivity == pytest.approx(1.59506, rel=0.05)

    def test_positive_outputs_over_grid(self, packaged_model):
        for temperature in np.linspace(0.0, 300.0, 11):
            prediction = packaged_model.evaluate(build_descriptor(0.4, "n", "a", temperature))

            assert prediction.resistivity > 0
            assert prediction.thermal_conductivity > 0
            assert np.all(prediction.std.array > 0)
