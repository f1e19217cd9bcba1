"""
Test configuration for pytest.
"""

import pytest
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture
def tiny_embedding_config():
    """Linear 5 -> 2 embedding that passes through (x, isP)."""
    return {
        "weightsArray": [[1.0, 0.0, 0.0, 0.0, 0.0,
                          0.0, 1.0, 0.0, 0.0, 0.0]],
        "biasesArray": [[0.0, 0.0]],
        "activationArray": ["linear"],
    }


@pytest.fixture
def tiny_dictionary_config():
    """Linear 3 -> 3 identity dictionary: raw output is (x, isP, T/300)."""
    return {
        "weightsArray": [[1.0, 0.0, 0.0,
                          0.0, 1.0, 0.0,
                          0.0, 0.0, 1.0]],
        "biasesArray": [[0.0, 0.0, 0.0]],
        "activationArray": ["linear"],
    }


@pytest.fixture
def tiny_std_dictionary_config():
    """Constant 3 -> 3 std dictionary: raw output is always (1, 1, 1)."""
    return {
        "weightsArray": [[0.0] * 9],
        "biasesArray": [[1.0, 1.0, 1.0]],
        "activationArray": ["linear"],
    }


@pytest.fixture
def tiny_config(tiny_embedding_config, tiny_dictionary_config, tiny_std_dictionary_config):
    """Mean+std model configuration built from the tiny networks."""
    return {
        "embeddingNet": tiny_embedding_config,
        "meanDictionaryNet": tiny_dictionary_config,
        "stdDictionaryNet": tiny_std_dictionary_config,
    }


@pytest.fixture
def tiny_mean_config(tiny_embedding_config, tiny_dictionary_config):
    """Mean-only model configuration built from the tiny networks."""
    return {
        "embeddingNet": tiny_embedding_config,
        "dictionaryNet": tiny_dictionary_config,
    }


@pytest.fixture(scope="session")
def packaged_model():
    """Mean+std model with the packaged trained weights."""
    from bitelann.models import load_property_model
    from bitelann.utils import load_model_config
    return load_property_model(load_model_config())


@pytest.fixture(scope="session")
def packaged_mean_model():
    """Mean-only model with the packaged trained weights."""
    from bitelann.models import load_property_model
    from bitelann.utils import DEFAULT_MEAN_MODEL_PATH, load_model_config
    return load_property_model(load_model_config(DEFAULT_MEAN_MODEL_PATH))


@pytest.fixture
def predictor(packaged_model):
    """Predictor over a short 0-300 °C grid."""
    from bitelann.inference import ThermoelectricPredictor, temperature_grid
    return ThermoelectricPredictor(packaged_model, temperature_grid(0.0, 300.0, 7))


@pytest.fixture(scope="session")
def dataset():
    """Packaged experimental dataset."""
    from bitelann.materials import ExperimentalDataset
    return ExperimentalDataset()
