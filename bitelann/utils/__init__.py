# Utilities Module
from .config import (
    DEFAULT_MODEL_PATH,
    DEFAULT_MEAN_MODEL_PATH,
    DEFAULT_DATASET_PATH,
    PredictionConfig,
    load_config,
    save_config,
    merge_configs,
    load_model_config,
)
from .logging_config import setup_logging

__all__ = [
    "DEFAULT_MODEL_PATH",
    "DEFAULT_MEAN_MODEL_PATH",
    "DEFAULT_DATASET_PATH",
    "PredictionConfig",
    "load_config",
    "save_config",
    "merge_configs",
    "load_model_config",
    "setup_logging",
]
