"""
Materials module for experimental BiTe thermoelectric measurements.
"""

from .dataset import DEFAULT_SAMPLE, ExperimentalDataset, ExperimentalSample, get_dataset

__all__ = [
    "DEFAULT_SAMPLE",
    "ExperimentalDataset",
    "ExperimentalSample",
    "get_dataset",
]
