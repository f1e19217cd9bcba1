"""
Analysis module for BiTe property predictions.

Provides:
- Model-vs-experiment comparison metrics
- Display-unit tables and JSON records of derived sweeps
"""

from .comparison import (
    ChannelMetrics,
    SampleComparison,
    compare_dataset,
    compare_sample,
    compute_coverage,
    compute_mae,
    compute_relative_l2,
    summarize,
)
from .report import DISPLAY_UNITS, DisplayUnit, format_table, sweep_to_records, to_display

__all__ = [
    "ChannelMetrics",
    "SampleComparison",
    "compare_dataset",
    "compare_sample",
    "compute_coverage",
    "compute_mae",
    "compute_relative_l2",
    "summarize",
    "DISPLAY_UNITS",
    "DisplayUnit",
    "format_table",
    "sweep_to_records",
    "to_display",
]
