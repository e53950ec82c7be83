"""Analysis modules for backyard ultra lap data."""

from .statistics import *
from .regression import *
from .smoothing import *
from .sections import *
from .lap_analysis import *
from .cohort_analysis import *

__all__ = [
    "calculate_stats",
    "fit_line",
    "fit_trendline",
    "calculate_ema",
    "segment",
    "section_bands",
    "build_runner_series",
    "build_lap_chart_dataset",
    "analyze_laps_over_threshold",
    "build_cohort_chart_dataset",
]
