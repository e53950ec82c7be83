"""Data processing utilities for backyard ultra race data."""

from .records import *
from .loaders import *
from .preprocessors import *
from .transformers import *

__all__ = [
    "RaceResult",
    "LapRecord",
    "EditionData",
    "load_edition",
    "load_editions",
    "parse_time_to_minutes",
    "parse_lap_splits",
    "runner_lap_minutes",
    "format_minutes",
    "sort_results",
    "results_to_frame",
]
