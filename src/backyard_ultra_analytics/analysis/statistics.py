"""Descriptive statistics over lap series with gaps."""

import math
from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class SeriesStats:
    """Mean and population standard deviation of the valid entries."""

    mean: float
    std_dev: float
    count: int


def calculate_stats(values: Iterable[Optional[float]]) -> SeriesStats:
    """Calculate mean and standard deviation, ignoring missing entries.

    An empty (or all-missing) series yields zeros rather than an error.

    Args:
        values: Lap minutes, None for gaps

    Returns:
        SeriesStats with the population standard deviation (divides by n)
    """
    valid_times = [v for v in values if v is not None]
    if not valid_times:
        return SeriesStats(mean=0.0, std_dev=0.0, count=0)

    n = len(valid_times)
    mean = sum(valid_times) / n
    variance = sum((v - mean) ** 2 for v in valid_times) / n
    return SeriesStats(mean=mean, std_dev=math.sqrt(variance), count=n)
