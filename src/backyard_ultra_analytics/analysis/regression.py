"""Ordinary least squares fits for trendlines and best-fit curves."""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class LinearFit:
    """A fitted line ``y = slope * x + intercept``."""

    slope: float
    intercept: float

    def predict(self, x: float) -> float:
        return self.slope * x + self.intercept

    def predict_many(self, xs: Iterable[float]) -> List[float]:
        return [self.predict(x) for x in xs]


def fit_line(points: Iterable[Tuple[float, float]]) -> Optional[LinearFit]:
    """Fit a least squares line through ``(x, y)`` points.

    Args:
        points: Points to fit

    Returns:
        LinearFit, or None with fewer than two points or when every x is
        the same (vertical fit)
    """
    points = list(points)
    n = len(points)
    if n < 2:
        return None

    sum_x = sum(x for x, _ in points)
    sum_y = sum(y for _, y in points)
    sum_xy = sum(x * y for x, y in points)
    sum_xx = sum(x * x for x, _ in points)

    denominator = n * sum_xx - sum_x * sum_x
    if denominator == 0:
        return None

    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n
    return LinearFit(slope=slope, intercept=intercept)


def fit_trendline(values: Sequence[Optional[float]]) -> Optional[LinearFit]:
    """Fit a trendline over a lap series.

    x is the 1-based lap number in the original series; missing laps are
    skipped but do not shift the lap numbers of later laps.
    """
    valid_points = [(index + 1, value) for index, value in enumerate(values) if value is not None]
    return fit_line(valid_points)
