"""Exponential moving average over lap and cohort series."""

from typing import List, Optional, Sequence

from ..config import EMA_WINDOW


def smoothing_factor(window_size: int) -> float:
    """Return alpha = 2 / (window + 1)."""
    if window_size < 1:
        raise ValueError(f"EMA window must be at least 1, got {window_size}")
    return 2 / (window_size + 1)


def calculate_ema(
    values: Sequence[Optional[float]],
    window_size: int = EMA_WINDOW,
    allow_gaps: bool = True,
) -> Optional[List[Optional[float]]]:
    """Calculate an exponential moving average.

    ``EMA = alpha * current + (1 - alpha) * previous EMA``. Missing inputs
    stay missing in the output. The previous EMA is the latest smoothed value
    within the trailing window; when the window holds none, the current
    value seeds the average again.

    Args:
        values: Series to smooth, None for gaps
        window_size: EMA window, sets alpha
        allow_gaps: If False the series must be dense

    Returns:
        Smoothed series of the same length, or None with fewer than two
        valid values

    Raises:
        ValueError: If ``allow_gaps`` is False and the series has a gap
    """
    alpha = smoothing_factor(window_size)

    if not allow_gaps and any(v is None for v in values):
        raise ValueError("Dense EMA received a series with missing values")
    if sum(1 for v in values if v is not None) < 2:
        return None

    ema_data: List[Optional[float]] = []
    for i, current in enumerate(values):
        if current is None:
            ema_data.append(None)
            continue

        previous_ema = None
        for j in range(i - 1, max(0, i - window_size) - 1, -1):
            if ema_data[j] is not None:
                previous_ema = ema_data[j]
                break

        if previous_ema is None:
            ema_data.append(current)
        else:
            ema_data.append(alpha * current + (1 - alpha) * previous_ema)

    return ema_data
