"""Lap split preprocessing utilities."""

import math
import re
from typing import Iterable, List, Optional

from loguru import logger

from .records import EditionData

_SECONDS_PATTERN = re.compile(r"[0-9]+(\.[0-9]+)?")


def _parse_whole(field: str) -> Optional[int]:
    field = field.strip()
    if not (field.isascii() and field.isdigit()):
        return None
    return int(field)


def _parse_seconds(field: str) -> Optional[float]:
    # float() also takes underscores, signs, exponents and non-ASCII digits
    field = field.strip()
    if not _SECONDS_PATTERN.fullmatch(field):
        return None
    return float(field)


def parse_time_to_minutes(value) -> Optional[float]:
    """Convert a ``M:SS`` or ``H:MM:SS`` duration to minutes.

    Args:
        value: Duration text, e.g. ``"52:30"`` or ``"1:02:15"``

    Returns:
        Minutes as a float, or None when the value is empty or malformed
    """
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None

    clean_time = str(value).strip()
    if not clean_time:
        return None

    parts = clean_time.split(':')
    if len(parts) == 2:
        minutes = _parse_whole(parts[0])
        seconds = _parse_seconds(parts[1])
        if minutes is None or seconds is None:
            return None
        return minutes + seconds / 60
    elif len(parts) == 3:
        hours = _parse_whole(parts[0])
        minutes = _parse_whole(parts[1])
        seconds = _parse_seconds(parts[2])
        if hours is None or minutes is None or seconds is None:
            return None
        return hours * 60 + minutes + seconds / 60

    return None


def parse_lap_splits(splits: Iterable) -> List[Optional[float]]:
    """Parse a sequence of lap splits, keeping None where a split is unreadable."""
    return [parse_time_to_minutes(split) for split in splits]


def runner_lap_minutes(edition_data: EditionData, bib: int) -> List[Optional[float]]:
    """Build the lap-minute series for one runner.

    Args:
        edition_data: Results and laps of the edition
        bib: Runner bib

    Returns:
        One entry per lap in lap order, None for unparseable splits
    """
    lap_times = parse_lap_splits(lap.lap_split for lap in edition_data.laps_for(bib))
    missing = sum(1 for t in lap_times if t is None)
    if missing:
        logger.debug(f"Bib {bib} in {edition_data.edition}: {missing} of {len(lap_times)} splits unparseable")
    return lap_times


def format_minutes(value: Optional[float]) -> str:
    """Render minutes as ``M:SS`` (empty string for missing values)."""
    if value is None:
        return ""
    mins = math.floor(value)
    secs = round((value - mins) * 60)
    if secs == 60:
        mins += 1
        secs = 0
    return f"{mins}:{secs:02d}"
