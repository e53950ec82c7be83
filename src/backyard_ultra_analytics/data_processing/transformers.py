"""Results table transformations: sorting and tabular export."""

from dataclasses import asdict
from typing import Callable, Dict, List, Optional, Sequence

import pandas as pd
from loguru import logger

from .preprocessors import parse_time_to_minutes
from .records import RaceResult

NUMERIC_COLUMNS = (
    "place",
    "bib",
    "age",
    "laps_completed",
    "total_distance_miles",
    "total_distance_km",
)
TEXT_COLUMNS = ("name", "state")
DURATION_COLUMNS = ("race_time",)

SORTABLE_COLUMNS = NUMERIC_COLUMNS + TEXT_COLUMNS + DURATION_COLUMNS


def _sort_key_for(column: str) -> Callable[[RaceResult], Optional[object]]:
    if column in NUMERIC_COLUMNS:
        def key(result):
            value = getattr(result, column)
            return None if value is None else float(value)
    elif column in DURATION_COLUMNS:
        def key(result):
            return parse_time_to_minutes(getattr(result, column))
    elif column in TEXT_COLUMNS:
        def key(result):
            value = getattr(result, column)
            return value.casefold() if value else None
    else:
        raise ValueError(f"Cannot sort by unknown column: {column}")
    return key


def sort_results(
    results: Sequence[RaceResult],
    column: Optional[str] = None,
    direction: str = "asc",
) -> List[RaceResult]:
    """Sort results by a column.

    Missing values always go last, whichever the direction. Ties keep the
    published order.

    Args:
        results: Results in published order
        column: Field name to sort by; None keeps the published order
        direction: 'asc' or 'desc'

    Returns:
        A new sorted list
    """
    if column is None:
        return list(results)
    if direction not in ("asc", "desc"):
        raise ValueError(f"Unknown sort direction: {direction}")

    key = _sort_key_for(column)
    present = [r for r in results if key(r) is not None]
    missing = [r for r in results if key(r) is None]

    ordered = sorted(present, key=key, reverse=(direction == "desc"))
    logger.debug(f"Sorted {len(results)} results by {column} {direction} ({len(missing)} missing)")
    return ordered + missing


def results_to_frame(results: Sequence[RaceResult]) -> pd.DataFrame:
    """Export results as a DataFrame, one row per runner."""
    columns = list(RaceResult.__dataclass_fields__)
    if not results:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame([asdict(r) for r in results], columns=columns)


def results_to_rows(results: Sequence[RaceResult]) -> List[Dict]:
    """Export results as table rows keyed by field name, with ``id`` set to the bib."""
    rows = []
    for result in results:
        row = asdict(result)
        row["id"] = result.bib
        rows.append(row)
    return rows
