"""Data loading utilities for backyard ultra race editions."""

import asyncio
import math
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pandas as pd
from loguru import logger

from ..config import get_settings
from ..exceptions import DataLoadError
from .records import EditionData, LapRecord, RaceResult

RESULTS_FILE = "results.json"
LAPS_FILE = "laps.json"

# Published column names -> record field names
RESULT_COLUMNS = {
    "Place": "place",
    "Bib": "bib",
    "Name": "name",
    "Age": "age",
    "State": "state",
    "Laps": "laps_completed",
    "Miles": "total_distance_miles",
    "KM": "total_distance_km",
    "RaceTime": "race_time",
}

LAP_COLUMNS = {
    "File": "runner_ref",
    "Lap Split": "lap_split",
}


def edition_dir(edition: str, data_root: Optional[Path] = None) -> Path:
    """Return the folder holding an edition's files."""
    if data_root is None:
        data_root = get_settings().data_root
    return Path(data_root) / f"data_{edition}"


def _read_records(path: Path, columns: Dict[str, str]) -> pd.DataFrame:
    df = pd.read_json(path, orient="records", dtype=False, convert_dates=False)

    # Clean up column names (remove leading/trailing whitespace)
    df.columns = df.columns.str.strip() if len(df.columns) else df.columns
    df = df.rename(columns=columns)

    missing = [name for name in columns.values() if name not in df.columns]
    if missing and not df.empty:
        raise ValueError(f"missing columns {missing}")
    return df


def load_results_data(edition: str, data_root: Optional[Path] = None) -> pd.DataFrame:
    """Load the results table of an edition.

    Args:
        edition: Edition name (e.g., '2025', '2023')
        data_root: Root directory holding data_<edition> folders

    Returns:
        DataFrame with record field names as columns
    """
    path = edition_dir(edition, data_root) / RESULTS_FILE
    logger.info(f"Loading results for {edition} edition from {path}")
    df = _read_records(path, RESULT_COLUMNS)
    logger.info(f"{edition} results loaded: {len(df)}")
    return df


def load_lap_data(edition: str, data_root: Optional[Path] = None) -> pd.DataFrame:
    """Load the lap splits of an edition.

    Args:
        edition: Edition name (e.g., '2025', '2023')
        data_root: Root directory holding data_<edition> folders

    Returns:
        DataFrame with ``runner_ref`` and ``lap_split`` columns, in file order
    """
    path = edition_dir(edition, data_root) / LAPS_FILE
    logger.info(f"Loading laps for {edition} edition from {path}")
    df = _read_records(path, LAP_COLUMNS)
    logger.info(f"{edition} laps loaded: {len(df)}")
    return df


def _clean(value):
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def _as_int(value) -> Optional[int]:
    value = _clean(value)
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _as_float(value) -> Optional[float]:
    value = _clean(value)
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_text(value) -> Optional[str]:
    value = _clean(value)
    return None if value is None else str(value)


def results_from_frame(df: pd.DataFrame) -> List[RaceResult]:
    """Convert a results DataFrame into RaceResult records, keeping row order."""
    results = []
    for row in df.to_dict("records"):
        bib = _as_int(row.get("bib"))
        if bib is None:
            logger.warning(f"Skipping result without a bib: {row}")
            continue
        place = _as_int(row.get("place"))
        if place is None or place < 1:
            logger.warning(f"Skipping result without a valid place: {row}")
            continue
        results.append(RaceResult(
            bib=bib,
            place=place,
            name=_as_text(row.get("name")) or "",
            age=_as_int(row.get("age")),
            state=_as_text(row.get("state")),
            laps_completed=_as_int(row.get("laps_completed")) or 0,
            total_distance_miles=_as_float(row.get("total_distance_miles")),
            total_distance_km=_as_float(row.get("total_distance_km")),
            race_time=_as_text(row.get("race_time")),
        ))
    return results


def laps_from_frame(df: pd.DataFrame) -> List[LapRecord]:
    """Convert a laps DataFrame into LapRecord records, keeping row order."""
    laps = []
    for row in df.to_dict("records"):
        runner_ref = _as_int(row.get("runner_ref"))
        if runner_ref is None:
            logger.warning(f"Skipping lap without a runner reference: {row}")
            continue
        laps.append(LapRecord(runner_ref=runner_ref, lap_split=_as_text(row.get("lap_split"))))
    return laps


async def load_edition_async(edition: str, data_root: Optional[Path] = None) -> EditionData:
    """Load results and laps of an edition concurrently.

    Both reads must succeed; otherwise the failure is logged and raised so
    the analytics never see a partial edition.

    Raises:
        DataLoadError: If either file is missing or malformed
    """
    folder = edition_dir(edition, data_root)
    try:
        results_df, laps_df = await asyncio.gather(
            asyncio.to_thread(load_results_data, edition, data_root),
            asyncio.to_thread(load_lap_data, edition, data_root),
        )
    except (OSError, ValueError) as e:
        logger.error(f"Error loading data for {edition} edition from {folder}: {e}")
        raise DataLoadError(edition, folder, str(e)) from e

    return EditionData(
        edition=edition,
        results=tuple(results_from_frame(results_df)),
        laps=tuple(laps_from_frame(laps_df)),
    )


def load_edition(edition: str, data_root: Optional[Path] = None) -> EditionData:
    """Synchronous wrapper around :func:`load_edition_async`."""
    return asyncio.run(load_edition_async(edition, data_root))


async def load_editions_async(
    editions: Iterable[str],
    data_root: Optional[Path] = None,
) -> Dict[str, EditionData]:
    editions = list(editions)
    loaded = await asyncio.gather(*(load_edition_async(e, data_root) for e in editions))
    return dict(zip(editions, loaded))


def load_editions(
    editions: Optional[Iterable[str]] = None,
    data_root: Optional[Path] = None,
) -> Dict[str, EditionData]:
    """Load several editions, keyed by edition name.

    Args:
        editions: Edition names (defaults to the configured editions)
        data_root: Root directory holding data_<edition> folders

    Returns:
        Mapping of edition name to EditionData
    """
    if editions is None:
        editions = get_settings().editions
    return asyncio.run(load_editions_async(editions, data_root))
