"""Placement vs. fatigue analysis across a whole edition."""

from dataclasses import asdict, dataclass
from typing import List, Mapping, Optional, Sequence

import pandas as pd
from loguru import logger

from ..config import EMA_WINDOW, THRESHOLD_MINUTES
from ..data_processing.preprocessors import parse_lap_splits
from ..data_processing.records import EditionData, group_laps_by_runner
from .regression import LinearFit, fit_line
from .smoothing import calculate_ema


@dataclass(frozen=True)
class CohortRecord:
    """Share of a runner's laps slower than the threshold."""

    rank: int
    name: str
    percent_over_threshold: float
    lap_count: int


@dataclass(frozen=True)
class CohortChartDataset:
    """Cohort scatter data ordered worst-placed first."""

    edition: str
    ranks: List[int]
    names: List[str]
    percents: List[float]
    ema: Optional[List[float]]
    best_fit: Optional[LinearFit]
    fit_values: Optional[List[float]]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({
            "rank": self.ranks,
            "name": self.names,
            "percent_over_threshold": self.percents,
            "ema": self.ema if self.ema is not None else [None] * len(self.ranks),
            "best_fit": self.fit_values if self.fit_values is not None else [None] * len(self.ranks),
        })


def analyze_laps_over_threshold(
    edition: str,
    editions: Mapping[str, EditionData],
    threshold: float = THRESHOLD_MINUTES,
) -> List[CohortRecord]:
    """Compute the percentage of laps over a threshold for each runner.

    Runners keep the published results order, so ``rank`` 1 is the winner.
    Percentages are taken over all of a runner's laps, unreadable splits
    included.

    Args:
        edition: Edition to analyze
        editions: Loaded editions keyed by name
        threshold: Lap duration in minutes; laps strictly slower count

    Returns:
        One CohortRecord per runner, or an empty list when the edition is
        not loaded
    """
    edition_data = editions.get(edition)
    if edition_data is None:
        logger.warning(f"No data for {edition} edition, cohort analysis is empty")
        return []

    logger.info(f"Analyzing laps over {threshold} min for {edition} edition")

    laps_by_runner = group_laps_by_runner(edition_data.laps)
    records = []
    for idx, runner in enumerate(edition_data.results):
        laps = laps_by_runner.get(runner.bib, [])
        lap_times = parse_lap_splits(lap.lap_split for lap in laps)
        over = sum(1 for t in lap_times if t is not None and t > threshold)
        percent = over / len(laps) * 100 if laps else 0.0
        records.append(CohortRecord(
            rank=idx + 1,
            name=runner.name,
            percent_over_threshold=percent,
            lap_count=len(laps),
        ))

    return records


def build_cohort_chart_dataset(
    edition: str,
    records: Sequence[CohortRecord],
    ema_window: int = EMA_WINDOW,
) -> CohortChartDataset:
    """Order cohort records worst-placed first and add EMA and best-fit overlays."""
    ordered = list(reversed(records))
    ranks = [r.rank for r in ordered]
    percents = [r.percent_over_threshold for r in ordered]

    ema = calculate_ema(percents, ema_window, allow_gaps=False)
    best_fit = fit_line(zip(ranks, percents))
    if best_fit is None and ordered:
        logger.warning(f"Best fit undefined for {edition} edition ({len(ordered)} runners)")

    return CohortChartDataset(
        edition=edition,
        ranks=ranks,
        names=[r.name for r in ordered],
        percents=percents,
        ema=ema,
        best_fit=best_fit,
        fit_values=best_fit.predict_many(ranks) if best_fit is not None else None,
    )


def cohort_to_frame(records: Sequence[CohortRecord]) -> pd.DataFrame:
    """Export cohort records as a DataFrame."""
    columns = ["rank", "name", "percent_over_threshold", "lap_count"]
    return pd.DataFrame([asdict(r) for r in records], columns=columns)
