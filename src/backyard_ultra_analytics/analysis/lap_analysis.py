"""Per-runner lap series with statistical overlays."""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

import pandas as pd
from loguru import logger

from ..config import (
    BAND_MAX_RUNNERS,
    CHART_MAX_MINUTES,
    CHART_MIN_MINUTES,
    EMA_WINDOW,
    TREND_MAX_RUNNERS,
)
from ..data_processing.preprocessors import runner_lap_minutes
from ..data_processing.records import EditionData
from .regression import LinearFit, fit_trendline
from .sections import SectionBand, section_bands
from .smoothing import calculate_ema
from .statistics import SeriesStats, calculate_stats


def clamp(value: float, low: float = CHART_MIN_MINUTES, high: float = CHART_MAX_MINUTES) -> float:
    """Clamp a value to the chart's valid range."""
    return max(low, min(high, value))


@dataclass(frozen=True)
class RunnerSeries:
    """Chart-ready series for one runner.

    Every list is aligned with ``lap_times``; None marks a missing point.
    Overlays left as None were suppressed or could not be computed.
    """

    bib: int
    name: str
    lap_times: List[Optional[float]]
    stats: SeriesStats
    min_time: Optional[float] = None
    max_time: Optional[float] = None
    min_indices: List[int] = field(default_factory=list)
    max_indices: List[int] = field(default_factory=list)
    trendline: Optional[LinearFit] = None
    trend: Optional[List[float]] = None
    ema: Optional[List[Optional[float]]] = None
    upper_band: Optional[List[Optional[float]]] = None
    lower_band: Optional[List[Optional[float]]] = None

    @property
    def lap_numbers(self) -> List[int]:
        return list(range(1, len(self.lap_times) + 1))

    def to_frame(self) -> pd.DataFrame:
        """Export the series as a DataFrame indexed by lap number."""
        data = {"lap_time": self.lap_times}
        for name in ("trend", "ema", "upper_band", "lower_band"):
            values = getattr(self, name)
            if values is not None:
                data[name] = values
        df = pd.DataFrame(data, index=pd.Index(self.lap_numbers, name="lap"))
        df["is_min"] = [i in self.min_indices for i in range(len(self.lap_times))]
        df["is_max"] = [i in self.max_indices for i in range(len(self.lap_times))]
        return df


@dataclass(frozen=True)
class LapChartDataset:
    """Everything the lap chart needs for the current selection."""

    edition: str
    lap_numbers: List[int]
    runners: List[RunnerSeries]
    sections: List[SectionBand]

    @property
    def max_laps(self) -> int:
        return len(self.lap_numbers)


def build_runner_series(
    bib: int,
    edition_data: EditionData,
    selection_size: int = 1,
    ema_window: int = EMA_WINDOW,
) -> Optional[RunnerSeries]:
    """Assemble a runner's raw series and overlays.

    Trendline and EMA are attached for selections of up to three runners,
    the standard deviation band for up to two.

    Args:
        bib: Runner bib
        edition_data: Results and laps of the active edition
        selection_size: Number of runners currently selected
        ema_window: EMA window in laps

    Returns:
        RunnerSeries, or None when the bib is not part of the edition
    """
    runner = edition_data.find_runner(bib)
    if runner is None:
        logger.warning(f"Bib {bib} not found in {edition_data.edition} edition, skipping")
        return None

    lap_times = runner_lap_minutes(edition_data, bib)
    stats = calculate_stats(lap_times)

    valid_times = [t for t in lap_times if t is not None]
    min_time = min(valid_times) if valid_times else None
    max_time = max(valid_times) if valid_times else None
    min_indices = [i for i, t in enumerate(lap_times) if t is not None and t == min_time]
    max_indices = [i for i, t in enumerate(lap_times) if t is not None and t == max_time]

    trendline = None
    trend = None
    ema = None
    if selection_size <= TREND_MAX_RUNNERS:
        trendline = fit_trendline(lap_times)
        if trendline is not None:
            trend = [clamp(trendline.predict(lap)) for lap in range(1, len(lap_times) + 1)]

        ema_data = calculate_ema(lap_times, ema_window)
        if ema_data is not None:
            ema = [clamp(v) if v is not None else None for v in ema_data]

    upper_band = None
    lower_band = None
    if selection_size <= BAND_MAX_RUNNERS:
        upper = clamp(stats.mean + stats.std_dev)
        lower = clamp(stats.mean - stats.std_dev)
        upper_band = [upper if t is not None else None for t in lap_times]
        lower_band = [lower if t is not None else None for t in lap_times]

    return RunnerSeries(
        bib=bib,
        name=runner.name,
        lap_times=lap_times,
        stats=stats,
        min_time=min_time,
        max_time=max_time,
        min_indices=min_indices,
        max_indices=max_indices,
        trendline=trendline,
        trend=trend,
        ema=ema,
        upper_band=upper_band,
        lower_band=lower_band,
    )


def build_lap_chart_dataset(
    edition_data: EditionData,
    selection: Iterable[int],
    ema_window: int = EMA_WINDOW,
) -> LapChartDataset:
    """Build the lap chart dataset for the selected runners.

    Bibs that are not part of the edition (e.g. left over from another
    edition) are ignored, and the overlay thresholds count only the
    runners that resolved.

    Args:
        edition_data: Results and laps of the active edition
        selection: Selected bibs in selection order

    Returns:
        LapChartDataset with one RunnerSeries per resolved runner
    """
    selection = list(dict.fromkeys(selection))
    resolved = [bib for bib in selection if edition_data.find_runner(bib) is not None]
    if len(resolved) < len(selection):
        stale = [bib for bib in selection if bib not in resolved]
        logger.warning(f"Ignoring bibs not in {edition_data.edition} edition: {stale}")

    logger.info(f"Building lap chart for {len(resolved)} runners in {edition_data.edition} edition")

    runners = []
    for bib in resolved:
        series = build_runner_series(bib, edition_data, len(resolved), ema_window)
        if series is not None:
            runners.append(series)

    max_laps = max((len(r.lap_times) for r in runners), default=0)
    return LapChartDataset(
        edition=edition_data.edition,
        lap_numbers=list(range(1, max_laps + 1)),
        runners=runners,
        sections=section_bands(max_laps, edition_data.edition),
    )
