"""Typed records for race results and lap splits."""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple


@dataclass(frozen=True)
class RaceResult:
    """One participant's final result in an edition."""

    bib: int
    place: int
    name: str
    age: Optional[int] = None
    state: Optional[str] = None
    laps_completed: int = 0
    total_distance_miles: Optional[float] = None
    total_distance_km: Optional[float] = None
    race_time: Optional[str] = None


@dataclass(frozen=True)
class LapRecord:
    """A single lap split, referencing its runner by bib."""

    runner_ref: int
    lap_split: Optional[str]


@dataclass(frozen=True)
class EditionData:
    """Results and laps of one race edition.

    Lap order inside ``laps`` is the lap sequence of each runner.
    """

    edition: str
    results: Tuple[RaceResult, ...] = ()
    laps: Tuple[LapRecord, ...] = ()

    def find_runner(self, bib: int) -> Optional[RaceResult]:
        for result in self.results:
            if result.bib == bib:
                return result
        return None

    def laps_for(self, bib: int) -> List[LapRecord]:
        """Return a runner's laps in lap order."""
        return [lap for lap in self.laps if lap.runner_ref == bib]

    @property
    def bibs(self) -> List[int]:
        return [result.bib for result in self.results]


def group_laps_by_runner(laps: Iterable[LapRecord]) -> Dict[int, List[LapRecord]]:
    """Group lap records by runner, keeping insertion order."""
    grouped: Dict[int, List[LapRecord]] = {}
    for lap in laps:
        grouped.setdefault(lap.runner_ref, []).append(lap)
    return grouped
