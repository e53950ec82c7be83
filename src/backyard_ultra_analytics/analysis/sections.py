"""Trail/road section segmentation of the lap axis.

The course alternates between a trail loop by day and a road loop by night.
Section 1 runs 10 laps, later odd sections 11 laps and even sections 13
laps. Odd sections are trail and even sections road, unless an edition
overrides a section (see ``SECTION_OVERRIDES``).
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from loguru import logger

from ..config import SECTION_OVERRIDES, Terrain

FIRST_SECTION_LAPS = 10
ODD_SECTION_LAPS = 11
EVEN_SECTION_LAPS = 13


@dataclass(frozen=True)
class Section:
    terrain: Terrain
    section_number: int


@dataclass(frozen=True)
class SectionBand:
    """A section painted as a chart background region."""

    start_lap: int
    end_lap: int
    terrain: Terrain
    label: str
    section_number: int
    center_lap: float
    is_exception: bool = False

    def as_tuple(self) -> Tuple[int, int, Terrain, str]:
        return (self.start_lap, self.end_lap, self.terrain, self.label)


def section_length(section_number: int) -> int:
    """Number of laps in a section."""
    if section_number < 1:
        raise ValueError(f"Section numbers start at 1, got {section_number}")
    if section_number == 1:
        return FIRST_SECTION_LAPS
    return ODD_SECTION_LAPS if section_number % 2 == 1 else EVEN_SECTION_LAPS


def _override_for(
    section_number: int,
    edition: str,
    overrides: Optional[Mapping[str, Dict[int, tuple]]],
) -> Optional[tuple]:
    if overrides is None:
        overrides = SECTION_OVERRIDES
    return overrides.get(edition, {}).get(section_number)


def section_terrain(
    section_number: int,
    edition: str,
    overrides: Optional[Mapping[str, Dict[int, tuple]]] = None,
) -> Terrain:
    override = _override_for(section_number, edition, overrides)
    if override is not None:
        return override[0]
    return Terrain.TRAIL if section_number % 2 == 1 else Terrain.ROAD


def section_label(
    section_number: int,
    edition: str,
    overrides: Optional[Mapping[str, Dict[int, tuple]]] = None,
) -> str:
    override = _override_for(section_number, edition, overrides)
    if override is not None:
        return override[1]
    return section_terrain(section_number, edition, overrides).value


def _iter_sections() -> Iterator[Tuple[int, int, int]]:
    # Yields (section_number, start_lap, end_lap) forever
    start = 1
    number = 1
    while True:
        length = section_length(number)
        yield number, start, start + length - 1
        start += length
        number += 1


def segment(
    lap_index: int,
    edition: str,
    overrides: Optional[Mapping[str, Dict[int, tuple]]] = None,
) -> Section:
    """Return the section a lap belongs to.

    Args:
        lap_index: 1-based lap number
        edition: Edition name, used for overrides
        overrides: Override table (defaults to ``SECTION_OVERRIDES``)
    """
    if lap_index < 1:
        raise ValueError(f"Lap numbers start at 1, got {lap_index}")

    for number, _, end in _iter_sections():
        if lap_index <= end:
            return Section(terrain=section_terrain(number, edition, overrides), section_number=number)


def section_bands(
    max_lap: int,
    edition: str,
    overrides: Optional[Mapping[str, Dict[int, tuple]]] = None,
) -> List[SectionBand]:
    """Return the ordered background bands covering laps 1..max_lap.

    The last band is truncated at ``max_lap``. ``center_lap`` is the centre
    of the full (untruncated) section, where its label is drawn.
    """
    bands: List[SectionBand] = []
    if max_lap < 1:
        return bands

    for number, start, end in _iter_sections():
        if start > max_lap:
            break
        is_exception = _override_for(number, edition, overrides) is not None
        bands.append(SectionBand(
            start_lap=start,
            end_lap=min(end, max_lap),
            terrain=section_terrain(number, edition, overrides),
            label=section_label(number, edition, overrides),
            section_number=number,
            center_lap=start + (end - start) / 2,
            is_exception=is_exception,
        ))

    logger.debug(f"{len(bands)} sections for {max_lap} laps in {edition} edition")
    return bands
