"""Dashboard state and the pure functions that update it.

The dashboard never mutates state in place: every update returns a new
``DashboardState``.
"""

from dataclasses import asdict, dataclass, replace
from typing import Dict, Iterable, Optional, Tuple

from loguru import logger


@dataclass(frozen=True)
class DashboardState:
    """Active edition, runner selection (in selection order) and table sort."""

    edition: str
    selection: Tuple[int, ...] = ()
    sort_column: Optional[str] = None
    sort_direction: str = "asc"

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["selection"] = list(self.selection)
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> "DashboardState":
        return cls(
            edition=data["edition"],
            selection=tuple(data.get("selection") or ()),
            sort_column=data.get("sort_column"),
            sort_direction=data.get("sort_direction", "asc"),
        )


def switch_edition(state: DashboardState, edition: str) -> DashboardState:
    """Switch edition, dropping the selection and sort of the previous one."""
    if edition == state.edition:
        return state
    logger.info(f"Switched to {edition} edition")
    return DashboardState(edition=edition)


def toggle_runner(state: DashboardState, bib: int) -> DashboardState:
    """Select a runner, or deselect it if already selected."""
    if bib in state.selection:
        return remove_runner(state, bib)
    return replace(state, selection=state.selection + (bib,))


def remove_runner(state: DashboardState, bib: int) -> DashboardState:
    return replace(state, selection=tuple(b for b in state.selection if b != bib))


def sync_selection(state: DashboardState, selected: Iterable[int]) -> DashboardState:
    """Toggle runners until the selection matches ``selected``.

    Runners already selected keep their position, so colours stay stable
    while others are added or removed.
    """
    selected = list(selected)
    for bib in state.selection:
        if bib not in selected:
            state = toggle_runner(state, bib)
    for bib in selected:
        if bib not in state.selection:
            state = toggle_runner(state, bib)
    return state


def toggle_sort(state: DashboardState, column: str) -> DashboardState:
    """Sort by a column; the same column again flips the direction."""
    if state.sort_column == column:
        direction = "desc" if state.sort_direction == "asc" else "asc"
        return replace(state, sort_direction=direction)
    return replace(state, sort_column=column, sort_direction="asc")


def prune_selection(state: DashboardState, bibs: Iterable[int]) -> DashboardState:
    """Drop selected bibs that are not part of the loaded edition."""
    known = set(bibs)
    kept = tuple(b for b in state.selection if b in known)
    if len(kept) != len(state.selection):
        logger.warning(f"Dropped {len(state.selection) - len(kept)} stale selections in {state.edition} edition")
        return replace(state, selection=kept)
    return state
