"""Unit tests for dashboard state updates."""

from backyard_ultra_analytics.state import (
    DashboardState,
    prune_selection,
    remove_runner,
    switch_edition,
    sync_selection,
    toggle_runner,
    toggle_sort,
)


class TestDashboardState:
    """Test suite for the pure state update functions."""

    def test_switch_edition_clears_selection_and_sort(self):
        state = DashboardState(edition="2025", selection=(1, 2), sort_column="age", sort_direction="desc")
        new_state = switch_edition(state, "2023")
        assert new_state == DashboardState(edition="2023")
        # the original is untouched
        assert state.selection == (1, 2)

    def test_switch_to_same_edition_is_noop(self):
        state = DashboardState(edition="2025", selection=(1,))
        assert switch_edition(state, "2025") is state

    def test_toggle_runner(self):
        state = DashboardState(edition="2025")
        state = toggle_runner(state, 3)
        state = toggle_runner(state, 1)
        assert state.selection == (3, 1)
        state = toggle_runner(state, 3)
        assert state.selection == (1,)

    def test_remove_runner(self):
        state = DashboardState(edition="2025", selection=(1, 2))
        assert remove_runner(state, 2).selection == (1,)
        assert remove_runner(state, 9).selection == (1, 2)

    def test_toggle_sort(self):
        state = toggle_sort(DashboardState(edition="2025"), "place")
        assert (state.sort_column, state.sort_direction) == ("place", "asc")
        state = toggle_sort(state, "place")
        assert state.sort_direction == "desc"
        state = toggle_sort(state, "name")
        assert (state.sort_column, state.sort_direction) == ("name", "asc")

    def test_prune_selection(self, edition_2023):
        state = DashboardState(edition="2023", selection=(1, 10, 2))
        assert prune_selection(state, edition_2023.bibs).selection == (10,)

    def test_round_trip_dict(self):
        state = DashboardState(edition="2025", selection=(4, 2), sort_column="bib")
        assert DashboardState.from_dict(state.to_dict()) == state

    def test_sync_selection_toggles_the_difference(self):
        state = DashboardState(edition="2025", selection=(2, 1))
        assert sync_selection(state, [1, 4, 2]).selection == (2, 1, 4)
        assert sync_selection(state, [1]).selection == (1,)
        assert sync_selection(state, [1, 2]) == state
