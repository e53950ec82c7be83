"""Unit tests for results table sorting and export."""

import pytest

from backyard_ultra_analytics.data_processing.transformers import (
    results_to_frame,
    results_to_rows,
    sort_results,
)


def _bibs(results):
    return [r.bib for r in results]


class TestSortResults:
    """Test suite for the results comparator."""

    def test_no_column_keeps_published_order(self, edition_2025):
        assert _bibs(sort_results(edition_2025.results)) == [1, 2, 3, 4]

    def test_numeric_descending(self, edition_2025):
        assert _bibs(sort_results(edition_2025.results, "place", "desc")) == [4, 3, 2, 1]

    @pytest.mark.parametrize("direction, expected", [
        ("asc", [4, 1, 3, 2]),
        ("desc", [3, 1, 4, 2]),
    ])
    def test_missing_values_always_last(self, edition_2025, direction, expected):
        """Bob has no age and stays at the bottom in both directions."""
        assert _bibs(sort_results(edition_2025.results, "age", direction)) == expected

    def test_race_time_compares_as_duration(self, edition_2025):
        """Durations sort by length; Dan's empty race time goes last."""
        assert _bibs(sort_results(edition_2025.results, "race_time")) == [2, 1, 3, 4]

    def test_text_is_case_insensitive(self, edition_2025):
        assert _bibs(sort_results(edition_2025.results, "state")) == [4, 3, 2, 1]

    def test_ties_keep_published_order(self, edition_2025):
        assert _bibs(sort_results(edition_2025.results, "total_distance_miles", "desc")) == [1, 2, 3, 4]

    def test_unknown_column(self, edition_2025):
        with pytest.raises(ValueError):
            sort_results(edition_2025.results, "shoe_size")

    def test_unknown_direction(self, edition_2025):
        with pytest.raises(ValueError):
            sort_results(edition_2025.results, "place", "sideways")


class TestExport:
    """Test suite for tabular export."""

    def test_frame(self, edition_2025):
        df = results_to_frame(edition_2025.results)
        assert len(df) == 4
        assert df["name"].tolist() == ["Alice", "Bob", "Cara", "Dan"]

    def test_empty_frame_has_columns(self):
        df = results_to_frame([])
        assert df.empty
        assert "bib" in df.columns

    def test_rows_carry_bib_as_id(self, edition_2025):
        rows = results_to_rows(edition_2025.results)
        assert [row["id"] for row in rows] == [1, 2, 3, 4]
