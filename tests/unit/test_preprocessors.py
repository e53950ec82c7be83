"""Unit tests for lap split parsing."""

import math

import pytest

from backyard_ultra_analytics.data_processing.preprocessors import (
    format_minutes,
    parse_lap_splits,
    parse_time_to_minutes,
    runner_lap_minutes,
)


class TestParseTimeToMinutes:
    """Test suite for the duration parser."""

    @pytest.mark.parametrize("text, expected", [
        ("52:30", 52.5),
        ("1:02:15", 62.25),
        ("0:45", 0.75),
        ("59:59", 59 + 59 / 60),
        ("2:00:00", 120.0),
        (" 55:00 ", 55.0),
        ("52:30.5", 52 + 30.5 / 60),
    ])
    def test_valid_durations(self, text, expected):
        """Two- and three-field durations convert to minutes."""
        assert parse_time_to_minutes(text) == pytest.approx(expected)

    @pytest.mark.parametrize("value", [None, "", "   ", float("nan")])
    def test_empty_values_are_missing(self, value):
        """Empty input yields None rather than a number."""
        assert parse_time_to_minutes(value) is None

    @pytest.mark.parametrize("text", ["52", "1:2:3:4", "DNF", "1:02:15:00"])
    def test_wrong_field_count_is_missing(self, text):
        """Only two or three fields are accepted."""
        assert parse_time_to_minutes(text) is None

    @pytest.mark.parametrize("text", ["ab:cd", "12:xx", "x:10:00", "-1:30", "12:-5", ":30", "1.5:00",
                                      "52:3_0", "52:\u0663\u0660", "52:1e1", "52:+30", "\u0665\u0662:30"])
    def test_non_numeric_fields_are_missing(self, text):
        """Non-numeric or negative fields never leak NaN."""
        result = parse_time_to_minutes(text)
        assert result is None

    def test_result_is_never_nan(self):
        """Malformed seconds such as 'nan' are rejected."""
        assert parse_time_to_minutes("12:nan") is None

    def test_parse_lap_splits_keeps_alignment(self):
        """Unparseable splits become None in place."""
        assert parse_lap_splits(["50:00", "bad", "1:00:00"]) == [50.0, None, 60.0]


class TestRunnerLapMinutes:
    """Test suite for per-runner series extraction."""

    def test_series_follows_lap_order(self, edition_2025):
        """Laps are taken in file order for the runner."""
        assert runner_lap_minutes(edition_2025, 1) == [50.0, 52.0, 54.0]

    def test_unparseable_split_is_gap(self, edition_2025):
        """A bad split stays in place as None."""
        assert runner_lap_minutes(edition_2025, 2) == [56.0, None, 58.5]

    def test_runner_without_laps(self, edition_2025):
        """A runner with no laps has an empty series."""
        assert runner_lap_minutes(edition_2025, 4) == []


class TestFormatMinutes:
    """Test suite for M:SS rendering."""

    @pytest.mark.parametrize("value, expected", [
        (52.5, "52:30"),
        (30, "30:00"),
        (45.999, "46:00"),
        (None, ""),
    ])
    def test_format(self, value, expected):
        assert format_minutes(value) == expected

    def test_round_trip(self):
        """Formatting then parsing returns the same whole-second value."""
        value = 53.25
        assert math.isclose(parse_time_to_minutes(format_minutes(value)), value)
