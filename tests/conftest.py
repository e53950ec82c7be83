"""Shared fixtures: two small editions, in memory and on disk."""

import json

import pytest

from backyard_ultra_analytics.data_processing.records import EditionData, LapRecord, RaceResult

RESULTS_2025 = [
    {"Place": 1, "Bib": 1, "Name": "Alice", "Age": 34, "State": "TN", "Laps": 3,
     "Miles": 12.5, "KM": 20.1, "RaceTime": "3:00:00"},
    {"Place": 2, "Bib": 2, "Name": "Bob", "Age": None, "State": "KY", "Laps": 3,
     "Miles": 12.5, "KM": 20.1, "RaceTime": "2:54:30"},
    {"Place": 3, "Bib": 3, "Name": "Cara", "Age": 41, "State": "GA", "Laps": 3,
     "Miles": 12.5, "KM": 20.1, "RaceTime": "3:03:00"},
    {"Place": 4, "Bib": 4, "Name": "Dan", "Age": 29, "State": "AL", "Laps": 0,
     "Miles": 0.0, "KM": 0.0, "RaceTime": ""},
]

LAPS_2025 = [
    {"File": 1, "Lap Split": "50:00"},
    {"File": 2, "Lap Split": "56:00"},
    {"File": 3, "Lap Split": "59:00"},
    {"File": 1, "Lap Split": "52:00"},
    {"File": 2, "Lap Split": "bad"},
    {"File": 3, "Lap Split": "61:00"},
    {"File": 1, "Lap Split": "54:00"},
    {"File": 2, "Lap Split": "58:30"},
    {"File": 3, "Lap Split": "1:03:00"},
]

RESULTS_2023 = [
    {"Place": 1, "Bib": 10, "Name": "Eve", "Age": 38, "State": "TN", "Laps": 2,
     "Miles": 8.3, "KM": 13.4, "RaceTime": "1:40:00"},
    {"Place": 2, "Bib": 11, "Name": "Finn", "Age": 45, "State": "NC", "Laps": 2,
     "Miles": 8.3, "KM": 13.4, "RaceTime": "1:52:00"},
]

LAPS_2023 = [
    {"File": 10, "Lap Split": "48:00"},
    {"File": 10, "Lap Split": "52:00"},
    {"File": 11, "Lap Split": "55:00"},
    {"File": 11, "Lap Split": "57:00"},
]


def _to_edition(edition, results, laps):
    return EditionData(
        edition=edition,
        results=tuple(
            RaceResult(
                bib=r["Bib"], place=r["Place"], name=r["Name"], age=r["Age"], state=r["State"],
                laps_completed=r["Laps"], total_distance_miles=r["Miles"],
                total_distance_km=r["KM"], race_time=r["RaceTime"],
            )
            for r in results
        ),
        laps=tuple(LapRecord(runner_ref=l["File"], lap_split=l["Lap Split"]) for l in laps),
    )


@pytest.fixture
def edition_2025():
    return _to_edition("2025", RESULTS_2025, LAPS_2025)


@pytest.fixture
def edition_2023():
    return _to_edition("2023", RESULTS_2023, LAPS_2023)


@pytest.fixture
def editions(edition_2025, edition_2023):
    return {"2025": edition_2025, "2023": edition_2023}


@pytest.fixture
def data_root(tmp_path):
    """Data root with data_2025 and data_2023 folders in the published format."""
    for edition, results, laps in (("2025", RESULTS_2025, LAPS_2025), ("2023", RESULTS_2023, LAPS_2023)):
        folder = tmp_path / f"data_{edition}"
        folder.mkdir()
        (folder / "results.json").write_text(json.dumps(results))
        (folder / "laps.json").write_text(json.dumps(laps))
    return tmp_path
