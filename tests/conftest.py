from datetime import datetime, timedelta

import pandas as pd
import pytest


def make_trips(rows) -> pd.DataFrame:
    """Build a trip frame from (start_id, end_id, start_minute, end_minute) tuples."""

    day = datetime(2024, 3, 1)
    records = [
        {
            "start_station_id": start,
            "end_station_id": end,
            "started_at": day + timedelta(minutes=start_minute),
            "ended_at": day + timedelta(minutes=end_minute),
        }
        for start, end, start_minute, end_minute in rows
    ]
    frame = pd.DataFrame.from_records(
        records, columns=["start_station_id", "end_station_id", "started_at", "ended_at"]
    )
    frame["started_at"] = pd.to_datetime(frame["started_at"])
    frame["ended_at"] = pd.to_datetime(frame["ended_at"])
    return frame


@pytest.fixture
def stations() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "station_id": ["A", "B", "C"],
            "name": ["Alpha Square", "Beta Street", "Gamma Park"],
            "lat": [42.36, 42.37, 42.35],
            "lon": [-71.09, -71.10, -71.08],
        }
    )


@pytest.fixture
def trips() -> pd.DataFrame:
    return make_trips(
        [
            ("A", "B", 8 * 60, 8 * 60 + 15),
            ("A", "A", 8 * 60 + 30, 8 * 60 + 50),
            ("B", "A", 17 * 60, 17 * 60 + 20),
            ("C", "ZZ", 23 * 60 + 50, 23 * 60 + 55),
        ]
    )
