"""Per-station arrival and departure counts."""
from __future__ import annotations

import pandas as pd


def count_by_station(trips: pd.DataFrame, column: str) -> pd.Series:
    """Number of trips per station id in ``column``; missing ids are not counted."""

    ids = trips[column].dropna().astype(str)
    if ids.empty:
        return pd.Series(dtype="int64")
    return ids.groupby(ids).size()


def compute_station_traffic(stations: pd.DataFrame, trips: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of ``stations`` with arrivals, departures and total traffic.

    The derived columns are recomputed from scratch on every call, so any values
    left over from an earlier filter are overwritten. Stations without trips
    get zero, and trips naming stations outside ``stations`` are ignored.
    Row order and count are preserved.
    """

    if "station_id" not in stations.columns:
        raise KeyError("Stations missing required column: station_id")
    departures = count_by_station(trips, "start_station_id")
    arrivals = count_by_station(trips, "end_station_id")

    result = stations.copy()
    station_ids = result["station_id"].astype(str)
    result["arrivals"] = station_ids.map(arrivals).fillna(0).astype(int).to_numpy()
    result["departures"] = station_ids.map(departures).fillna(0).astype(int).to_numpy()
    result["total_traffic"] = result["arrivals"] + result["departures"]
    return result
