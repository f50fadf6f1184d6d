"""Time-of-day filtering of the trip log."""
from __future__ import annotations

import pandas as pd

from stationtraffic.utils.time import ANY_TIME, minutes_since_midnight, validate_time_filter

TRIP_COLUMNS = ["start_station_id", "end_station_id", "started_at", "ended_at"]


def filter_trips_by_time(trips: pd.DataFrame, time_filter: int, window_minutes: int = 60) -> pd.DataFrame:
    """Keep trips that start or end within ``window_minutes`` of ``time_filter``.

    ``time_filter`` is minutes since midnight, or ``-1`` to keep every trip, in
    which case ``trips`` is returned as is. Distances are flat differences on
    the 0-1439 scale and do not wrap around midnight.
    """

    validate_time_filter(time_filter)
    if time_filter == ANY_TIME:
        return trips
    if trips.empty:
        return trips.iloc[0:0]
    started = minutes_since_midnight(trips["started_at"])
    ended = minutes_since_midnight(trips["ended_at"])
    mask = ((started - time_filter).abs() <= window_minutes) | ((ended - time_filter).abs() <= window_minutes)
    return trips.loc[mask]
