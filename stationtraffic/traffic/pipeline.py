"""Filter -> aggregate -> scale pass producing renderable station markers."""
from __future__ import annotations

import logging
from typing import Iterator, Optional, Tuple

import pandas as pd

from stationtraffic.config import ScaleConfig
from stationtraffic.traffic.aggregates import compute_station_traffic
from stationtraffic.traffic.filters import filter_trips_by_time
from stationtraffic.traffic.scales import build_flow_scale, build_radius_scale, departure_ratio
from stationtraffic.utils.time import ANY_TIME, MINUTES_PER_DAY

logger = logging.getLogger(__name__)

MARKER_COLUMNS = [
    "station_id",
    "name",
    "lat",
    "lon",
    "arrivals",
    "departures",
    "total_traffic",
    "radius",
    "departure_ratio",
    "tooltip",
]


def format_tooltip(total_traffic: int, departures: int, arrivals: int) -> str:
    return f"{int(total_traffic)} trips ({int(departures)} departures, {int(arrivals)} arrivals)"


def build_station_markers(
    stations: pd.DataFrame,
    trips: pd.DataFrame,
    time_filter: int = ANY_TIME,
    config: Optional[ScaleConfig] = None,
) -> pd.DataFrame:
    """Compute marker attributes for every station under ``time_filter``.

    The full trip log is re-filtered on each call, so results never depend on a
    previous time filter.
    """

    config = config or ScaleConfig()
    filtered_trips = filter_trips_by_time(trips, time_filter, window_minutes=config.window_minutes)
    traffic = compute_station_traffic(stations, filtered_trips)
    logger.debug("Time filter %s kept %d of %d trips", time_filter, len(filtered_trips), len(trips))

    radius_scale = build_radius_scale(traffic, filtered=time_filter != ANY_TIME, config=config)
    flow_scale = build_flow_scale(config)

    markers = traffic.copy()
    for column in ("name", "lat", "lon"):
        if column not in markers.columns:
            markers[column] = None
    markers["radius"] = radius_scale(markers["total_traffic"].to_numpy(dtype=float))
    markers["departure_ratio"] = departure_ratio(markers, flow_scale, config.zero_traffic_ratio)
    markers["tooltip"] = [
        format_tooltip(total, dep, arr)
        for total, dep, arr in zip(markers["total_traffic"], markers["departures"], markers["arrivals"])
    ]
    return markers[MARKER_COLUMNS].reset_index(drop=True)


def iter_time_frames(
    stations: pd.DataFrame,
    trips: pd.DataFrame,
    step_minutes: int,
    config: Optional[ScaleConfig] = None,
) -> Iterator[Tuple[int, pd.DataFrame]]:
    """Yield ``(time_filter, markers)`` for every slider position ``0, step, 2*step, ...``."""

    for time_filter in range(0, MINUTES_PER_DAY, step_minutes):
        yield time_filter, build_station_markers(stations, trips, time_filter, config)
