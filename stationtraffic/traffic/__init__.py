"""Station traffic aggregation and time-filtered recomputation."""

from .filters import filter_trips_by_time
from .aggregates import compute_station_traffic
from .scales import (
    QuantizeScale,
    SqrtScale,
    build_flow_scale,
    build_radius_scale,
    departure_ratio,
)
from .pipeline import build_station_markers, format_tooltip, iter_time_frames

__all__ = [
    "filter_trips_by_time",
    "compute_station_traffic",
    "QuantizeScale",
    "SqrtScale",
    "build_flow_scale",
    "build_radius_scale",
    "departure_ratio",
    "build_station_markers",
    "format_tooltip",
    "iter_time_frames",
]
