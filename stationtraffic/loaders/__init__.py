"""Loaders for station lists, trip logs, and bike-lane layers."""

from .bluebikes import BluebikesLoader, SourceFiles, load_sources, parse_stations, parse_trips
from .lanes import BikeLaneLoader

__all__ = [
    "BluebikesLoader",
    "SourceFiles",
    "load_sources",
    "parse_stations",
    "parse_trips",
    "BikeLaneLoader",
]
