"""Utility helpers for IO and time-of-day handling."""

from .io import ensure_directory, read_json, write_text
from .time import (
    ANY_TIME,
    ensure_datetime_columns,
    format_time,
    minutes_since_midnight,
    parse_time_filter,
    validate_time_filter,
)

__all__ = [
    "ensure_directory",
    "read_json",
    "write_text",
    "ANY_TIME",
    "ensure_datetime_columns",
    "format_time",
    "minutes_since_midnight",
    "parse_time_filter",
    "validate_time_filter",
]
