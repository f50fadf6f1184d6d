"""Time-of-day helpers for trip timestamps and slider values."""
from __future__ import annotations

from typing import Iterable

import pandas as pd

ANY_TIME = -1
MINUTES_PER_DAY = 1440


def ensure_datetime_columns(df: pd.DataFrame, columns: Iterable[str]) -> pd.DataFrame:
    """Return a copy of ``df`` with the given columns parsed as datetimes."""

    result = df.copy()
    for column in columns:
        if column not in result.columns:
            raise KeyError(f"Timestamp column '{column}' is missing.")
        if pd.api.types.is_datetime64_any_dtype(result[column]):
            continue
        result[column] = pd.to_datetime(result[column], errors="coerce")
        if result[column].isna().any():
            raise ValueError(f"Timestamp parsing failed for some rows in '{column}'.")
    return result


def minutes_since_midnight(timestamps: pd.Series) -> pd.Series:
    """Wall-clock minutes since midnight; the calendar date is ignored."""

    return timestamps.dt.hour * 60 + timestamps.dt.minute


def validate_time_filter(time_filter: int) -> int:
    if time_filter != ANY_TIME and not 0 <= time_filter < MINUTES_PER_DAY:
        raise ValueError(f"Time filter must be -1 or within [0, 1439], got {time_filter}.")
    return time_filter


def parse_time_filter(value: str) -> int:
    """Parse ``any``, ``-1``, ``HH:MM`` or a plain minute count into a time filter."""

    text = value.strip().lower()
    if text in {"any", "all", ""}:
        return ANY_TIME
    if ":" in text:
        hours_text, _, minutes_text = text.partition(":")
        try:
            hours, minutes = int(hours_text), int(minutes_text)
        except ValueError as err:
            raise ValueError(f"Invalid time of day: {value!r}") from err
        if not (0 <= hours < 24 and 0 <= minutes < 60):
            raise ValueError(f"Invalid time of day: {value!r}")
        return hours * 60 + minutes
    return validate_time_filter(int(text))


def format_time(minutes: int) -> str:
    """Format minutes since midnight as a short 12-hour clock label (``8:05 AM``)."""

    if minutes == ANY_TIME:
        return "(any time)"
    hours, mins = divmod(minutes, 60)
    suffix = "AM" if hours < 12 else "PM"
    display_hour = hours % 12 or 12
    return f"{display_hour}:{mins:02d} {suffix}"
