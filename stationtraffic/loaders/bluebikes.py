"""Bluebikes station list and trip log ingestion."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import pandas as pd
import requests

from stationtraffic.config import DataPaths, StationFeedConfig, TripFeedConfig
from stationtraffic.traffic.filters import TRIP_COLUMNS
from stationtraffic.utils import ensure_datetime_columns, ensure_directory, read_json, write_text

logger = logging.getLogger(__name__)

STATIONS_FILENAME = "stations.json"
TRIPS_FILENAME = "trips.csv"


@dataclass(frozen=True)
class SourceFiles:
    """Locations of the cached station and trip sources."""

    stations: Path
    trips: Path


class BluebikesLoader:
    """Fetch the station list and trip log, caching the raw documents on disk."""

    def __init__(
        self,
        data_paths: DataPaths,
        station_config: StationFeedConfig,
        trip_config: TripFeedConfig,
    ) -> None:
        self._data_paths = data_paths
        self._station_config = station_config
        self._trip_config = trip_config
        self._raw_root = Path(data_paths.raw)

    @property
    def files(self) -> SourceFiles:
        return SourceFiles(
            stations=self._raw_root / STATIONS_FILENAME,
            trips=self._raw_root / TRIPS_FILENAME,
        )

    def fetch_stations(self, use_cache: bool = False) -> pd.DataFrame:
        """Download the station list (or reuse the cached copy) and parse it."""

        target = self.files.stations
        if not (use_cache and target.exists()):
            ensure_directory(self._raw_root)
            response = _request_with_retries(
                self._station_config.url,
                self._station_config.request_timeout,
                self._station_config.max_retries,
            )
            write_text(response.text, target)
            logger.info("Fetched station list from %s", self._station_config.url)
        return self.load_stations(target)

    def fetch_trips(self, use_cache: bool = False) -> pd.DataFrame:
        """Download the trip log (or reuse the cached copy) and parse it."""

        target = self.files.trips
        if not (use_cache and target.exists()):
            ensure_directory(self._raw_root)
            response = _request_with_retries(
                self._trip_config.url,
                self._trip_config.request_timeout,
                self._trip_config.max_retries,
            )
            write_text(response.text, target)
            logger.info("Fetched trip log from %s", self._trip_config.url)
        return self.load_trips(target)

    def load_stations(self, path: Path) -> pd.DataFrame:
        """Parse a station document with records under ``data.stations``."""

        if not path.exists():
            raise FileNotFoundError(f"Station list not found: {path}")
        payload = read_json(path)
        records = payload.get("data", {}).get("stations", [])
        return parse_stations(pd.json_normalize(records), self._station_config.id_field)

    def load_trips(self, path: Path) -> pd.DataFrame:
        if not path.exists():
            raise FileNotFoundError(f"Trip log not found: {path}")
        return parse_trips(pd.read_csv(path, dtype=str))


def parse_stations(df: pd.DataFrame, id_field: str = "short_name") -> pd.DataFrame:
    """Normalise raw station records to ``station_id``, ``name``, ``lat``, ``lon``."""

    if id_field not in df.columns:
        raise KeyError(f"Station records missing id field '{id_field}'.")
    missing = {"lat", "lon"} - set(df.columns)
    if missing:
        raise KeyError(f"Station records missing columns: {missing}")
    stations = df.dropna(subset=[id_field]).copy()
    if len(stations) < len(df):
        logger.warning("Skipping %d station records without '%s'", len(df) - len(stations), id_field)
    stations["station_id"] = stations[id_field].astype(str)
    if "name" not in stations.columns:
        stations["name"] = stations["station_id"]
    stations["name"] = stations["name"].fillna(stations["station_id"])
    stations["lat"] = pd.to_numeric(stations["lat"], errors="coerce")
    stations["lon"] = pd.to_numeric(stations["lon"], errors="coerce")
    columns = ["station_id", "name", "lat", "lon"]
    extras = [c for c in stations.columns if c not in columns and c != id_field]
    return stations[columns + extras].reset_index(drop=True)


def parse_trips(df: pd.DataFrame) -> pd.DataFrame:
    """Keep trip endpoint and timestamp columns, parsing timestamps to datetimes."""

    missing = set(TRIP_COLUMNS) - set(df.columns)
    if missing:
        raise KeyError(f"Trip records missing columns: {missing}")
    trips = ensure_datetime_columns(df[TRIP_COLUMNS], ["started_at", "ended_at"])
    for column in ("start_station_id", "end_station_id"):
        # Missing ids stay NaN so they never match a station.
        trips[column] = trips[column].astype(str).where(trips[column].notna())
    return trips.reset_index(drop=True)


def _request_with_retries(url: str, timeout: float, max_retries: int) -> requests.Response:
    for attempt in range(max_retries + 1):
        response = requests.get(url, timeout=timeout)
        if response.ok:
            return response
        logger.warning("Request to %s failed with status %s (attempt %d)", url, response.status_code, attempt + 1)
        if attempt == max_retries:
            response.raise_for_status()
    raise RuntimeError("Unreachable code path in _request_with_retries")


def load_sources(
    loader: BluebikesLoader,
    use_cache: bool = False,
    stations_path: Optional[Path] = None,
    trips_path: Optional[Path] = None,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Load stations and trips, preferring explicit local files when given."""

    stations = loader.load_stations(stations_path) if stations_path else loader.fetch_stations(use_cache=use_cache)
    trips = loader.load_trips(trips_path) if trips_path else loader.fetch_trips(use_cache=use_cache)
    return stations, trips
