import json
from pathlib import Path

import pandas as pd
import pytest
import requests

from stationtraffic.config import BikeLaneLayerConfig, DataPaths, StationFeedConfig, TripFeedConfig
from stationtraffic.loaders import BikeLaneLoader, BluebikesLoader, load_sources, parse_stations
from stationtraffic.loaders import bluebikes, lanes

STATION_PAYLOAD = {
    "data": {
        "stations": [
            {"short_name": "A32000", "name": "Kendall T", "lat": 42.3625, "lon": -71.0843},
            {"short_name": "B32001", "name": "MIT at Mass Ave", "lat": "42.3581", "lon": "-71.0931"},
        ]
    }
}

TRIPS_CSV = (
    "ride_id,start_station_id,end_station_id,started_at,ended_at\n"
    "r1,A32000,B32001,2024-03-01 08:01:10.100,2024-03-01 08:14:00.000\n"
    "r2,B32001,A32000,2024-03-01 17:45:00.000,2024-03-01 18:02:00.000\n"
)


class _FakeResponse:
    def __init__(self, text: str, status_code: int = 200) -> None:
        self.text = text
        self.status_code = status_code

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def raise_for_status(self) -> None:
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} error")


def _loader(tmp_path: Path, retries: int = 0) -> BluebikesLoader:
    return BluebikesLoader(
        DataPaths(root=tmp_path / "data"),
        StationFeedConfig(url="https://example.test/stations.json", max_retries=retries),
        TripFeedConfig(url="https://example.test/trips.csv", max_retries=retries),
    )


def _fake_get(responses):
    calls = []

    def fake_get(url, timeout):
        calls.append(url)
        return responses[url] if not isinstance(responses[url], list) else responses[url].pop(0)

    return fake_get, calls


def test_fetch_stations_and_trips(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    fake_get, calls = _fake_get(
        {
            "https://example.test/stations.json": _FakeResponse(json.dumps(STATION_PAYLOAD)),
            "https://example.test/trips.csv": _FakeResponse(TRIPS_CSV),
        }
    )
    monkeypatch.setattr(bluebikes.requests, "get", fake_get)
    loader = _loader(tmp_path)

    stations = loader.fetch_stations()
    assert stations["station_id"].tolist() == ["A32000", "B32001"]
    assert stations["lat"].dtype == float
    assert loader.files.stations.exists()

    trips = loader.fetch_trips()
    assert list(trips.columns) == ["start_station_id", "end_station_id", "started_at", "ended_at"]
    assert pd.api.types.is_datetime64_any_dtype(trips["started_at"])
    assert trips.loc[0, "started_at"].hour == 8
    assert len(calls) == 2


def test_cached_sources_skip_network(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    loader = _loader(tmp_path)
    loader.files.stations.parent.mkdir(parents=True)
    loader.files.stations.write_text(json.dumps(STATION_PAYLOAD), encoding="utf-8")
    loader.files.trips.write_text(TRIPS_CSV, encoding="utf-8")

    def fail_get(url, timeout):
        raise AssertionError("network should not be used")

    monkeypatch.setattr(bluebikes.requests, "get", fail_get)
    stations, trips = load_sources(loader, use_cache=True)
    assert len(stations) == 2
    assert len(trips) == 2


def test_retries_then_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    fake_get, calls = _fake_get({"https://example.test/stations.json": [_FakeResponse("", 503), _FakeResponse("", 503)]})
    monkeypatch.setattr(bluebikes.requests, "get", fake_get)
    with pytest.raises(requests.HTTPError):
        _loader(tmp_path, retries=1).fetch_stations()
    assert len(calls) == 2


def test_missing_local_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        _loader(tmp_path).load_trips(tmp_path / "missing.csv")


def test_parse_stations_requires_id_field():
    with pytest.raises(KeyError):
        parse_stations(pd.DataFrame({"name": ["x"], "lat": [1.0], "lon": [2.0]}))


def test_trips_missing_columns(tmp_path: Path):
    path = tmp_path / "trips.csv"
    path.write_text("start_station_id,started_at\nA,2024-03-01 08:00\n", encoding="utf-8")
    with pytest.raises(KeyError):
        _loader(tmp_path).load_trips(path)


def test_bike_lane_loader_caches_layers(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    geojson = {"type": "FeatureCollection", "features": []}
    fake_get, calls = _fake_get({"https://example.test/lanes.geojson": _FakeResponse(json.dumps(geojson))})
    monkeypatch.setattr(lanes.requests, "get", fake_get)
    layer = BikeLaneLayerConfig(name="Boston bike lanes", url="https://example.test/lanes.geojson")
    loader = BikeLaneLoader(DataPaths(root=tmp_path / "data"), [layer])

    assert loader.fetch_layers() == {"Boston bike lanes": geojson}
    assert loader.cache_path(layer).name == "boston_bike_lanes.geojson"
    assert loader.fetch_layers(use_cache=True) == {"Boston bike lanes": geojson}
    assert len(calls) == 1


def test_missing_ids_stay_missing():
    stations = parse_stations(
        pd.DataFrame({"short_name": ["A", None], "name": ["Alpha", "Ghost"], "lat": [1.0, 2.0], "lon": [3.0, 4.0]})
    )
    assert stations["station_id"].tolist() == ["A"]

    trips = bluebikes.parse_trips(
        pd.DataFrame(
            {
                "start_station_id": ["A", None],
                "end_station_id": [None, "A"],
                "started_at": ["2024-03-01 08:00", "2024-03-01 09:00"],
                "ended_at": ["2024-03-01 08:10", "2024-03-01 09:10"],
            }
        )
    )
    assert trips["start_station_id"].isna().tolist() == [False, True]
    assert trips["end_station_id"].isna().tolist() == [True, False]
