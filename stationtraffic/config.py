"""Typed configuration models for the station traffic map."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, validator


class DataPaths(BaseModel):
    """Filesystem layout for downloaded sources and rendered reports."""

    root: Path = Field(default=Path("data"))
    raw: Path = Field(default=Path("raw"))
    reports: Path = Field(default=Path("reports"))

    @validator("raw", "reports", pre=True, always=True)
    def _resolve(cls, value: Path, values: Dict[str, Path]) -> Path:  # type: ignore[arg-type]
        root: Path = values.get("root", Path("data"))
        value_path = Path(value)
        return value_path if value_path.is_absolute() else root / value_path


class StationFeedConfig(BaseModel):
    """Station list endpoint and loader controls."""

    url: str = Field(
        default="https://dsc106.com/labs/lab07/data/bluebikes-stations.json",
        description="JSON document with stations under data.stations.",
    )
    id_field: str = Field(
        default="short_name",
        description="Station record field matched against trip start/end station ids.",
    )
    request_timeout: float = Field(default=10.0, ge=1.0)
    max_retries: int = Field(default=3, ge=0)


class TripFeedConfig(BaseModel):
    """Trip log endpoint and loader controls."""

    url: str = Field(
        default="https://dsc106.com/labs/lab07/data/bluebikes-traffic-2024-03.csv",
        description="CSV with start/end station ids and start/end timestamps.",
    )
    request_timeout: float = Field(default=30.0, ge=1.0)
    max_retries: int = Field(default=3, ge=0)


class BikeLaneLayerConfig(BaseModel):
    """A GeoJSON bike-lane network drawn beneath the station markers."""

    name: str
    url: str
    color: str = Field(default="#32D400")
    weight: int = Field(default=5, ge=1)
    opacity: float = Field(default=0.6, ge=0.0, le=1.0)


class MapViewConfig(BaseModel):
    """Initial camera and basemap."""

    center: Tuple[float, float] = Field(default=(42.36027, -71.09415), description="(lat, lon)")
    zoom_start: int = Field(default=12, ge=0)
    min_zoom: int = Field(default=5, ge=0)
    max_zoom: int = Field(default=18, ge=0)
    tiles: str = Field(default="cartodbpositron")


class ScaleConfig(BaseModel):
    """Marker radius and flow-direction scale settings."""

    window_minutes: int = Field(default=60, ge=0)
    radius_range: Tuple[float, float] = Field(default=(0.0, 25.0))
    filtered_radius_range: Tuple[float, float] = Field(default=(3.0, 50.0))
    flow_buckets: List[float] = Field(default_factory=lambda: [0.0, 0.5, 1.0])
    zero_traffic_ratio: float = Field(default=0.5, ge=0.0, le=1.0)


class SliderConfig(BaseModel):
    """Time-of-day slider frames rendered into the map."""

    step_minutes: int = Field(default=30, ge=1, le=1440)
    reference_date: str = Field(
        default="2024-03-01",
        description="Calendar date the slider frames are stamped with; only the time is shown.",
    )


class TrafficMapConfig(BaseModel):
    """Top-level configuration."""

    data: DataPaths = Field(default_factory=DataPaths)
    stations: StationFeedConfig = Field(default_factory=StationFeedConfig)
    trips: TripFeedConfig = Field(default_factory=TripFeedConfig)
    bike_lanes: List[BikeLaneLayerConfig] = Field(
        default_factory=lambda: [
            BikeLaneLayerConfig(
                name="Boston bike lanes",
                url="https://bostonopendata-boston.opendata.arcgis.com/datasets/boston::existing-bike-network-2022.geojson",
            ),
            BikeLaneLayerConfig(
                name="Cambridge bike lanes",
                url="https://raw.githubusercontent.com/cambridgegis/cambridgegis_data/main/Recreation/Bike_Facilities/RECREATION_BikeFacilities.geojson",
            ),
        ]
    )
    view: MapViewConfig = Field(default_factory=MapViewConfig)
    scales: ScaleConfig = Field(default_factory=ScaleConfig)
    slider: SliderConfig = Field(default_factory=SliderConfig)
    cache: bool = Field(default=True)


def load_traffic_map_config(path: Optional[Path] = None) -> TrafficMapConfig:
    """Load map configuration from disk or return defaults."""

    if path is None:
        return TrafficMapConfig()
    data = _load_json_or_yaml(path)
    return TrafficMapConfig.model_validate(data)


def _load_json_or_yaml(path: Path) -> Dict[str, object]:
    if path.suffix in {".json"}:
        import json

        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    if path.suffix in {".yaml", ".yml"}:
        import yaml

        with path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle)
    raise ValueError(f"Unsupported config format: {path}")
