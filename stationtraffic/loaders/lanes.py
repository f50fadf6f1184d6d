"""Bike-lane GeoJSON layers drawn beneath the station markers."""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, List

import requests

from stationtraffic.config import BikeLaneLayerConfig, DataPaths
from stationtraffic.utils import ensure_directory, read_json, write_text

logger = logging.getLogger(__name__)


class BikeLaneLoader:
    """Fetch configured bike-lane networks and cache them as GeoJSON files."""

    def __init__(self, data_paths: DataPaths, layers: List[BikeLaneLayerConfig], request_timeout: float = 30.0) -> None:
        self._layers = layers
        self._request_timeout = request_timeout
        self._root = Path(data_paths.raw) / "bike_lanes"

    def cache_path(self, layer: BikeLaneLayerConfig) -> Path:
        slug = re.sub(r"[^a-z0-9]+", "_", layer.name.lower()).strip("_")
        return self._root / f"{slug}.geojson"

    def fetch_layers(self, use_cache: bool = False) -> Dict[str, Dict[str, object]]:
        """Return parsed GeoJSON per layer name."""

        documents: Dict[str, Dict[str, object]] = {}
        for layer in self._layers:
            target = self.cache_path(layer)
            if not (use_cache and target.exists()):
                ensure_directory(self._root)
                response = requests.get(layer.url, timeout=self._request_timeout)
                response.raise_for_status()
                write_text(response.text, target)
                logger.info("Fetched bike lanes '%s' from %s", layer.name, layer.url)
            documents[layer.name] = read_json(target)
        return documents
