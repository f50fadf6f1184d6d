"""Folium rendering of station traffic markers, bike lanes, and the time slider."""
from __future__ import annotations

import html
import logging
from pathlib import Path
from typing import Dict, List, Optional

import folium
import pandas as pd
from branca.element import Element
from folium.plugins import TimestampedGeoJson

from stationtraffic.config import BikeLaneLayerConfig, TrafficMapConfig
from stationtraffic.traffic.pipeline import build_station_markers, iter_time_frames
from stationtraffic.utils import ANY_TIME, ensure_directory, format_time

logger = logging.getLogger(__name__)

DEPARTURES_COLOR = "#4682b4"  # steelblue
ARRIVALS_COLOR = "#ff8c00"  # darkorange
BALANCED_COLOR = "#a2875a"


def flow_color(bucket: float) -> str:
    """Marker color for a departure-ratio bucket (0 arrivals-heavy, 1 departures-heavy)."""

    if bucket >= 0.75:
        return DEPARTURES_COLOR
    if bucket <= 0.25:
        return ARRIVALS_COLOR
    return BALANCED_COLOR


def _popup_html(row) -> str:
    return (
        f"<strong>{html.escape(str(row.name))}</strong><br>"
        f"{int(row.total_traffic)} trips<br>"
        f"{int(row.departures)} departures<br>"
        f"{int(row.arrivals)} arrivals"
    )


def _drop_unplaced(markers: pd.DataFrame) -> pd.DataFrame:
    placed = markers.dropna(subset=["lat", "lon"])
    dropped = len(markers) - len(placed)
    if dropped:
        logger.warning("Skipping %d stations without coordinates", dropped)
    return placed


def add_bike_lanes(fmap: folium.Map, layers: List[BikeLaneLayerConfig], documents: Dict[str, Dict[str, object]]) -> None:
    for layer in layers:
        geojson = documents.get(layer.name)
        if geojson is None:
            logger.warning("No GeoJSON loaded for bike lane layer '%s'", layer.name)
            continue
        style = {"color": layer.color, "weight": layer.weight, "opacity": layer.opacity}
        folium.GeoJson(geojson, name=layer.name, style_function=lambda _, style=style: style).add_to(fmap)


def add_station_markers(
    fmap: folium.Map,
    markers: pd.DataFrame,
    layer_name: str = "Any time",
    show: bool = False,
) -> folium.FeatureGroup:
    """Draw one circle per station, sized by traffic and colored by flow direction.

    The layer starts hidden so it does not overlap the time slider frames; it
    can be switched on from the layer control.
    """

    group = folium.FeatureGroup(name=layer_name, show=show)
    for row in _drop_unplaced(markers).itertuples(index=False):
        color = flow_color(row.departure_ratio)
        folium.CircleMarker(
            location=(row.lat, row.lon),
            radius=float(row.radius),
            color="white",
            weight=1,
            fill=True,
            fill_color=color,
            fill_opacity=0.6,
            tooltip=row.tooltip,
            popup=_popup_html(row),
        ).add_to(group)
    group.add_to(fmap)
    return group


def build_time_slider_features(frames, reference_date: str) -> List[Dict[str, object]]:
    """GeoJSON point features stamped with each frame's time of day."""

    features = []
    for time_filter, markers in frames:
        hours, minutes = divmod(time_filter, 60)
        timestamp_iso = f"{reference_date}T{hours:02d}:{minutes:02d}:00"
        for row in _drop_unplaced(markers).itertuples(index=False):
            color = flow_color(row.departure_ratio)
            features.append(
                {
                    "type": "Feature",
                    "geometry": {"type": "Point", "coordinates": [row.lon, row.lat]},
                    "properties": {
                        "time": timestamp_iso,
                        "popup": f"{_popup_html(row)}<br>{row.tooltip}<br>Around {format_time(time_filter)}",
                        "icon": "circle",
                        "iconstyle": {
                            "fillColor": color,
                            "fillOpacity": 0.6,
                            "stroke": True,
                            "color": "white",
                            "weight": 1,
                            "radius": float(row.radius),
                        },
                    },
                }
            )
    return features


def add_time_slider(fmap: folium.Map, features: List[Dict[str, object]], step_minutes: int) -> None:
    period = f"PT{step_minutes * 60}S"
    TimestampedGeoJson(
        {"type": "FeatureCollection", "features": features},
        period=period,
        duration=period,
        add_last_point=False,
        auto_play=False,
        loop=False,
        max_speed=10,
        loop_button=True,
        date_options="hh:mm A",
        time_slider_drag_update=True,
    ).add_to(fmap)


def add_legend(fmap: folium.Map) -> None:
    legend_html = f"""
    <div style="position: fixed; bottom: 20px; left: 20px; width: 220px; z-index: 9999; background: rgba(255, 255, 255, 0.9); padding: 10px 12px; border-radius: 6px; box-shadow: 0 1px 3px rgba(0,0,0,0.4);">
      <h4 style="margin: 0 0 6px; font-size: 14px;">Station traffic</h4>
      <ul style="margin: 0; padding-left: 16px; font-size: 12px; line-height: 1.4;">
        <li><span style="color:{DEPARTURES_COLOR};">●</span> More departures</li>
        <li><span style="color:{BALANCED_COLOR};">●</span> Balanced</li>
        <li><span style="color:{ARRIVALS_COLOR};">●</span> More arrivals</li>
      </ul>
      <p style="margin: 6px 0 0; font-size: 11px;">Circle size follows total trips. Use the time slider to count trips within an hour of a time of day.</p>
    </div>
    """
    fmap.get_root().html.add_child(Element(legend_html))


def build_traffic_map(
    stations: pd.DataFrame,
    trips: pd.DataFrame,
    config: Optional[TrafficMapConfig] = None,
    bike_lanes: Optional[Dict[str, Dict[str, object]]] = None,
) -> folium.Map:
    """Compose the full interactive map from stations, trips and bike-lane layers."""

    config = config or TrafficMapConfig()
    view = config.view
    fmap = folium.Map(
        location=list(view.center),
        zoom_start=view.zoom_start,
        min_zoom=view.min_zoom,
        max_zoom=view.max_zoom,
        tiles=view.tiles,
    )
    if bike_lanes:
        add_bike_lanes(fmap, config.bike_lanes, bike_lanes)

    all_day = build_station_markers(stations, trips, ANY_TIME, config.scales)
    add_station_markers(fmap, all_day, layer_name="Any time")

    frames = iter_time_frames(stations, trips, config.slider.step_minutes, config.scales)
    features = build_time_slider_features(frames, config.slider.reference_date)
    add_time_slider(fmap, features, config.slider.step_minutes)
    logger.info("Rendered %d stations and %d slider markers", len(all_day), len(features))

    add_legend(fmap)
    folium.LayerControl(collapsed=False).add_to(fmap)
    return fmap


def save_traffic_map(fmap: folium.Map, output_path: Path) -> Path:
    ensure_directory(output_path.parent)
    fmap.save(str(output_path))
    return output_path
