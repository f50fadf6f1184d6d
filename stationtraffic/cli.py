"""Command-line interface for rendering and summarising station traffic."""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Dict, Optional, Tuple

import pandas as pd
import requests
import typer

from stationtraffic import config as cfg
from stationtraffic.loaders import BikeLaneLoader, BluebikesLoader, load_sources
from stationtraffic.rendering import build_traffic_map, save_traffic_map
from stationtraffic.reporting import hourly_traffic, plot_hourly_traffic
from stationtraffic.traffic import build_station_markers
from stationtraffic.utils import format_time, parse_time_filter

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False)

LOAD_ERRORS = (requests.RequestException, FileNotFoundError, KeyError, ValueError)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def _load_or_exit(
    map_config: cfg.TrafficMapConfig,
    use_cache: bool,
    stations_path: Optional[Path],
    trips_path: Optional[Path],
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    loader = BluebikesLoader(map_config.data, map_config.stations, map_config.trips)
    try:
        stations, trips = load_sources(loader, use_cache=use_cache, stations_path=stations_path, trips_path=trips_path)
    except LOAD_ERRORS as err:
        logger.error("Error loading station or trip data: %s", err)
        raise typer.Exit(code=1) from err
    if stations.empty:
        logger.error("Station list is empty; nothing to render.")
        raise typer.Exit(code=1)
    typer.echo(f"Loaded {len(stations)} stations and {len(trips)} trips.")
    return stations, trips


@app.command()
def render(
    config_path: Optional[Path] = typer.Option(None, "--config", help="Path to map config JSON/YAML."),
    stations_path: Optional[Path] = typer.Option(None, "--stations", help="Local station JSON instead of the configured URL."),
    trips_path: Optional[Path] = typer.Option(None, "--trips", help="Local trips CSV instead of the configured URL."),
    use_cache: bool = typer.Option(True, "--cache/--refresh", help="Reuse previously downloaded sources when present."),
    lanes: bool = typer.Option(True, "--lanes/--no-lanes", help="Draw bike-lane layers beneath the stations."),
    output_path: Optional[Path] = typer.Option(None, "--output", help="Output HTML file for the map."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Render the interactive station traffic map with a time-of-day slider."""

    _configure_logging(verbose)
    map_config = cfg.load_traffic_map_config(config_path)
    stations, trips = _load_or_exit(map_config, use_cache and map_config.cache, stations_path, trips_path)

    bike_lanes: Dict[str, Dict[str, object]] = {}
    if lanes and map_config.bike_lanes:
        lane_loader = BikeLaneLoader(map_config.data, map_config.bike_lanes)
        try:
            bike_lanes = lane_loader.fetch_layers(use_cache=use_cache and map_config.cache)
        except LOAD_ERRORS as err:
            logger.error("Error loading bike lane layers: %s", err)
            raise typer.Exit(code=1) from err

    fmap = build_traffic_map(stations, trips, map_config, bike_lanes)
    target = output_path or map_config.data.reports / "station_traffic_map.html"
    save_traffic_map(fmap, target)
    typer.echo(f"Station traffic map saved to {target}")


@app.command()
def summary(
    config_path: Optional[Path] = typer.Option(None, "--config", help="Path to map config JSON/YAML."),
    stations_path: Optional[Path] = typer.Option(None, "--stations", help="Local station JSON instead of the configured URL."),
    trips_path: Optional[Path] = typer.Option(None, "--trips", help="Local trips CSV instead of the configured URL."),
    use_cache: bool = typer.Option(True, "--cache/--refresh", help="Reuse previously downloaded sources when present."),
    time: str = typer.Option("any", "--time", help="Time of day as HH:MM, minutes since midnight, or 'any'."),
    top: int = typer.Option(10, "--top", help="Number of busiest stations to print (0 = all)."),
    csv_path: Optional[Path] = typer.Option(None, "--csv", help="Write the full station table to this CSV file."),
    plot_path: Optional[Path] = typer.Option(None, "--plot", help="Write an hourly departures/arrivals chart (PNG)."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Print the busiest stations for a time of day."""

    _configure_logging(verbose)
    try:
        time_filter = parse_time_filter(time)
    except ValueError as err:
        raise typer.BadParameter(str(err), param_hint="--time") from err
    map_config = cfg.load_traffic_map_config(config_path)
    stations, trips = _load_or_exit(map_config, use_cache and map_config.cache, stations_path, trips_path)

    markers = build_station_markers(stations, trips, time_filter, map_config.scales)
    ranked = markers.sort_values("total_traffic", ascending=False, kind="stable")
    if top > 0:
        ranked = ranked.head(top)
    typer.echo(f"Busiest stations {format_time(time_filter)}:")
    typer.echo(ranked[["station_id", "name", "departures", "arrivals", "total_traffic"]].to_string(index=False))

    if csv_path is not None:
        csv_path.parent.mkdir(parents=True, exist_ok=True)
        markers.to_csv(csv_path, index=False)
        typer.echo(f"Station table saved to {csv_path}")
    if plot_path is not None:
        plot_hourly_traffic(hourly_traffic(trips), plot_path)
        typer.echo(f"Hourly traffic chart saved to {plot_path}")


def run_render() -> None:
    """Entry point for `stationtraffic-render`."""

    typer.run(render)


if __name__ == "__main__":
    app()
