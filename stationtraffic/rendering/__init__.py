"""Map rendering adapters for station traffic markers."""

from .traffic_map import build_traffic_map, flow_color, save_traffic_map

__all__ = ["build_traffic_map", "flow_color", "save_traffic_map"]
