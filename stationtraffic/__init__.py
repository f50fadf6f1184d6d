"""Bike-share station traffic map: trip filtering, aggregation, and rendering."""

__version__ = "0.1.0"
