"""Reporting helpers for hourly traffic summaries."""

from .plots import hourly_traffic, plot_hourly_traffic

__all__ = ["hourly_traffic", "plot_hourly_traffic"]
