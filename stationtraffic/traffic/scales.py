"""Marker radius and flow-direction scales derived from station traffic."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np
import pandas as pd

from stationtraffic.config import ScaleConfig


@dataclass(frozen=True)
class SqrtScale:
    """Square-root scale mapping ``domain`` onto ``range``."""

    domain: Tuple[float, float]
    range: Tuple[float, float]

    def __call__(self, values):
        d0, d1 = np.sqrt(self.domain[0]), np.sqrt(self.domain[1])
        r0, r1 = self.range
        roots = np.sqrt(np.asarray(values, dtype=float))
        if d1 == d0:
            # Degenerate domain: every input sits at the middle of the range.
            t = np.full_like(roots, 0.5)
        else:
            t = (roots - d0) / (d1 - d0)
        scaled = r0 + t * (r1 - r0)
        return float(scaled) if np.ndim(scaled) == 0 else scaled


@dataclass(frozen=True)
class QuantizeScale:
    """Split a continuous domain into equal segments, one per output value."""

    domain: Tuple[float, float]
    range: Sequence[float]

    @property
    def thresholds(self) -> np.ndarray:
        d0, d1 = self.domain
        n = len(self.range)
        return np.array([d0 + (i + 1) * (d1 - d0) / n for i in range(n - 1)])

    def __call__(self, values):
        indices = np.searchsorted(self.thresholds, np.asarray(values, dtype=float), side="right")
        outputs = np.asarray(self.range, dtype=float)[indices]
        return float(outputs) if np.ndim(outputs) == 0 else outputs


def build_radius_scale(stations: pd.DataFrame, filtered: bool, config: ScaleConfig) -> SqrtScale:
    """Radius scale over ``[0, max(total_traffic)]``; filtered views get a wider range."""

    max_traffic = float(stations["total_traffic"].max()) if not stations.empty else 0.0
    radius_range = config.filtered_radius_range if filtered else config.radius_range
    return SqrtScale(domain=(0.0, max_traffic), range=tuple(radius_range))


def build_flow_scale(config: ScaleConfig) -> QuantizeScale:
    return QuantizeScale(domain=(0.0, 1.0), range=tuple(config.flow_buckets))


def departure_ratio(stations: pd.DataFrame, flow_scale: QuantizeScale, zero_traffic_ratio: float = 0.5) -> pd.Series:
    """Quantized share of departures in each station's traffic.

    Stations with no traffic get ``zero_traffic_ratio`` instead of 0/0.
    """

    total = stations["total_traffic"].to_numpy(dtype=float)
    departures = stations["departures"].to_numpy(dtype=float)
    ratio = np.divide(departures, total, out=np.zeros_like(total), where=total > 0)
    buckets = np.asarray(flow_scale(ratio), dtype=float)
    buckets = np.where(total > 0, buckets, zero_traffic_ratio)
    return pd.Series(buckets, index=stations.index, name="departure_ratio")
