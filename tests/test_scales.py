import numpy as np
import pandas as pd
import pytest

from stationtraffic.config import ScaleConfig
from stationtraffic.traffic import (
    QuantizeScale,
    SqrtScale,
    build_flow_scale,
    build_radius_scale,
    departure_ratio,
)


def _traffic(departures, arrivals) -> pd.DataFrame:
    frame = pd.DataFrame({"departures": departures, "arrivals": arrivals})
    frame["total_traffic"] = frame["departures"] + frame["arrivals"]
    return frame


def test_sqrt_scale_maps_domain_to_range():
    scale = SqrtScale(domain=(0.0, 100.0), range=(0.0, 25.0))
    assert scale(0) == pytest.approx(0.0)
    assert scale(25) == pytest.approx(12.5)
    assert scale(100) == pytest.approx(25.0)
    assert np.allclose(scale([0, 100]), [0.0, 25.0])


def test_sqrt_scale_degenerate_domain_uses_midpoint():
    scale = SqrtScale(domain=(0.0, 0.0), range=(3.0, 50.0))
    assert scale(0) == pytest.approx(26.5)


def test_quantize_scale_buckets():
    scale = QuantizeScale(domain=(0.0, 1.0), range=(0.0, 0.5, 1.0))
    assert scale(0.0) == 0.0
    assert scale(0.2) == 0.0
    assert scale(0.5) == 0.5
    assert scale(0.75) == 1.0
    assert scale(1.0) == 1.0
    assert scale(1.5) == 1.0
    assert scale(-0.5) == 0.0


def test_radius_scale_range_depends_on_filter():
    stations = _traffic([10, 2], [6, 0])
    config = ScaleConfig()
    unfiltered = build_radius_scale(stations, filtered=False, config=config)
    filtered = build_radius_scale(stations, filtered=True, config=config)
    assert unfiltered.domain == (0.0, 16.0)
    assert unfiltered.range == (0.0, 25.0)
    assert filtered.range == (3.0, 50.0)
    assert unfiltered(16) == pytest.approx(25.0)
    assert filtered(0) == pytest.approx(3.0)


def test_departure_ratio_buckets():
    stations = _traffic([3, 0, 1, 0], [1, 4, 1, 0])
    ratios = departure_ratio(stations, build_flow_scale(ScaleConfig()))
    assert ratios.tolist() == [1.0, 0.0, 0.5, 0.5]
