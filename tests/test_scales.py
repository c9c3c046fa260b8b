from datetime import datetime, timedelta, timezone

import numpy as np
import pytest

from core.scales import LinearScale, build_time_scale, build_value_scale


START = datetime(2024, 1, 1, tzinfo=timezone.utc)
END = START + timedelta(hours=2)


def test_value_scale_maps_domain_ends_to_range_ends():
    scale = build_value_scale((0.0, 30.0), (470.0, 20.0))
    assert scale.to_pixel(0.0) == pytest.approx(470.0)
    assert scale.to_pixel(30.0) == pytest.approx(20.0)
    assert scale.to_pixel(15.0) == pytest.approx(245.0)


def test_value_scale_extrapolates_outside_domain():
    scale = build_value_scale((0.0, 10.0), (100.0, 0.0))
    assert scale.to_pixel(20.0) == pytest.approx(-100.0)
    assert scale.to_pixel(-5.0) == pytest.approx(150.0)


@pytest.mark.parametrize("px", [20.0, 33.3, 245.0, 469.99, 470.0])
def test_value_scale_round_trip(px):
    scale = build_value_scale((0.0, 1234.5), (470.0, 20.0))
    assert scale.to_pixel(scale.to_domain(px)) == pytest.approx(px, abs=1e-9)


def test_time_scale_round_trip_over_range():
    scale = build_time_scale((START, END), (40.0, 898.0))
    pixels = np.linspace(40.0, 898.0, 57)
    back = scale.to_pixel(scale.to_domain_seconds(pixels))
    np.testing.assert_allclose(back, pixels, atol=1e-6)
    for px in (40.0, 361.75, 898.0):
        assert scale.to_pixel(scale.to_domain(px)) == pytest.approx(px, abs=1e-6)


def test_time_scale_accepts_datetimes_and_returns_aware_datetimes():
    scale = build_time_scale((START, END), (40.0, 898.0))
    assert scale.to_pixel(START) == pytest.approx(40.0)
    assert scale.to_pixel(END) == pytest.approx(898.0)
    mid = scale.to_domain(469.0)
    assert mid == START + timedelta(hours=1)
    assert mid.tzinfo is not None


def test_time_scale_keeps_domain_offset():
    tz = timezone(timedelta(hours=2))
    start = datetime(2024, 6, 1, 6, 0, tzinfo=tz)
    scale = build_time_scale((start, start + timedelta(hours=12)), (0.0, 100.0))
    assert scale.to_domain(0.0).utcoffset() == timedelta(hours=2)
    assert scale.domain[0] == start


def test_degenerate_time_domain_is_widened():
    scale = build_time_scale((START, START), (40.0, 898.0))
    assert scale.to_pixel(START) == pytest.approx(469.0)
    t0, t1 = scale.seconds.domain
    assert t1 - t0 == pytest.approx(1.0)


def test_degenerate_value_domain_is_widened():
    scale = build_value_scale((0.0, 0.0), (470.0, 20.0))
    assert scale.domain == (0.0, 1.0)
    assert scale.to_pixel(0.0) == pytest.approx(470.0)


def test_linear_scale_rejects_degenerate_inputs():
    with pytest.raises(ValueError):
        LinearScale((1.0, 1.0), (0.0, 10.0))
    with pytest.raises(ValueError):
        LinearScale((0.0, 1.0), (5.0, 5.0))
