from __future__ import annotations

import pytest

from routle.coords import (
    calculate_distance,
    points_within_range,
    project,
    scale_to_viewport,
    unproject,
    within_range,
)
from routle.models import MapBounds, ScreenPoint, Viewport


def test_project_normalizes_to_bounds_with_north_up() -> None:
    bounds = MapBounds(lat_min=40.0, lat_max=50.0, lng_min=-10.0, lng_max=10.0)

    point = project(bounds, lat=47.5, lng=5.0)

    assert point.x == pytest.approx(0.75)
    assert point.y == pytest.approx(0.75)


def test_project_does_not_clamp_outside_points() -> None:
    bounds = MapBounds(lat_min=0.0, lat_max=10.0, lng_min=0.0, lng_max=10.0)

    point = project(bounds, lat=-5.0, lng=15.0)

    assert point.x == pytest.approx(1.5)
    assert point.y == pytest.approx(-0.5)


def test_unproject_inverts_project() -> None:
    bounds = MapBounds(lat_min=-43.7, lat_max=-10.6, lng_min=113.1, lng_max=153.7)

    lat, lng = unproject(bounds, project(bounds, lat=-33.87, lng=151.21))

    assert lat == pytest.approx(-33.87)
    assert lng == pytest.approx(151.21)


def test_bounds_reject_inverted_box() -> None:
    with pytest.raises(ValueError):
        MapBounds(lat_min=10.0, lat_max=0.0, lng_min=0.0, lng_max=10.0)


def test_calculate_distance_is_planar() -> None:
    assert calculate_distance(0.0, 0.0, 3.0, 4.0) == pytest.approx(5.0)


def test_within_range_includes_boundary() -> None:
    assert within_range(0.0, 0.0, 3.0, 4.0, 5.0) is True
    assert within_range(0.0, 0.0, 3.0, 4.0, 4.999) is False


def test_range_uses_viewport_aspect_ratio() -> None:
    a = ScreenPoint(x=0.0, y=0.0)
    b = ScreenPoint(x=0.1, y=0.1)

    assert scale_to_viewport(b, Viewport(width=400, height=200)) == pytest.approx((20.0, 40.0))
    assert points_within_range(a, b, Viewport(width=100, height=100), radius=15) is True
    assert points_within_range(a, b, Viewport(width=400, height=200), radius=15) is False
