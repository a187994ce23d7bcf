"""Projection of geographic coordinates onto a map box, plus distance helpers.

Projected points are normalized to the map's bounding box with ``y`` growing
northward: the southern edge is ``y == 0`` and the northern edge ``y == 1``.
Screen renderers that put the origin at the top must draw at ``1 - y``.
Nothing is clamped, so cities outside the box project outside ``[0, 1]``.
"""

from __future__ import annotations

import math

from .models import MapBounds, ScreenPoint, Viewport


def project(bounds: MapBounds, lat: float, lng: float) -> ScreenPoint:
    return ScreenPoint(
        x=(lng - bounds.lng_min) / bounds.lng_span,
        y=(lat - bounds.lat_min) / bounds.lat_span,
    )


def unproject(bounds: MapBounds, point: ScreenPoint) -> tuple[float, float]:
    """Return ``(lat, lng)`` for a projected point."""
    return (
        bounds.lat_min + point.y * bounds.lat_span,
        bounds.lng_min + point.x * bounds.lng_span,
    )


def calculate_distance(y1: float, x1: float, y2: float, x2: float) -> float:
    """Planar distance in raw latitude/longitude units. Only used to rank candidates."""
    return math.hypot(y1 - y2, x1 - x2)


def within_range(y1: float, x1: float, y2: float, x2: float, radius: float) -> bool:
    return math.hypot(y1 - y2, x1 - x2) <= radius


def scale_to_viewport(point: ScreenPoint, viewport: Viewport) -> tuple[float, float]:
    """Return ``(y_px, x_px)`` for a projected point drawn on ``viewport``."""
    return point.y * viewport.height, point.x * viewport.width


def points_within_range(a: ScreenPoint, b: ScreenPoint, viewport: Viewport, radius: float) -> bool:
    ay, ax = scale_to_viewport(a, viewport)
    by, bx = scale_to_viewport(b, viewport)
    return within_range(ay, ax, by, bx, radius)
