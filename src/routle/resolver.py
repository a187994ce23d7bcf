"""Turns the geocoder hits for one guess into a single candidate city."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union

from .coords import calculate_distance, project, unproject
from .models import CityPoint, GeoCity, MapConfig


@dataclass(frozen=True, slots=True)
class NoMatch:
    query: str


@dataclass(frozen=True, slots=True)
class AlreadyHere:
    query: str


@dataclass(frozen=True, slots=True)
class Selected:
    query: str
    candidate: CityPoint
    end_point_candidate: bool = False


ResolveOutcome = Union[NoMatch, AlreadyHere, Selected]


def to_city_point(map_config: MapConfig, city: GeoCity) -> CityPoint:
    point = project(map_config.bounds, city.lat, city.lng)
    return CityPoint(x=point.x, y=point.y, name=city.name, lat=city.lat, lng=city.lng)


def resolve(
    query: str,
    cities: Sequence[GeoCity],
    map_config: MapConfig,
    current_point: CityPoint,
    end_point: CityPoint,
) -> ResolveOutcome:
    """Pick the hit closest to ``current_point``.

    Hits sitting exactly on the current point are skipped. The end-point flag is
    raised when any remaining hit sits on ``end_point``, even if a closer hit wins
    the selection.
    """
    if not cities:
        return NoMatch(query=query)

    if current_point.lat is not None and current_point.lng is not None:
        current_lat, current_lng = current_point.lat, current_point.lng
    else:
        current_lat, current_lng = unproject(map_config.bounds, current_point)

    closest: CityPoint | None = None
    closest_distance = float("inf")
    end_point_candidate = False

    for city in cities:
        point = to_city_point(map_config, city)
        if point.same_place(current_point):
            continue

        if point.same_place(end_point):
            end_point_candidate = True

        distance = calculate_distance(city.lat, city.lng, current_lat, current_lng)
        # strict comparison keeps the first of equally distant hits
        if distance < closest_distance:
            closest = point
            closest_distance = distance

    if closest is None:
        return AlreadyHere(query=query)

    return Selected(query=query, candidate=closest, end_point_candidate=end_point_candidate)
