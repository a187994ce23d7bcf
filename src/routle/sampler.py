"""Start/end city selection for a new game."""

from __future__ import annotations

import logging
import random
from typing import Sequence

from .coords import calculate_distance
from .models import GeoCity, MapConfig

_LOGGER = logging.getLogger("routle.sampler")


class SessionStartError(RuntimeError):
    """Raised when a game cannot be set up for a map."""


def minimum_separation(map_config: MapConfig) -> float:
    return map_config.bounds.lat_span / 6


def pick_start_and_end(
    cities: Sequence[GeoCity],
    map_config: MapConfig,
    *,
    rng: random.Random | None = None,
    max_attempts: int = 100,
) -> tuple[GeoCity, GeoCity]:
    """Draw a random start city and an end city far enough away from it.

    The end city is re-drawn until it lies more than a sixth of the map's
    latitude span from the start. After ``max_attempts`` draws the city farthest from
    the start is used instead.
    """
    if not cities:
        raise SessionStartError(f"No cities available to start a game on map '{map_config.name}'")

    rng = rng or random.Random()
    min_dist = minimum_separation(map_config)
    start = rng.choice(cities)

    def _from_start(city: GeoCity) -> float:
        return calculate_distance(start.lat, start.lng, city.lat, city.lng)

    for _ in range(max(1, max_attempts)):
        end = rng.choice(cities)
        if _from_start(end) > min_dist:
            return start, end

    best = max(cities, key=_from_start)
    best_distance = _from_start(best)
    if best_distance <= 0:
        raise SessionStartError(
            f"Every city available on map '{map_config.name}' sits at the start city; no end city can be reached"
        )

    _LOGGER.warning(
        "end_city_fallback",
        extra={
            "map": map_config.name,
            "attempts": max_attempts,
            "distance": best_distance,
            "min_distance": min_dist,
        },
    )
    return start, best
