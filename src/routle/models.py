from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class MapBounds:
    lat_min: float
    lat_max: float
    lng_min: float
    lng_max: float

    def __post_init__(self) -> None:
        if not self.lat_min < self.lat_max:
            raise ValueError(f"lat_min ({self.lat_min}) must be below lat_max ({self.lat_max})")
        if not self.lng_min < self.lng_max:
            raise ValueError(f"lng_min ({self.lng_min}) must be below lng_max ({self.lng_max})")

    @property
    def lat_span(self) -> float:
        return self.lat_max - self.lat_min

    @property
    def lng_span(self) -> float:
        return self.lng_max - self.lng_min


@dataclass(frozen=True, slots=True)
class MapConfig:
    name: str
    bounds: MapBounds
    search_radius: float
    country_codes: tuple[str, ...] = ()
    feature_class: str = "P"

    def __post_init__(self) -> None:
        if self.search_radius <= 0:
            raise ValueError(f"search_radius must be > 0 for map '{self.name}'")


@dataclass(frozen=True, slots=True)
class GeoCity:
    """One geocoder hit."""

    name: str
    lat: float
    lng: float


@dataclass(frozen=True, slots=True)
class ScreenPoint:
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class CityPoint(ScreenPoint):
    name: str = ""
    # geocoder coordinates, kept for ranking candidates; not part of identity
    lat: float | None = field(default=None, compare=False)
    lng: float | None = field(default=None, compare=False)

    def same_place(self, other: ScreenPoint | None) -> bool:
        """Points are the same place when their projected coordinates match, whatever the name."""
        if other is None:
            return False
        return self.x == other.x and self.y == other.y


@dataclass(frozen=True, slots=True)
class Viewport:
    """Pixel size of the surface the map is drawn on."""

    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("Viewport dimensions must be > 0")


@dataclass(frozen=True, slots=True)
class GameState:
    current_point: CityPoint
    end_point: CityPoint
    search_radius: float
    past_points: tuple[CityPoint, ...] = field(default_factory=tuple)
    far_points: tuple[CityPoint, ...] = field(default_factory=tuple)
    has_won: bool = False

    @property
    def cities_visited(self) -> int:
        return len(self.past_points)
