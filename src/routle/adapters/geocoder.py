"""City lookup backends used to resolve guesses and pick start/end cities."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Protocol

import requests

from routle.models import GeoCity, MapConfig

DEFAULT_GAZETTEER_PATH = Path(__file__).resolve().parent.parent / "data" / "cities.json"

_LOGGER = logging.getLogger("routle.adapters.geocoder")


class GeocoderError(RuntimeError):
    """Raised when a lookup backend is unreachable or returns an unusable payload."""


class Geocoder(Protocol):
    """Interface to a service that knows where cities are."""

    def search(self, query: str, map_config: MapConfig) -> list[GeoCity]:
        """Return every city matching ``query`` on the given map (possibly none)."""

    def sample_cities(self, map_config: MapConfig) -> list[GeoCity]:
        """Return a pool of cities inside the map to draw start and end cities from."""


def _parse_city(item: Any) -> GeoCity | None:
    if not isinstance(item, Mapping):
        return None
    name = item.get("name")
    if not isinstance(name, str) or not name.strip():
        return None
    try:
        # GeoNames sends coordinates as strings
        return GeoCity(name=name.strip(), lat=float(item["lat"]), lng=float(item["lng"]))
    except (KeyError, TypeError, ValueError):
        return None


def parse_cities(payload: Any) -> list[GeoCity]:
    """Extract cities from a ``{"geonames": [...]}`` response, skipping malformed rows."""
    if not isinstance(payload, Mapping):
        raise GeocoderError("Geocoder response must be a JSON object")
    status = payload.get("status")
    if isinstance(status, Mapping):
        raise GeocoderError(f"Geocoder error {status.get('value')}: {status.get('message')}")
    rows = payload.get("geonames", [])
    if not isinstance(rows, list):
        raise GeocoderError("Geocoder response 'geonames' must be a list")
    cities: list[GeoCity] = []
    for row in rows:
        city = _parse_city(row)
        if city is not None:
            cities.append(city)
    return cities


class GeoNamesGeocoder:
    """Geocoder backed by the GeoNames JSON web services."""

    def __init__(
        self,
        *,
        username: str,
        base_url: str = "http://api.geonames.org",
        timeout_seconds: float = 8.0,
        max_rows: int = 10,
        sample_max_rows: int = 500,
        session: requests.Session | None = None,
    ) -> None:
        self.username = username
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.max_rows = max_rows
        self.sample_max_rows = sample_max_rows
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": "routle"})

    def search(self, query: str, map_config: MapConfig) -> list[GeoCity]:
        params: dict[str, Any] = {
            "name": query,
            "isNameRequired": "true",
            "featureClass": map_config.feature_class,
            "maxRows": self.max_rows,
            "orderby": "population",
            **self._box_params(map_config),
        }
        if map_config.country_codes:
            params["country"] = list(map_config.country_codes)
        return self._get("searchJSON", params)

    def sample_cities(self, map_config: MapConfig) -> list[GeoCity]:
        params = {"maxRows": self.sample_max_rows, **self._box_params(map_config)}
        return self._get("citiesJSON", params)

    def _box_params(self, map_config: MapConfig) -> dict[str, Any]:
        bounds = map_config.bounds
        return {
            "north": bounds.lat_max,
            "south": bounds.lat_min,
            "east": bounds.lng_max,
            "west": bounds.lng_min,
            "username": self.username,
        }

    def _get(self, endpoint: str, params: Mapping[str, Any]) -> list[GeoCity]:
        url = f"{self.base_url}/{endpoint}"
        try:
            response = self._session.get(url, params=params, timeout=self.timeout_seconds)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            raise GeocoderError(f"GeoNames request to {endpoint} failed: {exc}") from exc
        except ValueError as exc:
            raise GeocoderError(f"GeoNames returned invalid JSON from {endpoint}") from exc

        cities = parse_cities(payload)
        _LOGGER.debug("geocoder_response", extra={"endpoint": endpoint, "hits": len(cities)})
        return cities


class StaticGeocoder:
    """Offline geocoder over a fixed list of cities.

    Names match case-insensitively. Only cities inside the map box are returned.
    """

    def __init__(self, cities: list[GeoCity]) -> None:
        self._cities = list(cities)

    @classmethod
    def from_file(cls, path: str | Path = DEFAULT_GAZETTEER_PATH) -> StaticGeocoder:
        try:
            payload = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise GeocoderError(f"Unable to read gazetteer: {path}") from exc
        if isinstance(payload, list):
            payload = {"geonames": payload}
        return cls(parse_cities(payload))

    def search(self, query: str, map_config: MapConfig) -> list[GeoCity]:
        wanted = query.strip().casefold()
        return [
            city
            for city in self._cities
            if city.name.casefold() == wanted and self._inside(city, map_config)
        ]

    def sample_cities(self, map_config: MapConfig) -> list[GeoCity]:
        return [city for city in self._cities if self._inside(city, map_config)]

    @staticmethod
    def _inside(city: GeoCity, map_config: MapConfig) -> bool:
        bounds = map_config.bounds
        return bounds.lat_min <= city.lat <= bounds.lat_max and bounds.lng_min <= city.lng <= bounds.lng_max
