"""Named map definitions loaded from a JSON map list."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .models import MapBounds, MapConfig


class MapConfigError(RuntimeError):
    """Raised when a map list is unreadable or a requested map is missing or malformed."""


class MapEntry(BaseModel):
    """One record of the map list file."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(min_length=1)
    lat_min: float = Field(alias="latMin")
    lat_max: float = Field(alias="latMax")
    lng_min: float = Field(alias="lngMin")
    lng_max: float = Field(alias="lngMax")
    search_radius: float = Field(alias="searchRadius", gt=0)
    country_codes: list[str] = Field(default_factory=list, alias="countryCodes")
    feature_class: str = Field(default="P", alias="featureClass")

    @model_validator(mode="after")
    def _check_bounds(self) -> MapEntry:
        if self.lat_min >= self.lat_max:
            raise ValueError("latMin must be below latMax")
        if self.lng_min >= self.lng_max:
            raise ValueError("lngMin must be below lngMax")
        return self

    def to_config(self) -> MapConfig:
        return MapConfig(
            name=self.name,
            bounds=MapBounds(
                lat_min=self.lat_min,
                lat_max=self.lat_max,
                lng_min=self.lng_min,
                lng_max=self.lng_max,
            ),
            search_radius=self.search_radius,
            country_codes=tuple(code.upper() for code in self.country_codes),
            feature_class=self.feature_class,
        )


class MapRegistry:
    """Looks up map configuration by name.

    Entries are validated lazily so one broken map does not hide the others;
    asking for a broken map raises :class:`MapConfigError`.
    """

    def __init__(self, raw_entries: list[dict]) -> None:
        self._raw: dict[str, dict] = {}
        for idx, item in enumerate(raw_entries):
            if not isinstance(item, dict) or not isinstance(item.get("name"), str):
                raise MapConfigError(f"Map entry #{idx} has no name")
            if item["name"] in self._raw:
                raise MapConfigError(f"Duplicate map name: {item['name']}")
            self._raw[item["name"]] = item

    @classmethod
    def from_file(cls, path: str | Path) -> MapRegistry:
        map_path = Path(path)
        if not map_path.exists():
            raise MapConfigError(f"Map list not found: {map_path}")
        try:
            payload = json.loads(map_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise MapConfigError(f"Map list is not valid JSON: {map_path}") from exc
        if not isinstance(payload, list):
            raise MapConfigError(f"Map list must be a JSON array: {map_path}")
        return cls(payload)

    def names(self) -> list[str]:
        return sorted(self._raw)

    def get(self, name: str) -> MapConfig:
        if name not in self._raw:
            raise MapConfigError(f"Unknown map: {name}")
        try:
            return MapEntry.model_validate(self._raw[name]).to_config()
        except ValidationError as exc:
            raise MapConfigError(f"Invalid configuration for map '{name}': {exc}") from exc
