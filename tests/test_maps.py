from __future__ import annotations

import json
from pathlib import Path

import pytest

from routle.config import DEFAULT_MAPS_PATH
from routle.maps import MapConfigError, MapRegistry


def _write(tmp_path: Path, payload) -> Path:
    path = tmp_path / "maps.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_registry_loads_map_by_name(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        [
            {
                "name": "uk",
                "latMin": 49.9,
                "latMax": 58.7,
                "lngMin": -8.2,
                "lngMax": 1.8,
                "searchRadius": 70,
                "countryCodes": ["gb"],
            }
        ],
    )

    config = MapRegistry.from_file(path).get("uk")

    assert config.bounds.lat_min == 49.9
    assert config.bounds.lng_max == 1.8
    assert config.search_radius == 70.0
    assert config.country_codes == ("GB",)
    assert config.feature_class == "P"


def test_unknown_map_is_config_error(tmp_path: Path) -> None:
    registry = MapRegistry.from_file(_write(tmp_path, []))

    with pytest.raises(MapConfigError, match="Unknown map"):
        registry.get("mars")


def test_malformed_map_is_config_error(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        [
            {"name": "upside-down", "latMin": 10, "latMax": 0, "lngMin": 0, "lngMax": 10, "searchRadius": 5},
            {"name": "no-radius", "latMin": 0, "latMax": 10, "lngMin": 0, "lngMax": 10},
            {"name": "ok", "latMin": 0, "latMax": 10, "lngMin": 0, "lngMax": 10, "searchRadius": 5},
        ],
    )
    registry = MapRegistry.from_file(path)

    with pytest.raises(MapConfigError, match="upside-down"):
        registry.get("upside-down")
    with pytest.raises(MapConfigError, match="no-radius"):
        registry.get("no-radius")
    assert registry.get("ok").name == "ok"


def test_missing_or_invalid_file(tmp_path: Path) -> None:
    with pytest.raises(MapConfigError, match="not found"):
        MapRegistry.from_file(tmp_path / "absent.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(MapConfigError, match="not valid JSON"):
        MapRegistry.from_file(broken)


def test_bundled_map_list_is_valid() -> None:
    registry = MapRegistry.from_file(DEFAULT_MAPS_PATH)

    for name in registry.names():
        assert registry.get(name).search_radius > 0


def test_duplicate_map_names_are_rejected() -> None:
    entry = {"name": "uk", "latMin": 0, "latMax": 10, "lngMin": 0, "lngMax": 10, "searchRadius": 5}

    with pytest.raises(MapConfigError, match="Duplicate map name: uk"):
        MapRegistry([entry, dict(entry)])
