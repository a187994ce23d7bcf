from __future__ import annotations

import pytest

from routle.models import CityPoint, GameState, MapBounds, MapConfig, Viewport


@pytest.fixture
def square_map() -> MapConfig:
    return MapConfig(
        name="square",
        bounds=MapBounds(lat_min=0.0, lat_max=10.0, lng_min=0.0, lng_max=10.0),
        search_radius=20.0,
    )


@pytest.fixture
def viewport() -> Viewport:
    return Viewport(width=100, height=100)


@pytest.fixture
def state_at_a() -> GameState:
    return GameState(
        current_point=CityPoint(x=0.5, y=0.5, name="A"),
        end_point=CityPoint(x=0.9, y=0.9, name="Z"),
        search_radius=20.0,
    )
