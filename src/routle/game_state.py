"""Game state transitions for a single routle session."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from .coords import points_within_range
from .models import CityPoint, GameState, GeoCity, MapConfig, Viewport
from .resolver import AlreadyHere, NoMatch, ResolveOutcome, Selected, to_city_point


class GuessVerdict(str, Enum):
    """What a resolved guess did to the game."""

    NO_MATCH = "no_match"
    ALREADY_HERE = "already_here"
    TOO_FAR = "too_far"
    MOVED = "moved"
    WON = "won"
    GAME_OVER = "game_over"


@dataclass(frozen=True, slots=True)
class GuessResult:
    verdict: GuessVerdict
    state: GameState
    message: str
    candidate: CityPoint | None = None


def new_game(map_config: MapConfig, start_city: GeoCity, end_city: GeoCity) -> GameState:
    return GameState(
        current_point=to_city_point(map_config, start_city),
        end_point=to_city_point(map_config, end_city),
        search_radius=map_config.search_radius,
    )


def _move(state: GameState, destination: CityPoint, *, won: bool = False) -> GameState:
    return replace(
        state,
        past_points=(*state.past_points, state.current_point),
        current_point=destination,
        far_points=(),
        has_won=won,
    )


def apply_guess(
    state: GameState,
    outcome: ResolveOutcome,
    viewport: Viewport,
    radius: float | None = None,
) -> GuessResult:
    """Return the state that follows ``outcome``.

    ``radius`` is the search radius in viewport pixels; it defaults to the one
    stored on ``state``. A won game is never changed.
    """
    if state.has_won:
        return GuessResult(verdict=GuessVerdict.GAME_OVER, state=state, message="You win!")

    effective_radius = state.search_radius if radius is None else radius

    if isinstance(outcome, NoMatch):
        return GuessResult(
            verdict=GuessVerdict.NO_MATCH,
            state=state,
            message=f"{outcome.query} ???",
        )

    if isinstance(outcome, AlreadyHere):
        return GuessResult(
            verdict=GuessVerdict.ALREADY_HERE,
            state=state,
            message=f"Already in {outcome.query}",
        )

    if not isinstance(outcome, Selected):
        raise TypeError(f"Unsupported resolve outcome: {outcome!r}")

    if outcome.end_point_candidate and points_within_range(
        state.end_point, state.current_point, viewport, effective_radius
    ):
        return GuessResult(
            verdict=GuessVerdict.WON,
            state=_move(state, state.end_point, won=True),
            message="You win!",
            candidate=state.end_point,
        )

    candidate = outcome.candidate
    if points_within_range(candidate, state.current_point, viewport, effective_radius):
        return GuessResult(
            verdict=GuessVerdict.MOVED,
            state=_move(state, candidate),
            message=candidate.name,
            candidate=candidate,
        )

    return GuessResult(
        verdict=GuessVerdict.TOO_FAR,
        state=replace(state, far_points=(*state.far_points, candidate)),
        message=f"{candidate.name} is too far!",
        candidate=candidate,
    )
