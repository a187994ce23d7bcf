"""CLI startup entrypoint for Routle."""

from __future__ import annotations

import asyncio
import random

import typer
from rich import print

from routle.adapters import GeoNamesGeocoder, StaticGeocoder
from routle.adapters.geocoder import Geocoder, GeocoderError
from routle.cli import parse_radius_command, render_state
from routle.config import settings
from routle.maps import MapConfigError, MapRegistry
from routle.models import MapConfig, Viewport
from routle.sampler import SessionStartError, pick_start_and_end
from routle.session import GameSession, GuessJobStatus
from routle.telemetry.logging import LoggingTelemetry, NullTelemetry, configure_logging

app = typer.Typer(help="Routle: walk from one city to another by naming cities in between")


def _build_geocoder() -> Geocoder:
    if settings.geocoder_backend.lower() == "static":
        return StaticGeocoder.from_file()
    return GeoNamesGeocoder(
        username=settings.geonames_username,
        base_url=settings.geonames_base_url,
        timeout_seconds=settings.geocoder_timeout_seconds,
        max_rows=settings.geocoder_max_rows,
        sample_max_rows=settings.sample_max_rows,
    )


def _load_map(name: str) -> MapConfig:
    try:
        return MapRegistry.from_file(settings.maps_path).get(name)
    except MapConfigError as exc:
        print({"error": str(exc)})
        raise typer.Exit(code=1)


def _viewport() -> Viewport:
    return Viewport(width=settings.viewport_width, height=settings.viewport_height)


@app.callback()
def main() -> None:
    configure_logging(settings.log_level)


@app.command()
def start() -> None:
    """Show runtime backend configuration."""
    print(
        {
            "app_name": settings.app_name,
            "geocoder_backend": settings.geocoder_backend,
            "maps_path": str(settings.maps_path),
            "viewport": (settings.viewport_width, settings.viewport_height),
        }
    )


@app.command("maps")
def list_maps() -> None:
    try:
        registry = MapRegistry.from_file(settings.maps_path)
    except MapConfigError as exc:
        print({"error": str(exc)})
        raise typer.Exit(code=1)
    print({"maps": registry.names()})


@app.command("new-game")
def new_game_cmd(
    map_name: str = typer.Argument(..., help="Map name from the map list"),
    seed: int = typer.Option(None, help="Random seed for reproducible start/end cities"),
) -> None:
    """Draw a start and end city for a map."""
    map_config = _load_map(map_name)
    try:
        pool = _build_geocoder().sample_cities(map_config)
        start_city, end_city = pick_start_and_end(
            pool,
            map_config,
            rng=random.Random(seed),
            max_attempts=settings.separation_max_attempts,
        )
    except (GeocoderError, SessionStartError) as exc:
        print({"error": str(exc)})
        raise typer.Exit(code=1)
    print({"map": map_config.name, "start": start_city, "end": end_city})


@app.command("search")
def search(
    query: str,
    map_name: str = typer.Option(..., "--map", help="Map name from the map list"),
) -> None:
    """Look up a city name the way a guess would."""
    map_config = _load_map(map_name)
    try:
        cities = _build_geocoder().search(query, map_config)
    except GeocoderError as exc:
        print({"error": str(exc)})
        raise typer.Exit(code=1)
    print({"query": query, "cities": cities})


@app.command("play")
def play(
    map_name: str = typer.Argument(..., help="Map name from the map list"),
    seed: int = typer.Option(None, help="Random seed for reproducible start/end cities"),
) -> None:
    """Play an interactive game in the terminal."""
    map_config = _load_map(map_name)
    telemetry = LoggingTelemetry() if settings.telemetry_enabled else NullTelemetry()

    async def _run() -> int:
        try:
            session = await GameSession.start(
                map_config=map_config,
                geocoder=_build_geocoder(),
                viewport_provider=_viewport,
                rng=random.Random(seed),
                max_attempts=settings.separation_max_attempts,
                lookup_timeout_seconds=settings.geocoder_timeout_seconds,
                telemetry=telemetry,
            )
        except (SessionStartError, GeocoderError) as exc:
            print({"error": str(exc)})
            return 1

        state = session.state
        print(f"[bold]Get from {state.current_point.name} to {state.end_point.name}[/bold]")
        print("Type a city name. ':radius <modifier>' scales the search radius, ':quit' exits.")

        try:
            while not session.state.has_won:
                entry = (await asyncio.to_thread(input, "> ")).strip()
                if not entry:
                    continue
                if entry == ":quit":
                    break
                if entry.startswith(":radius"):
                    modifier = parse_radius_command(entry)
                    if modifier is None:
                        print("Usage: :radius <positive number>")
                    else:
                        print({"search_radius": session.scale_search_radius(modifier)})
                    continue

                job = await session.guess(entry)
                if job.status != GuessJobStatus.SUCCEEDED:
                    print(f"[red]{job.error}[/red]")
                    continue
                print(render_state(session.state, title=job.message))
        finally:
            await session.close()

        if session.state.has_won:
            print(f"[bold green]Number of cities: {session.state.cities_visited}[/bold green]")
        return 0

    code = asyncio.run(_run())
    if code:
        raise typer.Exit(code=code)


if __name__ == "__main__":
    app()
