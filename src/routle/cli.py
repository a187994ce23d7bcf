"""Terminal rendering helpers for the interactive game."""

from __future__ import annotations

from rich.table import Table

from routle.models import CityPoint, GameState


def _fmt_point(point: CityPoint) -> str:
    return f"({point.x:.3f}, {point.y:.3f})"


def render_state(state: GameState, *, title: str | None = None) -> Table:
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("role")
    table.add_column("city")
    table.add_column("position", justify="right")

    for point in state.past_points:
        table.add_row("[dim]visited[/dim]", point.name, _fmt_point(point))
    for point in state.far_points:
        table.add_row("[red]too far[/red]", point.name, _fmt_point(point))
    table.add_row("[green]current[/green]", state.current_point.name, _fmt_point(state.current_point))
    if not state.has_won:
        table.add_row("[yellow]target[/yellow]", state.end_point.name, _fmt_point(state.end_point))
    return table


def parse_radius_command(text: str) -> float | None:
    """Return the modifier from ``:radius <modifier>``, or ``None`` for other input."""
    parts = text.split()
    if len(parts) != 2 or parts[0] != ":radius":
        return None
    try:
        modifier = float(parts[1])
    except ValueError:
        return None
    return modifier if modifier > 0 else None
