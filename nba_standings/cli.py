"""CLI entrypoint using Typer.

Example:
    $ nba-standings --help
    $ nba-standings show
    $ nba-standings build --output docs/index.html --json docs/standings.json
    $ nba-standings cache status
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from nba_standings import __version__
from nba_standings.config import get_settings
from nba_standings.logging import setup_logging
from nba_standings.types import StandingsError

console = Console()

app = typer.Typer(
    name="nba-standings",
    help="NBA standings board with league-relative metric colors",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

cache_app = typer.Typer(
    name="cache",
    help="Inspect and refresh the cached feeds",
    no_args_is_help=True,
)

app.add_typer(cache_app, name="cache")


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]nba-standings[/bold blue] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-V",
            help="Enable verbose output",
        ),
    ] = False,
) -> None:
    """NBA standings board.

    Merges standings with team stats, derives efficiency metrics and colors
    each one by where the team sits within the league.
    """
    settings = get_settings()
    log_level = "DEBUG" if verbose else settings.log_level
    setup_logging(level=log_level, log_dir=settings.log_dir_obj)


def _run_pipeline():
    from nba_standings.data.pipelines import StandingsPipeline

    try:
        return StandingsPipeline().run()
    except StandingsError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from e


def _section_breaks(teams: list[dict]) -> list[bool]:
    """Flag the row just above the first WEST team so a rule separates the conferences."""
    return [
        i + 1 < len(teams) and bool(teams[i + 1]["first_west"]) for i in range(len(teams))
    ]


def _display_datasets(result) -> None:
    for status in result.datasets:
        checked = status.last_checked_at.isoformat() if status.last_checked_at else "never"
        source = "remote" if status.refreshed else "cache"
        console.print(f"[dim]{status.name}: {source}, last checked {checked}[/dim]")


@app.command("show")
def show(
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-n", help="Show only the first N teams"),
    ] = None,
) -> None:
    """Print the colored standings board."""
    from nba_standings.output.board import DEFAULT_COLUMNS

    result = _run_pipeline()
    teams = result.board["stats"]["standing"]
    if limit is not None:
        teams = teams[:limit]

    table = Table(title=result.board["title"])
    table.add_column("Team", style="bold")
    for column in DEFAULT_COLUMNS:
        table.add_column(column.label, justify="right")

    for team, ends_conference in zip(teams, _section_breaks(teams)):
        name = f"{team.get('first_name', team['team_id'])} {team.get('last_name', '')}".strip()
        cells = [
            f"[black on rgb({column.color(team)})]{column.text(team)}[/]"
            for column in DEFAULT_COLUMNS
        ]
        table.add_row(name, *cells, end_section=ends_conference)

    console.print(table)
    _display_datasets(result)


@app.command("build")
def build(
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="HTML file to write"),
    ] = Path("docs/index.html"),
    json_output: Annotated[
        Path | None,
        typer.Option("--json", "-j", help="Also write the board as JSON"),
    ] = None,
) -> None:
    """Render the board to static HTML (and optionally JSON)."""
    from nba_standings.output.board import StandingsBoard

    result = _run_pipeline()
    board = StandingsBoard()

    try:
        html_path = board.write_html(result.board, output)
        json_path = board.write_json(result.board, json_output) if json_output else None
    except StandingsError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from e

    lines = [f"[bold]HTML:[/bold] {html_path}"]
    if json_path is not None:
        lines.append(f"[bold]JSON:[/bold] {json_path}")
    lines.append(f"[bold]Teams:[/bold] {len(result.board['stats']['standing'])}")
    console.print(Panel("\n".join(lines), title="Board Built"))
    _display_datasets(result)


@cache_app.command("status")
def cache_status() -> None:
    """Show age and staleness of each cached feed."""
    from nba_standings.data.cache import STANDINGS, TEAM_STATS, TimeBasedCache

    settings = get_settings()
    cache = TimeBasedCache(settings.data_dir_obj)
    now = datetime.now(timezone.utc)
    max_ages = {
        TEAM_STATS.name: settings.team_stats_max_cache_hours,
        STANDINGS.name: settings.standings_max_cache_hours,
    }

    table = Table(title="Cached Feeds")
    table.add_column("Dataset", style="cyan")
    table.add_column("File")
    table.add_column("Last Checked")
    table.add_column("Age (h)", justify="right")
    table.add_column("Max Age (h)", justify="right")
    table.add_column("Status")

    failed = False
    for dataset in (TEAM_STATS, STANDINGS):
        path = cache.path_for(dataset)
        try:
            snapshot = cache.load(dataset)
        except StandingsError as e:
            failed = True
            table.add_row(dataset.name, str(path), "-", "-", "-", f"[red]{e}[/red]")
            continue

        hours = snapshot.hours_since_check(now)
        max_age = max_ages[dataset.name]
        checked = snapshot.last_checked_at.isoformat() if snapshot.last_checked_at else "never"
        status = "[yellow]stale[/yellow]" if hours > max_age else "[green]fresh[/green]"
        table.add_row(dataset.name, str(path), checked, f"{hours:.2f}", f"{max_age:g}", status)

    console.print(table)
    if failed:
        raise typer.Exit(1)


@cache_app.command("refresh")
def cache_refresh() -> None:
    """Fetch both feeds now, regardless of age."""
    from nba_standings.data.api import XmlStatsClient
    from nba_standings.data.cache import STANDINGS, TEAM_STATS, TimeBasedCache

    settings = get_settings()
    cache = TimeBasedCache(settings.data_dir_obj)
    client = XmlStatsClient()

    for dataset in (TEAM_STATS, STANDINGS):
        try:
            snapshot = cache.resolve(dataset, client, max_age_hours=0.0)
        except StandingsError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1) from e

        if snapshot.refreshed:
            console.print(f"[green]{dataset.name}: refreshed[/green]")
        else:
            console.print(f"[yellow]{dataset.name}: refresh failed, cache unchanged[/yellow]")


if __name__ == "__main__":
    app()
