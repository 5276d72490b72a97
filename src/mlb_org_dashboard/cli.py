"""Command-line interface for the MLB organization dashboard."""

import asyncio
import logging
from enum import Enum
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from .config import DashboardConfig, load_dashboard_config
from .dashboard import Dashboard
from .ingestion.errors import UpstreamError
from .pipeline.extractors import StatGroup
from .registry import level_label
from .views.composer import HITTING_STATS, PITCHING_STATS, ScheduleEntry
from .views.formatters import PLACEHOLDER

app = typer.Typer(
    name="mlb-org",
    help="MLB organization dashboard - schedule, leaderboards and player stats",
    add_completion=False,
)
console = Console()

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(None, "--config", "-c", help="Path to dashboard config YAML"),
    log_level: LogLevel = typer.Option(
        LogLevel.WARNING, "--log-level", case_sensitive=False, help="Logging level"
    ),
):
    """Configure logging and load the dashboard configuration."""
    logging.basicConfig(level=log_level.value, format=LOG_FORMAT)

    try:
        ctx.obj = load_dashboard_config(config) if config else DashboardConfig()
    except FileNotFoundError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    except ValidationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(1)


def _run(ctx: typer.Context, work):
    """Run ``work(dashboard)`` on a fresh dashboard, mapping upstream failures to exit 1."""

    async def runner():
        async with Dashboard(config=ctx.obj) as dashboard:
            return await work(dashboard)

    try:
        return asyncio.run(runner())
    except UpstreamError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def teams(ctx: typer.Context):
    """List organizational teams with their levels."""

    async def work(dashboard: Dashboard):
        await dashboard.load_teams()
        return dashboard.store.teams

    metadata = _run(ctx, work)

    table = Table(title=ctx.obj.organization.name)
    table.add_column("ID", style="cyan")
    table.add_column("Team")
    table.add_column("Level", style="yellow")
    table.add_column("League")
    table.add_column("Venue")

    for team_id in ctx.obj.organization.team_ids:
        team = metadata.get(team_id)
        if team is None:
            table.add_row(str(team_id), f"Team {team_id}", PLACEHOLDER, "", "")
            continue
        table.add_row(
            str(team_id),
            team.name,
            level_label(team.league_name) or PLACEHOLDER,
            team.league_name,
            team.venue_name or "",
        )

    console.print(table)


def _status_text(entry: ScheduleEntry) -> str:
    if not entry.has_game:
        return "[dim]NO GAME[/dim]"
    if entry.live is None:
        return entry.detailed_state or entry.state
    live = entry.live
    score = f"{live.away_runs}-{live.home_runs}"
    if entry.state == "Live":
        return f"[green]{score} {live.inning_display}, {live.outs} out[/green]"
    return f"{entry.detailed_state or entry.state} {score}"


def _detail_text(entry: ScheduleEntry) -> str:
    if not entry.has_game:
        return ""
    live = entry.live
    if entry.state == "Live" and live is not None:
        return f"P: {live.pitcher} / AB: {live.batter} / On: {live.runners_display}"
    if entry.state == "Final" and live is not None:
        decisions = live.decisions
        text = f"W: {decisions.winner or PLACEHOLDER} / L: {decisions.loser or PLACEHOLDER}"
        if decisions.save:
            text += f" / SV: {decisions.save}"
        return text
    return f"SP: {entry.starting_pitcher} vs {entry.opponent_starting_pitcher}"


@app.command()
def schedule(
    ctx: typer.Context,
    date: str | None = typer.Option(None, "--date", "-d", help="Date (YYYY-MM-DD), default today ET"),
):
    """Show every organizational team's game for a date."""
    entries = _run(ctx, lambda dashboard: dashboard.load_schedule(date))

    table = Table(title=f"Schedule {date or 'today'}")
    table.add_column("Level", style="yellow")
    table.add_column("Team")
    table.add_column("Matchup")
    table.add_column("Time")
    table.add_column("Status")
    table.add_column("Details")

    for entry in entries:
        table.add_row(
            entry.level or PLACEHOLDER,
            entry.team_name,
            entry.matchup_display,
            entry.start_time if entry.has_game else "",
            _status_text(entry),
            _detail_text(entry),
        )

    console.print(table)


@app.command()
def leaderboard(
    ctx: typer.Context,
    season: int | None = typer.Option(None, "--season", "-s", help="Season year"),
    group: StatGroup = typer.Option(StatGroup.HITTING, "--group", "-g", help="Stat group"),
    stat: str = typer.Option("homeRuns", "--stat", help="Stat to rank by"),
    team: int | None = typer.Option(None, "--team", "-t", help="Team ID (default organization team)"),
):
    """Rank a team's players by one statistic."""
    definitions = HITTING_STATS if group is StatGroup.HITTING else PITCHING_STATS
    known = {d.key: d.label for d in definitions}
    if stat not in known:
        console.print(f"[yellow]⚠ Unknown {group.value} stat '{stat}', ranking descending[/yellow]")

    rows = _run(ctx, lambda dashboard: dashboard.load_leaderboard(team, season, group, stat))

    if not rows:
        console.print("[yellow]No players found with the selected criteria.[/yellow]")
        return

    table = Table(title=f"{known.get(stat, stat)} leaders")
    table.add_column("#", style="cyan")
    table.add_column("Player")
    table.add_column("Pos")
    table.add_column(known.get(stat, stat), style="bold")
    for key in rows[0].secondary:
        table.add_column(key.upper())

    for row in rows:
        table.add_row(
            str(row.rank),
            row.full_name,
            row.position,
            row.display_value,
            *row.secondary.values(),
        )

    console.print(table)


@app.command()
def player(
    ctx: typer.Context,
    player_id: int = typer.Argument(..., help="Player ID"),
    season: int | None = typer.Option(None, "--season", "-s", help="Season year"),
):
    """Show a player's season stats and recent games."""

    async def work(dashboard: Dashboard):
        await dashboard.load_rosters()
        return await dashboard.load_player(player_id, season)

    panel = _run(ctx, work)

    console.print(f"[bold]{panel.full_name}[/bold] {panel.position} ({panel.season})")

    for title, stats, present in (
        ("Hitting", panel.hitting, panel.has_hitting),
        ("Pitching", panel.pitching, panel.has_pitching),
    ):
        if not present:
            continue
        table = Table(title=title)
        for key in stats:
            table.add_column(key)
        table.add_row(*stats.values())
        console.print(table)

    if panel.game_logs:
        table = Table(title="Recent games")
        table.add_column("Date")
        table.add_column("Opponent")
        for key in panel.game_logs[0].stats:
            table.add_column(key)
        for row in panel.game_logs:
            table.add_row(row.date, row.opponent, *row.stats.values())
        console.print(table)


@app.command()
def search(
    ctx: typer.Context,
    query: str = typer.Argument("", help="Name fragment"),
    limit: int = typer.Option(20, "--limit", "-n", help="Maximum results"),
):
    """Search players across the organization's main rosters."""

    async def work(dashboard: Dashboard):
        await dashboard.load_rosters()
        return dashboard.search(query, limit=limit)

    results = _run(ctx, work)

    if not results:
        console.print(f"[yellow]No players match '{query}'[/yellow]")
        return

    table = Table(title=f"Players matching '{query}'" if query else "Players")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Pos")
    table.add_column("Team")
    for entry in results:
        table.add_row(str(entry.player_id), entry.full_name, entry.position, str(entry.team_id or ""))
    console.print(table)


if __name__ == "__main__":
    app()
