"""View models for the dashboard.

Recombines registry, schedule, live state and stat records into display
records. Inputs are never mutated.

Schedule ordering:
    (game-state priority, league rank), stable over registry order
    Live 0 < Preview 1 < Final/other 2 < no game 3
    MLB 0 < AAA 1 < AA 2 < High-A 3 < A 4 < FCL 5 < DSL 6 < unrecognized 99

Leaderboard ordering:
    selected stat, direction from HITTING_STATS / PITCHING_STATS,
    missing values sort as 0 (display stays a placeholder), top 10
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Sequence

from ..pipeline.extractors import Game, GameLogLine, RosterEntry, StatGroup, Team
from ..pipeline.live_state import LiveState
from ..pipeline.stats import PlayerSeasonStats, to_float
from ..registry import is_major_league, league_rank, level_label
from .formatters import PLACEHOLDER, format_local_time, format_stat_value

NO_GAME = "NO GAME"
TBD = "TBD"

STATE_PRIORITY = {"Live": 0, "Preview": 1}
OTHER_STATE_PRIORITY = 2
NO_GAME_PRIORITY = 3

DEFAULT_TOP_N = 10
DEFAULT_SEARCH_LIMIT = 20


# =============================================================================
# SCHEDULE
# =============================================================================


@dataclass(frozen=True)
class ScheduleEntry:
    """One organizational team's row in the schedule view."""

    team_id: int
    team_name: str
    level: str
    league_rank: int
    state: str  # abstract state, or NO_GAME
    detailed_state: str = ""
    game_pk: int | None = None
    is_home: bool | None = None
    opponent_id: int | None = None
    opponent_name: str = ""
    opponent_qualifier: str = ""
    venue: str = ""
    start_time: str = ""
    starting_pitcher: str = ""
    opponent_starting_pitcher: str = ""
    live: LiveState | None = None

    @property
    def has_game(self) -> bool:
        return self.game_pk is not None

    @property
    def sort_key(self) -> tuple[int, int]:
        if not self.has_game:
            return (NO_GAME_PRIORITY, self.league_rank)
        return (STATE_PRIORITY.get(self.state, OTHER_STATE_PRIORITY), self.league_rank)

    @property
    def matchup_display(self) -> str:
        if not self.has_game:
            return NO_GAME
        prefix = "vs" if self.is_home else "@"
        qualifier = f" ({self.opponent_qualifier})" if self.opponent_qualifier else ""
        return f"{prefix} {self.opponent_name}{qualifier}"


def opponent_qualifier(teams: Mapping[int, Team], opponent_id: int | None) -> str:
    """Parent club shown next to an opponent's name.

    Args:
        teams: Known team metadata
        opponent_id: Opponent team id

    Returns:
        Team name for an MLB opponent, parent org (or franchise) name for a
        minor-league opponent, "" when metadata is unknown
    """
    meta = teams.get(opponent_id) if opponent_id is not None else None
    if meta is None:
        return ""
    if is_major_league(meta.league_name):
        return meta.team_name or meta.name or ""
    return meta.parent_org_name or meta.franchise_name or ""


def _team_display_name(team_id: int, meta: Team | None, game: Game | None) -> str:
    if meta is not None and meta.name:
        return meta.name
    if game is not None:
        side = game.home if game.is_home(team_id) else game.away
        if side.name:
            return side.name
    return f"Team {team_id}"


def build_schedule_entry(
    team_id: int,
    teams: Mapping[int, Team],
    game: Game | None,
    live_states: Mapping[int, LiveState | None],
) -> ScheduleEntry:
    meta = teams.get(team_id)
    league_name = meta.league_name if meta is not None else ""
    name = _team_display_name(team_id, meta, game)
    level = level_label(league_name)
    rank = league_rank(league_name)

    if game is None:
        return ScheduleEntry(
            team_id=team_id, team_name=name, level=level, league_rank=rank, state=NO_GAME
        )

    opponent = game.opponent_of(team_id)
    is_home = game.is_home(team_id)
    opponent_pitcher = game.away_probable_pitcher if is_home else game.home_probable_pitcher

    return ScheduleEntry(
        team_id=team_id,
        team_name=name,
        level=level,
        league_rank=rank,
        state=game.abstract_state or "",
        detailed_state=game.detailed_state or "",
        game_pk=game.game_pk,
        is_home=is_home,
        opponent_id=opponent.id,
        opponent_name=opponent.name,
        opponent_qualifier=opponent_qualifier(teams, opponent.id),
        venue=game.venue_name or "",
        start_time=format_local_time(game.game_date) or TBD,
        starting_pitcher=game.probable_pitcher_for(team_id) or TBD,
        opponent_starting_pitcher=opponent_pitcher or TBD,
        live=live_states.get(game.game_pk),
    )


def compose_schedule(
    team_ids: Iterable[int],
    teams: Mapping[int, Team],
    games_by_team: Mapping[int, Game | None],
    live_states: Mapping[int, LiveState | None] | None = None,
) -> list[ScheduleEntry]:
    """Compose the ordered schedule view.

    Args:
        team_ids: Organizational team ids in registry order
        teams: Team metadata by id (may be incomplete)
        games_by_team: Resolved game-or-None per team id
        live_states: Live states by game_pk for the same date

    Returns:
        One ScheduleEntry per team id, sorted by state priority then league
        rank, ties in registry order
    """
    live_states = live_states or {}
    entries = [
        build_schedule_entry(team_id, teams, games_by_team.get(team_id), live_states)
        for team_id in team_ids
    ]
    return sorted(entries, key=lambda e: e.sort_key)


# =============================================================================
# LEADERBOARDS
# =============================================================================


@dataclass(frozen=True)
class StatDefinition:
    key: str
    label: str
    descending: bool = True


HITTING_STATS: tuple[StatDefinition, ...] = (
    StatDefinition("homeRuns", "Home Runs"),
    StatDefinition("rbi", "RBIs"),
    StatDefinition("avg", "Batting Average"),
    StatDefinition("obp", "On-Base %"),
    StatDefinition("slg", "Slugging %"),
    StatDefinition("ops", "OPS"),
    StatDefinition("hits", "Hits"),
    StatDefinition("doubles", "Doubles"),
    StatDefinition("triples", "Triples"),
    StatDefinition("stolenBases", "Stolen Bases"),
    StatDefinition("walks", "Walks"),
    StatDefinition("strikeOuts", "Strikeouts"),
)

PITCHING_STATS: tuple[StatDefinition, ...] = (
    StatDefinition("wins", "Wins"),
    StatDefinition("losses", "Losses", descending=False),
    StatDefinition("era", "ERA", descending=False),
    StatDefinition("strikeOuts", "Strikeouts"),
    StatDefinition("saves", "Saves"),
    StatDefinition("inningsPitched", "Innings Pitched"),
    StatDefinition("whip", "WHIP", descending=False),
    StatDefinition("battingAverageAgainst", "BAA", descending=False),
)

STATS_BY_GROUP: dict[StatGroup, tuple[StatDefinition, ...]] = {
    StatGroup.HITTING: HITTING_STATS,
    StatGroup.PITCHING: PITCHING_STATS,
}

SECONDARY_COLUMNS: dict[StatGroup, tuple[str, ...]] = {
    StatGroup.HITTING: ("avg", "ops"),
    StatGroup.PITCHING: ("era", "whip"),
}


def stat_definition(group: StatGroup | str, stat_key: str) -> StatDefinition:
    """Definition of a stat in a group; unknown stats sort descending."""
    for definition in STATS_BY_GROUP[StatGroup(group)]:
        if definition.key == stat_key:
            return definition
    return StatDefinition(stat_key, stat_key)


@dataclass(frozen=True)
class LeaderboardRow:
    rank: int
    player_id: int
    full_name: str
    position: str
    value: Any
    display_value: str
    secondary: dict[str, str] = field(default_factory=dict)


def build_leaderboard(
    roster: Sequence[RosterEntry],
    stats_by_player: Mapping[int, PlayerSeasonStats | None],
    group: StatGroup | str,
    stat_key: str,
    limit: int = DEFAULT_TOP_N,
) -> list[LeaderboardRow]:
    """Rank roster players by one statistic.

    Players without any stat in ``group`` are excluded. A missing or
    non-numeric value sorts as 0 but displays as the placeholder.

    Args:
        roster: Roster entries in roster order
        stats_by_player: Season stats by player id (None = unavailable)
        group: Stat group
        stat_key: Stat to rank by
        limit: Number of rows to keep

    Returns:
        Leaderboard rows, rank 1 first
    """
    group = StatGroup(group)
    definition = stat_definition(group, stat_key)

    candidates: list[tuple[RosterEntry, Mapping[str, Any]]] = []
    for entry in roster:
        season = stats_by_player.get(entry.player_id)
        if season is None:
            continue
        group_stats = season.group(group)
        if group_stats:
            candidates.append((entry, group_stats))

    def sort_value(candidate: tuple[RosterEntry, Mapping[str, Any]]) -> float:
        value = to_float(candidate[1].get(stat_key))
        return value if value is not None else 0.0

    ranked = sorted(candidates, key=sort_value, reverse=definition.descending)

    rows = []
    for rank, (entry, group_stats) in enumerate(ranked[:limit], start=1):
        value = group_stats.get(stat_key)
        rows.append(
            LeaderboardRow(
                rank=rank,
                player_id=entry.player_id,
                full_name=entry.full_name,
                position=entry.position,
                value=value,
                display_value=format_stat_value(value, stat_key),
                secondary={
                    key: format_stat_value(group_stats.get(key), key)
                    for key in SECONDARY_COLUMNS[group]
                },
            )
        )
    return rows


# =============================================================================
# PLAYER PANEL / SEARCH
# =============================================================================

HITTING_PANEL = ("gamesPlayed", "atBats", "hits", "homeRuns", "rbi", "avg", "obp", "slg", "ops")
PITCHING_PANEL = ("gamesPlayed", "wins", "losses", "era", "inningsPitched", "strikeOuts", "whip")
GAME_LOG_COLUMNS = ("atBats", "hits", "homeRuns", "rbi", "baseOnBalls", "strikeOuts")


@dataclass(frozen=True)
class GameLogRow:
    date: str
    opponent: str
    stats: dict[str, str]


@dataclass(frozen=True)
class PlayerPanel:
    player_id: int
    full_name: str
    position: str
    season: int
    hitting: dict[str, str]
    pitching: dict[str, str]
    game_logs: list[GameLogRow]

    @property
    def has_hitting(self) -> bool:
        return any(v != PLACEHOLDER for v in self.hitting.values())

    @property
    def has_pitching(self) -> bool:
        return any(v != PLACEHOLDER for v in self.pitching.values())


def _panel(stats: Mapping[str, Any], keys: Sequence[str]) -> dict[str, str]:
    return {key: format_stat_value(stats.get(key), key) for key in keys}


def build_player_panel(
    entry: RosterEntry,
    season_stats: PlayerSeasonStats,
    game_logs: Sequence[GameLogLine] = (),
) -> PlayerPanel:
    """Formatted season panels and recent game log rows for one player."""
    rows = [
        GameLogRow(
            date=line.date.isoformat() if line.date else PLACEHOLDER,
            opponent=("vs " if line.is_home else "@ ") + (line.opponent_name or PLACEHOLDER),
            stats=_panel(line.stats, GAME_LOG_COLUMNS),
        )
        for line in game_logs
    ]
    return PlayerPanel(
        player_id=entry.player_id,
        full_name=entry.full_name,
        position=entry.position,
        season=season_stats.season,
        hitting=_panel(season_stats.hitting, HITTING_PANEL),
        pitching=_panel(season_stats.pitching, PITCHING_PANEL),
        game_logs=rows,
    )


def search_players(
    rosters: Mapping[int, Sequence[RosterEntry]],
    query: str,
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> list[RosterEntry]:
    """Case-insensitive name search across loaded rosters.

    A player on several rosters appears once. A blank query returns the
    first ``limit`` players.
    """
    needle = (query or "").strip().lower()
    seen: dict[int, RosterEntry] = {}

    for roster in rosters.values():
        for entry in roster:
            if entry.player_id in seen:
                continue
            if needle and needle not in entry.full_name.lower():
                continue
            seen[entry.player_id] = entry
            if len(seen) >= limit:
                return list(seen.values())

    return list(seen.values())
