"""Keyed in-memory store for fetched dashboard data.

Every record is stored under the parameters of the request that produced
it (date, team id, game_pk, player/season/group). A write only replaces the
entry under its own key; same-key writes are last-write-wins.
"""

from datetime import date
from typing import Iterable, Mapping

from .pipeline.extractors import (
    Game,
    GameLogLine,
    PlayerStatLine,
    RosterEntry,
    StatGroup,
    Team,
)
from .pipeline.live_state import LiveState
from .pipeline.stats import PlayerSeasonStats

DateKey = str


def date_key(value: date | str | None) -> DateKey:
    """Normalize a schedule date to its store key ("" = upstream today)."""
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    return value


class DashboardStore:
    """Session cache keyed by request parameters."""

    def __init__(self):
        self.teams: dict[int, Team] = {}
        self._schedules: dict[DateKey, dict[int, Game | None]] = {}
        self._live_states: dict[DateKey, dict[int, LiveState | None]] = {}
        self._rosters: dict[int, list[RosterEntry]] = {}
        self._player_stats: dict[tuple[int, int, StatGroup], PlayerStatLine] = {}
        self._game_logs: dict[tuple[int, int], list[GameLogLine]] = {}

    # Teams

    def merge_teams(self, teams: Mapping[int, Team]) -> None:
        """Add or replace team metadata per id."""
        self.teams.update(teams)

    def missing_team_ids(self, ids: Iterable[int | None]) -> list[int]:
        return [i for i in dict.fromkeys(ids) if i is not None and i not in self.teams]

    # Schedule / live

    def put_schedule(self, schedule_date: date | str | None, games_by_team: Mapping[int, Game | None]) -> None:
        self._schedules[date_key(schedule_date)] = dict(games_by_team)

    def schedule_for(self, schedule_date: date | str | None) -> dict[int, Game | None] | None:
        """Resolved schedule for a date, or None if never loaded."""
        return self._schedules.get(date_key(schedule_date))

    def put_live_states(
        self, schedule_date: date | str | None, states: Mapping[int, LiveState | None]
    ) -> None:
        self._live_states.setdefault(date_key(schedule_date), {}).update(states)

    def live_states_for(self, schedule_date: date | str | None) -> dict[int, LiveState | None]:
        return dict(self._live_states.get(date_key(schedule_date), {}))

    def clear_schedule(self) -> None:
        """Drop every schedule and live state (teams and stats survive)."""
        self._schedules.clear()
        self._live_states.clear()

    # Rosters

    def put_roster(self, team_id: int, entries: Iterable[RosterEntry]) -> None:
        self._rosters[team_id] = list(entries)

    def roster(self, team_id: int) -> list[RosterEntry] | None:
        return self._rosters.get(team_id)

    def rosters(self) -> dict[int, list[RosterEntry]]:
        return dict(self._rosters)

    # Player stats

    def put_player_stats(self, line: PlayerStatLine) -> None:
        self._player_stats[line.key] = line

    def player_stats(self, player_id: int, season: int, group: StatGroup | str) -> PlayerStatLine | None:
        return self._player_stats.get((player_id, season, StatGroup(group)))

    def player_season(self, player_id: int, season: int) -> PlayerSeasonStats | None:
        """Merged season stats, or None unless both groups are cached."""
        lines = [self.player_stats(player_id, season, group) for group in StatGroup]
        if any(line is None for line in lines):
            return None
        return PlayerSeasonStats.from_lines(player_id, season, lines)

    def put_player_season(self, season_stats: PlayerSeasonStats) -> None:
        for group in StatGroup:
            self.put_player_stats(
                PlayerStatLine(
                    player_id=season_stats.player_id,
                    season=season_stats.season,
                    group=group,
                    stats=season_stats.group(group),
                )
            )

    # Game logs

    def put_game_logs(self, player_id: int, season: int, lines: Iterable[GameLogLine]) -> None:
        self._game_logs[(player_id, season)] = list(lines)

    def game_logs(self, player_id: int, season: int) -> list[GameLogLine] | None:
        return self._game_logs.get((player_id, season))
