"""Data extractors for MLB Stats API responses.

Converts raw JSON payloads into immutable records:
- TeamExtractor: Team metadata from Team.teams
- ScheduleExtractor: Games from Schedule.schedule date buckets
- RosterExtractor: Roster entries from Team.roster
- StatsExtractor: Season stat objects and game logs from Person.stats

Upstream fields are loosely documented and often absent, so every
extractor defaults missing values instead of raising.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping


class StatGroup(str, Enum):
    """Disjoint categories of season statistics."""

    HITTING = "hitting"
    PITCHING = "pitching"


@dataclass(frozen=True)
class Team:
    """Team metadata from the teams endpoint."""

    id: int
    name: str
    team_name: str = ""
    league_name: str = ""
    division_name: str | None = None
    parent_org_name: str | None = None
    franchise_name: str | None = None
    venue_name: str | None = None
    sport_id: int | None = None


@dataclass(frozen=True)
class TeamRef:
    """One side of a scheduled game."""

    id: int | None
    name: str = ""


@dataclass(frozen=True)
class Game:
    """A scheduled game as returned by the schedule endpoint."""

    game_pk: int
    home: TeamRef
    away: TeamRef
    game_date: str | None = None  # ISO-8601 start time
    official_date: date | None = None
    abstract_state: str | None = None  # Preview, Live, Final
    detailed_state: str | None = None
    venue_name: str | None = None
    home_probable_pitcher: str | None = None
    away_probable_pitcher: str | None = None

    @property
    def is_live(self) -> bool:
        return self.abstract_state == "Live"

    @property
    def is_preview(self) -> bool:
        return self.abstract_state == "Preview"

    @property
    def is_final(self) -> bool:
        return self.abstract_state == "Final"

    def involves(self, team_id: int) -> bool:
        """Check if the team plays in this game, home or away."""
        return team_id in (self.home.id, self.away.id)

    def is_home(self, team_id: int) -> bool:
        return self.home.id == team_id

    def opponent_of(self, team_id: int) -> TeamRef:
        """The other side of the game from the given team's perspective."""
        return self.away if self.is_home(team_id) else self.home

    def probable_pitcher_for(self, team_id: int) -> str | None:
        if self.is_home(team_id):
            return self.home_probable_pitcher
        return self.away_probable_pitcher


@dataclass(frozen=True)
class RosterEntry:
    """A rostered player."""

    player_id: int
    full_name: str
    position: str = ""
    position_name: str = ""
    team_id: int | None = None


@dataclass(frozen=True)
class PlayerStatLine:
    """Season statistics for one (player, season, group) key.

    Values are kept exactly as upstream sent them (numbers or numeric
    strings); consumers normalize with ``stats.to_float``.
    """

    player_id: int
    season: int
    group: StatGroup
    stats: Mapping[str, Any] = field(default_factory=dict)

    @property
    def key(self) -> tuple[int, int, StatGroup]:
        return (self.player_id, self.season, self.group)

    @property
    def has_stats(self) -> bool:
        return bool(self.stats)


@dataclass(frozen=True)
class GameLogLine:
    """One game from a player's game log."""

    date: date | None
    game_pk: int | None = None
    opponent_id: int | None = None
    opponent_name: str = ""
    is_home: bool | None = None
    stats: Mapping[str, Any] = field(default_factory=dict)


class TeamExtractor:
    """Extract team metadata from teams API responses."""

    @staticmethod
    def extract_team(data: Mapping[str, Any]) -> Team:
        """Extract a Team from one entry of Team.teams ``teams``.

        Args:
            data: Single team object

        Returns:
            Team record
        """
        return Team(
            id=data["id"],
            name=data.get("name") or "",
            team_name=data.get("teamName") or "",
            league_name=(data.get("league") or {}).get("name") or "",
            division_name=(data.get("division") or {}).get("name"),
            parent_org_name=data.get("parentOrgName"),
            franchise_name=data.get("franchiseName"),
            venue_name=(data.get("venue") or {}).get("name"),
            sport_id=(data.get("sport") or {}).get("id"),
        )

    @staticmethod
    def extract_teams(data: Mapping[str, Any]) -> dict[int, Team]:
        """Extract all teams keyed by id.

        Entries without an id are skipped; a repeated id keeps the last entry.

        Args:
            data: Raw API response from Team.teams

        Returns:
            Mapping of team id to Team
        """
        teams: dict[int, Team] = {}
        for entry in data.get("teams") or []:
            if not isinstance(entry, dict) or entry.get("id") is None:
                continue
            team = TeamExtractor.extract_team(entry)
            teams[team.id] = team
        return teams


class ScheduleExtractor:
    """Extract game information from schedule API responses."""

    @staticmethod
    def extract_game(game: Mapping[str, Any], bucket_date: date | None = None) -> Game:
        """Extract a Game from one schedule game object.

        Args:
            game: Game object from a date bucket
            bucket_date: Date of the enclosing bucket (fallback official date)

        Returns:
            Game record
        """
        teams = game.get("teams") or {}
        home = teams.get("home") or {}
        away = teams.get("away") or {}
        status = game.get("status") or {}

        return Game(
            game_pk=game.get("gamePk"),
            home=_team_ref(home),
            away=_team_ref(away),
            game_date=game.get("gameDate"),
            official_date=_parse_date(game.get("officialDate")) or bucket_date,
            abstract_state=status.get("abstractGameState"),
            detailed_state=status.get("detailedState"),
            venue_name=(game.get("venue") or {}).get("name"),
            home_probable_pitcher=(home.get("probablePitcher") or {}).get("fullName"),
            away_probable_pitcher=(away.get("probablePitcher") or {}).get("fullName"),
        )

    @staticmethod
    def extract_games(data: Mapping[str, Any]) -> list[Game]:
        """Extract games from every date bucket of Schedule.schedule.

        Args:
            data: Raw API response from Schedule.schedule

        Returns:
            Games in response order
        """
        games = []

        for date_entry in data.get("dates") or []:
            bucket_date = _parse_date(date_entry.get("date"))

            for game in date_entry.get("games") or []:
                if not isinstance(game, dict) or game.get("gamePk") is None:
                    continue
                games.append(ScheduleExtractor.extract_game(game, bucket_date))

        return games

    @staticmethod
    def get_game_pks(data: Mapping[str, Any]) -> list[int]:
        return [g.game_pk for g in ScheduleExtractor.extract_games(data)]


class RosterExtractor:
    """Extract roster entries from roster API responses."""

    @staticmethod
    def extract_roster(data: Mapping[str, Any], team_id: int | None = None) -> list[RosterEntry]:
        """Extract roster entries in upstream order.

        Args:
            data: Raw API response from Team.roster
            team_id: Team the roster belongs to

        Returns:
            Ordered roster entries (entries without a person id are skipped)
        """
        entries = []

        for item in data.get("roster") or []:
            person = item.get("person") or {}
            if person.get("id") is None:
                continue
            position = item.get("position") or {}
            entries.append(
                RosterEntry(
                    player_id=person["id"],
                    full_name=person.get("fullName") or "",
                    position=position.get("abbreviation") or "",
                    position_name=position.get("name") or "",
                    team_id=team_id if team_id is not None else item.get("parentTeamId"),
                )
            )

        return entries


class StatsExtractor:
    """Extract stat objects from Person.stats responses."""

    @staticmethod
    def extract_splits(data: Mapping[str, Any]) -> list[dict[str, Any]]:
        """Splits of the first stats block, or an empty list."""
        stats = data.get("stats") or []
        if not stats or not isinstance(stats[0], dict):
            return []
        return [s for s in stats[0].get("splits") or [] if isinstance(s, dict)]

    @staticmethod
    def extract_season_stats(data: Mapping[str, Any]) -> dict[str, Any]:
        """Stat object of the first season split (empty when no data).

        Args:
            data: Raw API response from Person.stats (stats=season)

        Returns:
            Raw stat mapping
        """
        splits = StatsExtractor.extract_splits(data)
        if not splits:
            return {}
        return dict(splits[0].get("stat") or {})

    @staticmethod
    def extract_game_logs(data: Mapping[str, Any], limit: int | None = None) -> list[GameLogLine]:
        """Extract game log lines, most recent first.

        Undated splits sort last. Upstream returns the log in chronological
        order, so ties keep reverse upstream order.

        Args:
            data: Raw API response from Person.stats (stats=gameLog)
            limit: Maximum number of lines to keep

        Returns:
            Game log lines, most recent first
        """
        lines = []

        for split in StatsExtractor.extract_splits(data):
            opponent = split.get("opponent") or {}
            lines.append(
                GameLogLine(
                    date=_parse_date(split.get("date")),
                    game_pk=(split.get("game") or {}).get("gamePk"),
                    opponent_id=opponent.get("id"),
                    opponent_name=opponent.get("name") or "",
                    is_home=split.get("isHome"),
                    stats=dict(split.get("stat") or {}),
                )
            )

        lines.reverse()
        lines.sort(key=lambda line: line.date or date.min, reverse=True)

        if limit is not None:
            lines = lines[:limit]
        return lines


def _team_ref(side: Mapping[str, Any]) -> TeamRef:
    team = side.get("team") or {}
    return TeamRef(id=team.get("id"), name=team.get("name") or "")


def _parse_date(date_str: str | None) -> date | None:
    """Parse date string (YYYY-MM-DD) to date object."""
    if not date_str:
        return None
    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except (ValueError, TypeError):
        return None
