"""Dashboard orchestrator.

Orchestrates the flow:
    Teams metadata → Schedule → resolve per team → Live states + opponents
    Roster → bounded roster stats → leaderboard
    Player → season stats + game logs → player panel

Every fetched record lands in a DashboardStore keyed by its request
parameters; views are composed from the store only.
"""

import asyncio
import logging
from datetime import date
from typing import Iterable

from .config import DashboardConfig
from .ingestion.client import StatsAPIClient
from .ingestion.errors import UpstreamError
from .pipeline.extractors import GameLogLine, RosterEntry, StatGroup
from .pipeline.live_state import LiveStateAggregator
from .pipeline.schedule import games_for_date, resolve_games_by_team, scheduled_games
from .pipeline.stats import PlayerSeasonStats, RosterStatAggregator
from .store import DashboardStore
from .views.composer import (
    LeaderboardRow,
    PlayerPanel,
    ScheduleEntry,
    build_leaderboard,
    build_player_panel,
    compose_schedule,
    search_players,
)
from .views.formatters import today_eastern

logger = logging.getLogger(__name__)


class Dashboard:
    """Loads, caches and composes dashboard views for one organization.

    Usage:
        >>> async with Dashboard() as dashboard:
        ...     entries = await dashboard.load_schedule("2024-07-04")
        ...     leaders = await dashboard.load_leaderboard(146, 2024, "hitting", "homeRuns")
    """

    def __init__(
        self,
        client: StatsAPIClient | None = None,
        config: DashboardConfig | None = None,
        store: DashboardStore | None = None,
    ):
        """Initialize the dashboard.

        Args:
            client: StatsAPIClient instance (built from config if None)
            config: Dashboard configuration (uses defaults if None)
            store: Keyed store (new empty store if None)
        """
        self.config = config or DashboardConfig()
        org = self.config.organization

        self._owns_client = client is None
        self.client = client or StatsAPIClient(
            self.config.client, team_ids=org.team_ids, sport_ids=org.sport_ids
        )
        self.store = store or DashboardStore()
        self.live = LiveStateAggregator(self.client)
        self.stats = RosterStatAggregator(self.client)
        self._selected_team_id: int | None = None

    @property
    def team_ids(self) -> list[int]:
        return list(self.config.organization.team_ids)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    # =========================================================================
    # TEAMS / SCHEDULE
    # =========================================================================

    async def load_teams(self) -> None:
        """Fetch metadata for every organizational team.

        Raises:
            UpstreamError: If the metadata request fails
        """
        teams = await self.client.fetch_teams_metadata(self.team_ids)
        self.store.merge_teams(teams)
        logger.info(f"Loaded metadata for {len(teams)}/{len(self.team_ids)} teams")

    async def load_schedule(self, schedule_date: date | str | None = None) -> list[ScheduleEntry]:
        """Load and compose the schedule view for a date.

        The schedule request failure propagates. Live feed and opponent
        metadata failures only degrade the affected entries.

        Args:
            schedule_date: Date to load (today in America/New_York if None)

        Returns:
            Ordered schedule entries, one per organizational team
        """
        schedule_date = schedule_date or today_eastern()

        if not self.store.teams:
            await self.load_teams()

        schedule = await self.client.fetch_schedule(schedule_date)
        games = games_for_date(schedule)
        games_by_team = resolve_games_by_team(games, self.team_ids)
        self.store.put_schedule(schedule_date, games_by_team)

        day_games = scheduled_games(games_by_team)
        logger.info(f"Schedule {schedule_date}: {len(day_games)} games for {len(self.team_ids)} teams")

        states, _ = await asyncio.gather(
            self.live.fetch_for_games(day_games),
            self._load_opponents(g.opponent_of(tid).id for tid, g in games_by_team.items() if g),
        )
        self.store.put_live_states(schedule_date, states)

        return self.schedule_view(schedule_date)

    async def _load_opponents(self, opponent_ids: Iterable[int | None]) -> None:
        """Fetch metadata for opponents not yet known, in one request."""
        missing = self.store.missing_team_ids(opponent_ids)
        if not missing:
            return
        try:
            self.store.merge_teams(await self.client.fetch_teams_metadata(missing))
        except UpstreamError as e:
            logger.warning(f"Opponent metadata unavailable for {len(missing)} teams: {e}")

    def schedule_view(self, schedule_date: date | str | None = None) -> list[ScheduleEntry]:
        """Compose the schedule view from the store (empty if never loaded)."""
        schedule_date = schedule_date or today_eastern()
        games_by_team = self.store.schedule_for(schedule_date)
        if games_by_team is None:
            return []
        return compose_schedule(
            self.team_ids,
            self.store.teams,
            games_by_team,
            self.store.live_states_for(schedule_date),
        )

    # =========================================================================
    # ROSTERS / LEADERBOARDS
    # =========================================================================

    async def load_roster(self, team_id: int, roster_type: str = "active") -> list[RosterEntry]:
        roster = await self.stats.fetch_roster(team_id, roster_type)
        self.store.put_roster(team_id, roster)
        return roster

    async def load_rosters(self, team_ids: Iterable[int] | None = None) -> dict[int, list[RosterEntry]]:
        """Load several rosters concurrently; a failed team is skipped."""
        ids = list(team_ids if team_ids is not None else self.config.organization.roster_team_ids)
        results = await asyncio.gather(*(self.load_roster(tid) for tid in ids), return_exceptions=True)

        loaded: dict[int, list[RosterEntry]] = {}
        for team_id, result in zip(ids, results):
            if isinstance(result, UpstreamError):
                logger.warning(f"Team {team_id}: roster unavailable: {result}")
            elif isinstance(result, BaseException):
                raise result
            else:
                loaded[team_id] = result
        return loaded

    async def _season_stats_for(
        self, roster: list[RosterEntry], season: int
    ) -> dict[int, PlayerSeasonStats | None]:
        cached = {e.player_id: self.store.player_season(e.player_id, season) for e in roster}
        missing = [e for e in roster if cached[e.player_id] is None]

        if missing:
            fetched = await self.stats.fetch_roster_stats(missing, season, limit=len(missing))
            for player_id, season_stats in fetched.items():
                if season_stats is not None:
                    self.store.put_player_season(season_stats)
                cached[player_id] = season_stats
        return cached

    async def load_leaderboard(
        self,
        team_id: int | None = None,
        season: int | None = None,
        group: StatGroup | str = StatGroup.HITTING,
        stat_key: str = "homeRuns",
    ) -> list[LeaderboardRow]:
        """Rank a team's players by one statistic.

        Only the first ``roster_prefix`` roster entries are considered. The
        roster is reused only while the same team stays selected.

        Args:
            team_id: Team id (organization default if None)
            season: Season year (configured default if None)
            group: Stat group
            stat_key: Stat to rank by

        Returns:
            Top ``top_n`` leaderboard rows

        Raises:
            UpstreamError: If the roster cannot be fetched
        """
        settings = self.config.leaderboard
        team_id = team_id if team_id is not None else self.config.organization.default_team_id
        season = season or settings.default_season

        roster = self.store.roster(team_id) if team_id == self._selected_team_id else None
        if roster is None:
            roster = await self.load_roster(team_id)
        self._selected_team_id = team_id

        prefix = roster[: settings.roster_prefix]
        stats_by_player = await self._season_stats_for(prefix, season)
        return build_leaderboard(prefix, stats_by_player, group, stat_key, limit=settings.top_n)

    # =========================================================================
    # PLAYERS
    # =========================================================================

    def find_player(self, player_id: int) -> RosterEntry | None:
        for roster in self.store.rosters().values():
            for entry in roster:
                if entry.player_id == player_id:
                    return entry
        return None

    def search(self, query: str, limit: int = 20) -> list[RosterEntry]:
        return search_players(self.store.rosters(), query, limit=limit)

    async def _game_logs_for(self, player_id: int, season: int) -> list[GameLogLine]:
        lines = self.store.game_logs(player_id, season)
        if lines is None:
            lines = await self.stats.fetch_player_game_logs(
                player_id, season, limit=self.config.leaderboard.game_log_limit
            )
            self.store.put_game_logs(player_id, season, lines)
        return lines

    async def _player_season_for(self, player_id: int, season: int) -> PlayerSeasonStats:
        season_stats = self.store.player_season(player_id, season)
        if season_stats is None:
            season_stats = await self.stats.fetch_player_season(player_id, season)
            self.store.put_player_season(season_stats)
        return season_stats

    async def load_player(self, player_id: int, season: int | None = None) -> PlayerPanel:
        """Load a player's season stats and recent game logs.

        Raises:
            UpstreamError: If either request fails
        """
        season = season or self.config.leaderboard.default_season

        season_stats, game_logs = await asyncio.gather(
            self._player_season_for(player_id, season),
            self._game_logs_for(player_id, season),
        )

        entry = self.find_player(player_id) or RosterEntry(player_id, f"Player {player_id}")
        return build_player_panel(entry, season_stats, game_logs)
