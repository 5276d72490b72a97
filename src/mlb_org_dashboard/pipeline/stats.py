"""Roster and player statistics aggregation.

Season stats arrive per (player, season, group); hitting and pitching are
fetched concurrently and merged into one PlayerSeasonStats per player.
Roster-wide stat fetches are bounded to a prefix of the roster.
"""

import asyncio
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from ..ingestion.client import StatsAPIClient
from ..ingestion.errors import UpstreamError
from .extractors import (
    GameLogLine,
    PlayerStatLine,
    RosterEntry,
    RosterExtractor,
    StatGroup,
    StatsExtractor,
)

logger = logging.getLogger(__name__)

DEFAULT_ROSTER_PREFIX = 25
DEFAULT_GAME_LOG_LIMIT = 10


def to_float(value: Any) -> float | None:
    """Coerce a raw upstream stat value to float.

    Upstream sends rate stats as strings (".285", "3.45") and counting stats
    as integers.

    Args:
        value: Raw stat value

    Returns:
        Finite float value, or None for absent, non-numeric, NaN or infinite values
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        result = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            result = float(text)
        except ValueError:
            return None
    else:
        return None
    return result if math.isfinite(result) else None


@dataclass(frozen=True)
class PlayerSeasonStats:
    """Hitting and pitching stats of one player for one season."""

    player_id: int
    season: int
    hitting: Mapping[str, Any] = field(default_factory=dict)
    pitching: Mapping[str, Any] = field(default_factory=dict)

    def group(self, group: StatGroup | str) -> Mapping[str, Any]:
        return self.hitting if StatGroup(group) is StatGroup.HITTING else self.pitching

    @classmethod
    def from_lines(
        cls, player_id: int, season: int, lines: Sequence[PlayerStatLine]
    ) -> "PlayerSeasonStats":
        by_group = {line.group: line.stats for line in lines}
        return cls(
            player_id=player_id,
            season=season,
            hitting=dict(by_group.get(StatGroup.HITTING) or {}),
            pitching=dict(by_group.get(StatGroup.PITCHING) or {}),
        )


class RosterStatAggregator:
    """Fetches rosters, season stats and game logs.

    Usage:
        >>> aggregator = RosterStatAggregator(client)
        >>> roster = await aggregator.fetch_roster(146)
        >>> stats = await aggregator.fetch_roster_stats(roster, 2024)
    """

    def __init__(self, client: StatsAPIClient | None = None):
        self.client = client or StatsAPIClient()

    async def fetch_roster(self, team_id: int, roster_type: str = "active") -> list[RosterEntry]:
        data = await self.client.fetch_roster(team_id, roster_type)
        roster = RosterExtractor.extract_roster(data, team_id)
        logger.info(f"Team {team_id}: {len(roster)} rostered players")
        return roster

    async def fetch_player_stats(
        self,
        player_id: int,
        season: int,
        group: StatGroup | str,
    ) -> PlayerStatLine:
        """Fetch one stat group of a player's season.

        Args:
            player_id: Player id
            season: Season year
            group: Stat group

        Returns:
            PlayerStatLine (empty ``stats`` when the player has no data)
        """
        group = StatGroup(group)
        data = await self.client.fetch_player_stats(player_id, season, group)
        return PlayerStatLine(
            player_id=player_id,
            season=season,
            group=group,
            stats=StatsExtractor.extract_season_stats(data),
        )

    async def fetch_player_season(self, player_id: int, season: int) -> PlayerSeasonStats:
        """Fetch hitting and pitching concurrently and merge them."""
        lines = await asyncio.gather(
            self.fetch_player_stats(player_id, season, StatGroup.HITTING),
            self.fetch_player_stats(player_id, season, StatGroup.PITCHING),
        )
        return PlayerSeasonStats.from_lines(player_id, season, lines)

    async def fetch_player_game_logs(
        self,
        player_id: int,
        season: int,
        limit: int = DEFAULT_GAME_LOG_LIMIT,
    ) -> list[GameLogLine]:
        data = await self.client.fetch_player_game_logs(player_id, season)
        return StatsExtractor.extract_game_logs(data, limit=limit)

    async def fetch_roster_stats(
        self,
        roster: Sequence[RosterEntry],
        season: int,
        limit: int = DEFAULT_ROSTER_PREFIX,
    ) -> dict[int, PlayerSeasonStats | None]:
        """Fetch season stats for the first ``limit`` roster entries.

        Players are fetched concurrently; a player whose fetch fails maps to
        None without affecting the others.

        Args:
            roster: Roster entries in roster order
            season: Season year
            limit: Number of leading roster entries to fetch

        Returns:
            Mapping of player id to PlayerSeasonStats or None
        """
        player_ids = list(dict.fromkeys(entry.player_id for entry in roster[:limit]))
        if not player_ids:
            return {}

        results = await asyncio.gather(
            *(self.fetch_player_season(pid, season) for pid in player_ids),
            return_exceptions=True,
        )

        stats: dict[int, PlayerSeasonStats | None] = {}
        failed = 0
        for player_id, result in zip(player_ids, results):
            if isinstance(result, UpstreamError):
                logger.warning(f"Player {player_id}: season {season} stats unavailable: {result}")
                stats[player_id] = None
                failed += 1
            elif isinstance(result, BaseException):
                raise result
            else:
                stats[player_id] = result

        logger.info(f"Roster stats: {len(stats) - failed}/{len(stats)} players for {season}")
        return stats
