"""Async MLB Stats API client.

One request per logical fetch: the schedule and teams-metadata requests are
batched over every organizational team id, and live feeds for a set of
games are issued concurrently so latency is bounded by the slowest game.

Usage:
    >>> async with StatsAPIClient() as client:
    ...     schedule = await client.fetch_schedule("2024-07-04")
    ...     teams = await client.fetch_teams_metadata([146, 385])
    ...     feeds = await client.fetch_game_lives([744834, 744835])
"""

import asyncio
import logging
from datetime import date
from typing import Any, Iterable, Sequence

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_fixed,
)

from ..config import BackoffStrategy, ClientConfig
from ..pipeline.extractors import StatGroup, Team, TeamExtractor
from ..registry import list_org_team_ids, list_sport_ids
from .errors import NetworkError, UpstreamError, UpstreamShapeError, UpstreamStatusError

logger = logging.getLogger(__name__)


class StatsAPIClient:
    """Client for the MLB Stats API.

    Features:
    - Batched schedule/teams requests (O(1) requests per date)
    - Concurrent live feed fetches with per-game failure isolation
    - Typed failures (``UpstreamError`` subclasses)
    - Opt-in retry of network failures (off by default)
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        team_ids: Sequence[int] | None = None,
        sport_ids: Sequence[int] | None = None,
    ):
        """Initialize the client.

        Args:
            config: Client configuration (uses defaults if None)
            transport: Custom httpx transport (for testing)
            team_ids: Default team ids for schedule requests (registry if None)
            sport_ids: Default sport ids for schedule requests (registry if None)
        """
        self.config = config or ClientConfig()
        self.team_ids = tuple(team_ids) if team_ids is not None else list_org_team_ids()
        self.sport_ids = tuple(sport_ids) if sport_ids is not None else list_sport_ids()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.config.base_url,
                headers={
                    "Accept": "application/json",
                    "User-Agent": self.config.user_agent,
                },
                timeout=self.config.timeout,
                transport=self._transport,
                follow_redirects=True,
            )
        return self._client

    async def aclose(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    # =========================================================================
    # REQUEST PLUMBING
    # =========================================================================

    def _build_retrying(self) -> AsyncRetrying:
        """Build retry controller based on client configuration."""
        retry_config = self.config.retry

        if retry_config.backoff == BackoffStrategy.EXPONENTIAL:
            wait_strategy = wait_exponential(
                multiplier=retry_config.initial_delay,
                max=retry_config.max_delay,
            )
        else:  # LINEAR / CONSTANT
            wait_strategy = wait_fixed(retry_config.initial_delay)

        return AsyncRetrying(
            retry=retry_if_exception_type(NetworkError),
            stop=stop_after_attempt(retry_config.max_attempts),
            wait=wait_strategy,
            reraise=True,
        )

    async def _get_json(
        self,
        operation: str,
        path: str,
        params: Any = None,
    ) -> dict[str, Any]:
        """GET a JSON object, mapping every failure to an UpstreamError.

        Args:
            operation: Operation name reported on failure
            path: Path relative to the API root
            params: Query parameters (list of tuples for repeated keys)

        Returns:
            Decoded JSON object

        Raises:
            NetworkError: Transport failure
            UpstreamStatusError: Non-2xx response
            UpstreamShapeError: Body is not a JSON object
        """
        async for attempt in self._build_retrying():
            with attempt:
                return await self._request_json(operation, path, params)
        raise UpstreamError(operation, message="no request attempted")  # pragma: no cover

    async def _request_json(self, operation: str, path: str, params: Any) -> dict[str, Any]:
        client = self._get_client()
        logger.debug(f"{operation}: GET {path} params={params}")

        try:
            response = await client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"{operation}: HTTP {e.response.status_code} from {path}")
            raise UpstreamStatusError(operation, e.response.status_code, cause=e) from e
        except httpx.HTTPError as e:
            logger.error(f"{operation}: request to {path} failed: {e!r}")
            raise NetworkError(operation, cause=e) from e

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamShapeError(operation, cause=e, message="response is not JSON") from e

        if not isinstance(data, dict):
            raise UpstreamShapeError(
                operation, message=f"expected JSON object, got {type(data).__name__}"
            )
        return data

    # =========================================================================
    # SCHEDULE / TEAMS
    # =========================================================================

    async def fetch_schedule(
        self,
        schedule_date: date | str | None = None,
        team_ids: Iterable[int] | None = None,
        sport_ids: Iterable[int] | None = None,
    ) -> dict[str, Any]:
        """Fetch the schedule for every organizational team in one request.

        Args:
            schedule_date: Date to fetch (upstream "today" if None)
            team_ids: Team ids (client defaults if None)
            sport_ids: Sport ids (client defaults if None)

        Returns:
            Raw schedule response (``dates`` buckets of ``games``)
        """
        params: list[tuple[str, Any]] = [
            ("teamId", tid) for tid in (team_ids if team_ids is not None else self.team_ids)
        ]
        params += [("sportId", sid) for sid in (sport_ids if sport_ids is not None else self.sport_ids)]

        if schedule_date:
            if isinstance(schedule_date, date):
                schedule_date = schedule_date.isoformat()
            params.append(("date", schedule_date))
        if self.config.schedule_hydrate:
            params.append(("hydrate", self.config.schedule_hydrate))

        return await self._get_json("fetch_schedule", "/v1/schedule", params)

    async def fetch_teams_metadata(self, ids: Iterable[int]) -> dict[int, Team]:
        """Fetch metadata for a set of teams in one request.

        Args:
            ids: Team ids

        Returns:
            Mapping of team id to Team (ids upstream does not know are absent)
        """
        ids = list(dict.fromkeys(ids))
        if not ids:
            return {}

        data = await self._get_json(
            "fetch_teams_metadata", "/v1/teams", [("teamId", tid) for tid in ids]
        )
        return TeamExtractor.extract_teams(data)

    # =========================================================================
    # LIVE FEED
    # =========================================================================

    async def fetch_game_live(self, game_pk: int) -> dict[str, Any]:
        """Fetch the live feed (boxscore, linescore, plays) of one game."""
        return await self._get_json(
            "fetch_game_live", f"/v1.1/game/{game_pk}/feed/live"
        )

    async def fetch_game_lives(self, game_pks: Iterable[int]) -> dict[int, dict[str, Any] | None]:
        """Fetch live feeds for several games concurrently.

        A failed game maps to None; sibling successes are preserved.

        Args:
            game_pks: Game primary keys (duplicates fetched once)

        Returns:
            Mapping of game_pk to feed or None
        """
        pks = list(dict.fromkeys(game_pks))
        if not pks:
            return {}

        results = await asyncio.gather(
            *(self.fetch_game_live(pk) for pk in pks), return_exceptions=True
        )

        feeds: dict[int, dict[str, Any] | None] = {}
        for pk, result in zip(pks, results):
            if isinstance(result, UpstreamError):
                logger.warning(f"Game {pk}: live feed unavailable: {result}")
                feeds[pk] = None
            elif isinstance(result, BaseException):
                raise result
            else:
                feeds[pk] = result
        return feeds

    # =========================================================================
    # ROSTER / PLAYER STATS
    # =========================================================================

    async def fetch_roster(self, team_id: int, roster_type: str = "active") -> dict[str, Any]:
        return await self._get_json(
            "fetch_roster",
            f"/v1/teams/{team_id}/roster",
            {"rosterType": roster_type},
        )

    async def fetch_player_stats(
        self,
        player_id: int,
        season: int,
        group: StatGroup | str,
    ) -> dict[str, Any]:
        """Fetch one stat group of a player's season statistics."""
        return await self._get_json(
            "fetch_player_stats",
            f"/v1/people/{player_id}/stats",
            {"stats": "season", "season": season, "group": StatGroup(group).value},
        )

    async def fetch_player_game_logs(
        self,
        player_id: int,
        season: int,
        group: StatGroup | str = StatGroup.HITTING,
    ) -> dict[str, Any]:
        """Fetch a player's per-game log for a season."""
        return await self._get_json(
            "fetch_player_game_logs",
            f"/v1/people/{player_id}/stats",
            {"stats": "gameLog", "season": season, "group": StatGroup(group).value},
        )
