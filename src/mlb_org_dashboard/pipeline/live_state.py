"""Live game state extraction from Game.liveGameV1 feeds.

The live feed is deeply nested and frequently partial (minor-league games
in particular often lack linescore defense/offense or play-by-play), so
every field is extracted best-effort:

- Score, inning and outs default to zero/None.
- Baserunners come from the current play's runner movements.
- Current pitcher and batter are resolved through an ordered list of
  extractors, each field taking the first non-empty name:
    1. linescore defense/offense ids → boxscore player table
    2. current play matchup
    3. last completed play matchup
    4. first listed boxscore pitcher/batter
- Decisions (W/L/SV) come from ``liveData.decisions``.

A game whose feed cannot be fetched is "unavailable" (None), never an error.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Sequence

from ..ingestion.client import StatsAPIClient
from .extractors import Game

logger = logging.getLogger(__name__)

UNKNOWN_PLAYER = "unknown"


class Base(str, Enum):
    """Occupiable bases."""

    FIRST = "first"
    SECOND = "second"
    THIRD = "third"


BASES_BY_POSITION: dict[int, Base] = {1: Base.FIRST, 2: Base.SECOND, 3: Base.THIRD}


@dataclass(frozen=True)
class Decisions:
    """Pitchers credited with the win, loss and save."""

    winner: str | None = None
    loser: str | None = None
    save: str | None = None


@dataclass(frozen=True)
class Matchup:
    """Pitcher/batter names found by one extractor (None = not found)."""

    pitcher: str | None = None
    batter: str | None = None


@dataclass(frozen=True)
class LiveState:
    """Presentation-relevant subset of a game's live feed."""

    game_pk: int
    home_runs: int = 0
    away_runs: int = 0
    inning: int | None = None
    inning_half: str | None = None  # Top, Bottom, or upstream inning state
    outs: int = 0
    bases: frozenset[Base] = field(default_factory=frozenset)
    pitcher: str = UNKNOWN_PLAYER
    batter: str = UNKNOWN_PLAYER
    decisions: Decisions = field(default_factory=Decisions)
    abstract_state: str | None = None

    @property
    def bases_occupied(self) -> list[Base]:
        """Occupied bases in base order."""
        return [b for b in Base if b in self.bases]

    @property
    def runners_display(self) -> str:
        if not self.bases:
            return "None"
        labels = {Base.FIRST: "1st", Base.SECOND: "2nd", Base.THIRD: "3rd"}
        return ", ".join(labels[b] for b in self.bases_occupied)

    @property
    def inning_display(self) -> str:
        if self.inning is None:
            return self.inning_half or ""
        return f"{self.inning_half or ''} {self.inning}".strip()


# =============================================================================
# FEED NAVIGATION
# =============================================================================


def _dig(data: Any, *keys: str) -> Any:
    """Walk nested dicts, returning None as soon as a level is missing."""
    current = data
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
        if current is None:
            return None
    return current


def _live_data(feed: Mapping[str, Any]) -> dict[str, Any]:
    live = feed.get("liveData") if isinstance(feed, Mapping) else None
    return live if isinstance(live, dict) else {}


def _full_name(value: Any) -> str | None:
    """Name from a person-like object ({fullName} or {person: {fullName}})."""
    if not isinstance(value, dict):
        return None
    name = value.get("fullName") or _dig(value, "person", "fullName")
    return name or None


def _player_id(value: Any) -> int | None:
    """Player id from a bare id or an object carrying ``id``."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    if isinstance(value, dict):
        return _player_id(value.get("id"))
    return None


def build_player_table(feed: Mapping[str, Any]) -> dict[str, str]:
    """Map ``"ID{player_id}"`` to full name over every boxscore player.

    Reads both ``boxscore.players`` and ``boxscore.teams.{home,away}.players``.
    """
    boxscore = _live_data(feed).get("boxscore") or {}
    sources = [boxscore.get("players")]
    sources += [_dig(boxscore, "teams", side, "players") for side in ("home", "away")]

    table: dict[str, str] = {}
    for players in sources:
        if not isinstance(players, dict):
            continue
        for key, player in players.items():
            name = _full_name(player)
            if name and key not in table:
                table[key] = name
    return table


def _lookup(table: Mapping[str, str], value: Any) -> str | None:
    player_id = _player_id(value)
    if player_id is None:
        return None
    return table.get(f"ID{player_id}")


# =============================================================================
# MATCHUP EXTRACTORS (highest confidence first)
# =============================================================================


def matchup_from_boxscore(feed: Mapping[str, Any]) -> Matchup:
    """Current defense pitcher / offense batter resolved through the boxscore."""
    linescore = _live_data(feed).get("linescore") or {}
    table = build_player_table(feed)
    return Matchup(
        pitcher=_lookup(table, _dig(linescore, "defense", "pitcher")),
        batter=_lookup(table, _dig(linescore, "offense", "batter")),
    )


def matchup_from_current_play(feed: Mapping[str, Any]) -> Matchup:
    matchup = _dig(_live_data(feed), "plays", "currentPlay", "matchup") or {}
    return Matchup(
        pitcher=_full_name(matchup.get("pitcher")),
        batter=_full_name(matchup.get("batter")),
    )


def matchup_from_last_play(feed: Mapping[str, Any]) -> Matchup:
    plays = _dig(_live_data(feed), "plays", "allPlays")
    if not isinstance(plays, list) or not plays:
        return Matchup()
    matchup = _dig(plays[-1], "matchup") or {}
    return Matchup(
        pitcher=_full_name(matchup.get("pitcher")),
        batter=_full_name(matchup.get("batter")),
    )


def matchup_from_boxscore_lists(feed: Mapping[str, Any]) -> Matchup:
    """First pitcher/batter listed for either team (lowest confidence)."""
    teams = _dig(_live_data(feed), "boxscore", "teams") or {}
    table = build_player_table(feed)

    def first_name(list_key: str) -> str | None:
        entries: list[Any] = []
        for side in ("home", "away"):
            listed = _dig(teams, side, list_key)
            if isinstance(listed, list):
                entries.extend(listed)
        for entry in entries:
            name = _full_name(entry) or _lookup(table, entry)
            if name:
                return name
        return None

    return Matchup(pitcher=first_name("pitchers"), batter=first_name("batters"))


MatchupExtractor = Callable[[Mapping[str, Any]], Matchup]

MATCHUP_EXTRACTORS: tuple[MatchupExtractor, ...] = (
    matchup_from_boxscore,
    matchup_from_current_play,
    matchup_from_last_play,
    matchup_from_boxscore_lists,
)


def resolve_matchup(
    feed: Mapping[str, Any],
    extractors: Sequence[MatchupExtractor] = MATCHUP_EXTRACTORS,
) -> Matchup:
    """Resolve pitcher and batter independently, first non-empty wins.

    Args:
        feed: Live feed payload
        extractors: Extractors in priority order

    Returns:
        Matchup with names, or ``UNKNOWN_PLAYER`` where no source had one
    """
    pitcher = batter = None

    for extract in extractors:
        if pitcher and batter:
            break
        found = extract(feed)
        pitcher = pitcher or found.pitcher
        batter = batter or found.batter

    return Matchup(pitcher=pitcher or UNKNOWN_PLAYER, batter=batter or UNKNOWN_PLAYER)


# =============================================================================
# BASERUNNERS / LINESCORE / DECISIONS
# =============================================================================


def extract_bases(feed: Mapping[str, Any]) -> frozenset[Base]:
    """Bases occupied according to the current play's runner movements.

    A runner is on base only when the movement has no start and a non-null
    end; ends 1, 2 and 3 map to first, second and third. Any other end
    encoding is not a runner-on-base signal.
    """
    runners = _dig(_live_data(feed), "plays", "currentPlay", "runners")
    if not isinstance(runners, list):
        return frozenset()

    occupied = set()
    for runner in runners:
        movement = _dig(runner, "movement")
        if not isinstance(movement, dict):
            continue
        end = movement.get("end")
        if movement.get("start") is not None or end is None:
            continue
        if isinstance(end, int) and not isinstance(end, bool) and end in BASES_BY_POSITION:
            occupied.add(BASES_BY_POSITION[end])
    return frozenset(occupied)


def _int_or(value: Any, default: int | None) -> int | None:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return default


def extract_decisions(feed: Mapping[str, Any]) -> Decisions:
    decisions = _live_data(feed).get("decisions") or {}
    return Decisions(
        winner=_full_name(decisions.get("winner")),
        loser=_full_name(decisions.get("loser")),
        save=_full_name(decisions.get("save")),
    )


def extract_live_state(game_pk: int, feed: Mapping[str, Any]) -> LiveState:
    """Extract the presentation subset of a live feed.

    Never raises on missing fields; a feed with no liveData at all yields a
    zero-score state with unknown pitcher and batter.

    Args:
        game_pk: Game primary key
        feed: Raw API response from Game.liveGameV1

    Returns:
        LiveState
    """
    linescore = _live_data(feed).get("linescore") or {}

    is_top = linescore.get("isTopInning")
    if is_top is not None:
        inning_half = "Top" if is_top else "Bottom"
    else:
        inning_half = linescore.get("inningState") or None

    matchup = resolve_matchup(feed)

    return LiveState(
        game_pk=game_pk,
        home_runs=_int_or(_dig(linescore, "teams", "home", "runs"), 0),
        away_runs=_int_or(_dig(linescore, "teams", "away", "runs"), 0),
        inning=_int_or(linescore.get("currentInning"), None),
        inning_half=inning_half,
        outs=_int_or(linescore.get("outs"), 0),
        bases=extract_bases(feed),
        pitcher=matchup.pitcher,
        batter=matchup.batter,
        decisions=extract_decisions(feed),
        abstract_state=_dig(feed, "gameData", "status", "abstractGameState"),
    )


def live_game_pks(games: Iterable[Game]) -> list[int]:
    """Distinct game_pks of in-progress or concluded games."""
    pks = [g.game_pk for g in games if g.is_live or g.is_final]
    return list(dict.fromkeys(pks))


class LiveStateAggregator:
    """Fetches live feeds concurrently and extracts LiveState per game.

    Usage:
        >>> aggregator = LiveStateAggregator(client)
        >>> states = await aggregator.fetch_live_states([745123, 745124])
        >>> states[745123].runners_display
        '1st, 3rd'
    """

    def __init__(self, client: StatsAPIClient | None = None):
        """Initialize the aggregator.

        Args:
            client: StatsAPIClient instance (creates new one if None)
        """
        self.client = client or StatsAPIClient()

    async def fetch_live_state(self, game_pk: int) -> LiveState | None:
        """Fetch and extract one game's live state (None = unavailable)."""
        states = await self.fetch_live_states([game_pk])
        return states.get(game_pk)

    async def fetch_live_states(self, game_pks: Iterable[int]) -> dict[int, LiveState | None]:
        """Fetch live states for several games concurrently.

        Args:
            game_pks: Game primary keys (duplicates fetched once)

        Returns:
            Mapping of game_pk to LiveState, or None where the feed failed
        """
        feeds = await self.client.fetch_game_lives(game_pks)

        states: dict[int, LiveState | None] = {}
        for game_pk, feed in feeds.items():
            states[game_pk] = extract_live_state(game_pk, feed) if feed is not None else None

        unavailable = sum(1 for s in states.values() if s is None)
        logger.info(f"Live states: {len(states) - unavailable} fetched, {unavailable} unavailable")
        return states

    async def fetch_for_games(self, games: Sequence[Game]) -> dict[int, LiveState | None]:
        """Fetch live states for the Live/Final games among ``games``."""
        pks = live_game_pks(games)
        if not pks:
            return {}
        return await self.fetch_live_states(pks)
