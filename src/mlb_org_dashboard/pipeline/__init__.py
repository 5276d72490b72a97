"""Data synthesis pipeline for the organization dashboard.

Key Components:
- Extractors: raw JSON → Team, Game, RosterEntry, stat lines
- Schedule resolver: team id → game-or-absent for a date
- LiveStateAggregator: concurrent live feed fetch + LiveState extraction
- RosterStatAggregator: rosters, merged season stats, game logs

Flow:
    Schedule.schedule(date, teamIds, sportIds) → games[]
        ↓
    resolve_games_by_team(games, org team ids) → {team_id: Game | None}
        ↓
    Game.liveGameV1(game_pk) for Live/Final games (concurrent) → LiveState

Aggregators: ``pipeline.live_state`` and ``pipeline.stats`` (import directly).
"""

from mlb_org_dashboard.pipeline.extractors import (
    Game,
    GameLogLine,
    PlayerStatLine,
    RosterEntry,
    RosterExtractor,
    ScheduleExtractor,
    StatGroup,
    StatsExtractor,
    Team,
    TeamExtractor,
    TeamRef,
)
from mlb_org_dashboard.pipeline.schedule import (
    games_for_date,
    resolve_games_by_team,
    scheduled_games,
)

__all__ = [
    "Game",
    "GameLogLine",
    "PlayerStatLine",
    "RosterEntry",
    "RosterExtractor",
    "ScheduleExtractor",
    "StatGroup",
    "StatsExtractor",
    "Team",
    "TeamExtractor",
    "TeamRef",
    "games_for_date",
    "resolve_games_by_team",
    "scheduled_games",
]
