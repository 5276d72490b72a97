"""Display records composed from pipeline output."""

from mlb_org_dashboard.views.composer import (
    HITTING_STATS,
    NO_GAME,
    PITCHING_STATS,
    TBD,
    LeaderboardRow,
    PlayerPanel,
    ScheduleEntry,
    build_leaderboard,
    build_player_panel,
    compose_schedule,
    opponent_qualifier,
    search_players,
)
from mlb_org_dashboard.views.formatters import (
    PLACEHOLDER,
    format_local_time,
    format_stat_value,
    today_eastern,
)

__all__ = [
    "HITTING_STATS",
    "NO_GAME",
    "PITCHING_STATS",
    "PLACEHOLDER",
    "TBD",
    "LeaderboardRow",
    "PlayerPanel",
    "ScheduleEntry",
    "build_leaderboard",
    "build_player_panel",
    "compose_schedule",
    "format_local_time",
    "format_stat_value",
    "opponent_qualifier",
    "search_players",
    "today_eastern",
]
