"""Miami Marlins organization dashboard core.

Fetches schedule, live game, roster and player statistics data from the
MLB Stats API and composes it into ordered, display-ready view models.

Architecture:
    Registry (org team ids, level rules)
        ↓
    StatsAPIClient (schedule, teams, live feed, roster, stats)
        ↓
    Extractors → Schedule resolver / Live state / Roster+stats aggregators
        ↓
    DashboardStore (keyed in-memory state)
        ↓
    Composer (schedule entries, leaderboards, player panels)
"""

__version__ = "0.1.0"
