"""Organizational team registry and league level classification.

The organization is fixed: one MLB club plus its minor-league affiliates.
League levels are derived from the free-text league name returned by the
teams endpoint, so classification is a substring match against a
priority-ordered keyword table.
"""

from enum import Enum

# Miami Marlins organization, in registry (display tie-break) order
ORG_TEAM_IDS: tuple[int, ...] = (
    146,  # Miami Marlins (MLB)
    385,  # Jacksonville Jumbo Shrimp (AAA)
    467,  # Pensacola Blue Wahoos (AA)
    564,  # Beloit Sky Carp (High-A)
    554,  # Jupiter Hammerheads (A)
    619,  # FCL Marlins (Rookie)
    3276,  # DSL Marlins (Rookie)
    4124,  # DSL Marlins Bautista (Rookie)
    3277,  # DSL Marlins San Pedro (Rookie)
    479,  # DSL Marlins (Rookie)
    2127,  # DSL Marlins (Rookie)
)

# Sport ids covering every level an affiliate can play at
SPORT_IDS: tuple[int, ...] = (1, 21, 16, 11, 13, 12, 14)

UNRECOGNIZED_RANK = 99


class Level(str, Enum):
    """Organizational level of a team."""

    MLB = "MLB"
    AAA = "AAA"
    AA = "AA"
    HIGH_A = "High-A"
    A = "A"
    FCL = "FCL"
    DSL = "DSL"
    UNKNOWN = "Unknown"


# First match wins, so MLB keywords are checked before any affiliate synonym
LEVEL_KEYWORDS: tuple[tuple[str, Level], ...] = (
    ("Major League", Level.MLB),
    ("National League", Level.MLB),
    ("American League", Level.MLB),
    ("Triple-A", Level.AAA),
    ("International League", Level.AAA),
    ("Pacific Coast League", Level.AAA),
    ("Double-A", Level.AA),
    ("Southern League", Level.AA),
    ("Eastern League", Level.AA),
    ("Texas League", Level.AA),
    ("High-A", Level.HIGH_A),
    ("Midwest League", Level.HIGH_A),
    ("South Atlantic League", Level.HIGH_A),
    ("Northwest League", Level.HIGH_A),
    ("Single-A", Level.A),
    ("Florida State League", Level.A),
    ("Carolina League", Level.A),
    ("Florida Complex", Level.FCL),
    ("Dominican Summer", Level.DSL),
)

LEVEL_RANKS: dict[Level, int] = {
    Level.MLB: 0,
    Level.AAA: 1,
    Level.AA: 2,
    Level.HIGH_A: 3,
    Level.A: 4,
    Level.FCL: 5,
    Level.DSL: 6,
    Level.UNKNOWN: UNRECOGNIZED_RANK,
}


def list_org_team_ids() -> tuple[int, ...]:
    """Organizational team ids in registry order."""
    return ORG_TEAM_IDS


def list_sport_ids() -> tuple[int, ...]:
    """Sport ids to request alongside the team ids."""
    return SPORT_IDS


def classify_level(league_name: str | None) -> Level:
    """Classify a league name into an organizational level.

    Never raises: ``None``, empty and unrecognized names all yield
    ``Level.UNKNOWN``.

    Args:
        league_name: Free-text league name from the teams endpoint

    Returns:
        Matching Level
    """
    if not league_name or not isinstance(league_name, str):
        return Level.UNKNOWN

    for keyword, level in LEVEL_KEYWORDS:
        if keyword in league_name:
            return level

    return Level.UNKNOWN


def level_label(league_name: str | None) -> str:
    """Short level label, or the league name itself when unrecognized."""
    level = classify_level(league_name)
    if level is Level.UNKNOWN:
        return league_name or ""
    return level.value


def league_rank(league_name: str | None) -> int:
    """Sort rank of a league: MLB first, unrecognized last."""
    return LEVEL_RANKS[classify_level(league_name)]


def is_major_league(league_name: str | None) -> bool:
    return classify_level(league_name) is Level.MLB
