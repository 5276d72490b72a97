"""Schedule resolution: one game (or none) per organizational team."""

from typing import Any, Iterable, Mapping, Sequence

from .extractors import Game, ScheduleExtractor


def games_for_date(schedule: Mapping[str, Any]) -> list[Game]:
    """Flatten every date bucket of a schedule response into games."""
    return ScheduleExtractor.extract_games(schedule)


def resolve_games_by_team(
    games: Sequence[Game],
    team_ids: Iterable[int],
) -> dict[int, Game | None]:
    """Map each team id to the first game it plays in.

    Every team id gets a key; teams without a game map to None. Two
    organizational teams playing each other both resolve to the same game.
    A double-header resolves to whichever game upstream lists first.

    Args:
        games: Games for one date, in upstream order
        team_ids: Organizational team ids

    Returns:
        Mapping of team id to Game or None, in team id order
    """
    resolved: dict[int, Game | None] = {}

    for team_id in team_ids:
        resolved[team_id] = next((g for g in games if g.involves(team_id)), None)

    return resolved


def scheduled_games(games_by_team: Mapping[int, Game | None]) -> list[Game]:
    """Distinct games referenced by a resolved schedule, first-seen order."""
    seen: dict[int, Game] = {}
    for game in games_by_team.values():
        if game is not None and game.game_pk not in seen:
            seen[game.game_pk] = game
    return list(seen.values())
