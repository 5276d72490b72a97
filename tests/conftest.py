"""Pytest configuration and fixtures for all tests."""

import copy
from typing import Any, Callable

import httpx
import pytest

from mlb_org_dashboard.config import ClientConfig
from mlb_org_dashboard.ingestion.client import StatsAPIClient

API_PREFIX = "/api"


# ============================================================================
# Fake upstream
# ============================================================================


class FakeStatsAPI:
    """In-memory Stats API served through httpx.MockTransport.

    Routes map a path (without the ``/api`` prefix) to a JSON payload, an
    HTTP status code, or a callable taking the request (plain or async).
    """

    def __init__(self):
        self.routes: dict[str, Any] = {}
        self.requests: list[httpx.Request] = []

    def add(self, path: str, payload: Any = None, status: int = 200) -> None:
        if status != 200:
            self.routes[path] = status
        else:
            self.routes[path] = payload

    def add_handler(self, path: str, handler: Callable[[httpx.Request], Any]) -> None:
        self.routes[path] = handler

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == API_PREFIX + path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix(API_PREFIX)

        if path not in self.routes:
            return httpx.Response(404, json={"message": "Object not found"})

        route = self.routes[path]
        if callable(route):
            return route(request)
        if isinstance(route, int):
            return httpx.Response(route, json={"message": "error"})
        return httpx.Response(200, json=copy.deepcopy(route))

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self, config: ClientConfig | None = None, **kwargs) -> StatsAPIClient:
        return StatsAPIClient(config=config, transport=self.transport(), **kwargs)


@pytest.fixture
def fake_api() -> FakeStatsAPI:
    """Empty fake upstream."""
    return FakeStatsAPI()


# ============================================================================
# Sample Data Fixtures
# ============================================================================


def _team(team_id, name, team_name, league, parent=None, franchise=None, sport_id=1):
    team = {
        "id": team_id,
        "name": name,
        "teamName": team_name,
        "league": {"id": team_id * 10, "name": league},
        "venue": {"name": f"{team_name} Park"},
        "sport": {"id": sport_id},
    }
    if parent:
        team["parentOrgName"] = parent
    if franchise:
        team["franchiseName"] = franchise
    return team


@pytest.fixture
def sample_teams_response() -> dict:
    """Teams metadata for the organization plus two opponents."""
    return {
        "teams": [
            _team(146, "Miami Marlins", "Marlins", "National League"),
            _team(385, "Jacksonville Jumbo Shrimp", "Jumbo Shrimp", "International League", "Miami Marlins", sport_id=11),
            _team(467, "Pensacola Blue Wahoos", "Blue Wahoos", "Southern League", "Miami Marlins", sport_id=12),
            _team(564, "Beloit Sky Carp", "Sky Carp", "Midwest League", "Miami Marlins", sport_id=13),
            _team(554, "Jupiter Hammerheads", "Hammerheads", "Florida State League", "Miami Marlins", sport_id=14),
            _team(619, "FCL Marlins", "FCL Marlins", "Florida Complex League", "Miami Marlins", sport_id=16),
            _team(3276, "DSL Marlins", "DSL Marlins", "Dominican Summer League", "Miami Marlins", sport_id=16),
        ]
    }


@pytest.fixture
def sample_opponents_response() -> dict:
    """Metadata for opponents outside the organization."""
    return {
        "teams": [
            _team(121, "New York Mets", "Mets", "National League"),
            _team(234, "Durham Bulls", "Bulls", "International League", "Tampa Bay Rays", sport_id=11),
        ]
    }


def _game(game_pk, home_id, home_name, away_id, away_name, state, detailed=None, home_pp=None, away_pp=None):
    home = {"team": {"id": home_id, "name": home_name}}
    away = {"team": {"id": away_id, "name": away_name}}
    if home_pp:
        home["probablePitcher"] = {"id": 1, "fullName": home_pp}
    if away_pp:
        away["probablePitcher"] = {"id": 2, "fullName": away_pp}
    return {
        "gamePk": game_pk,
        "gameDate": "2024-07-04T23:10:00Z",
        "officialDate": "2024-07-04",
        "status": {"abstractGameState": state, "detailedState": detailed or state},
        "teams": {"home": home, "away": away},
        "venue": {"name": "loanDepot park"},
    }


@pytest.fixture
def sample_schedule_response() -> dict:
    """One date: Marlins home Preview vs Mets, Jumbo Shrimp live at Durham,
    Blue Wahoos final."""
    return {
        "totalGames": 3,
        "dates": [
            {
                "date": "2024-07-04",
                "games": [
                    _game(745001, 146, "Miami Marlins", 121, "New York Mets", "Preview",
                          "Scheduled", home_pp="John Doe", away_pp="Jane Roe"),
                    _game(745002, 234, "Durham Bulls", 385, "Jacksonville Jumbo Shrimp", "Live",
                          "In Progress"),
                    _game(745003, 467, "Pensacola Blue Wahoos", 999, "Biloxi Shuckers", "Final"),
                ],
            }
        ],
    }


@pytest.fixture
def single_game_schedule_response() -> dict:
    """One date with only the Marlins home Preview game."""
    return {
        "dates": [
            {
                "date": "2024-07-04",
                "games": [
                    _game(745001, 146, "Miami Marlins", 121, "New York Mets", "Preview",
                          "Scheduled", home_pp="John Doe"),
                ],
            }
        ]
    }


@pytest.fixture
def sample_live_feed() -> dict:
    """Live feed with every matchup source populated."""
    return {
        "gamePk": 745002,
        "gameData": {"status": {"abstractGameState": "Live", "detailedState": "In Progress"}},
        "liveData": {
            "linescore": {
                "currentInning": 7,
                "isTopInning": True,
                "inningState": "Top",
                "outs": 2,
                "teams": {"home": {"runs": 3}, "away": {"runs": 5}},
                "defense": {"pitcher": {"id": 501, "fullName": "Defense Pitcher"}},
                "offense": {"batter": {"id": 601, "fullName": "Offense Batter"}},
            },
            "boxscore": {
                "teams": {
                    "home": {
                        "players": {"ID501": {"person": {"id": 501, "fullName": "Box Pitcher"}}},
                        "pitchers": [501],
                        "batters": [],
                    },
                    "away": {
                        "players": {"ID601": {"person": {"id": 601, "fullName": "Box Batter"}}},
                        "pitchers": [],
                        "batters": [601],
                    },
                }
            },
            "plays": {
                "currentPlay": {
                    "matchup": {
                        "pitcher": {"id": 502, "fullName": "Current Pitcher"},
                        "batter": {"id": 602, "fullName": "Current Batter"},
                    },
                    "runners": [
                        {"movement": {"start": None, "end": 1}},
                        {"movement": {"start": None, "end": None}},
                        {"movement": {"start": None, "end": 3}},
                    ],
                },
                "allPlays": [
                    {
                        "matchup": {
                            "pitcher": {"id": 503, "fullName": "Last Pitcher"},
                            "batter": {"id": 603, "fullName": "Last Batter"},
                        }
                    }
                ],
            },
            "decisions": {},
        },
    }


@pytest.fixture
def sample_final_feed() -> dict:
    """Live feed of a concluded game with decisions."""
    return {
        "gameData": {"status": {"abstractGameState": "Final"}},
        "liveData": {
            "linescore": {"currentInning": 9, "isTopInning": False, "outs": 3,
                          "teams": {"home": {"runs": 4}, "away": {"runs": 2}}},
            "decisions": {
                "winner": {"id": 1, "fullName": "Winning Pitcher"},
                "loser": {"id": 2, "fullName": "Losing Pitcher"},
                "save": {"id": 3, "fullName": "Closing Pitcher"},
            },
        },
    }


@pytest.fixture
def sample_roster_response() -> dict:
    """Active roster with three hitters and two pitchers."""

    def entry(pid, name, abbr, pos_name):
        return {
            "person": {"id": pid, "fullName": name},
            "position": {"abbreviation": abbr, "name": pos_name},
            "parentTeamId": 146,
        }

    return {
        "roster": [
            entry(1001, "Alpha Hitter", "SS", "Shortstop"),
            entry(1002, "Bravo Hitter", "CF", "Outfielder"),
            entry(1003, "Charlie Hitter", "1B", "First Base"),
            entry(2001, "Delta Pitcher", "P", "Pitcher"),
            entry(2002, "Echo Pitcher", "P", "Pitcher"),
        ]
    }


def season_stats_response(stat: dict | None) -> dict:
    """Person.stats (stats=season) payload wrapping one stat object."""
    if stat is None:
        return {"stats": []}
    return {"stats": [{"type": {"displayName": "season"}, "splits": [{"season": "2024", "stat": stat}]}]}


@pytest.fixture
def make_season_stats() -> Callable[[dict | None], dict]:
    return season_stats_response


@pytest.fixture
def sample_game_log_response() -> dict:
    """Game log in upstream (chronological) order."""

    def split(day, pk, opp_id, opp_name, is_home, hits):
        return {
            "date": f"2024-06-{day:02d}",
            "game": {"gamePk": pk},
            "opponent": {"id": opp_id, "name": opp_name},
            "isHome": is_home,
            "stat": {
                "atBats": 4, "hits": hits, "homeRuns": 0, "rbi": 1,
                "baseOnBalls": 1, "strikeOuts": 2, "avg": ".275",
            },
        }

    return {
        "stats": [
            {
                "type": {"displayName": "gameLog"},
                "splits": [split(day, 700000 + day, 121, "New York Mets", day % 2 == 0, day % 3)
                           for day in range(1, 13)],
            }
        ]
    }
