"""Unit tests for pipeline extractors."""

from datetime import date

from mlb_org_dashboard.pipeline.extractors import (
    Game,
    PlayerStatLine,
    RosterExtractor,
    ScheduleExtractor,
    StatGroup,
    StatsExtractor,
    TeamExtractor,
    TeamRef,
)


class TestTeamExtractor:
    """Test TeamExtractor."""

    def test_extract_teams(self, sample_teams_response):
        """Test teams are keyed by id with league and parent fields."""
        teams = TeamExtractor.extract_teams(sample_teams_response)

        assert len(teams) == 7
        shrimp = teams[385]
        assert shrimp.name == "Jacksonville Jumbo Shrimp"
        assert shrimp.team_name == "Jumbo Shrimp"
        assert shrimp.league_name == "International League"
        assert shrimp.parent_org_name == "Miami Marlins"
        assert shrimp.venue_name == "Jumbo Shrimp Park"
        assert shrimp.sport_id == 11

    def test_missing_optional_fields(self):
        """Test absent fields default instead of raising."""
        teams = TeamExtractor.extract_teams({"teams": [{"id": 1}]})

        assert teams[1].name == ""
        assert teams[1].league_name == ""
        assert teams[1].parent_org_name is None

    def test_entries_without_id_skipped(self):
        """Test malformed entries are ignored."""
        assert TeamExtractor.extract_teams({"teams": [{"name": "Nobody"}, None]}) == {}

    def test_empty_response(self):
        """Test a response without teams."""
        assert TeamExtractor.extract_teams({}) == {}


class TestScheduleExtractor:
    """Test ScheduleExtractor."""

    def test_extract_games(self, sample_schedule_response):
        """Test games are extracted in response order."""
        games = ScheduleExtractor.extract_games(sample_schedule_response)

        assert [g.game_pk for g in games] == [745001, 745002, 745003]
        preview = games[0]
        assert preview.home == TeamRef(146, "Miami Marlins")
        assert preview.away == TeamRef(121, "New York Mets")
        assert preview.official_date == date(2024, 7, 4)
        assert preview.abstract_state == "Preview"
        assert preview.detailed_state == "Scheduled"
        assert preview.home_probable_pitcher == "John Doe"
        assert preview.away_probable_pitcher == "Jane Roe"
        assert preview.venue_name == "loanDepot park"

    def test_game_without_probables(self, sample_schedule_response):
        """Test probable pitchers are optional."""
        game = ScheduleExtractor.extract_games(sample_schedule_response)[1]

        assert game.home_probable_pitcher is None
        assert game.away_probable_pitcher is None

    def test_all_date_buckets_flattened(self):
        """Test games from every bucket are returned."""
        data = {
            "dates": [
                {"date": "2024-07-04", "games": [{"gamePk": 1}]},
                {"date": "2024-07-05", "games": [{"gamePk": 2}, {"noPk": True}]},
            ]
        }

        games = ScheduleExtractor.extract_games(data)

        assert [g.game_pk for g in games] == [1, 2]
        assert games[1].official_date == date(2024, 7, 5)

    def test_get_game_pks(self, sample_schedule_response):
        """Test game_pk listing."""
        assert ScheduleExtractor.get_game_pks(sample_schedule_response) == [745001, 745002, 745003]

    def test_empty_schedule(self):
        """Test a date without games."""
        assert ScheduleExtractor.extract_games({"dates": []}) == []
        assert ScheduleExtractor.extract_games({}) == []


class TestGame:
    """Test Game helpers."""

    def _game(self, state="Preview"):
        return Game(
            game_pk=1,
            home=TeamRef(146, "Miami Marlins"),
            away=TeamRef(121, "New York Mets"),
            abstract_state=state,
            home_probable_pitcher="Home Starter",
            away_probable_pitcher="Away Starter",
        )

    def test_involves(self):
        """Test both sides are involved."""
        game = self._game()

        assert game.involves(146)
        assert game.involves(121)
        assert not game.involves(385)

    def test_opponent_and_probable(self):
        """Test perspective helpers."""
        game = self._game()

        assert game.opponent_of(146).name == "New York Mets"
        assert game.opponent_of(121).name == "Miami Marlins"
        assert game.probable_pitcher_for(146) == "Home Starter"
        assert game.probable_pitcher_for(121) == "Away Starter"

    def test_state_flags(self):
        """Test abstract state helpers."""
        assert self._game("Live").is_live
        assert self._game("Preview").is_preview
        assert self._game("Final").is_final
        assert not self._game("Suspended").is_live


class TestRosterExtractor:
    """Test RosterExtractor."""

    def test_extract_roster(self, sample_roster_response):
        """Test roster order and fields."""
        roster = RosterExtractor.extract_roster(sample_roster_response, team_id=146)

        assert [e.player_id for e in roster] == [1001, 1002, 1003, 2001, 2002]
        assert roster[0].full_name == "Alpha Hitter"
        assert roster[0].position == "SS"
        assert roster[0].position_name == "Shortstop"
        assert all(e.team_id == 146 for e in roster)

    def test_entries_without_person_skipped(self):
        """Test entries without a player id are ignored."""
        data = {"roster": [{"person": {}}, {"person": {"id": 5, "fullName": "Five"}}]}

        roster = RosterExtractor.extract_roster(data)

        assert [e.player_id for e in roster] == [5]


class TestStatsExtractor:
    """Test StatsExtractor."""

    def test_season_stats(self, make_season_stats):
        """Test the first split's stat object is returned."""
        data = make_season_stats({"homeRuns": 12, "avg": ".285"})

        assert StatsExtractor.extract_season_stats(data) == {"homeRuns": 12, "avg": ".285"}

    def test_season_stats_empty(self, make_season_stats):
        """Test no data yields an empty mapping, not None."""
        assert StatsExtractor.extract_season_stats(make_season_stats(None)) == {}
        assert StatsExtractor.extract_season_stats({"stats": [{"splits": []}]}) == {}

    def test_game_logs_most_recent_first(self, sample_game_log_response):
        """Test game logs are newest first and capped."""
        lines = StatsExtractor.extract_game_logs(sample_game_log_response, limit=10)

        assert len(lines) == 10
        assert lines[0].date == date(2024, 6, 12)
        assert lines[-1].date == date(2024, 6, 3)
        assert lines[0].opponent_name == "New York Mets"
        assert lines[0].is_home is True
        assert lines[0].game_pk == 700012

    def test_game_logs_undated_last(self):
        """Test splits without a date sort after dated ones."""
        data = {
            "stats": [
                {
                    "splits": [
                        {"stat": {"hits": 0}},
                        {"date": "2024-06-01", "stat": {"hits": 1}},
                        {"date": "2024-06-02", "stat": {"hits": 2}},
                    ]
                }
            ]
        }

        lines = StatsExtractor.extract_game_logs(data)

        assert [line.stats["hits"] for line in lines] == [2, 1, 0]


class TestPlayerStatLine:
    """Test PlayerStatLine."""

    def test_key(self):
        """Test the cache key."""
        line = PlayerStatLine(1, 2024, StatGroup.HITTING, {"hits": 1})

        assert line.key == (1, 2024, StatGroup.HITTING)
        assert line.has_stats

    def test_empty(self):
        """Test a line without stats."""
        assert not PlayerStatLine(1, 2024, StatGroup.PITCHING).has_stats
