"""Tests for league configuration validation and games-per-player suggestions."""

from datetime import date

import pytest

from podleague.core.validation import (
    get_suggested_games_per_player,
    validate_league_inputs,
    validate_league_request,
)
from podleague.models.league import CreateLeagueRequest


class TestValidateLeagueInputs:
    def test_five_players_one_game(self):
        result = validate_league_inputs(5, 1)
        assert result.is_valid is False
        assert result.error == "5 players × 1 games = 5 total slots. Need a multiple of 4."

    def test_eight_players_two_games(self):
        result = validate_league_inputs(8, 2)
        assert result.is_valid is True
        assert result.error is None

    def test_too_few_players(self):
        result = validate_league_inputs(2, 2)
        assert result.is_valid is False
        assert result.error == "Need at least 4 players for a league"

    def test_roster_checked_before_games(self):
        result = validate_league_inputs(3, 0)
        assert result.error == "Need at least 4 players for a league"

    @pytest.mark.parametrize("games", [0, -1])
    def test_games_per_player_must_be_positive(self, games: int):
        result = validate_league_inputs(8, games)
        assert result.is_valid is False
        assert result.error == "Games per player must be at least 1"

    def test_divisibility_invariant(self):
        """For every roster >= 4 and games >= 1: valid iff slots divide by 4."""
        for players in range(4, 41):
            for games in range(1, 21):
                result = validate_league_inputs(players, games)
                assert result.is_valid == ((players * games) % 4 == 0), (players, games)

    def test_three_player_pods(self):
        assert validate_league_inputs(5, 3, pod_size=3).is_valid
        result = validate_league_inputs(5, 1, pod_size=3)
        assert result.error == "5 players × 1 games = 5 total slots. Need a multiple of 3."


class TestSuggestedGamesPerPlayer:
    def test_too_few_players_gets_nothing(self):
        assert get_suggested_games_per_player(3) == []

    def test_multiple_of_four_roster_any_games(self):
        assert get_suggested_games_per_player(8) == list(range(1, 11))

    def test_odd_roster(self):
        assert get_suggested_games_per_player(5) == [4, 8, 12, 16, 20]

    def test_even_non_multiple(self):
        assert get_suggested_games_per_player(6) == [2, 4, 6, 8, 10, 12, 14, 16, 18, 20]

    def test_soundness(self):
        for players in range(4, 41):
            suggestions = get_suggested_games_per_player(players)
            assert suggestions, players
            assert suggestions == sorted(suggestions)
            for games in suggestions:
                assert validate_league_inputs(players, games).is_valid

    def test_bounds(self):
        assert get_suggested_games_per_player(8, max_games=5, limit=3) == [1, 2, 3]
        assert get_suggested_games_per_player(7, max_games=10) == [4, 8]

    def test_deterministic(self):
        assert get_suggested_games_per_player(10) == get_suggested_games_per_player(10)


def _request(**overrides) -> CreateLeagueRequest:
    data = {
        "name": "Winter League",
        "player_ids": ["a", "b", "c", "d", "e", "f", "g", "h"],
        "start_date": date(2026, 1, 5),
        "games_per_player": 2,
    }
    data.update(overrides)
    return CreateLeagueRequest(**data)


class TestValidateLeagueRequest:
    def test_valid_request(self):
        assert validate_league_request(_request()) == []

    def test_blank_name(self):
        errors = validate_league_request(_request(name="   "))
        assert [(e.field, e.message) for e in errors] == [("name", "League name is required")]

    def test_long_name(self):
        errors = validate_league_request(_request(name="x" * 101))
        assert errors[0].field == "name"

    def test_duplicate_players(self):
        errors = validate_league_request(_request(player_ids=["a", "b", "c", "d", "a", "e", "f", "g"]))
        assert [e.message for e in errors] == ["Player IDs must be unique"]

    def test_too_few_players_skips_slot_check(self):
        errors = validate_league_request(_request(player_ids=["a", "b", "c"], games_per_player=1))
        assert [e.field for e in errors] == ["player_ids"]

    def test_slot_error(self):
        errors = validate_league_request(
            _request(player_ids=["a", "b", "c", "d", "e"], games_per_player=1)
        )
        assert len(errors) == 1
        assert errors[0].field == "games_per_player"
        assert "5 total slots" in errors[0].message

    def test_end_before_start(self):
        errors = validate_league_request(_request(end_date=date(2026, 1, 1)))
        assert [e.field for e in errors] == ["end_date"]

    def test_collects_every_problem(self):
        errors = validate_league_request(
            _request(name="", player_ids=["a"], games_per_player=0, end_date=date(2025, 1, 1))
        )
        assert {e.field for e in errors} == {"name", "player_ids", "games_per_player", "end_date"}
