"""Tests for league generation and game-report fulfillment."""

from collections import Counter
from datetime import date

import pytest

from podleague.core.league import LeagueGenerationError, generate_league, store_legacy_schedule
from podleague.core.lifecycle import transition_league
from podleague.core.reporting import on_game_reported
from podleague.db.repository import Repository
from podleague.models.league import CreateLeagueRequest, LeagueStatus

START = date(2026, 1, 5)


def _request(player_ids: list[str], games: int = 2, **overrides) -> CreateLeagueRequest:
    data = {
        "name": "Commander Night",
        "player_ids": player_ids,
        "start_date": START,
        "games_per_player": games,
    }
    data.update(overrides)
    return CreateLeagueRequest(**data)


async def _report(repo: Repository, player_ids, league_id: str | None = None):
    """Store a game for *player_ids* and run fulfillment. Returns (game, scheduled_pod)."""
    game = await repo.create_game(
        [{"player_id": pid, "result": "lose", "commander_deck": ""} for pid in player_ids]
    )
    matched = await on_game_reported(repo, player_ids, game.id, league_id)
    return game, matched


class TestGenerateLeague:
    async def test_eight_players_two_games(self, repo: Repository, make_players):
        ids = await make_players(8)
        result = await generate_league(repo, _request(ids, 2))

        assert result.league.status is LeagueStatus.ACTIVE
        assert result.league.player_ids == ids
        assert result.stats.total_players == 8
        assert result.stats.total_pods == 4
        assert result.stats.games_per_player == 2
        assert len(result.scheduled_pods) == 4

        counts = Counter(pid for pod in result.scheduled_pods for pid in pod.player_ids)
        assert set(counts.values()) == {2}
        assert all(pod.completed_pod_id is None for pod in result.scheduled_pods)
        assert all(pod.league_id == result.league.id for pod in result.scheduled_pods)

    async def test_draft_when_not_published(self, repo: Repository, make_players):
        ids = await make_players(4)
        result = await generate_league(repo, _request(ids, 1), publish=False)
        assert result.league.status is LeagueStatus.DRAFT
        stored = await repo.get_league(result.league.id)
        assert stored.status == "draft"

    async def test_persists_scheduled_pods(self, repo: Repository, make_players):
        ids = await make_players(6)
        result = await generate_league(repo, _request(ids, 2))
        stored = await repo.list_scheduled_pods(result.league.id)
        assert [p.id for p in stored] == [p.id for p in result.scheduled_pods]

    async def test_three_player_mode(self, repo: Repository, make_players):
        ids = await make_players(5)
        result = await generate_league(repo, _request(ids, 3), pod_size=3)
        assert result.stats.total_pods == 5
        assert all(len(p.player_ids) == 3 for p in result.scheduled_pods)

    async def test_invalid_request_raises_with_errors(self, repo: Repository, make_players):
        ids = await make_players(5)
        with pytest.raises(LeagueGenerationError) as exc_info:
            await generate_league(repo, _request(ids, 1))
        assert exc_info.value.errors[0].field == "games_per_player"
        assert "5 total slots" in exc_info.value.errors[0].message
        assert await repo.list_leagues() == []

    async def test_unknown_players_rejected(self, repo: Repository, make_players):
        ids = await make_players(3)
        with pytest.raises(LeagueGenerationError, match="Unknown players"):
            await generate_league(repo, _request([*ids, "ghost"], 1))
        assert await repo.list_leagues() == []


class TestLegacySchedule:
    async def test_every_combination_scheduled(self, repo: Repository, make_players):
        ids = await make_players(5)
        league = await repo.create_league("Legacy", ids, 4, START)
        pods = await store_legacy_schedule(repo, league.id)
        assert len(pods) == 5
        assert len({p.player_set for p in pods}) == 5

    async def test_refuses_existing_schedule(self, repo: Repository, make_players):
        ids = await make_players(4)
        league = await repo.create_league("Legacy", ids, 1, START)
        await store_legacy_schedule(repo, league.id)
        with pytest.raises(ValueError, match="already has scheduled pods"):
            await store_legacy_schedule(repo, league.id)

    async def test_missing_league(self, repo: Repository):
        with pytest.raises(ValueError, match="not found"):
            await store_legacy_schedule(repo, "nope")


class TestOnGameReported:
    async def test_match_marks_completed(self, repo: Repository, make_players):
        ids = await make_players(8)
        result = await generate_league(repo, _request(ids, 2))
        target = result.scheduled_pods[0]

        game, matched = await _report(repo, list(reversed(target.player_ids)))
        assert matched is not None
        assert matched.id == target.id
        assert matched.completed_pod_id == game.id

        stored = await repo.get_scheduled_pod(target.id)
        assert stored.completed_pod_id == game.id

    async def test_casual_game_unmatched(self, repo: Repository, make_players):
        ids = await make_players(8)
        result = await generate_league(repo, _request(ids, 2))
        _, matched = await _report(repo, result.scheduled_pods[0].player_ids[:3])
        assert matched is None
        assert await repo.count_incomplete_scheduled_pods(result.league.id) == 4

    async def test_completed_pod_not_matched_again(self, repo: Repository, make_players):
        ids = await make_players(8)
        result = await generate_league(repo, _request(ids, 2))
        players = result.scheduled_pods[0].player_ids
        first_game, _ = await _report(repo, players)
        _, matched = await _report(repo, players)
        assert matched is None
        stored = await repo.get_scheduled_pod(result.scheduled_pods[0].id)
        assert stored.completed_pod_id == first_game.id

    async def test_draft_league_never_matches(self, repo: Repository, make_players):
        ids = await make_players(4)
        result = await generate_league(repo, _request(ids, 1), publish=False)

        _, matched = await _report(repo, ids)
        assert matched is None
        _, matched = await _report(repo, ids, league_id=result.league.id)
        assert matched is None

        assert await repo.count_incomplete_scheduled_pods(result.league.id) == 1
        assert (await repo.get_league(result.league.id)).status == "draft"

    async def test_completed_league_never_matches(self, repo: Repository, make_players):
        ids = await make_players(8)
        result = await generate_league(repo, _request(ids, 1))
        await transition_league(repo, result.league.id, LeagueStatus.COMPLETED)
        first = result.scheduled_pods[0]

        _, matched = await _report(repo, first.player_ids, league_id=result.league.id)
        assert matched is None
        _, matched = await _report(repo, first.player_ids)
        assert matched is None

        stored = await repo.get_scheduled_pod(first.id)
        assert stored.completed_pod_id is None
        assert await repo.count_incomplete_scheduled_pods(result.league.id) == 2

    async def test_published_draft_starts_matching(self, repo: Repository, make_players):
        ids = await make_players(4)
        result = await generate_league(repo, _request(ids, 1), publish=False)
        await transition_league(repo, result.league.id, LeagueStatus.ACTIVE)

        game, matched = await _report(repo, ids, league_id=result.league.id)
        assert matched.completed_pod_id == game.id
        assert (await repo.get_league(result.league.id)).status == "completed"

    async def test_league_scope_excludes_other_leagues(self, repo: Repository, make_players):
        ids = await make_players(4)
        first = await generate_league(repo, _request(ids, 1))
        second = await generate_league(repo, _request(ids, 1, name="Second"))

        _, matched = await _report(repo, ids, league_id=second.league.id)
        assert matched.league_id == second.league.id
        assert await repo.count_incomplete_scheduled_pods(first.league.id) == 1

    async def test_league_completes_when_schedule_done(self, repo: Repository, make_players):
        ids = await make_players(8)
        result = await generate_league(repo, _request(ids, 1))
        first, second = result.scheduled_pods

        await _report(repo, first.player_ids)
        assert (await repo.get_league(result.league.id)).status == "active"

        await _report(repo, second.player_ids)
        assert (await repo.get_league(result.league.id)).status == "completed"
