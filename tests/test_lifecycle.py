"""Tests for league status transitions and scheduled pod completion."""

from datetime import date

import pytest

from podleague.core.lifecycle import (
    ALLOWED_TRANSITIONS,
    LifecycleError,
    check_league_transition,
    complete_scheduled_pod,
    is_league_complete,
    transition_league,
)
from podleague.db.repository import Repository
from podleague.models.league import LeagueStatus, ScheduledPod, ScheduledPodStatus

START = date(2026, 3, 1)


def _pod(pod_id: str = "sp-1", completed: str | None = None) -> ScheduledPod:
    return ScheduledPod(
        id=pod_id, league_id="L1", player_ids=["a", "b", "c", "d"], completed_pod_id=completed
    )


class TestLeagueTransitions:
    def test_all_statuses_have_transitions(self):
        assert set(ALLOWED_TRANSITIONS) == set(LeagueStatus)

    def test_draft_to_active(self):
        assert check_league_transition("draft", LeagueStatus.ACTIVE) is LeagueStatus.ACTIVE

    def test_active_to_completed(self):
        assert check_league_transition("active", "completed") is LeagueStatus.COMPLETED

    @pytest.mark.parametrize(
        ("current", "target"),
        [
            ("draft", "completed"),
            ("draft", "draft"),
            ("active", "draft"),
            ("active", "active"),
            ("completed", "active"),
            ("completed", "draft"),
        ],
    )
    def test_invalid_transitions(self, current: str, target: str):
        with pytest.raises(LifecycleError, match="Invalid league transition"):
            check_league_transition(current, target)

    def test_unknown_status(self):
        with pytest.raises(LifecycleError):
            check_league_transition("archived", "active")

    def test_lifecycle_error_is_value_error(self):
        assert issubclass(LifecycleError, ValueError)


class TestScheduledPodCompletion:
    def test_pending_by_default(self):
        assert _pod().status is ScheduledPodStatus.PENDING

    def test_complete_sets_game(self):
        pod = _pod()
        done = complete_scheduled_pod(pod, "game-1")
        assert done.completed_pod_id == "game-1"
        assert done.status is ScheduledPodStatus.COMPLETED
        assert pod.completed_pod_id is None

    def test_completion_is_terminal(self):
        done = complete_scheduled_pod(_pod(), "game-1")
        with pytest.raises(LifecycleError, match="already completed"):
            complete_scheduled_pod(done, "game-2")
        assert done.completed_pod_id == "game-1"


class TestIsLeagueComplete:
    def test_all_completed(self):
        assert is_league_complete([_pod("1", "g1"), _pod("2", "g2")]) is True

    def test_some_pending(self):
        assert is_league_complete([_pod("1", "g1"), _pod("2")]) is False

    def test_no_schedule(self):
        assert is_league_complete([]) is False


class TestTransitionLeague:
    async def test_persists_status(self, repo: Repository, make_players):
        players = await make_players(4)
        league = await repo.create_league("L", players, 1, start_date=START)
        result = await transition_league(repo, league.id, LeagueStatus.ACTIVE)
        assert result is LeagueStatus.ACTIVE
        stored = await repo.get_league(league.id)
        assert stored.status == "active"

    async def test_invalid_transition_does_not_persist(self, repo: Repository, make_players):
        players = await make_players(4)
        league = await repo.create_league("L", players, 1, start_date=START)
        with pytest.raises(LifecycleError):
            await transition_league(repo, league.id, LeagueStatus.COMPLETED)
        stored = await repo.get_league(league.id)
        assert stored.status == "draft"

    async def test_missing_league(self, repo: Repository):
        with pytest.raises(ValueError, match="not found"):
            await transition_league(repo, "nope", LeagueStatus.ACTIVE)
