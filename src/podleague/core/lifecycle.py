"""League and scheduled-pod lifecycle.

League lifecycle:
    DRAFT --(publish)--> ACTIVE --(every pod played, or admin)--> COMPLETED

Scheduled pod lifecycle:
    PENDING (completed_pod_id is None) --(matching game reported)--> COMPLETED

Both machines are forward-only. A completed scheduled pod is never reopened
or relinked to a different game.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from podleague.models.league import LeagueStatus, ScheduledPod, ScheduledPodStatus

if TYPE_CHECKING:
    from podleague.core.league import LeagueStore

logger = logging.getLogger(__name__)


class LifecycleError(ValueError):
    """An invalid league or scheduled-pod transition was requested."""


# Key = current status, value = set of valid next statuses.
ALLOWED_TRANSITIONS: dict[LeagueStatus, set[LeagueStatus]] = {
    LeagueStatus.DRAFT: {LeagueStatus.ACTIVE},
    LeagueStatus.ACTIVE: {LeagueStatus.COMPLETED},
    LeagueStatus.COMPLETED: set(),  # terminal state
}


def check_league_transition(current: str, target: str) -> LeagueStatus:
    """Validate ``current -> target`` and return the target status.

    Raises:
        LifecycleError: If either status is unknown or the move is not allowed.
    """
    try:
        current_status = LeagueStatus(current)
        target_status = LeagueStatus(target)
    except ValueError as exc:
        raise LifecycleError(str(exc)) from exc

    allowed = ALLOWED_TRANSITIONS[current_status]
    if target_status not in allowed:
        msg = (
            f"Invalid league transition: {current_status.value} -> {target_status.value}. "
            f"Allowed: {sorted(s.value for s in allowed)}"
        )
        raise LifecycleError(msg)
    return target_status


def is_league_complete(scheduled_pods: Iterable[ScheduledPod]) -> bool:
    """True when the league has a schedule and every scheduled pod was played."""
    pods = list(scheduled_pods)
    return bool(pods) and all(pod.completed_pod_id is not None for pod in pods)


def complete_scheduled_pod(pod: ScheduledPod, game_id: str) -> ScheduledPod:
    """Return ``pod`` fulfilled by ``game_id``.

    Raises:
        LifecycleError: If the pod is already completed.
    """
    if pod.status is ScheduledPodStatus.COMPLETED:
        msg = f"Scheduled pod {pod.id} already completed by game {pod.completed_pod_id}"
        raise LifecycleError(msg)
    return pod.model_copy(update={"completed_pod_id": game_id})


async def transition_league(
    store: LeagueStore,
    league_id: str,
    to_status: LeagueStatus,
) -> LeagueStatus:
    """Validate and persist a league status transition.

    Raises:
        ValueError: If the league is not found.
        LifecycleError: If the transition is invalid.
    """
    league = await store.get_league(league_id)
    if league is None:
        raise ValueError(f"League {league_id} not found")

    new_status = check_league_transition(league.status, to_status)
    await store.update_league_status(league_id, new_status)

    logger.info(
        "league_status_changed league=%s from=%s to=%s",
        league_id,
        league.status,
        new_status.value,
    )
    return new_status
