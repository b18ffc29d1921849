"""Match a reported game to the scheduled pod it fulfills.

Matching is exact set equality on player ids: same size, same members,
order ignored. A game that matches nothing is a casual game, not an error.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from podleague.models.league import ScheduledPod, ScheduledPodStatus

logger = logging.getLogger(__name__)


def find_matching_scheduled_pod(
    scheduled_pods: Iterable[ScheduledPod],
    reported_player_ids: Iterable[str],
    league_id: str | None = None,
) -> ScheduledPod | None:
    """Return the first pending scheduled pod whose players equal the reported set.

    Args:
        scheduled_pods: Candidates, in the order they should be tried.
        reported_player_ids: Resolved player ids of the reported game.
        league_id: Restrict matching to one league. ``None`` considers every
            pod supplied.

    Returns:
        The matching pod, or None when no pending pod has exactly these players.
    """
    reported = list(reported_player_ids)
    reported_set = frozenset(reported)
    if len(reported_set) != len(reported):
        # A player listed twice is a bad report, not a smaller pod.
        logger.warning("scheduled_pod_match_skipped reason=duplicate_players ids=%s", reported)
        return None

    for pod in scheduled_pods:
        if pod.status is not ScheduledPodStatus.PENDING:
            continue
        if league_id is not None and pod.league_id != league_id:
            continue
        if pod.player_set == reported_set:
            return pod
    return None
