"""Game reporting -- link a reported game to the scheduled pod it fulfills.

Called after the game record itself is stored. A game that matches no
pending scheduled pod is simply a casual game; reporting never fails
because of a missing match.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from podleague.core.league import LeagueStore, scheduled_pod_from_row
from podleague.core.lifecycle import complete_scheduled_pod, transition_league
from podleague.core.matcher import find_matching_scheduled_pod
from podleague.models.league import LeagueStatus, ScheduledPod

logger = logging.getLogger(__name__)


async def on_game_reported(
    store: LeagueStore,
    resolved_player_ids: Iterable[str],
    game_id: str,
    league_id: str | None = None,
) -> ScheduledPod | None:
    """Mark the matching pending scheduled pod completed by ``game_id``.

    Args:
        store: Persistence backend.
        resolved_player_ids: Player ids of everyone in the reported game.
        game_id: The stored game record that fulfills the pod.
        league_id: Only match within this league. ``None`` searches every
            active league. Pods of draft or completed leagues never match.

    Returns:
        The completed scheduled pod, or None when nothing matched (or another
        report claimed the pod first).
    """
    player_ids = list(resolved_player_ids)
    pending = [scheduled_pod_from_row(row) for row in await store.list_pending_scheduled_pods(league_id)]

    match = find_matching_scheduled_pod(pending, player_ids, league_id)
    if match is None:
        logger.info("scheduled_pod_unmatched game=%s players=%d", game_id, len(player_ids))
        return None

    completed = complete_scheduled_pod(match, game_id)
    if not await store.mark_scheduled_pod_completed(match.id, game_id):
        logger.warning(
            "scheduled_pod_already_completed scheduled_pod=%s game=%s",
            match.id,
            game_id,
        )
        return None

    logger.info(
        "scheduled_pod_completed scheduled_pod=%s league=%s game=%s",
        match.id,
        match.league_id,
        game_id,
    )

    await _complete_league_if_finished(store, match.league_id)
    return completed


async def _complete_league_if_finished(store: LeagueStore, league_id: str) -> None:
    league = await store.get_league(league_id)
    if league is None or league.status != LeagueStatus.ACTIVE:
        return
    if await store.count_incomplete_scheduled_pods(league_id) == 0:
        await transition_league(store, league_id, LeagueStatus.COMPLETED)
        logger.info("league_schedule_finished league=%s", league_id)
