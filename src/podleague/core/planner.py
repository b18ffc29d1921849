"""Balanced pod assignment.

Turns a roster and a games-per-player target into pod groupings where every
player appears exactly ``games_per_player`` times.

Algorithm (rotating queue):
  - ``remaining[p]`` counts the games player ``p`` is still owed and
    ``pods_left`` the pods still to build.  The invariant
    ``max(remaining) <= pods_left`` holds at the start because
    ``games_per_player <= n * games_per_player / pod_size`` whenever
    ``n >= pod_size``.
  - Each pod first takes every player with ``remaining == pods_left``
    (they must play in every pod from here on), then fills from the queue
    preferring players owed the most games, then players who have shared
    the fewest pods with those already chosen, then queue order.
  - Drawn players rotate to the back of the queue, so a player is not drawn
    again until the rest of the queue has had a turn.

Taking all forced players keeps the invariant, and ``sum(remaining) ==
pod_size * pods_left`` guarantees at least ``pod_size`` players are still
owed games, so the loop never stalls on a validated input.  Pod sizes are
never mixed within one plan.
"""

from __future__ import annotations

import logging
from collections import Counter, deque
from collections.abc import Sequence
from dataclasses import dataclass, field
from itertools import combinations

from podleague.core.validation import validate_league_inputs
from podleague.models.constants import DEFAULT_POD_SIZE, SUPPORTED_POD_SIZES

logger = logging.getLogger(__name__)

Grouping = tuple[str, ...]


@dataclass(frozen=True)
class PlanSuccess:
    """A complete schedule. Each grouping is one pod's player ids."""

    groupings: list[Grouping] = field(default_factory=list)
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class PlanFailure:
    """No exact assignment exists (InvalidConfiguration). Never a partial schedule."""

    error: str
    ok: bool = field(default=False, init=False)


PlanResult = PlanSuccess | PlanFailure


def plan_pods(
    player_ids: Sequence[str],
    games_per_player: int,
    pod_size: int = DEFAULT_POD_SIZE,
) -> PlanResult:
    """Assign every player to exactly ``games_per_player`` pods of ``pod_size``.

    Args:
        player_ids: Roster in a stable order. Order drives tie-breaking, so
            the same roster always produces the same plan.
        games_per_player: Target appearances per player.
        pod_size: Uniform pod size (4 by default, 3 as an explicit mode).

    Returns:
        ``PlanSuccess`` with ``len(player_ids) * games_per_player / pod_size``
        groupings, or ``PlanFailure`` describing why no schedule exists.
    """
    if pod_size not in SUPPORTED_POD_SIZES:
        return PlanFailure(error=f"Unsupported pod size {pod_size}")

    validation = validate_league_inputs(len(player_ids), games_per_player, pod_size)
    if not validation.is_valid:
        return PlanFailure(error=validation.error or "Invalid league configuration")

    if len(set(player_ids)) != len(player_ids):
        return PlanFailure(error="Player IDs must be unique")

    remaining: dict[str, int] = {pid: games_per_player for pid in player_ids}
    shared: Counter[frozenset[str]] = Counter()
    queue: deque[str] = deque(player_ids)
    pods_left = len(player_ids) * games_per_player // pod_size
    groupings: list[Grouping] = []

    while pods_left > 0:
        chosen = _draw_pod(queue, remaining, shared, pod_size, pods_left)
        if chosen is None:
            logger.error(
                "pod_plan_stalled players=%d games=%d pods_built=%d",
                len(player_ids),
                games_per_player,
                len(groupings),
            )
            return PlanFailure(error=_cannot_generate(len(player_ids), games_per_player))

        for pid in chosen:
            remaining[pid] -= 1
        for pair in combinations(chosen, 2):
            shared[frozenset(pair)] += 1

        drawn = set(chosen)
        queue = deque([p for p in queue if p not in drawn] + [p for p in queue if p in drawn])
        groupings.append(tuple(chosen))
        pods_left -= 1

    appearances = Counter(pid for grouping in groupings for pid in grouping)
    if any(appearances[pid] != games_per_player for pid in player_ids):
        logger.error("pod_plan_unbalanced appearances=%s", dict(appearances))
        return PlanFailure(error=_cannot_generate(len(player_ids), games_per_player))

    logger.debug(
        "pod_plan_built players=%d games=%d pods=%d",
        len(player_ids),
        games_per_player,
        len(groupings),
    )
    return PlanSuccess(groupings=groupings)


def _draw_pod(
    queue: deque[str],
    remaining: dict[str, int],
    shared: Counter[frozenset[str]],
    pod_size: int,
    pods_left: int,
) -> list[str] | None:
    """Pick the next pod, or None if the invariant has been broken."""
    chosen = [p for p in queue if remaining[p] == pods_left]
    if len(chosen) > pod_size:
        return None

    position = {pid: idx for idx, pid in enumerate(queue)}
    while len(chosen) < pod_size:
        candidates = [p for p in queue if p not in chosen and remaining[p] > 0]
        if not candidates:
            return None
        pick = min(
            candidates,
            key=lambda p: (
                -remaining[p],
                sum(shared[frozenset((p, c))] for c in chosen),
                position[p],
            ),
        )
        chosen.append(pick)

    return chosen


def _cannot_generate(player_count: int, games_per_player: int) -> str:
    return (
        f"Cannot generate a schedule for {player_count} players × {games_per_player} games; "
        "adjust the roster or games per player."
    )
