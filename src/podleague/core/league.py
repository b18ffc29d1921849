"""League generation: turn an admin request into a stored, scheduled league.

Flow:
    validate_league_request -> roster existence check -> plan_pods
    -> store league (draft) + scheduled pods (pending) -> optional publish

Persistence goes through the ``LeagueStore`` protocol; ``Repository``
is the SQLAlchemy implementation.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import date
from typing import TYPE_CHECKING, Protocol

from podleague.core.combinations import generate_combinations
from podleague.core.lifecycle import transition_league
from podleague.core.planner import PlanFailure, plan_pods
from podleague.core.validation import validate_league_request
from podleague.models.constants import DEFAULT_POD_SIZE
from podleague.models.league import (
    CreateLeagueRequest,
    FieldError,
    League,
    LeagueGenerationResult,
    LeagueStats,
    LeagueStatus,
    ScheduledPod,
)

if TYPE_CHECKING:
    from podleague.db.models import LeagueRow, ScheduledPodRow

logger = logging.getLogger(__name__)


class LeagueStore(Protocol):
    """Persistence capabilities league generation and reporting depend on."""

    async def get_league(self, league_id: str) -> LeagueRow | None: ...

    async def create_league(
        self,
        name: str,
        player_ids: Sequence[str],
        games_per_player: int,
        start_date: date,
        end_date: date | None = None,
        description: str | None = None,
    ) -> LeagueRow: ...

    async def update_league_status(self, league_id: str, status: str) -> None: ...

    async def list_scheduled_pods(
        self, league_id: str, status: str | None = None
    ) -> list[ScheduledPodRow]: ...

    async def list_pending_scheduled_pods(
        self, league_id: str | None = None
    ) -> list[ScheduledPodRow]: ...

    async def create_scheduled_pods(
        self, league_id: str, groupings: Iterable[Sequence[str]]
    ) -> list[ScheduledPodRow]: ...

    async def mark_scheduled_pod_completed(self, scheduled_pod_id: str, game_id: str) -> bool: ...

    async def count_incomplete_scheduled_pods(self, league_id: str) -> int: ...

    async def get_missing_player_ids(self, player_ids: Iterable[str]) -> list[str]: ...


class LeagueGenerationError(ValueError):
    """The league could not be generated. ``errors`` lists each problem."""

    def __init__(self, message: str, errors: list[FieldError] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


def league_from_row(row: LeagueRow) -> League:
    return League.model_validate(row, from_attributes=True)


def scheduled_pod_from_row(row: ScheduledPodRow) -> ScheduledPod:
    return ScheduledPod.model_validate(row, from_attributes=True)


async def generate_league(
    store: LeagueStore,
    request: CreateLeagueRequest,
    pod_size: int = DEFAULT_POD_SIZE,
    publish: bool = True,
) -> LeagueGenerationResult:
    """Generate and store a league with its balanced pod schedule.

    The league is created in ``draft`` with every grouping as a pending
    scheduled pod. With ``publish`` it then moves to ``active``.

    Raises:
        LeagueGenerationError: If the request is invalid, references unknown
            players, or no exact schedule exists.
    """
    logger.info(
        "league_generation_requested name=%r players=%d games=%d",
        request.name,
        len(request.player_ids),
        request.games_per_player,
    )

    errors = validate_league_request(request, pod_size)
    if errors:
        raise LeagueGenerationError("Invalid league request", errors)

    missing = await store.get_missing_player_ids(request.player_ids)
    if missing:
        raise LeagueGenerationError(
            "Unknown players",
            [FieldError(field="player_ids", message=f"Unknown player IDs: {', '.join(missing)}")],
        )

    plan = plan_pods(request.player_ids, request.games_per_player, pod_size)
    if isinstance(plan, PlanFailure):
        logger.error("league_generation_failed name=%r error=%s", request.name, plan.error)
        raise LeagueGenerationError(
            "Cannot generate this league; adjust roster or games per player",
            [FieldError(field="games_per_player", message=plan.error)],
        )

    league_row = await store.create_league(
        name=request.name.strip(),
        player_ids=request.player_ids,
        games_per_player=request.games_per_player,
        start_date=request.start_date,
        end_date=request.end_date,
        description=request.description,
    )
    pod_rows = await store.create_scheduled_pods(league_row.id, plan.groupings)
    logger.info("league_created league=%s scheduled_pods=%d", league_row.id, len(pod_rows))

    if publish:
        await transition_league(store, league_row.id, LeagueStatus.ACTIVE)

    league = await store.get_league(league_row.id) or league_row
    return LeagueGenerationResult(
        league=league_from_row(league),
        scheduled_pods=[scheduled_pod_from_row(row) for row in pod_rows],
        stats=LeagueStats(
            total_players=len(request.player_ids),
            total_pods=len(plan.groupings),
            games_per_player=request.games_per_player,
        ),
    )


async def store_legacy_schedule(
    store: LeagueStore,
    league_id: str,
    pod_size: int = DEFAULT_POD_SIZE,
) -> list[ScheduledPod]:
    """Schedule every ``pod_size``-combination of a draft league's roster.

    For leagues stored without planned groupings. Every possible pod is
    played once, so each player gets C(n-1, k-1) games regardless of the
    league's ``games_per_player``. Only practical for small rosters, and not
    exposed over HTTP.

    Raises:
        ValueError: If the league is missing or already has scheduled pods.
    """
    league = await store.get_league(league_id)
    if league is None:
        raise ValueError(f"League {league_id} not found")
    if await store.list_scheduled_pods(league_id):
        raise ValueError(f"League {league_id} already has scheduled pods")

    groupings = generate_combinations(league.player_ids, pod_size)
    rows = await store.create_scheduled_pods(league_id, groupings)
    logger.info("legacy_schedule_stored league=%s scheduled_pods=%d", league_id, len(rows))
    return [scheduled_pod_from_row(row) for row in rows]
