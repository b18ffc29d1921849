"""League API endpoints: generation, suggestions, progress, lifecycle."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, Response
from pydantic import BaseModel

from podleague.api.deps import RepoDep, SettingsDep
from podleague.api.games import game_dict
from podleague.core.league import (
    LeagueGenerationError,
    generate_league,
    league_from_row,
    scheduled_pod_from_row,
)
from podleague.core.lifecycle import LifecycleError, transition_league
from podleague.core.validation import get_suggested_games_per_player, validate_league_inputs
from podleague.models.league import CreateLeagueRequest, LeagueStatus, UpdateLeagueRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/leagues", tags=["leagues"])


class ValidateLeagueRequest(BaseModel):
    player_count: int
    games_per_player: int


@router.get("")
async def list_leagues(
    repo: RepoDep,
    status: LeagueStatus | None = None,
    limit: int | None = Query(default=None, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
) -> dict:
    """List leagues with schedule progress, optionally filtered by status."""
    rows = await repo.list_leagues(status=status, limit=limit, offset=offset)
    data = []
    for row in rows:
        progress = await repo.get_league_progress(row.id)
        data.append(
            {
                **league_from_row(row).model_dump(mode="json"),
                "total_count": progress.total_count,
                "completed_count": progress.completed_count,
            }
        )
    return {"data": data}


@router.post("", status_code=201)
async def create_league(
    body: CreateLeagueRequest,
    repo: RepoDep,
    settings: SettingsDep,
) -> dict:
    """Generate a league and its balanced pod schedule."""
    try:
        result = await generate_league(
            repo,
            body,
            pod_size=settings.podleague_pod_size,
            publish=settings.podleague_auto_publish,
        )
    except LeagueGenerationError as exc:
        raise HTTPException(
            status_code=400,
            detail={
                "message": str(exc),
                "errors": [e.model_dump() for e in exc.errors],
            },
        ) from exc

    return {"data": result.model_dump(mode="json")}


@router.get("/suggestions")
async def suggest_games_per_player(
    settings: SettingsDep,
    player_count: int = Query(ge=0),
) -> dict:
    """Valid games-per-player choices for a roster size."""
    suggestions = get_suggested_games_per_player(
        player_count,
        pod_size=settings.podleague_pod_size,
        max_games=settings.podleague_max_suggested_games,
        limit=settings.podleague_suggestion_limit,
    )
    return {"data": {"player_count": player_count, "suggestions": suggestions}}


@router.post("/validate")
async def validate_league(body: ValidateLeagueRequest, settings: SettingsDep) -> dict:
    """Check a (player count, games per player) pair. Invalid input is a 200 with is_valid=false."""
    result = validate_league_inputs(
        body.player_count, body.games_per_player, settings.podleague_pod_size
    )
    return {"data": result.model_dump()}


@router.get("/{league_id}")
async def get_league(league_id: str, repo: RepoDep) -> dict:
    row = await repo.get_league(league_id)
    if row is None:
        raise HTTPException(status_code=404, detail="League not found")
    progress = await repo.get_league_progress(league_id)
    return {
        "data": {
            **league_from_row(row).model_dump(mode="json"),
            "total_count": progress.total_count,
            "completed_count": progress.completed_count,
            "is_complete": progress.is_complete,
        }
    }


@router.get("/{league_id}/scheduled-pods")
async def list_scheduled_pods(
    league_id: str,
    repo: RepoDep,
    status: str | None = Query(default=None, pattern="^(pending|completed)$"),
) -> dict:
    if await repo.get_league(league_id) is None:
        raise HTTPException(status_code=404, detail="League not found")
    pods = [scheduled_pod_from_row(r) for r in await repo.list_scheduled_pods(league_id, status)]
    return {"data": [{**pod.model_dump(mode="json"), "status": pod.status.value} for pod in pods]}


@router.put("/{league_id}")
async def update_league(league_id: str, body: UpdateLeagueRequest, repo: RepoDep) -> dict:
    """Edit a league's name, description or end date."""
    row = await repo.get_league(league_id)
    if row is None:
        raise HTTPException(status_code=404, detail="League not found")
    changes = body.model_dump(exclude_unset=True)
    name = changes.pop("name", None)
    if name is not None:
        changes["name"] = name.strip()
    if changes.get("end_date") is not None and changes["end_date"] < row.start_date:
        raise HTTPException(status_code=400, detail="End date must be on or after start date")
    row = await repo.update_league_details(league_id, **changes)
    return {"data": league_from_row(row).model_dump(mode="json")}


@router.get("/{league_id}/games")
async def list_league_games(league_id: str, repo: RepoDep) -> dict:
    """Games reported against a league, newest first."""
    if await repo.get_league(league_id) is None:
        raise HTTPException(status_code=404, detail="League not found")
    return {"data": [game_dict(row) for row in await repo.get_games_for_league(league_id)]}


async def _transition(repo: RepoDep, league_id: str, to_status: LeagueStatus) -> dict:
    try:
        new_status = await transition_league(repo, league_id, to_status)
    except LifecycleError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {"data": {"id": league_id, "status": new_status.value}}


@router.post("/{league_id}/publish")
async def publish_league(league_id: str, repo: RepoDep) -> dict:
    """Move a draft league to active so reported games start counting."""
    return await _transition(repo, league_id, LeagueStatus.ACTIVE)


@router.post("/{league_id}/complete")
async def complete_league(league_id: str, repo: RepoDep) -> dict:
    """Admin close of an active league, even with pods left unplayed."""
    return await _transition(repo, league_id, LeagueStatus.COMPLETED)


@router.delete("/{league_id}", status_code=204)
async def delete_league(league_id: str, repo: RepoDep) -> Response:
    if not await repo.delete_league(league_id):
        raise HTTPException(status_code=404, detail="League not found")
    logger.info("league_deleted league=%s", league_id)
    return Response(status_code=204)
