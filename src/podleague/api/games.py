"""Game API endpoints.

Reporting a game stores it and then tries to fulfill a scheduled pod with
it. Unscheduled (casual) games are stored the same way and simply come back
with ``scheduled_pod: null``.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Response

from podleague.api.deps import RepoDep
from podleague.core.reporting import on_game_reported
from podleague.db.models import GameRow
from podleague.models.league import ReportedGame

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/games", tags=["games"])


def game_dict(row: GameRow) -> dict:
    return {
        "id": row.id,
        "league_id": row.league_id,
        "participants": row.participants,
        "participant_count": row.participant_count,
        "played_on": row.played_on.isoformat() if row.played_on else None,
        "notes": row.notes,
    }


@router.post("", status_code=201)
async def report_game(body: ReportedGame, repo: RepoDep) -> dict:
    """Store a reported game and link it to the scheduled pod it fulfills."""
    missing = await repo.get_missing_player_ids(body.player_ids)
    if missing:
        raise HTTPException(status_code=400, detail=f"Unknown player IDs: {', '.join(missing)}")
    if body.league_id is not None and await repo.get_league(body.league_id) is None:
        raise HTTPException(status_code=404, detail="League not found")

    game = await repo.create_game(
        participants=[p.model_dump() for p in body.participants],
        league_id=body.league_id,
        played_on=body.played_on,
        notes=body.notes,
    )

    scheduled_pod = await on_game_reported(repo, body.player_ids, game.id, body.league_id)
    if scheduled_pod is not None and game.league_id is None:
        await repo.set_game_league(game.id, scheduled_pod.league_id)

    logger.info(
        "game_reported game=%s players=%d scheduled_pod=%s",
        game.id,
        len(body.participants),
        scheduled_pod.id if scheduled_pod else None,
    )
    return {
        "data": {
            "game": game_dict(game),
            "scheduled_pod": scheduled_pod.model_dump(mode="json") if scheduled_pod else None,
        }
    }


@router.get("/{game_id}")
async def get_game(game_id: str, repo: RepoDep) -> dict:
    row = await repo.get_game(game_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Game not found")
    return {"data": game_dict(row)}


@router.delete("/{game_id}", status_code=204)
async def delete_game(game_id: str, repo: RepoDep) -> Response:
    """Delete a casual game. Games that fulfilled a scheduled pod are kept."""
    if await repo.get_game(game_id) is None:
        raise HTTPException(status_code=404, detail="Game not found")
    fulfilled = await repo.get_scheduled_pod_for_game(game_id)
    if fulfilled is not None:
        raise HTTPException(
            status_code=409,
            detail=f"Game fulfills scheduled pod {fulfilled.id} and cannot be deleted",
        )
    await repo.delete_game(game_id)
    logger.info("game_deleted game=%s", game_id)
    return Response(status_code=204)
