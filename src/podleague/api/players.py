"""Player API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from podleague.api.deps import RepoDep
from podleague.core.stats import compute_player_stats
from podleague.models.league import Player

router = APIRouter(prefix="/api/players", tags=["players"])


class CreatePlayerRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    discord_username: str | None = None


class UpdatePlayerRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    discord_username: str | None = None


@router.get("")
async def list_players(repo: RepoDep) -> dict:
    rows = await repo.get_all_players()
    return {"data": [Player.model_validate(r, from_attributes=True).model_dump() for r in rows]}


@router.post("", status_code=201)
async def create_player(body: CreatePlayerRequest, repo: RepoDep) -> dict:
    if body.discord_username and await repo.get_player_by_discord_username(body.discord_username):
        raise HTTPException(status_code=409, detail="Discord username already registered")
    row = await repo.create_player(body.name.strip(), body.discord_username)
    return {"data": Player.model_validate(row, from_attributes=True).model_dump()}


@router.get("/{player_id}")
async def get_player(player_id: str, repo: RepoDep) -> dict:
    row = await repo.get_player(player_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Player not found")
    return {"data": Player.model_validate(row, from_attributes=True).model_dump()}


@router.put("/{player_id}")
async def update_player(player_id: str, body: UpdatePlayerRequest, repo: RepoDep) -> dict:
    if await repo.get_player(player_id) is None:
        raise HTTPException(status_code=404, detail="Player not found")
    if body.discord_username:
        holder = await repo.get_player_by_discord_username(body.discord_username)
        if holder is not None and holder.id != player_id:
            raise HTTPException(status_code=409, detail="Discord username already registered")
    row = await repo.update_player(
        player_id,
        name=body.name.strip() if body.name else None,
        discord_username=body.discord_username,
    )
    return {"data": Player.model_validate(row, from_attributes=True).model_dump()}


@router.get("/{player_id}/stats")
async def get_player_stats(player_id: str, repo: RepoDep) -> dict:
    """Lifetime win/loss/draw record and most-played commanders."""
    row = await repo.get_player(player_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Player not found")
    games = await repo.get_games_for_player(player_id)
    stats = compute_player_stats(row.id, row.name, [g.participants for g in games])
    return {"data": stats.model_dump()}
