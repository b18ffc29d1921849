"""League, ScheduledPod, and related models.

Glossary:
  - **Pod**: one game instance; the group of players who played it together.
  - **Scheduled Pod**: a planned grouping within a league's schedule, pending
    fulfillment by a real reported game.
  - **Fulfillment**: linking a reported game to the Scheduled Pod whose
    player set it matches.
"""

from __future__ import annotations

from datetime import date
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from podleague.models.constants import MAX_LEAGUE_NAME_LENGTH, MAX_POD_PLAYERS, MIN_POD_PLAYERS


class LeagueStatus(StrEnum):
    """League lifecycle states. Compares equal to the raw strings stored in the DB."""

    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"


class ScheduledPodStatus(StrEnum):
    PENDING = "pending"
    COMPLETED = "completed"


class Player(BaseModel):
    """A person who plays in pods. Leagues reference players by id only."""

    id: str
    name: str
    discord_username: str | None = None


class League(BaseModel):
    """A season-long roster with a games-per-player target."""

    id: str
    name: str
    description: str | None = None
    player_ids: list[str] = Field(default_factory=list)
    games_per_player: int = Field(ge=1)
    status: LeagueStatus = LeagueStatus.DRAFT
    start_date: date
    end_date: date | None = None


class ScheduledPod(BaseModel):
    """A planned pod. ``completed_pod_id`` links the game that fulfilled it."""

    id: str
    league_id: str
    player_ids: list[str]
    completed_pod_id: str | None = None

    @property
    def status(self) -> ScheduledPodStatus:
        if self.completed_pod_id is None:
            return ScheduledPodStatus.PENDING
        return ScheduledPodStatus.COMPLETED

    @property
    def player_set(self) -> frozenset[str]:
        return frozenset(self.player_ids)


class LeagueStats(BaseModel):
    total_players: int
    total_pods: int
    games_per_player: int


class LeagueProgress(BaseModel):
    """How much of a league's schedule has been played."""

    total_count: int = 0
    completed_count: int = 0

    @property
    def is_complete(self) -> bool:
        return self.total_count > 0 and self.completed_count == self.total_count


class ValidationResult(BaseModel):
    """Outcome of a configuration check. Failures are values, not exceptions."""

    is_valid: bool
    error: str | None = None


class FieldError(BaseModel):
    """A single request-validation problem, keyed by the offending field."""

    field: str
    message: str


class CreateLeagueRequest(BaseModel):
    """Admin request to generate a league.

    Deliberately loose: roster size, uniqueness and slot arithmetic are
    checked by ``validate_league_request`` so the caller gets every problem
    back as a ``FieldError`` instead of a schema rejection.
    """

    name: str
    description: str | None = None
    player_ids: list[str] = Field(default_factory=list)
    start_date: date
    end_date: date | None = None
    games_per_player: int


class LeagueGenerationResult(BaseModel):
    league: League
    scheduled_pods: list[ScheduledPod]
    stats: LeagueStats


class GameParticipant(BaseModel):
    """One player's line in a reported game."""

    player_id: str
    result: Literal["win", "lose", "draw"]
    commander_deck: str = ""


class ReportedGame(BaseModel):
    """A real game reported after it was played."""

    participants: list[GameParticipant] = Field(
        min_length=MIN_POD_PLAYERS, max_length=MAX_POD_PLAYERS
    )
    league_id: str | None = None
    played_on: date | None = None
    notes: str | None = None

    @model_validator(mode="after")
    def _unique_players(self) -> ReportedGame:
        seen: set[str] = set()
        for participant in self.participants:
            if participant.player_id in seen:
                msg = f"Player {participant.player_id} is listed more than once"
                raise ValueError(msg)
            seen.add(participant.player_id)
        return self

    @property
    def player_ids(self) -> list[str]:
        return [p.player_id for p in self.participants]


class UpdateLeagueRequest(BaseModel):
    """Editable league details. Roster and games per player are fixed once scheduled."""

    name: str | None = Field(default=None, min_length=1, max_length=MAX_LEAGUE_NAME_LENGTH)
    description: str | None = None
    end_date: date | None = None


class PlayerStats(BaseModel):
    """Lifetime record of one player across every reported game."""

    player_id: str
    player_name: str
    games_played: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0
    win_rate: float = 0.0
    favorite_commanders: list[str] = Field(default_factory=list)
