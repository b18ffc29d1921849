"""SQLAlchemy ORM models for the podleague database.

Tables: players, leagues, scheduled_pods, games.
"""

from __future__ import annotations

import uuid
from datetime import UTC, date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.sqlite import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _uuid() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for all ORM models."""


class PlayerRow(Base):
    __tablename__ = "players"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    discord_username: Mapped[str | None] = mapped_column(String(100), nullable=True, unique=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(UTC))


class LeagueRow(Base):
    __tablename__ = "leagues"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Ordered roster, fixed once scheduled pods exist.
    player_ids: Mapped[list] = mapped_column(JSON, nullable=False)
    games_per_player: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="draft")
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(UTC))

    scheduled_pods: Mapped[list[ScheduledPodRow]] = relationship(
        back_populates="league",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ScheduledPodRow.sequence",
    )


class ScheduledPodRow(Base):
    __tablename__ = "scheduled_pods"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    league_id: Mapped[str] = mapped_column(
        ForeignKey("leagues.id", ondelete="CASCADE"), nullable=False
    )
    # Position in the generated plan; keeps listing order stable.
    sequence: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    player_ids: Mapped[list] = mapped_column(JSON, nullable=False)
    # Set exactly once, when a reported game fulfills this pod.
    completed_pod_id: Mapped[str | None] = mapped_column(
        ForeignKey("games.id", ondelete="RESTRICT"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(UTC))

    league: Mapped[LeagueRow] = relationship(back_populates="scheduled_pods")

    __table_args__ = (
        Index("ix_scheduled_pods_league_id", "league_id"),
        Index("ix_scheduled_pods_completed_pod_id", "completed_pod_id"),
    )


class GameRow(Base):
    """A reported real game (a played pod)."""

    __tablename__ = "games"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    league_id: Mapped[str | None] = mapped_column(
        ForeignKey("leagues.id", ondelete="SET NULL"), nullable=True
    )
    # [{"player_id": ..., "result": "win"|"lose"|"draw", "commander_deck": ...}]
    participants: Mapped[list] = mapped_column(JSON, nullable=False)
    participant_count: Mapped[int] = mapped_column(Integer, nullable=False)
    played_on: Mapped[date | None] = mapped_column(Date, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(UTC))
