"""Repository pattern for database access.

Wraps SQLAlchemy async sessions. Implements the ``LeagueStore`` contract
used by league generation and game reporting. Scheduled pods are written
once at generation time and afterwards only ever gain a
``completed_pod_id``.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from podleague.db.models import GameRow, LeagueRow, PlayerRow, ScheduledPodRow
from podleague.models.league import LeagueProgress, LeagueStatus


class Repository:
    """Async repository for all database operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    # --- Players ---

    async def create_player(self, name: str, discord_username: str | None = None) -> PlayerRow:
        row = PlayerRow(name=name, discord_username=discord_username)
        self.session.add(row)
        await self.session.flush()
        return row

    async def get_player(self, player_id: str) -> PlayerRow | None:
        return await self.session.get(PlayerRow, player_id)

    async def get_player_by_discord_username(self, discord_username: str) -> PlayerRow | None:
        stmt = select(PlayerRow).where(PlayerRow.discord_username == discord_username)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_all_players(self) -> list[PlayerRow]:
        """Return all players, alphabetically."""
        stmt = select(PlayerRow).order_by(PlayerRow.name)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update_player(
        self,
        player_id: str,
        name: str | None = None,
        discord_username: str | None = None,
    ) -> PlayerRow | None:
        """Rename a player or change their handle. Unset arguments are left alone."""
        row = await self.session.get(PlayerRow, player_id)
        if row is None:
            return None
        if name is not None:
            row.name = name
        if discord_username is not None:
            row.discord_username = discord_username
        await self.session.flush()
        return row

    async def get_missing_player_ids(self, player_ids: Iterable[str]) -> list[str]:
        """Return the ids in *player_ids* that have no player record, in input order."""
        wanted = list(player_ids)
        if not wanted:
            return []
        stmt = select(PlayerRow.id).where(PlayerRow.id.in_(wanted))
        result = await self.session.execute(stmt)
        found = set(result.scalars().all())
        return [pid for pid in wanted if pid not in found]

    # --- Leagues ---

    async def create_league(
        self,
        name: str,
        player_ids: Sequence[str],
        games_per_player: int,
        start_date: date,
        end_date: date | None = None,
        description: str | None = None,
    ) -> LeagueRow:
        """Create a league in ``draft``."""
        row = LeagueRow(
            name=name,
            description=description,
            player_ids=list(player_ids),
            games_per_player=games_per_player,
            status=LeagueStatus.DRAFT.value,
            start_date=start_date,
            end_date=end_date,
        )
        self.session.add(row)
        await self.session.flush()
        return row

    async def get_league(self, league_id: str) -> LeagueRow | None:
        """Get a league by ID."""
        return await self.session.get(LeagueRow, league_id)

    async def list_leagues(
        self,
        status: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[LeagueRow]:
        """Return leagues, most recent start date first."""
        stmt = select(LeagueRow).order_by(LeagueRow.start_date.desc(), LeagueRow.created_at.desc())
        if status:
            stmt = stmt.where(LeagueRow.status == status)
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update_league_status(self, league_id: str, status: str) -> None:
        league = await self.session.get(LeagueRow, league_id)
        if league:
            league.status = str(status)
            await self.session.flush()

    async def update_league_details(self, league_id: str, **fields: object) -> LeagueRow | None:
        """Set name, description or end date. Roster and schedule are never touched here."""
        league = await self.session.get(LeagueRow, league_id)
        if league is None:
            return None
        for key in ("name", "description", "end_date"):
            if key in fields:
                setattr(league, key, fields[key])
        await self.session.flush()
        return league

    async def delete_league(self, league_id: str) -> bool:
        """Delete a league and, by cascade, its scheduled pods."""
        league = await self.session.get(LeagueRow, league_id)
        if league is None:
            return False
        await self.session.delete(league)
        await self.session.flush()
        return True

    async def get_league_progress(self, league_id: str) -> LeagueProgress:
        stmt = select(
            func.count(ScheduledPodRow.id),
            func.count(ScheduledPodRow.completed_pod_id),
        ).where(ScheduledPodRow.league_id == league_id)
        result = await self.session.execute(stmt)
        total, completed = result.one()
        return LeagueProgress(total_count=total, completed_count=completed)

    # --- Scheduled pods ---

    async def create_scheduled_pods(
        self,
        league_id: str,
        groupings: Iterable[Sequence[str]],
    ) -> list[ScheduledPodRow]:
        """Store planned groupings as pending scheduled pods, preserving plan order."""
        rows = [
            ScheduledPodRow(league_id=league_id, sequence=idx, player_ids=list(grouping))
            for idx, grouping in enumerate(groupings)
        ]
        self.session.add_all(rows)
        await self.session.flush()
        return rows

    async def list_scheduled_pods(
        self,
        league_id: str,
        status: str | None = None,
    ) -> list[ScheduledPodRow]:
        stmt = (
            select(ScheduledPodRow)
            .where(ScheduledPodRow.league_id == league_id)
            .order_by(ScheduledPodRow.sequence)
        )
        if status == "pending":
            stmt = stmt.where(ScheduledPodRow.completed_pod_id.is_(None))
        elif status == "completed":
            stmt = stmt.where(ScheduledPodRow.completed_pod_id.isnot(None))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_pending_scheduled_pods(
        self,
        league_id: str | None = None,
    ) -> list[ScheduledPodRow]:
        """Pending pods of active leagues, optionally limited to one league.

        Draft and completed leagues contribute nothing, even when asked for
        by id.
        """
        stmt = (
            select(ScheduledPodRow)
            .join(LeagueRow, ScheduledPodRow.league_id == LeagueRow.id)
            .where(
                LeagueRow.status == LeagueStatus.ACTIVE.value,
                ScheduledPodRow.completed_pod_id.is_(None),
            )
            .order_by(LeagueRow.start_date, ScheduledPodRow.league_id, ScheduledPodRow.sequence)
        )
        if league_id is not None:
            stmt = stmt.where(ScheduledPodRow.league_id == league_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_scheduled_pod(self, scheduled_pod_id: str) -> ScheduledPodRow | None:
        return await self.session.get(ScheduledPodRow, scheduled_pod_id)

    async def get_scheduled_pod_for_game(self, game_id: str) -> ScheduledPodRow | None:
        """The scheduled pod *game_id* fulfilled, if any."""
        stmt = select(ScheduledPodRow).where(ScheduledPodRow.completed_pod_id == game_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def mark_scheduled_pod_completed(self, scheduled_pod_id: str, game_id: str) -> bool:
        """Link *game_id* to a pending scheduled pod.

        Conditional on ``completed_pod_id IS NULL`` so two concurrent reports
        can never both claim the same pod. Returns False when the pod was
        already completed (or does not exist).
        """
        stmt = (
            update(ScheduledPodRow)
            .where(
                ScheduledPodRow.id == scheduled_pod_id,
                ScheduledPodRow.completed_pod_id.is_(None),
            )
            .values(completed_pod_id=game_id)
            .returning(ScheduledPodRow.id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.scalar_one_or_none() is None:
            return False
        # Reload any copy already in the identity map.
        await self.session.get(ScheduledPodRow, scheduled_pod_id, populate_existing=True)
        return True

    async def count_incomplete_scheduled_pods(self, league_id: str) -> int:
        stmt = select(func.count(ScheduledPodRow.id)).where(
            ScheduledPodRow.league_id == league_id,
            ScheduledPodRow.completed_pod_id.is_(None),
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    # --- Games ---

    async def create_game(
        self,
        participants: list[dict],
        league_id: str | None = None,
        played_on: date | None = None,
        notes: str | None = None,
    ) -> GameRow:
        row = GameRow(
            participants=participants,
            participant_count=len(participants),
            league_id=league_id,
            played_on=played_on,
            notes=notes,
        )
        self.session.add(row)
        await self.session.flush()
        return row

    async def get_game(self, game_id: str) -> GameRow | None:
        return await self.session.get(GameRow, game_id)

    async def set_game_league(self, game_id: str, league_id: str) -> None:
        game = await self.session.get(GameRow, game_id)
        if game:
            game.league_id = league_id
            await self.session.flush()

    async def get_games_for_league(self, league_id: str) -> list[GameRow]:
        """Games reported against a league, most recently played first."""
        stmt = (
            select(GameRow)
            .where(GameRow.league_id == league_id)
            .order_by(GameRow.played_on.desc().nulls_last(), GameRow.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_games_for_player(self, player_id: str) -> list[GameRow]:
        """Every game *player_id* took part in, oldest first.

        Participants live in a JSON column, so the filter runs in Python.
        """
        stmt = select(GameRow).order_by(GameRow.created_at)
        result = await self.session.execute(stmt)
        return [
            game
            for game in result.scalars().all()
            if any(p.get("player_id") == player_id for p in game.participants)
        ]

    async def delete_game(self, game_id: str) -> bool:
        """Delete a game. Games that fulfilled a scheduled pod are refused by the FK."""
        game = await self.session.get(GameRow, game_id)
        if game is None:
            return False
        await self.session.delete(game)
        await self.session.flush()
        return True
