"""Shared test fixtures."""

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine

from podleague.config import Settings
from podleague.db.engine import create_engine, create_tables, get_session
from podleague.db.repository import Repository


@pytest.fixture
def settings() -> Settings:
    """Test settings with defaults."""
    return Settings(podleague_env="development", database_url="sqlite+aiosqlite:///:memory:")


@pytest.fixture
async def engine() -> AsyncEngine:
    """Create an in-memory SQLite engine with all tables."""
    eng = create_engine("sqlite+aiosqlite:///:memory:")
    await create_tables(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
async def repo(engine: AsyncEngine) -> Repository:
    """Yield a repository with a session bound to the in-memory database."""
    async with get_session(engine) as session:
        yield Repository(session)


@pytest.fixture
def make_players(repo: Repository):
    """Factory: create ``count`` players named P1..Pn and return their ids in order."""

    async def _make(count: int) -> list[str]:
        ids = []
        for i in range(1, count + 1):
            player = await repo.create_player(f"P{i}", discord_username=f"p{i}")
            ids.append(player.id)
        return ids

    return _make
