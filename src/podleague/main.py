"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from podleague.api.games import router as games_router
from podleague.api.leagues import router as leagues_router
from podleague.api.players import router as players_router
from podleague.config import Settings
from podleague.db.engine import create_engine, create_tables

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: create engine and tables. Shutdown: dispose the engine."""
    settings: Settings = app.state.settings
    engine = create_engine(settings.database_url)
    await create_tables(engine)
    app.state.engine = engine
    logger.info(
        "podleague_started env=%s pod_size=%d",
        settings.podleague_env,
        settings.podleague_pod_size,
    )

    yield

    await engine.dispose()
    logger.info("podleague_stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the podleague FastAPI application."""
    settings = settings or Settings()

    logging.basicConfig(
        level=getattr(logging, settings.podleague_log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="podleague",
        version="0.1.0",
        description="League pod scheduling and game fulfillment tracking",
        docs_url="/docs" if settings.podleague_env != "production" else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.include_router(players_router)
    app.include_router(leagues_router)
    app.include_router(games_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "env": settings.podleague_env}

    return app


app = create_app()
