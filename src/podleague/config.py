"""Application settings via pydantic-settings. Loads from environment and .env file."""

from __future__ import annotations

from pydantic import field_validator
from pydantic_settings import BaseSettings

from podleague.models.constants import (
    DEFAULT_POD_SIZE,
    MAX_SUGGESTED_GAMES,
    SUGGESTION_LIMIT,
    SUPPORTED_POD_SIZES,
)


class Settings(BaseSettings):
    """podleague configuration.

    All values can be overridden via environment variables or .env file.
    """

    # Database
    database_url: str = "sqlite+aiosqlite:///podleague.db"

    # Environment
    podleague_env: str = "development"

    # Scheduling
    podleague_pod_size: int = DEFAULT_POD_SIZE
    podleague_max_suggested_games: int = MAX_SUGGESTED_GAMES
    podleague_suggestion_limit: int = SUGGESTION_LIMIT
    podleague_auto_publish: bool = True  # Activate leagues right after generation

    # Logging
    podleague_log_level: str = "INFO"

    model_config = {"env_prefix": "", "env_file": ".env", "extra": "ignore"}

    @field_validator("podleague_pod_size")
    @classmethod
    def _supported_pod_size(cls, value: int) -> int:
        """Pods are uniform; only 3- and 4-player pods can be scheduled."""
        if value not in SUPPORTED_POD_SIZES:
            msg = f"PODLEAGUE_POD_SIZE must be one of {list(SUPPORTED_POD_SIZES)}, got {value}"
            raise ValueError(msg)
        return value

    @field_validator("podleague_max_suggested_games", "podleague_suggestion_limit")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be at least 1")
        return value
