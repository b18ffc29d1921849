"""Shared constants for podleague models.

Placed here so the config, core, and database layers can import them
without creating a layer violation.
"""

from __future__ import annotations

# A league needs at least one full pod.
MIN_LEAGUE_PLAYERS = 4

DEFAULT_POD_SIZE = 4
SUPPORTED_POD_SIZES: tuple[int, ...] = (3, 4)

# Games-per-player suggestions are searched in 1..MAX_SUGGESTED_GAMES and
# truncated to the first SUGGESTION_LIMIT hits.
MAX_SUGGESTED_GAMES = 20
SUGGESTION_LIMIT = 10

MAX_LEAGUE_NAME_LENGTH = 100

GAME_RESULTS: tuple[str, ...] = ("win", "lose", "draw")

# Bounds on the number of participants in a reported game.
MIN_POD_PLAYERS = min(SUPPORTED_POD_SIZES)
MAX_POD_PLAYERS = max(SUPPORTED_POD_SIZES)

# Player stats list this many most-played commanders.
FAVORITE_COMMANDER_LIMIT = 3
