"""League configuration validation.

A league is schedulable when it has at least four players, each player is
owed at least one game, and the total number of player-slots
(``players * games_per_player``) fills a whole number of pods. Every check
returns a value; nothing here raises for bad input, so API and UI callers
can render the message directly.
"""

from __future__ import annotations

from podleague.models.constants import (
    DEFAULT_POD_SIZE,
    MAX_LEAGUE_NAME_LENGTH,
    MAX_SUGGESTED_GAMES,
    MIN_LEAGUE_PLAYERS,
    SUGGESTION_LIMIT,
)
from podleague.models.league import CreateLeagueRequest, FieldError, ValidationResult

TOO_FEW_PLAYERS = f"Need at least {MIN_LEAGUE_PLAYERS} players for a league"
INVALID_GAMES_PER_PLAYER = "Games per player must be at least 1"


def slots_error(player_count: int, games_per_player: int, pod_size: int) -> str:
    total_slots = player_count * games_per_player
    return (
        f"{player_count} players × {games_per_player} games = {total_slots} total slots. "
        f"Need a multiple of {pod_size}."
    )


def validate_league_inputs(
    player_count: int,
    games_per_player: int,
    pod_size: int = DEFAULT_POD_SIZE,
) -> ValidationResult:
    """Check whether ``player_count`` players can each play ``games_per_player`` pods.

    >>> validate_league_inputs(8, 2).is_valid
    True
    >>> validate_league_inputs(5, 1).error
    '5 players × 1 games = 5 total slots. Need a multiple of 4.'
    """
    if player_count < MIN_LEAGUE_PLAYERS:
        return ValidationResult(is_valid=False, error=TOO_FEW_PLAYERS)

    if games_per_player < 1:
        return ValidationResult(is_valid=False, error=INVALID_GAMES_PER_PLAYER)

    if (player_count * games_per_player) % pod_size != 0:
        return ValidationResult(
            is_valid=False,
            error=slots_error(player_count, games_per_player, pod_size),
        )

    return ValidationResult(is_valid=True)


def get_suggested_games_per_player(
    player_count: int,
    pod_size: int = DEFAULT_POD_SIZE,
    max_games: int = MAX_SUGGESTED_GAMES,
    limit: int = SUGGESTION_LIMIT,
) -> list[int]:
    """Return valid games-per-player values for a roster, ascending.

    Searches ``1..max_games`` and keeps the first ``limit`` values that pass
    ``validate_league_inputs``. Empty when the roster is too small.
    """
    if player_count < MIN_LEAGUE_PLAYERS:
        return []

    suggestions = [
        games
        for games in range(1, max_games + 1)
        if validate_league_inputs(player_count, games, pod_size).is_valid
    ]
    return suggestions[:limit]


def validate_league_request(
    request: CreateLeagueRequest,
    pod_size: int = DEFAULT_POD_SIZE,
) -> list[FieldError]:
    """Collect every problem with a league-creation request.

    Returns an empty list when the request can be scheduled.
    """
    errors: list[FieldError] = []

    name = request.name.strip()
    if not name:
        errors.append(FieldError(field="name", message="League name is required"))
    elif len(name) > MAX_LEAGUE_NAME_LENGTH:
        errors.append(
            FieldError(
                field="name",
                message=f"League name must be at most {MAX_LEAGUE_NAME_LENGTH} characters",
            )
        )

    player_count = len(request.player_ids)
    roster_ok = player_count >= MIN_LEAGUE_PLAYERS
    if not roster_ok:
        errors.append(FieldError(field="player_ids", message=TOO_FEW_PLAYERS))
    elif len(set(request.player_ids)) != player_count:
        roster_ok = False
        errors.append(FieldError(field="player_ids", message="Player IDs must be unique"))

    games_ok = request.games_per_player >= 1
    if not games_ok:
        errors.append(FieldError(field="games_per_player", message=INVALID_GAMES_PER_PLAYER))

    if request.end_date is not None and request.end_date < request.start_date:
        errors.append(FieldError(field="end_date", message="End date must not be before start date"))

    # Slot arithmetic only means something once roster and games are sane.
    if roster_ok and games_ok:
        result = validate_league_inputs(player_count, request.games_per_player, pod_size)
        if not result.is_valid:
            errors.append(FieldError(field="games_per_player", message=result.error or ""))

    return errors
