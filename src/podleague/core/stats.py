"""Player statistics computed from reported games."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from podleague.models.constants import FAVORITE_COMMANDER_LIMIT
from podleague.models.league import PlayerStats


def compute_player_stats(
    player_id: str,
    player_name: str,
    games: Iterable[list[dict]],
) -> PlayerStats:
    """Tally one player's record.

    Args:
        player_id: The player to tally.
        player_name: Display name copied onto the result.
        games: Participant lists of reported games. Games the player did not
            play in are ignored.

    Returns:
        Win/loss/draw counts, win rate (0.0 with no games) and up to three
        most-played commanders, ties broken by first appearance.
    """
    results: Counter[str] = Counter()
    commanders: Counter[str] = Counter()
    for participants in games:
        for entry in participants:
            if entry.get("player_id") != player_id:
                continue
            results[entry.get("result", "")] += 1
            deck = entry.get("commander_deck") or ""
            if deck:
                commanders[deck] += 1

    games_played = sum(results.values())
    wins = results["win"]
    return PlayerStats(
        player_id=player_id,
        player_name=player_name,
        games_played=games_played,
        wins=wins,
        losses=results["lose"],
        draws=results["draw"],
        win_rate=wins / games_played if games_played else 0.0,
        favorite_commanders=[
            deck for deck, _ in commanders.most_common(FAVORITE_COMMANDER_LIMIT)
        ],
    )
