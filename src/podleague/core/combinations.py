"""Exhaustive pod enumeration.

Legacy schedule strategy: every ``size``-subset of the roster becomes a
scheduled pod. C(n, 4) grows fast (12 players is already 495 pods), so this
is only used when a caller stores a league without planned groupings.
"""

from __future__ import annotations

from collections.abc import Sequence
from itertools import combinations


def generate_combinations(players: Sequence[str], size: int) -> list[list[str]]:
    """Return every ``size``-player subset of ``players``, lexicographic by index.

    Returns an empty list when ``size`` is not in ``1..len(players)``.
    """
    if size < 1 or size > len(players):
        return []
    return [list(combo) for combo in combinations(players, size)]
