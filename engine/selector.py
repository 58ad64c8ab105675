"""
Uniform random choice, used both as a whole engine (the random mode) and as
the sampling primitive inside the Monte-Carlo search.

Each selector owns its own random.Random so that a seeded engine replays the
same games, and so that two selectors never disturb each other's sequence.
"""

import random
from typing import Sequence, TypeVar

import chess

from engine.rules import legal_moves

T = TypeVar("T")


class RandomSelector:
    """Draw uniformly at random from finite candidate sets."""

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)

    def index(self, n: int) -> int:
        """
        Return a uniform index in [0, n).

        Raises:
            ValueError: n is not positive. Callers only ask for an index when
                        they know the set is non-empty, so this is a bug.
        """
        if n <= 0:
            raise ValueError(f"expected a non-empty range, got {n}")
        return self._rng.randrange(n)

    def choose(self, candidates: Sequence[T]) -> T | None:
        """Return one candidate with probability 1/n, or None if there are none."""
        if not candidates:
            return None
        return candidates[self.index(len(candidates))]

    def random_move(self, board: chess.Board) -> chess.Move | None:
        """Pick a uniformly random legal move, or None if the side to move has none."""
        return self.choose(legal_moves(board))
