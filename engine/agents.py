"""
Agents: the objects the UCI handler asks for a move.

Every agent answers one question, play(board), with a legal move or None when
the side to move has no legal move. The handler never needs to know which
agent it holds; the choice is made once at startup by make_agent().
"""

import logging
from abc import ABC, abstractmethod

import chess

from engine.search import SearchConfig, search
from engine.selector import RandomSelector

_log = logging.getLogger(__name__)


class Agent(ABC):
    """A move chooser. Implementations must not modify the board they are given."""

    name: str = "agent"

    @abstractmethod
    def play(self, board: chess.Board) -> chess.Move | None:
        """Return the move to play in board, or None if there is no legal move."""


class RandomAgent(Agent):
    """Plays a uniformly random legal move."""

    name = "random"

    def __init__(self, selector: RandomSelector | None = None) -> None:
        self.selector = selector or RandomSelector()

    def play(self, board: chess.Board) -> chess.Move | None:
        return self.selector.random_move(board)


class SearchAgent(Agent):
    """
    Plays the first move of the best line found by the Monte-Carlo search.

    Attributes:
        config:   Search parameters used for every move.
        selector: Randomness shared by all searches of this agent, so a
                  seeded agent plays a reproducible game.
    """

    name = "monteattack"

    def __init__(self, config: SearchConfig | None = None, selector: RandomSelector | None = None) -> None:
        self.config = config or SearchConfig()
        self.selector = selector or RandomSelector()

    def play(self, board: chess.Board) -> chess.Move | None:
        result = search(board, self.config, self.selector)
        _log.info(
            "Search (%s, depth %d) chose %s with score %.3f",
            self.config.shape,
            self.config.depth,
            result.best_move.uci() if result.best_move is not None else "nothing",
            result.score,
        )
        return result.best_move


def make_agent(mode: str, config: SearchConfig | None = None, seed: int | None = None) -> Agent:
    """
    Build the agent for an engine mode.

    Args:
        mode:   "random" or "monteattack".
        config: Search parameters, used only by the search agent.
        seed:   Seed for the agent's randomness; None for a fresh seed.

    Raises:
        ValueError: mode names no agent.
    """
    selector = RandomSelector(seed)
    if mode == RandomAgent.name:
        return RandomAgent(selector)
    if mode == SearchAgent.name:
        return SearchAgent(config, selector)
    raise ValueError(f"no agent for mode {mode!r}")
