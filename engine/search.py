"""
Monte-Carlo capture search: random playouts scored by what they capture.

Instead of searching the game tree exhaustively, the engine plays random
games forward from the current position and remembers the line whose own
moves captured the most (after discounting later captures). The first move of
that line is the move it plays. Only our own moves are scored; the
opponent's replies shape the position between them but earn nothing.

Two search shapes are available, chosen by SearchConfig.shape:

1. "branching": at each level, run `breadth` independent trials. A trial
   plays one random move for us, advances the opponent, and recurses one
   level deeper with the breadth reduced by `breadth_decay`. Each level keeps
   the best of its trials, so the root sees the best line over a tree of
   roughly breadth * (breadth - decay) * ... playouts. When the breadth drops
   to zero or below, the level runs no trials and the line ends there.

2. "sampling": play `iterations` independent straight lines of `depth` moves
   from the root, with no branching, and keep the best one. Statistically
   similar, but the cost grows linearly instead of as a product of breadths.

The opponent is advanced according to SearchConfig.opponent:

- "random": a uniformly random legal reply. Models an opponent that moves,
  and never lets us capture a king.
- "null": a null move that only passes the turn. Models a static opponent;
  a line that walks into the enemy king can then capture it.

Ties between lines are broken in favour of the first line found. Searches are
inherently non-deterministic unless the selector is seeded.

The caller's board is never modified: every playout runs on its own copy.
"""

import logging
import time
from dataclasses import dataclass

import chess

from engine.constants import (
    BREADTH_DECAY,
    FUTURE_DISCOUNT,
    SEARCH_BREADTH,
    SEARCH_DEPTH,
    SEARCH_ITERATIONS,
)
from engine.evaluate import AGGRESSIVE, CaptureRewards, ScoredMove, score_move, score_sequence
from engine.rules import apply_move, apply_null_move
from engine.selector import RandomSelector

_log = logging.getLogger(__name__)

BRANCHING = "branching"
SAMPLING = "sampling"
SHAPES = (BRANCHING, SAMPLING)

OPPONENT_RANDOM = "random"
OPPONENT_NULL = "null"
OPPONENT_MODELS = (OPPONENT_RANDOM, OPPONENT_NULL)


@dataclass(frozen=True)
class SearchConfig:
    """
    Immutable parameters of one search.

    Attributes:
        shape:         "branching" or "sampling" (see module docstring).
        depth:         Maximum number of our own moves in a line.
        breadth:       Trials at the root level of the branching search.
        breadth_decay: Breadth reduction per level of the branching search.
        iterations:    Number of lines played by the sampling search.
        discount:      Per-move reward multiplier, in (0, 1].
        opponent:      "random" or "null" opponent model.
        rewards:       Capture reward table.

    Raises:
        ValueError: on construction, if any field is out of range.
    """

    shape: str = BRANCHING
    depth: int = SEARCH_DEPTH
    breadth: int = SEARCH_BREADTH
    breadth_decay: int = BREADTH_DECAY
    iterations: int = SEARCH_ITERATIONS
    discount: float = FUTURE_DISCOUNT
    opponent: str = OPPONENT_RANDOM
    rewards: CaptureRewards = AGGRESSIVE

    def __post_init__(self) -> None:
        if self.shape not in SHAPES:
            raise ValueError(f"unknown search shape {self.shape!r}, expected one of {SHAPES}")
        if self.opponent not in OPPONENT_MODELS:
            raise ValueError(
                f"unknown opponent model {self.opponent!r}, expected one of {OPPONENT_MODELS}"
            )
        if self.depth < 1:
            raise ValueError(f"depth must be at least 1, got {self.depth}")
        if self.breadth < 1:
            raise ValueError(f"breadth must be at least 1, got {self.breadth}")
        if self.breadth_decay < 0:
            raise ValueError(f"breadth_decay must not be negative, got {self.breadth_decay}")
        if self.iterations < 1:
            raise ValueError(f"iterations must be at least 1, got {self.iterations}")
        if not 0.0 < self.discount <= 1.0:
            raise ValueError(f"discount must be in (0, 1], got {self.discount}")


@dataclass
class SearchResult:
    """
    Outcome of a search.

    Attributes:
        line:       Best (reward, move) line found, oldest first. Empty when
                    the side to move had no legal move.
        score:      Discounted score of that line.
        plies:      Total half-moves simulated, ours and the opponent's.
        elapsed_ms: Wall-clock time spent searching.
    """

    line: list[ScoredMove]
    score: float
    plies: int = 0
    elapsed_ms: int = 0

    @property
    def best_move(self) -> chess.Move | None:
        """First move of the best line, or None if the line is empty."""
        return self.line[0][1] if self.line else None


@dataclass
class _SearchState:
    """Per-search context threaded through the recursion."""

    config: SearchConfig
    selector: RandomSelector
    plies: int = 0


def _play_random_move(board: chess.Board, state: _SearchState) -> ScoredMove | None:
    """
    Play a random legal move for the side to move and return it with its reward.

    The reward is taken before the move is applied. Returns None, leaving the
    board untouched, if there is no legal move.
    """
    move = state.selector.random_move(board)
    if move is None:
        return None
    reward = score_move(board, move, state.config.rewards)
    apply_move(board, move)
    state.plies += 1
    return (reward, move)


def _advance_opponent(board: chess.Board, state: _SearchState) -> None:
    """
    Let the opponent move according to the configured opponent model.

    When the random opponent has no legal move the turn stays with it, so the
    next attempt to play our move finds nothing and the line ends.
    """
    if state.config.opponent == OPPONENT_NULL:
        apply_null_move(board)
        return
    reply = state.selector.random_move(board)
    if reply is None:
        return
    apply_move(board, reply)
    state.plies += 1


def simulate_branching(
    board: chess.Board,
    remaining: int,
    breadth: int,
    state: _SearchState,
) -> list[ScoredMove]:
    """
    Best line of at most `remaining` moves found by `breadth` branching trials.

    Args:
        board:     Position to search from. Not modified.
        remaining: Moves of ours still to simulate. 0 or less ends the line.
        breadth:   Trials at this level. 0 or less ends the line.
        state:     Search context.

    Returns:
        The highest scoring line among the trials (first one on ties), or an
        empty line if no trial could play a move.
    """
    if remaining <= 0:
        return []

    best_score: float | None = None
    best_line: list[ScoredMove] = []
    for _ in range(breadth):
        trial = board.copy(stack=False)
        played = _play_random_move(trial, state)
        if played is None:
            continue
        _advance_opponent(trial, state)

        continuation = simulate_branching(
            trial,
            remaining - 1,
            breadth - state.config.breadth_decay,
            state,
        )
        line = [played] + continuation
        score = score_sequence(line, state.config.discount)
        if best_score is None or score > best_score:
            best_score = score
            best_line = line

    return best_line


def simulate_line(board: chess.Board, remaining: int, state: _SearchState) -> list[ScoredMove]:
    """
    Play one straight random line of at most `remaining` of our moves.

    The board is advanced in place; callers pass a copy. The line stops early
    when we run out of legal moves.
    """
    line: list[ScoredMove] = []
    for _ in range(remaining):
        played = _play_random_move(board, state)
        if played is None:
            break
        line.append(played)
        _advance_opponent(board, state)
    return line


def _best_sampled_line(board: chess.Board, state: _SearchState) -> list[ScoredMove]:
    """Play `iterations` independent lines from board and keep the best one."""
    best_score: float | None = None
    best_line: list[ScoredMove] = []
    for _ in range(state.config.iterations):
        line = simulate_line(board.copy(stack=False), state.config.depth, state)
        if not line:
            # Every line from this root is empty: we have no legal move.
            break
        score = score_sequence(line, state.config.discount)
        if best_score is None or score > best_score:
            best_score = score
            best_line = line
    return best_line


def search(
    board: chess.Board,
    config: SearchConfig | None = None,
    selector: RandomSelector | None = None,
) -> SearchResult:
    """
    Run the configured Monte-Carlo search from board.

    Args:
        board:    The position to move in. Not modified.
        config:   Search parameters; the defaults when omitted.
        selector: Source of randomness; an unseeded one when omitted.

    Returns:
        SearchResult whose best_move is the move to play, or None when the
        side to move has no legal move.
    """
    config = config or SearchConfig()
    state = _SearchState(config=config, selector=selector or RandomSelector())
    start = time.monotonic()

    root = board.copy(stack=False)
    if config.shape == BRANCHING:
        line = simulate_branching(root, config.depth, config.breadth, state)
    else:
        line = _best_sampled_line(root, state)

    result = SearchResult(
        line=line,
        score=score_sequence(line, config.discount),
        plies=state.plies,
        elapsed_ms=int((time.monotonic() - start) * 1000),
    )
    _log.debug(
        "Selecting move set with score %.3f after %d plies in %d ms: %s",
        result.score,
        result.plies,
        result.elapsed_ms,
        [(reward, move.uci()) for reward, move in line],
    )
    return result


def get_best_move(
    board: chess.Board,
    config: SearchConfig | None = None,
    selector: RandomSelector | None = None,
) -> chess.Move | None:
    """Return the first move of the best line found from board, or None."""
    return search(board, config, selector).best_move
