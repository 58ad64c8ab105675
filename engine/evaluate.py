"""
Capture scoring: the reward a single move earns, and the discounted value of a
whole simulated line.

The engine does not evaluate positions at all. It only asks "what did this
move take?" and looks the answer up in a reward table. A simulated line is a
list of (reward, move) pairs for our own moves, oldest first, and its value is

    reward_0 + reward_1 * d + reward_2 * d**2 + ...

where d is the future discount. A capture now is worth more than the same
capture three moves from now, because the random simulation is less and less
likely to resemble what will actually happen the further out it goes.

Rewards are looked up on the destination square before the move is played.
An en passant capture therefore lands on an empty square and scores as a
quiet move.
"""

from dataclasses import dataclass
from typing import Sequence

import chess

from engine.constants import (
    BISHOP_REWARD,
    CLASSIC_REWARDS,
    KING_REWARD,
    KNIGHT_REWARD,
    NO_CAPTURE_REWARD,
    PAWN_REWARD,
    QUEEN_REWARD,
    ROOK_REWARD,
)
from engine.rules import occupant_at

ScoredMove = tuple[float, chess.Move]


@dataclass(frozen=True)
class CaptureRewards:
    """
    Reward table for captured pieces.

    Attributes:
        king, queen, rook, knight, bishop, pawn: Reward for capturing a piece
            of that type.
        none: Reward for a move that captures nothing.
    """

    king: float = KING_REWARD
    queen: float = QUEEN_REWARD
    rook: float = ROOK_REWARD
    knight: float = KNIGHT_REWARD
    bishop: float = BISHOP_REWARD
    pawn: float = PAWN_REWARD
    none: float = NO_CAPTURE_REWARD

    def for_piece(self, piece_type: chess.PieceType | None) -> float:
        """Return the reward for capturing piece_type (None = nothing captured)."""
        if piece_type is None:
            return self.none
        return {
            chess.KING: self.king,
            chess.QUEEN: self.queen,
            chess.ROOK: self.rook,
            chess.KNIGHT: self.knight,
            chess.BISHOP: self.bishop,
            chess.PAWN: self.pawn,
        }[piece_type]


AGGRESSIVE = CaptureRewards()

CLASSIC = CaptureRewards(
    king=CLASSIC_REWARDS[chess.KING],
    queen=CLASSIC_REWARDS[chess.QUEEN],
    rook=CLASSIC_REWARDS[chess.ROOK],
    knight=CLASSIC_REWARDS[chess.KNIGHT],
    bishop=CLASSIC_REWARDS[chess.BISHOP],
    pawn=CLASSIC_REWARDS[chess.PAWN],
)

REWARD_PROFILES: dict[str, CaptureRewards] = {
    "aggressive": AGGRESSIVE,
    "classic": CLASSIC,
}


def score_capture(occupant: chess.PieceType | None, rewards: CaptureRewards = AGGRESSIVE) -> float:
    """Reward for capturing occupant, or the quiet-move reward when it is None."""
    return rewards.for_piece(occupant)


def score_move(board: chess.Board, move: chess.Move, rewards: CaptureRewards = AGGRESSIVE) -> float:
    """
    Reward for playing move on board.

    Must be called before the move is applied: it inspects whatever currently
    stands on the destination square.
    """
    return score_capture(occupant_at(board, move.to_square), rewards)


def score_sequence(line: Sequence[ScoredMove], discount: float) -> float:
    """
    Discounted sum of the rewards of a simulated line.

    Args:
        line:     (reward, move) pairs, oldest first. The first reward is
                  taken at full value.
        discount: Per-move multiplier in (0, 1].

    Returns:
        The aggregate score. An empty line scores 0.
    """
    multiplier = 1.0
    total = 0.0
    for reward, _move in line:
        total += reward * multiplier
        multiplier *= discount
    return total
