import chess
import pytest

from engine.evaluate import (
    AGGRESSIVE,
    CLASSIC,
    REWARD_PROFILES,
    CaptureRewards,
    score_capture,
    score_move,
    score_sequence,
)

E2E4 = chess.Move.from_uci("e2e4")


@pytest.mark.parametrize(
    ("piece_type", "reward"),
    [
        (chess.KING, 100.0),
        (chess.QUEEN, 35.0),
        (chess.ROOK, 10.0),
        (chess.KNIGHT, 10.0),
        (chess.BISHOP, 5.0),
        (chess.PAWN, 2.5),
        (None, -1.0),
    ],
)
def test_aggressive_capture_rewards(piece_type: chess.PieceType | None, reward: float) -> None:
    assert score_capture(piece_type) == reward


def test_classic_profile_values() -> None:
    assert CLASSIC.queen == 25.0
    assert CLASSIC.rook == 5.0
    assert CLASSIC.knight == 5.0
    assert CLASSIC.pawn == 1.0
    assert REWARD_PROFILES == {"aggressive": AGGRESSIVE, "classic": CLASSIC}


def test_custom_rewards_are_used() -> None:
    rewards = CaptureRewards(queen=9.0, none=0.0)
    assert score_capture(chess.QUEEN, rewards) == 9.0
    assert score_capture(None, rewards) == 0.0


def test_score_move_looks_at_destination_before_the_move() -> None:
    board = chess.Board("3q3k/8/8/8/8/8/8/3R3K w - - 0 1")
    assert score_move(board, chess.Move.from_uci("d1d8")) == 35.0
    assert score_move(board, chess.Move.from_uci("d1d5")) == -1.0


def test_en_passant_scores_as_quiet_move() -> None:
    board = chess.Board("4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 2")
    move = chess.Move.from_uci("e5d6")
    assert board.is_en_passant(move)
    assert score_move(board, move) == -1.0


def test_score_sequence_discounts_geometrically() -> None:
    line = [(10.0, E2E4), (4.0, E2E4), (2.0, E2E4)]
    assert score_sequence(line, 0.5) == pytest.approx(10.0 + 2.0 + 0.5)


def test_score_sequence_empty_line() -> None:
    assert score_sequence([], 0.52) == 0.0


def test_score_sequence_is_order_sensitive() -> None:
    forward = [(35.0, E2E4), (-1.0, E2E4)]
    backward = [(-1.0, E2E4), (35.0, E2E4)]
    assert score_sequence(forward, 0.52) != score_sequence(backward, 0.52)
    assert score_sequence(forward, 0.52) > score_sequence(backward, 0.52)


def test_equal_rewards_commute() -> None:
    line = [(2.5, E2E4), (2.5, chess.Move.from_uci("d2d4"))]
    assert score_sequence(line, 0.52) == score_sequence(list(reversed(line)), 0.52)


def test_discount_of_one_is_plain_sum() -> None:
    line = [(1.0, E2E4), (2.0, E2E4), (3.0, E2E4)]
    assert score_sequence(line, 1.0) == 6.0
