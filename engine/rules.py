"""
Rules adapter: the only place the engine talks to python-chess directly
about legality.

The search and the UCI handler never decide for themselves whether a move is
legal. They ask this module for the legal moves of a position and push moves
through apply_move(). Two application forms exist:

- trusted (the default): the move was drawn from legal_moves() of this very
  board, so re-checking it would only cost time. No validation happens.
- validating: the move came from outside (the GUI reported it), so it is
  checked against the legal move list first and IllegalMoveError is raised
  if it does not belong there.
"""

import chess


class IllegalMoveError(ValueError):
    """
    Raised when a validated move is not legal in the given position.

    Attributes:
        move: The move that was rejected.
        fen:  FEN of the position the move was applied against.
    """

    def __init__(self, move: chess.Move, fen: str) -> None:
        super().__init__(f"illegal move {move.uci()} in position {fen}")
        self.move = move
        self.fen = fen


def starting_position() -> chess.Board:
    """Return a fresh board in the standard initial position."""
    return chess.Board()


def legal_moves(board: chess.Board) -> list[chess.Move]:
    """
    List every legal move for the side to move.

    An empty list means the side to move has no legal move at all
    (checkmate or stalemate).
    """
    return list(board.legal_moves)


def apply_move(board: chess.Board, move: chess.Move, validate: bool = False) -> chess.Board:
    """
    Play a move on the board in place and return the same board.

    Args:
        board:    The position to modify.
        move:     The move to play.
        validate: When True, reject moves that are not legal here. Leave it
                  False only for moves taken from legal_moves(board).

    Returns:
        The board that was passed in, now one ply further.

    Raises:
        IllegalMoveError: validate is True and the move is not legal.
    """
    if validate and not board.is_legal(move):
        raise IllegalMoveError(move, board.fen())
    board.push(move)
    return board


def apply_null_move(board: chess.Board) -> chess.Board:
    """Pass the turn to the other side without moving a piece."""
    board.push(chess.Move.null())
    return board


def occupant_at(board: chess.Board, square: chess.Square) -> chess.PieceType | None:
    """Return the type of the piece on a square, or None if it is empty."""
    return board.piece_type_at(square)
