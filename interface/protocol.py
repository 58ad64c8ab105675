"""
UCI line codec: turns input lines into command values and responses into lines.

Only the engine side of UCI is needed here. The codec knows nothing about
boards or agents; it checks that each line is well formed and hands the
handler a typed command to dispatch on.

Recognised commands:
    uci                                   -> Uci
    isready                               -> IsReady
    ucinewgame                            -> UciNewGame
    position startpos [moves m1 m2 ...]   -> Position
    position fen <FEN> [moves m1 m2 ...]  -> Position
    go [name value | flag] ...            -> Go
    quit                                  -> Quit
    anything else                         -> Unknown

A recognised command with malformed arguments raises ProtocolDecodeError.
Unknown commands are not errors: UCI requires engines to ignore them.
"""

from dataclasses import dataclass, field

import chess


class ProtocolDecodeError(ValueError):
    """Raised when an input line is a known command with malformed arguments."""


@dataclass(frozen=True)
class Uci:
    pass


@dataclass(frozen=True)
class IsReady:
    pass


@dataclass(frozen=True)
class UciNewGame:
    pass


@dataclass(frozen=True)
class Position:
    """
    A "position" command.

    Attributes:
        startpos: True for "position startpos".
        fen:      The FEN for "position fen", else None.
        moves:    Moves listed after "moves", oldest first.
    """

    startpos: bool = True
    fen: str | None = None
    moves: tuple[chess.Move, ...] = ()


@dataclass(frozen=True)
class Go:
    """A "go" command with its numeric parameters (wtime, movetime, ...)."""

    params: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class Unknown:
    """Any command the engine does not implement."""

    name: str
    args: str = ""


Command = Uci | IsReady | UciNewGame | Position | Go | Quit | Unknown

_SIMPLE_COMMANDS = {
    "uci": Uci,
    "isready": IsReady,
    "ucinewgame": UciNewGame,
    "quit": Quit,
}


def _parse_moves(tokens: list[str]) -> tuple[chess.Move, ...]:
    moves = []
    for token in tokens:
        try:
            moves.append(chess.Move.from_uci(token))
        except ValueError as exc:
            raise ProtocolDecodeError(f"invalid move {token!r} in position command") from exc
    return tuple(moves)


def _parse_position(tokens: list[str]) -> Position:
    """
    Parse the tokens following "position".

    Raises:
        ProtocolDecodeError: missing or unknown position type, junk before
                             "moves", an invalid FEN, or an invalid move.
    """
    if not tokens:
        raise ProtocolDecodeError("position command without startpos or fen")

    if "moves" in tokens:
        moves_idx = tokens.index("moves")
        head, move_tokens = tokens[:moves_idx], tokens[moves_idx + 1:]
    else:
        head, move_tokens = tokens, []

    if not head:
        raise ProtocolDecodeError("position command without startpos or fen")

    if head[0] == "startpos":
        if len(head) > 1:
            raise ProtocolDecodeError(f"unexpected tokens after startpos: {' '.join(head[1:])}")
        return Position(startpos=True, moves=_parse_moves(move_tokens))

    if head[0] == "fen":
        fen = " ".join(head[1:])
        try:
            chess.Board(fen)
        except ValueError as exc:
            raise ProtocolDecodeError(f"invalid FEN {fen!r}: {exc}") from exc
        return Position(startpos=False, fen=fen, moves=_parse_moves(move_tokens))

    raise ProtocolDecodeError(f"unknown position type: {head[0]}")


def _parse_go(tokens: list[str]) -> Go:
    """
    Collect "name value" pairs from the go command.

    Flags without a numeric value ("infinite", "ponder") are skipped. The
    engine does no time management, so the values are informational.
    """
    params: dict[str, int] = {}
    i = 0
    while i < len(tokens) - 1:
        key = tokens[i]
        try:
            params[key] = int(tokens[i + 1])
            i += 2
        except ValueError:
            i += 1
    return Go(params=params)


def parse_line(line: str) -> Command | None:
    """
    Decode one input line.

    Returns:
        The command, or None for a blank line.

    Raises:
        ProtocolDecodeError: the line is a known command with bad arguments.
    """
    tokens = line.split()
    if not tokens:
        return None

    name, args = tokens[0], tokens[1:]
    if name in _SIMPLE_COMMANDS:
        return _SIMPLE_COMMANDS[name]()
    if name == "position":
        return _parse_position(args)
    if name == "go":
        return _parse_go(args)
    return Unknown(name=name, args=" ".join(args))


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

UCIOK = "uciok"
READYOK = "readyok"


def format_id(name: str, author: str) -> list[str]:
    """Identity lines sent in answer to "uci", before "uciok"."""
    return [f"id name {name}", f"id author {author}"]


def format_bestmove(move: chess.Move) -> str:
    """
    The "bestmove" line for move.

    Promotions are always announced as queen promotions.
    """
    if move.promotion is not None:
        move = chess.Move(move.from_square, move.to_square, promotion=chess.QUEEN)
    return f"bestmove {move.uci()}"
