"""
UCI (Universal Chess Interface) session handler.

UCI is the standard text-based protocol that allows chess GUIs and testing
tools (like cutechess-cli) to communicate with chess engines. The engine
reads commands from stdin and writes responses to stdout. All output lines
must be flushed immediately, since GUIs read line by line.

Protocol overview:
    GUI -> Engine: uci, isready, ucinewgame, position, go, quit
    Engine -> GUI: id name, id author, uciok, readyok, bestmove

Session states:
    AWAITING_HANDSHAKE -> READY      on "uci"
    any live state     -> IN_GAME    on "position" or "go"
    "ucinewgame" resets the board and leaves the state as it is
    any state          -> TERMINATED on "quit"; no further line is read

Board tracking:
    The handler keeps its own board for the whole game. A "position" command
    only contributes its LAST move, which is played on the held board: the
    board already reflects every earlier move, including the engine's own
    replies, which are played locally as soon as they are chosen. The move
    list is never replayed from the start.

Threading model:
    None. Each line is processed to completion, search included, before the
    next one is read. The agent only ever sees the board between commands.

Critical rule: NEVER print to stdout except for valid UCI responses.
Diagnostics go through the logging module, which is configured to write to a
file or to stderr.
"""

import enum
import logging
import os
import sys
from typing import Iterable

# ---------------------------------------------------------------------------
# Path setup: make 'engine' importable when this script is run directly.
# When run as `python interface/uci.py` from the repo root, sys.path may not
# include the repo root, so `import engine` would fail.
# ---------------------------------------------------------------------------
_REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)

import chess

from engine.agents import Agent, make_agent
from engine.constants import ENGINE_AUTHOR, ENGINE_NAME
from engine.rules import IllegalMoveError, apply_move, starting_position
from interface.config import (
    EngineSettings,
    build_arg_parser,
    configure_logging,
    resolve_settings,
)
from interface.protocol import (
    READYOK,
    UCIOK,
    Command,
    Go,
    IsReady,
    Position,
    ProtocolDecodeError,
    Quit,
    Uci,
    UciNewGame,
    Unknown,
    format_bestmove,
    format_id,
    parse_line,
)

_log = logging.getLogger(__name__)


def _send(line: str) -> None:
    """Write one protocol line to stdout and flush it at once."""
    print(line, flush=True)


class SessionState(enum.Enum):
    AWAITING_HANDSHAKE = enum.auto()
    READY = enum.auto()
    IN_GAME = enum.auto()
    TERMINATED = enum.auto()


class UciHandler:
    """
    Stateful handler for one UCI session.

    Holds the current board and the session state, and turns decoded commands
    into board updates, agent calls and response lines.

    Attributes:
        agent:  Chooses the engine's moves. Fixed for the session.
        board:  The game as the engine believes it stands.
        state:  Current SessionState.
        name:   Engine name sent in answer to "uci".
        author: Engine author sent in answer to "uci".
    """

    def __init__(self, agent: Agent, settings: EngineSettings | None = None) -> None:
        self.agent = agent
        self.board: chess.Board = starting_position()
        self.state = SessionState.AWAITING_HANDSHAKE
        self.name = settings.name if settings else ENGINE_NAME
        self.author = settings.author if settings else ENGINE_AUTHOR
        self._handlers = {
            Uci: self.handle_uci,
            IsReady: self.handle_isready,
            UciNewGame: self.handle_ucinewgame,
            Position: self.handle_position,
            Go: self.handle_go,
            Quit: self.handle_quit,
            Unknown: self.handle_unknown,
        }

    @property
    def running(self) -> bool:
        return self.state is not SessionState.TERMINATED

    # -----------------------------------------------------------------------
    # Dispatch
    # -----------------------------------------------------------------------

    def handle_line(self, line: str) -> None:
        """
        Decode and process one input line.

        Blank lines are ignored. A line that fails to decode is logged and
        skipped; it does not end the session.
        """
        if not self.running:
            _log.debug("Session terminated, ignoring %r", line)
            return
        try:
            command = parse_line(line)
        except ProtocolDecodeError as e:
            _log.warning("Skipping malformed line %r: %s", line.strip(), e)
            return
        if command is not None:
            self.handle(command)

    def handle(self, command: Command) -> None:
        """Process one decoded command."""
        self._handlers[type(command)](command)

    # -----------------------------------------------------------------------
    # Command handlers
    # -----------------------------------------------------------------------

    def handle_uci(self, _: Uci) -> None:
        """Identify the engine and acknowledge the handshake."""
        for line in format_id(self.name, self.author):
            _send(line)
        _log.info("Responding uciok")
        _send(UCIOK)
        if self.state is SessionState.AWAITING_HANDSHAKE:
            self.state = SessionState.READY

    def handle_isready(self, _: IsReady) -> None:
        """Answer the synchronisation ping. No state change."""
        _log.info("Responding readyok")
        _send(READYOK)

    def handle_ucinewgame(self, _: UciNewGame) -> None:
        """Start a new game from the standard initial position. No state change."""
        _log.info("New game")
        self.board = starting_position()

    def handle_position(self, command: Position) -> None:
        """
        Play the last move of the command's move list on the held board.

        The move was made by the opponent, so it is validated. An illegal
        move is logged and ignored, leaving the board as it was. A command
        without moves changes nothing.
        """
        self.state = SessionState.IN_GAME
        _log.debug("Got moves %s", [move.uci() for move in command.moves])
        if not command.moves:
            return

        move = command.moves[-1]
        try:
            apply_move(self.board, move, validate=True)
        except IllegalMoveError as e:
            _log.warning("Ignoring opponent move: %s", e)
            return
        _log.info("Applied opponent move %s", move.uci())

    def handle_go(self, command: Go) -> None:
        """
        Ask the agent for a move, play it on the held board and announce it.

        When the agent finds no move (checkmate or stalemate) nothing is sent.
        """
        self.state = SessionState.IN_GAME
        _log.info("In go %s", command.params)

        move = self.agent.play(self.board)
        if move is None:
            _log.info("No best move found")
            return

        # The GUI is always told about a queen promotion, so the held board
        # must get the same move.
        if move.promotion is not None and move.promotion != chess.QUEEN:
            move = chess.Move(move.from_square, move.to_square, promotion=chess.QUEEN)
        apply_move(self.board, move)
        _send(format_bestmove(move))

    def handle_quit(self, _: Quit) -> None:
        """End the session. No reply is expected."""
        _log.info("Received quit command")
        self.state = SessionState.TERMINATED

    def handle_unknown(self, command: Unknown) -> None:
        """Ignore anything the engine does not implement."""
        _log.warning("Unimplemented message: %s %s", command.name, command.args)


def run_uci_loop(handler: UciHandler, lines: Iterable[str]) -> None:
    """
    Feed input lines to the handler until the input ends or the session quits.

    Error handling:
        Each line is wrapped in a try/except so that a bug in one command
        handler does not crash the engine mid-game. The error is logged with
        its traceback and the loop continues.
    """
    for raw_line in lines:
        try:
            handler.handle_line(raw_line)
        except Exception:
            _log.exception("Unhandled error for line %r", raw_line.strip())
        if not handler.running:
            break


def main(argv: list[str] | None = None, stdin: Iterable[str] | None = None) -> int:
    """
    Engine entry point.

    Resolves the startup settings (reading the mode line from stdin when no
    --mode option is given), sets up logging, builds the agent and runs the
    UCI loop.

    Returns:
        Process exit status: 0 after a normal session, 1 when the startup
        configuration is invalid.
    """
    args = build_arg_parser().parse_args(argv)
    lines = iter(stdin if stdin is not None else sys.stdin)

    mode_line = None
    if args.mode is None:
        mode_line = next(lines, "")

    try:
        settings = resolve_settings(args, mode_line)
    except ValueError as e:
        _log.error("Invalid startup configuration: %s", e)
        return 1

    configure_logging(settings)
    _log.info("Starting %s in %s mode with %s", settings.name, settings.mode.value, settings.search)

    agent = make_agent(settings.mode.value, settings.search, settings.seed)
    run_uci_loop(UciHandler(agent, settings), lines)
    return 0


if __name__ == "__main__":
    sys.exit(main())
