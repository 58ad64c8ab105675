"""
Startup configuration: engine mode, search settings, and logging.

Everything configurable is resolved exactly once, when the process starts,
into an immutable EngineSettings value. The UCI handler and the agent receive
what they need from it explicitly; nothing reads configuration from globals
afterwards.

The engine mode comes from the --mode option or, when that is absent, from
the first line on stdin. This lets a tournament manager select the mode with
a one-line preamble without having to pass arguments:

    random:       play uniformly random legal moves
    monteattack:  play the Monte-Carlo capture search (alias: search)

Any other value is fatal: UnknownModeError is raised and the process exits.
"""

import argparse
import enum
import logging
import sys
from dataclasses import dataclass, field

from engine.constants import (
    BREADTH_DECAY,
    DEFAULT_LOG_FILE,
    ENGINE_AUTHOR,
    ENGINE_NAME,
    FUTURE_DISCOUNT,
    SEARCH_BREADTH,
    SEARCH_DEPTH,
    SEARCH_ITERATIONS,
)
from engine.evaluate import REWARD_PROFILES
from engine.search import BRANCHING, OPPONENT_MODELS, OPPONENT_RANDOM, SHAPES, SearchConfig

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Passing this as --log-file sends the log to stderr instead of a file.
STDERR_LOG = "-"


class UnknownModeError(ValueError):
    """Raised when the startup mode names no known engine mode."""


class EngineMode(str, enum.Enum):
    RANDOM = "random"
    MONTEATTACK = "monteattack"


_MODE_ALIASES = {
    "random": EngineMode.RANDOM,
    "monteattack": EngineMode.MONTEATTACK,
    "search": EngineMode.MONTEATTACK,
}


def parse_mode(value: str) -> EngineMode:
    """
    Translate a mode line into an EngineMode.

    Surrounding whitespace and case are ignored.

    Raises:
        UnknownModeError: value is not a known mode.
    """
    key = value.strip().lower()
    try:
        return _MODE_ALIASES[key]
    except KeyError:
        raise UnknownModeError(f"Unknown engine selection: {value.strip()!r}") from None


@dataclass(frozen=True)
class EngineSettings:
    """
    Process-wide settings, fixed for the lifetime of the session.

    Attributes:
        mode:      Which agent plays.
        search:    Search parameters (used by the monteattack agent only).
        seed:      Random seed; None for a fresh seed each run.
        log_file:  Log destination path, or None to log to stderr.
        log_level: Logging level name ("DEBUG", "INFO", ...).
        name:      Engine name reported to the GUI.
        author:    Engine author reported to the GUI.
    """

    mode: EngineMode
    search: SearchConfig = field(default_factory=SearchConfig)
    seed: int | None = None
    log_file: str | None = None
    log_level: str = "WARNING"
    name: str = ENGINE_NAME
    author: str = ENGINE_AUTHOR


def build_arg_parser() -> argparse.ArgumentParser:
    """Command-line options of the engine executable."""
    parser = argparse.ArgumentParser(
        prog="coolbot",
        description="Monte-Carlo capture-hunting UCI chess engine.",
    )
    parser.add_argument(
        "--mode",
        help="random or monteattack; read from the first stdin line when omitted",
    )
    parser.add_argument("--seed", type=int, help="seed for reproducible play")
    parser.add_argument(
        "--log-file",
        help=f"log destination ({STDERR_LOG!r} for stderr); "
        f"defaults to {DEFAULT_LOG_FILE} in monteattack mode, stderr otherwise",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="defaults to DEBUG in monteattack mode, WARNING otherwise",
    )

    search = parser.add_argument_group("search")
    search.add_argument("--shape", choices=SHAPES, default=BRANCHING)
    search.add_argument("--opponent", choices=OPPONENT_MODELS, default=OPPONENT_RANDOM)
    search.add_argument("--depth", type=int, default=SEARCH_DEPTH)
    search.add_argument("--breadth", type=int, default=SEARCH_BREADTH)
    search.add_argument("--breadth-decay", type=int, default=BREADTH_DECAY)
    search.add_argument("--iterations", type=int, default=SEARCH_ITERATIONS)
    search.add_argument("--discount", type=float, default=FUTURE_DISCOUNT)
    search.add_argument("--rewards", choices=sorted(REWARD_PROFILES), default="aggressive")
    return parser


def resolve_settings(args: argparse.Namespace, mode_line: str | None = None) -> EngineSettings:
    """
    Combine parsed options and the optional mode line into EngineSettings.

    Args:
        args:      Result of build_arg_parser().parse_args().
        mode_line: The first stdin line, used when args.mode is None.

    Raises:
        UnknownModeError: neither source names a known mode.
        ValueError:       a search parameter is out of range.
    """
    mode = parse_mode(args.mode if args.mode is not None else (mode_line or ""))

    search = SearchConfig(
        shape=args.shape,
        depth=args.depth,
        breadth=args.breadth,
        breadth_decay=args.breadth_decay,
        iterations=args.iterations,
        discount=args.discount,
        opponent=args.opponent,
        rewards=REWARD_PROFILES[args.rewards],
    )

    searching = mode is EngineMode.MONTEATTACK
    log_file = args.log_file
    if log_file is None:
        log_file = DEFAULT_LOG_FILE if searching else None
    elif log_file == STDERR_LOG:
        log_file = None
    log_level = args.log_level or ("DEBUG" if searching else "WARNING")

    return EngineSettings(
        mode=mode,
        search=search,
        seed=args.seed,
        log_file=log_file,
        log_level=log_level,
    )


def configure_logging(settings: EngineSettings) -> None:
    """
    Install the process-wide log handler.

    Logs never go to stdout: stdout carries the UCI protocol and any stray
    line there would confuse the GUI. A log file is opened in append mode.
    """
    if settings.log_file:
        logging.basicConfig(
            filename=settings.log_file,
            filemode="a",
            encoding="utf-8",
            level=settings.log_level,
            format=LOG_FORMAT,
            force=True,
        )
    else:
        logging.basicConfig(
            stream=sys.stderr,
            level=settings.log_level,
            format=LOG_FORMAT,
            force=True,
        )
