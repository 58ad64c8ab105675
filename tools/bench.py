#!/usr/bin/env python3
"""
Benchmark: measure the move chosen and the time taken per position.

Run before and after changing search parameters or rewards to see how the
cost of a move and the choices made shift. Extra arguments are passed to the
engine unchanged, so any search option can be compared:

Usage:
    python3 tools/bench.py
    python3 tools/bench.py --mode random
    python3 tools/bench.py --shape sampling --iterations 500
"""
import argparse
import os
import subprocess
import sys
import time

REPO = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
PYTHON = sys.executable
ENGINE = os.path.join(REPO, "interface", "uci.py")

# Positions are given as move lists from the initial position. The engine
# only applies the last move of each "position" command, so the moves are
# fed to it one prefix at a time, the same way a GUI reports a game.
POSITIONS = [
    ("Start",        []),
    ("After 1.e4",   ["e2e4"]),
    ("Sicilian",     ["e2e4", "c7c5"]),
    ("Italian",      ["e2e4", "e7e5", "g1f3", "b8c6", "f1c4"]),
    ("London",       ["d2d4", "d7d5", "g1f3", "g8f6", "c1f4"]),
    ("Hanging f7",   ["e2e4", "e7e5", "d1h5", "b8c6", "f1c4", "g8f6"]),
    ("Scandinavian", ["e2e4", "d7d5", "e4d5", "d8d5", "b1c3"]),
]


def position_commands(moves: list[str]) -> list[str]:
    """UCI position commands that bring a fresh engine to the end of moves."""
    return [f"position startpos moves {' '.join(moves[:i])}" for i in range(1, len(moves) + 1)]


def run_position(label: str, moves: list[str], engine_args: list[str]) -> dict:
    """Run a single position through the engine and return metrics.

    Spawns the UCI engine as a subprocess, replays the moves, sends "go" and
    waits for the "bestmove" line.

    Args:
        label: Human-readable position name for display.
        moves: Moves from the initial position, in UCI notation.
        engine_args: Command-line arguments for the engine (must include --mode).

    Returns:
        Dict with keys: label, move, time_ms.
    """
    env = {**os.environ, "PYTHONPATH": REPO}
    proc = subprocess.Popen(
        [PYTHON, ENGINE, *engine_args],
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.DEVNULL,
        text=True,
        env=env,
    )
    cmds = ["uci", "isready", "ucinewgame", *position_commands(moves)]
    proc.stdin.write("\n".join(cmds) + "\n")
    proc.stdin.flush()

    # Wait for readyok so the timing covers the search only.
    for line in proc.stdout:
        if line.strip() == "readyok":
            break

    start = time.monotonic()
    proc.stdin.write("go\n")
    proc.stdin.flush()
    proc.stdin.write("isready\n")
    proc.stdin.flush()

    # "go" answers with bestmove, or with nothing when there is no legal
    # move; the isready sent behind it marks the end of the search either way.
    move = "(none)"
    for line in proc.stdout:
        line = line.strip()
        if line.startswith("bestmove"):
            move = line.split()[1]
        elif line == "readyok":
            break
    elapsed_ms = int((time.monotonic() - start) * 1000)

    proc.stdin.write("quit\n")
    proc.stdin.flush()
    proc.wait(timeout=5)

    return {"label": label, "move": move, "time_ms": elapsed_ms}


def main(argv: list[str] | None = None) -> None:
    """Run all benchmark positions and print a summary table."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--mode", default="monteattack")
    args, engine_extra = parser.parse_known_args(argv)
    engine_args = ["--mode", args.mode, "--log-file", "-", "--log-level", "ERROR", *engine_extra]

    print(f"Coolbot benchmark: {PYTHON}")
    print(f"Engine: {ENGINE} {' '.join(engine_args)}")
    print()
    print(f"{'Position':<14} {'Move':<7} {'Time(ms)':>9}")
    print("-" * 32)

    results = []
    for label, moves in POSITIONS:
        r = run_position(label, moves, engine_args)
        results.append(r)
        print(f"{r['label']:<14} {r['move']:<7} {r['time_ms']:>9,}")

    if results:
        avg_time = sum(r["time_ms"] for r in results) // len(results)
        print("-" * 32)
        print(f"{'AVERAGE':<14} {'':<7} {avg_time:>9,}")


if __name__ == "__main__":
    main()
