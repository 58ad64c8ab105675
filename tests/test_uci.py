import chess
import pytest

from engine.agents import Agent, RandomAgent, SearchAgent
from engine.search import SearchConfig
from engine.selector import RandomSelector
from interface import uci
from interface.config import EngineMode, EngineSettings
from interface.uci import SessionState, UciHandler, main, run_uci_loop


class RecordingAgent(Agent):
    """Returns scripted moves and remembers every board it was shown."""

    name = "recording"

    def __init__(self, moves: list[chess.Move | None] | None = None) -> None:
        self.moves = list(moves or [])
        self.boards: list[chess.Board] = []

    def play(self, board: chess.Board) -> chess.Move | None:
        self.boards.append(board.copy())
        if self.moves:
            return self.moves.pop(0)
        return next(iter(board.legal_moves), None)


def _output(capsys: pytest.CaptureFixture[str]) -> list[str]:
    return capsys.readouterr().out.splitlines()


def test_handshake_emits_identity_and_uciok(capsys: pytest.CaptureFixture[str]) -> None:
    handler = UciHandler(RandomAgent(RandomSelector(1)))
    assert handler.state is SessionState.AWAITING_HANDSHAKE
    handler.handle_line("uci")
    assert _output(capsys) == ["id name Coolbot", "id author Snazzy", "uciok"]
    assert handler.state is SessionState.READY


def test_identity_comes_from_settings(capsys: pytest.CaptureFixture[str]) -> None:
    settings = EngineSettings(mode=EngineMode.RANDOM, name="Testbot", author="Tester")
    handler = UciHandler(RandomAgent(), settings)
    handler.handle_line("uci")
    assert _output(capsys)[:2] == ["id name Testbot", "id author Tester"]


def test_isready(capsys: pytest.CaptureFixture[str]) -> None:
    handler = UciHandler(RandomAgent())
    handler.handle_line("uci")
    capsys.readouterr()
    handler.handle_line("isready")
    assert _output(capsys) == ["readyok"]
    assert handler.state is SessionState.READY


def test_newgame_then_go_plays_one_legal_move(capsys: pytest.CaptureFixture[str]) -> None:
    handler = UciHandler(RandomAgent(RandomSelector(2)))
    handler.handle_line("uci")
    capsys.readouterr()

    handler.handle_line("ucinewgame")
    handler.handle_line("go")
    output = _output(capsys)

    assert len(output) == 1
    assert output[0].startswith("bestmove ")
    move = chess.Move.from_uci(output[0].split()[1])
    assert move in chess.Board().legal_moves
    assert handler.board.move_stack == [move]
    assert handler.state is SessionState.IN_GAME


def test_go_searches_from_reported_position(capsys: pytest.CaptureFixture[str]) -> None:
    agent = RecordingAgent()
    handler = UciHandler(agent)
    handler.handle_line("uci")
    handler.handle_line("position startpos moves e2e4")
    handler.handle_line("go")

    expected = chess.Board()
    expected.push_uci("e2e4")
    assert agent.boards[0].fen() == expected.fen()
    assert _output(capsys)[-1].startswith("bestmove ")


def test_position_applies_only_the_last_move() -> None:
    handler = UciHandler(RecordingAgent())
    handler.handle_line("position startpos moves e2e4")
    handler.handle_line("position startpos moves e2e4 e7e5")

    expected = chess.Board()
    expected.push_uci("e2e4")
    expected.push_uci("e7e5")
    assert handler.board == expected


def test_incremental_apply_matches_apply_move() -> None:
    handler = UciHandler(RecordingAgent())
    for move in ("d2d4", "d7d5", "c2c4"):
        held = handler.board.copy()
        handler.handle_line(f"position startpos moves {move}")
        held.push(chess.Move.from_uci(move))
        assert handler.board == held


def test_position_without_moves_keeps_board() -> None:
    handler = UciHandler(RecordingAgent())
    handler.handle_line("position startpos moves e2e4")
    handler.handle_line("position startpos")
    assert len(handler.board.move_stack) == 1


def test_engine_reply_is_kept_on_the_board(capsys: pytest.CaptureFixture[str]) -> None:
    agent = RecordingAgent([chess.Move.from_uci("e7e5")])
    handler = UciHandler(agent)
    handler.handle_line("position startpos moves e2e4")
    handler.handle_line("go")
    handler.handle_line("position startpos moves e2e4 e7e5 g1f3")

    assert _output(capsys) == ["bestmove e7e5"]
    assert [move.uci() for move in handler.board.move_stack] == ["e2e4", "e7e5", "g1f3"]


def test_newgame_resets_after_any_game_length() -> None:
    handler = UciHandler(RandomAgent(RandomSelector(3)))
    for _ in range(12):
        handler.handle_line("go")
    assert handler.board.move_stack
    handler.handle_line("ucinewgame")
    assert handler.board == chess.Board()
    handler.handle_line("ucinewgame")
    assert handler.board == chess.Board()


def test_illegal_opponent_move_is_ignored(capsys: pytest.CaptureFixture[str]) -> None:
    handler = UciHandler(RecordingAgent())
    handler.handle_line("position startpos moves e2e5")
    assert handler.board == chess.Board()
    handler.handle_line("isready")
    assert _output(capsys) == ["readyok"]
    assert handler.running


def test_malformed_line_is_skipped(capsys: pytest.CaptureFixture[str]) -> None:
    handler = UciHandler(RecordingAgent())
    handler.handle_line("position sideways")
    handler.handle_line("position startpos moves xyz")
    handler.handle_line("position moves e2e4")
    handler.handle_line("isready")
    assert _output(capsys) == ["readyok"]
    assert handler.board == chess.Board()


def test_unknown_commands_are_ignored(capsys: pytest.CaptureFixture[str]) -> None:
    handler = UciHandler(RecordingAgent())
    handler.handle_line("stop")
    handler.handle_line("setoption name Hash value 16")
    handler.handle_line("")
    assert _output(capsys) == []
    assert handler.running


def test_no_move_emits_nothing(capsys: pytest.CaptureFixture[str]) -> None:
    handler = UciHandler(RandomAgent(RandomSelector(4)))
    handler.board = chess.Board("7k/5Q2/6K1/8/8/8/8/8 b - - 0 1")
    handler.handle_line("go")
    assert _output(capsys) == []
    assert handler.running


def test_underpromotion_is_played_as_queen(capsys: pytest.CaptureFixture[str]) -> None:
    agent = RecordingAgent([chess.Move.from_uci("f7f8n")])
    handler = UciHandler(agent)
    handler.board = chess.Board("k7/5P2/8/8/8/8/8/6K1 w - - 0 1")
    handler.handle_line("go")
    assert _output(capsys) == ["bestmove f7f8q"]
    assert handler.board.piece_type_at(chess.F8) == chess.QUEEN


def test_quit_terminates_the_session() -> None:
    handler = UciHandler(RecordingAgent())
    handler.handle_line("quit")
    assert handler.state is SessionState.TERMINATED
    assert not handler.running


def test_nothing_is_processed_after_quit(capsys: pytest.CaptureFixture[str]) -> None:
    agent = RecordingAgent()
    handler = UciHandler(agent)
    run_uci_loop(handler, ["uci\n", "quit\n", "isready\n", "go\n"])

    assert _output(capsys) == ["id name Coolbot", "id author Snazzy", "uciok"]
    assert agent.boards == []
    assert handler.state is SessionState.TERMINATED


def test_loop_survives_handler_errors(capsys: pytest.CaptureFixture[str]) -> None:
    class BrokenAgent(Agent):
        def play(self, board: chess.Board) -> chess.Move | None:
            raise RuntimeError("boom")

    handler = UciHandler(BrokenAgent())
    run_uci_loop(handler, ["go", "isready"])
    assert _output(capsys) == ["readyok"]


def test_search_agent_session(capsys: pytest.CaptureFixture[str]) -> None:
    agent = SearchAgent(SearchConfig(depth=2, breadth=3, breadth_decay=1), RandomSelector(5))
    handler = UciHandler(agent)
    run_uci_loop(handler, ["uci", "ucinewgame", "position startpos moves e2e4", "go", "quit"])

    output = _output(capsys)
    assert output[:3] == ["id name Coolbot", "id author Snazzy", "uciok"]
    assert len(output) == 4
    after_e4 = chess.Board()
    after_e4.push_uci("e2e4")
    assert chess.Move.from_uci(output[3].split()[1]) in after_e4.legal_moves


@pytest.fixture
def no_logging_setup(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(uci, "configure_logging", lambda settings: None)


def test_main_reads_mode_line(capsys: pytest.CaptureFixture[str], no_logging_setup: None) -> None:
    status = main(["--seed", "1"], stdin=iter(["random\n", "uci\n", "isready\n", "go\n", "quit\n", "go\n"]))
    output = _output(capsys)
    assert status == 0
    assert output[:4] == ["id name Coolbot", "id author Snazzy", "uciok", "readyok"]
    assert len(output) == 5
    assert chess.Move.from_uci(output[4].split()[1]) in chess.Board().legal_moves


def test_main_mode_option(capsys: pytest.CaptureFixture[str], no_logging_setup: None) -> None:
    status = main(
        ["--mode", "monteattack", "--depth", "2", "--breadth", "3", "--seed", "2"],
        stdin=["go", "quit"],
    )
    assert status == 0
    assert _output(capsys)[0].startswith("bestmove ")


def test_main_unknown_mode_is_fatal(capsys: pytest.CaptureFixture[str], no_logging_setup: None) -> None:
    status = main([], stdin=["alphabeta\n", "uci\n"])
    assert status == 1
    assert _output(capsys) == []
