"""Tests for game record export, import and replay."""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from uttt.core.moves import Move
from uttt.core.notation import GameRecord
from uttt.core.simulator import GameOutcome, GameSimulator
from uttt.core.state import GameState

from positions import x_to_win, o_to_win

OPENING = [Move(4, 4), Move(4, 5), Move(3, 7), Move(1, 4)]


class TestExport:
    def test_to_text(self):
        record = GameRecord(x_player="TacticalBot", o_player="MCTSBot", moves=OPENING)
        text = record.to_text()
        lines = text.splitlines()
        assert lines[0] == '[X "TacticalBot"]'
        assert lines[1] == '[O "MCTSBot"]'
        assert lines[2] == '[Result "*"]'
        assert lines[-1] == "1. e5 e6 2. d8 b5 *"

    def test_odd_number_of_moves(self):
        record = GameRecord(moves=OPENING[:3], result="1-0")
        assert record.to_text().splitlines()[-1] == "1. e5 e6 2. d8 1-0"


class TestImport:
    def test_from_text(self):
        text = '[X "RandomBot"]\n[O "CornerTacticalBot"]\n[Result "*"]\n\n1. e5 e6\n2. d8 b5 *\n'
        record = GameRecord.from_text(text)
        assert record.x_player == "RandomBot"
        assert record.o_player == "CornerTacticalBot"
        assert record.result == "*"
        assert record.moves == OPENING

    def test_text_survives_export(self):
        record = GameRecord(x_player="a", o_player="b", result="0-1", moves=OPENING)
        assert GameRecord.from_text(record.to_text()) == record

    def test_bad_move_token(self):
        with pytest.raises(ValueError):
            GameRecord.from_text('[Result "*"]\n\n1. e5 z9')


class TestReplay:
    def test_replay_from_start(self):
        simulator = GameRecord(moves=OPENING).replay()
        assert simulator.state.move_number == 4
        assert simulator.state.board[1, 4] == 1
        assert simulator.outcome is GameOutcome.ACTIVE

    def test_replay_from_position(self):
        simulator = GameRecord(moves=[Move(2, 8)]).replay(x_to_win())
        assert simulator.outcome is GameOutcome.WIN

    def test_illegal_move_raises(self):
        with pytest.raises(ValueError):
            GameRecord(moves=[Move(4, 4), Move(0, 0)]).replay()

    def test_update_result(self):
        record = GameRecord()
        record.update_result(GameSimulator(GameState.new_game()))
        assert record.result == "*"

        simulator = GameSimulator(x_to_win())
        simulator.apply_move(Move(2, 8))
        record.update_result(simulator)
        assert record.result == "1-0"

        simulator = GameSimulator(o_to_win())
        simulator.apply_move(Move(2, 8))
        record.update_result(simulator)
        assert record.result == "0-1"
