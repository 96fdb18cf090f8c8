"""
Static position evaluator used as the tree search's simulation step.

Scores are signed: positive favors player 0 (X), negative favors
player 1 (O).
"""

from __future__ import annotations
from dataclasses import dataclass
import numpy as np

from ..core.board import SUBGRID_SIZE, EMPTY, AVAILABLE, WIN_LINES, micro_board
from ..core.simulator import GameOutcome, GameSimulator


@dataclass
class EvaluatorWeights:
    """Contribution of each positional feature."""
    game_win: float = 10_000.0
    micro_win: float = 100.0       # micro-board owned
    control: float = 5.0           # cell matching a playable macro position
    two_in_line: float = 20.0      # two marks and an empty third


def _sign(cell: int) -> int:
    if cell == 0:
        return 1
    if cell == 1:
        return -1
    return 0


class PositionEvaluator:
    """
    Scores a simulator's position without playing it out.

    For each still-playable micro-board: open two-in-a-line threats and
    control of the cells whose local position matches a playable
    macro-board cell. Decided micro-boards and a decided game add fixed
    amounts. A full micro-board is always owned or TIED, so fullness is
    covered by the decided-board term and has no weight of its own.
    """

    def __init__(self, weights: EvaluatorWeights | None = None):
        self.weights = weights or EvaluatorWeights()
        self.total_evals = 0

    def evaluate(self, simulator: GameSimulator) -> float:
        self.total_evals += 1
        w = self.weights

        if simulator.outcome is GameOutcome.WIN:
            return w.game_win if simulator.winner == 0 else -w.game_win
        if simulator.outcome is GameOutcome.TIE:
            return 0.0

        macro = simulator.state.macro_board
        board = simulator.state.board
        playable = np.isin(macro, (EMPTY, AVAILABLE))

        score = 0.0
        for mx in range(SUBGRID_SIZE):
            for my in range(SUBGRID_SIZE):
                cell = int(macro[mx, my])
                if not playable[mx, my]:
                    score += _sign(cell) * w.micro_win
                    continue
                score += self._evaluate_micro(micro_board(board, mx, my), playable)
        return score

    def _evaluate_micro(self, cells: np.ndarray, playable: np.ndarray) -> float:
        w = self.weights
        score = 0.0

        # Control of positions that are live on the macro-board
        for i in range(SUBGRID_SIZE):
            for j in range(SUBGRID_SIZE):
                if playable[i, j]:
                    score += _sign(int(cells[i, j])) * w.control

        # Open lines with two marks of one player
        for line in WIN_LINES:
            values = [int(cells[c]) for c in line]
            x_count = values.count(0)
            o_count = values.count(1)
            if x_count == 2 and o_count == 0:
                score += w.two_in_line
            elif o_count == 2 and x_count == 0:
                score -= w.two_in_line
        return score

    def stats(self) -> dict:
        return {'total_evals': self.total_evals}
