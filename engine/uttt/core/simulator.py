"""
Game simulator for Ultimate Tic-Tac-Toe.

Applies moves to a private copy of a GameState: validates legality,
writes the cell, settles the owning micro-board, settles the game and
recomputes which micro-boards the next player may use.
"""

from __future__ import annotations
from enum import Enum
from typing import Optional
import logging

from .board import (
    EMPTY, AVAILABLE, TIED,
    in_bounds, micro_index, local_offset, is_open, is_win, is_tie, opponent,
)
from .moves import Move, MoveGenerator
from .state import GameState

logger = logging.getLogger(__name__)


class GameOutcome(Enum):
    ACTIVE = "active"
    WIN = "win"
    TIE = "tie"


class GameSimulator:
    """
    Rules engine wrapped around one GameState.

    The state passed in is cloned, so the caller's record never changes.
    Simulators are cheap and short-lived: make one (or copy() one) per
    candidate move being evaluated.
    """

    def __init__(self, state: GameState, current_player: Optional[int] = None):
        self.state = state.copy()
        self.current_player = state.current_player if current_player is None else current_player
        self.outcome = self._outcome_of(self.state)

    @staticmethod
    def _outcome_of(state: GameState) -> GameOutcome:
        """Outcome already recorded on a state's macro-board."""
        if state.get_winner() is not None:
            return GameOutcome.WIN
        if state.is_terminal():
            return GameOutcome.TIE
        return GameOutcome.ACTIVE

    def copy(self) -> GameSimulator:
        """Clone the simulator, including player to move and outcome."""
        clone = GameSimulator(self.state, self.current_player)
        clone.outcome = self.outcome
        return clone

    def switch_player(self) -> None:
        self.current_player = opponent(self.current_player)

    @property
    def is_over(self) -> bool:
        return self.outcome is not GameOutcome.ACTIVE

    @property
    def winner(self) -> Optional[int]:
        """Player owning the winning macro-board line, or None."""
        if self.outcome is GameOutcome.WIN:
            return self.state.get_winner()
        return None

    def legal_moves(self) -> list[Move]:
        """Legal moves for the player to move (empty once the game is over)."""
        if self.is_over:
            return []
        return MoveGenerator.get_legal_moves(self.state)

    def is_legal(self, move: Move) -> bool:
        """
        Check a move against the rules without applying it.

        The cell must be on the board, empty, and inside a micro-board the
        redirect rule allows; nothing may be played after the game ends.
        """
        x, y = move
        if self.is_over:
            return False
        if not in_bounds(x, y):
            return False
        if not self.state.is_targetable_microboard(x, y):
            return False
        return self.state.board[x, y] == EMPTY

    def apply_move(self, move: Move) -> bool:
        """
        Apply a move for the current player. Modifies the simulator in-place.

        Returns False (and changes nothing) if the move is illegal.
        """
        if not self.is_legal(move):
            logger.debug("Rejected illegal move %s for player %d", move, self.current_player)
            return False

        self._update_board(move)
        self.switch_player()
        return True

    def _update_board(self, move: Move) -> None:
        x, y = move
        state = self.state
        state.board[x, y] = self.current_player
        state.move_number += 1
        if state.move_number % 2 == 0:
            state.round_number += 1

        self._settle_microboard(move)
        self._update_macroboard(move)

    def _settle_microboard(self, move: Move) -> None:
        """Decide the micro-board containing the move, then the game."""
        x, y = move
        board = self.state.board
        macro = self.state.macro_board
        mx, my = micro_index(x, y)

        if not is_open(macro[mx, my]):
            return

        if is_win(board, x, y, self.current_player):
            macro[mx, my] = self.current_player
        elif is_tie(board, x, y):
            macro[mx, my] = TIED

        if is_win(macro, mx, my, self.current_player):
            self.outcome = GameOutcome.WIN
        elif is_tie(macro, mx, my):
            self.outcome = GameOutcome.TIE

    def _update_macroboard(self, move: Move) -> None:
        """
        Point the next player at the micro-board matching the move's local
        offset. An undecided target is marked EMPTY and the rest AVAILABLE;
        a decided target leaves every undecided micro-board AVAILABLE.
        """
        macro = self.state.macro_board
        for mx in range(macro.shape[0]):
            for my in range(macro.shape[1]):
                if is_open(macro[mx, my]):
                    macro[mx, my] = AVAILABLE

        tx, ty = local_offset(*move)
        if macro[tx, ty] == AVAILABLE:
            macro[tx, ty] = EMPTY


def simulate(state: GameState, moves: list[Move]) -> GameSimulator:
    """
    Replay a sequence of moves from a state.

    Raises ValueError at the first illegal move.
    """
    simulator = GameSimulator(state)
    for i, move in enumerate(moves):
        if not simulator.apply_move(move):
            raise ValueError(f"Illegal move {move} at index {i}")
    return simulator
