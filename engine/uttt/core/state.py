"""
Game state record for Ultimate Tic-Tac-Toe.

The state is a passive record: a 9x9 board, a 3x3 macro-board and the
move/round counters. All rule enforcement happens in GameSimulator,
which works on its own copy of the record.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional
import numpy as np

from .board import (
    BOARD_SIZE, SUBGRID_SIZE, EMPTY, AVAILABLE, PLAYERS, CELL_DTYPE,
    new_board, new_macro_board, micro_index, is_open, cell_symbol,
    WIN_LINES,
)
from .moves import Move, MoveGenerator


@dataclass
class GameState:
    """
    Represents the complete state of an Ultimate Tic-Tac-Toe game.

    Attributes:
        board: 9x9 int8 grid of cell values, indexed [x, y]
        macro_board: 3x3 int8 grid of micro-board outcomes/availability
        move_number: Number of moves played so far
        round_number: Number of completed rounds (move_number // 2)
    """
    board: np.ndarray = field(default_factory=new_board)
    macro_board: np.ndarray = field(default_factory=new_macro_board)
    move_number: int = 0
    round_number: int = 0

    @classmethod
    def new_game(cls) -> GameState:
        """Create a new game in the starting position."""
        return cls()

    @property
    def current_player(self) -> int:
        """Player to move: 0 (X) on even move numbers, 1 (O) on odd."""
        return self.move_number % 2

    def copy(self) -> GameState:
        """Create an independent copy of both grids and the counters."""
        return GameState(
            board=self.board.copy(),
            macro_board=self.macro_board.copy(),
            move_number=self.move_number,
            round_number=self.round_number,
        )

    def set_board(self, board: np.ndarray) -> None:
        """Install a copy of a 9x9 board snapshot."""
        board = np.asarray(board, dtype=CELL_DTYPE)
        if board.shape != (BOARD_SIZE, BOARD_SIZE):
            raise ValueError(f"Board must be {BOARD_SIZE}x{BOARD_SIZE}, got {board.shape}")
        self.board = board.copy()

    def set_macro_board(self, macro_board: np.ndarray) -> None:
        """Install a copy of a 3x3 macro-board snapshot."""
        macro_board = np.asarray(macro_board, dtype=CELL_DTYPE)
        if macro_board.shape != (SUBGRID_SIZE, SUBGRID_SIZE):
            raise ValueError(
                f"Macro-board must be {SUBGRID_SIZE}x{SUBGRID_SIZE}, got {macro_board.shape}"
            )
        self.macro_board = macro_board.copy()

    def is_targetable_microboard(self, x: int, y: int) -> bool:
        """
        Check if the micro-board containing board cell (x, y) may be played.

        A forced target is marked EMPTY while every other undecided
        micro-board is AVAILABLE. When no undecided micro-board is EMPTY
        (free choice), every AVAILABLE one is playable. At game start all
        micro-boards are EMPTY and all are playable.
        """
        mx, my = micro_index(x, y)
        cell = self.macro_board[mx, my]
        if cell == EMPTY:
            return True
        if cell == AVAILABLE:
            return not bool((self.macro_board == EMPTY).any())
        return False

    def legal_moves(self) -> list[Move]:
        """All empty cells inside targetable micro-boards (see MoveGenerator)."""
        return MoveGenerator.get_legal_moves(self)

    def get_winner(self) -> Optional[int]:
        """Return the player owning a full macro-board line, or None."""
        for line in WIN_LINES:
            first = self.macro_board[line[0]]
            if first in PLAYERS and all(self.macro_board[c] == first for c in line):
                return int(first)
        return None

    def is_terminal(self) -> bool:
        """Check if the game is over (macro line owned, or nothing left to play)."""
        if self.get_winner() is not None:
            return True
        return not any(is_open(c) for c in self.macro_board.flat)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GameState):
            return False
        return (
            np.array_equal(self.board, other.board) and
            np.array_equal(self.macro_board, other.macro_board) and
            self.move_number == other.move_number and
            self.round_number == other.round_number
        )

    def __repr__(self) -> str:
        """Pretty print the board with micro-board separators."""
        lines = []
        separator = "  +" + "+".join(["-------"] * SUBGRID_SIZE) + "+"
        lines.append("    " + "   ".join(
            " ".join(str(y) for y in range(s, s + SUBGRID_SIZE))
            for s in range(0, BOARD_SIZE, SUBGRID_SIZE)
        ))
        for x in range(BOARD_SIZE):
            if x % SUBGRID_SIZE == 0:
                lines.append(separator)
            row = f"{x} |"
            for y in range(BOARD_SIZE):
                row += " " + cell_symbol(self.board[x, y])
                if y % SUBGRID_SIZE == SUBGRID_SIZE - 1:
                    row += " |"
            lines.append(row)
        lines.append(separator)

        macro = " ".join(
            "".join(cell_symbol(c) for c in row) for row in self.macro_board
        )
        lines.append(f"\nMacro: {macro}")
        lines.append(f"Player {cell_symbol(self.current_player)} to move "
                     f"(move {self.move_number}, round {self.round_number})")
        return "\n".join(lines)

