"""
Moves for Ultimate Tic-Tac-Toe.

A move is a board coordinate (x, y), both in 0-8. Algebraic notation
writes x as a file letter and y as a rank digit:

    (0, 0) -> "a1"     (4, 4) -> "e5"     (8, 2) -> "i3"
"""

from __future__ import annotations
from typing import TYPE_CHECKING, NamedTuple

from .board import BOARD_SIZE, SUBGRID_SIZE, EMPTY, in_bounds, micro_index

if TYPE_CHECKING:
    from .state import GameState


FILES = "abcdefghi"


class Move(NamedTuple):
    """A board coordinate to mark."""
    x: int
    y: int

    def __str__(self) -> str:
        return move_to_algebraic(self)


def move_to_algebraic(move: Move) -> str:
    """Convert move to algebraic notation."""
    return f"{FILES[move.x]}{move.y + 1}"


def algebraic_to_move(s: str) -> Move:
    """Parse algebraic notation (e.g. 'e5') to a move."""
    s = s.strip().lower()
    if len(s) != 2 or s[0] not in FILES or not s[1].isdigit():
        raise ValueError(f"Invalid move format: {s!r}")
    x = FILES.index(s[0])
    y = int(s[1]) - 1
    if not in_bounds(x, y):
        raise ValueError(f"Move out of range: {s!r}")
    return Move(x, y)


class MoveGenerator:
    """Generates legal moves for a game state."""

    @staticmethod
    def get_targetable_microboards(state: GameState) -> set[tuple[int, int]]:
        """Macro-board coordinates of every micro-board the player may use."""
        return {
            (mx, my)
            for mx in range(SUBGRID_SIZE)
            for my in range(SUBGRID_SIZE)
            if state.is_targetable_microboard(mx * SUBGRID_SIZE, my * SUBGRID_SIZE)
        }

    @staticmethod
    def get_legal_moves(state: GameState) -> list[Move]:
        """
        Get all legal moves for the player to move.

        Rules:
        1. The move must land in a targetable micro-board (redirect rule)
        2. The target cell must be empty

        Moves are ordered by x then y; callers rely on this order for
        tie-breaking. A finished game has no legal moves.
        """
        if state.is_terminal():
            return []
        targetable = MoveGenerator.get_targetable_microboards(state)
        moves = []
        for x in range(BOARD_SIZE):
            for y in range(BOARD_SIZE):
                if micro_index(x, y) in targetable and state.board[x, y] == EMPTY:
                    moves.append(Move(x, y))
        return moves
