"""
Cell values and grid geometry for Ultimate Tic-Tac-Toe.

Board layout (9 x 9 cells, indexed grid[x, y]):

      y: 0 1 2   3 4 5   6 7 8
  x=0  | . . . | . . . | . . . |
  x=1  | . . . | . . . | . . . |   micro-board (0, 0) is x 0-2, y 0-2
  x=2  | . . . | . . . | . . . |
       +-------+-------+-------+
  x=3  | . . . | . . . | . . . |
  ...

The macro-board is a 3 x 3 grid with one cell per micro-board, indexed
by (x // 3, y // 3) of any board cell inside it.

Both grids store small integers:
  EMPTY     = -1  unplayed cell / undecided micro-board
  AVAILABLE = -2  undecided micro-board offered as a free choice (macro only)
  TIED      = -3  full micro-board with no line (macro only)
  0, 1            owner (player 0 plays X, player 1 plays O)
"""

from __future__ import annotations

import numpy as np

# Board dimensions
BOARD_SIZE = 9
SUBGRID_SIZE = 3
NUM_CELLS = BOARD_SIZE * BOARD_SIZE  # 81

# Cell values
EMPTY = -1
AVAILABLE = -2
TIED = -3
PLAYERS = (0, 1)

CELL_DTYPE = np.int8

_SYMBOLS = {EMPTY: '.', AVAILABLE: '-', TIED: 'T', 0: 'X', 1: 'O'}


def new_board() -> np.ndarray:
    """Create an empty 9x9 board."""
    return np.full((BOARD_SIZE, BOARD_SIZE), EMPTY, dtype=CELL_DTYPE)


def new_macro_board() -> np.ndarray:
    """Create the game-start macro-board (every micro-board undecided)."""
    return np.full((SUBGRID_SIZE, SUBGRID_SIZE), EMPTY, dtype=CELL_DTYPE)


def opponent(player: int) -> int:
    """Return the other player."""
    return (player + 1) % 2


def micro_index(x: int, y: int) -> tuple[int, int]:
    """Macro-board coordinates of the micro-board containing board cell (x, y)."""
    return x // SUBGRID_SIZE, y // SUBGRID_SIZE


def local_offset(x: int, y: int) -> tuple[int, int]:
    """Position of (x, y) inside its micro-board; also the redirect target."""
    return x % SUBGRID_SIZE, y % SUBGRID_SIZE


def in_bounds(x: int, y: int) -> bool:
    return 0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE


def is_open(cell: int) -> bool:
    """True if a macro-cell is still undecided (EMPTY or AVAILABLE)."""
    return cell == EMPTY or cell == AVAILABLE


def is_decided(cell: int) -> bool:
    """True if a macro-cell is owned by a player or tied."""
    return cell in PLAYERS or cell == TIED


def cell_symbol(cell: int) -> str:
    """Display glyph for a cell value."""
    return _SYMBOLS.get(int(cell), '?')


def is_win(grid: np.ndarray, x: int, y: int, mark: int) -> bool:
    """
    Check whether the 3-cell lines through (x, y) inside its sub-grid are
    all `mark`.

    Works on either granularity: on the 9x9 board the sub-grid is the
    micro-board containing (x, y); on the 3x3 macro-board the sub-grid is
    the whole grid. Only the row, the column and, when (x, y) sits on one,
    the diagonals of the sub-grid are examined.
    """
    lx, ly = local_offset(x, y)
    sx, sy = x - lx, y - ly
    span = range(SUBGRID_SIZE)

    if all(grid[x, sy + i] == mark for i in span):
        return True
    if all(grid[sx + i, y] == mark for i in span):
        return True
    if lx == ly and all(grid[sx + i, sy + i] == mark for i in span):
        return True
    if lx + ly == SUBGRID_SIZE - 1 and all(
        grid[sx + i, sy + SUBGRID_SIZE - 1 - i] == mark for i in span
    ):
        return True
    return False


def is_tie(grid: np.ndarray, x: int, y: int) -> bool:
    """True if the sub-grid containing (x, y) has no EMPTY or AVAILABLE cell."""
    lx, ly = local_offset(x, y)
    sub = grid[x - lx:x - lx + SUBGRID_SIZE, y - ly:y - ly + SUBGRID_SIZE]
    return not bool(np.isin(sub, (EMPTY, AVAILABLE)).any())


def micro_board(board: np.ndarray, mx: int, my: int) -> np.ndarray:
    """View of the 3x3 cells of micro-board (mx, my)."""
    sx, sy = mx * SUBGRID_SIZE, my * SUBGRID_SIZE
    return board[sx:sx + SUBGRID_SIZE, sy:sy + SUBGRID_SIZE]


# The eight 3-cell lines of a 3x3 grid as local (i, j) coordinates
WIN_LINES: tuple[tuple[tuple[int, int], ...], ...] = (
    tuple((0, j) for j in range(3)),
    tuple((1, j) for j in range(3)),
    tuple((2, j) for j in range(3)),
    tuple((i, 0) for i in range(3)),
    tuple((i, 1) for i in range(3)),
    tuple((i, 2) for i in range(3)),
    tuple((i, i) for i in range(3)),
    tuple((i, 2 - i) for i in range(3)),
)

