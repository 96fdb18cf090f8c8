"""
One-ply tactics and opening preferences.

Every check clones the simulator it is given, so the caller's simulator
(and the state behind it) is never modified. Candidates are examined in
list order and the first match wins.
"""

from __future__ import annotations
from typing import Optional, Sequence
import numpy as np

from ..core.board import BOARD_SIZE, opponent
from ..core.moves import Move
from ..core.simulator import GameOutcome, GameSimulator

CENTER = Move(BOARD_SIZE // 2, BOARD_SIZE // 2)


def _first_winning_move(
    moves: Sequence[Move], simulator: GameSimulator, player: int
) -> Optional[Move]:
    for move in moves:
        trial = simulator.copy()
        trial.current_player = player
        if trial.apply_move(move) and trial.outcome is GameOutcome.WIN:
            return move
    return None


def find_winning_move(moves: Sequence[Move], simulator: GameSimulator) -> Optional[Move]:
    """First move that wins the game outright for the player to move."""
    return _first_winning_move(moves, simulator, simulator.current_player)


def find_blocking_move(moves: Sequence[Move], simulator: GameSimulator) -> Optional[Move]:
    """First move that would win the game for the opponent if they played it."""
    return _first_winning_move(moves, simulator, opponent(simulator.current_player))


def find_defensive_move(moves: Sequence[Move], simulator: GameSimulator) -> Optional[Move]:
    """
    First move after which the opponent has no immediate winning reply.

    Each candidate is played for the player to move; the opponent's legal
    replies in the resulting position are then scanned with
    find_winning_move. Returns None when every candidate loses at once.
    """
    for move in moves:
        trial = simulator.copy()
        if not trial.apply_move(move):
            continue
        if find_winning_move(trial.legal_moves(), trial) is None:
            return move
    return None


def is_corner(move: Move) -> bool:
    """True for the corners of a micro-board (even x and even y)."""
    return move.x % 2 == 0 and move.y % 2 == 0


def random_move(moves: Sequence[Move], rng: np.random.Generator) -> Optional[Move]:
    """Uniformly random move, or None for an empty list."""
    if not moves:
        return None
    return moves[int(rng.integers(len(moves)))]


def choose_opening_move(
    moves: Sequence[Move], rng: np.random.Generator, center_first: bool = True
) -> Optional[Move]:
    """
    Pick the first move of the game.

    Preference: the board center (if center_first), then the first corner
    in list order, then a random move.
    """
    if center_first and CENTER in moves:
        return CENTER
    for move in moves:
        if is_corner(move):
            return move
    return random_move(moves, rng)


def find_opposite_corner_move(moves: Sequence[Move]) -> Optional[Move]:
    """
    First corner move whose vertically opposite corner (8 - x, y) is also
    legal.
    """
    legal = set(moves)
    for move in moves:
        if is_corner(move) and Move(BOARD_SIZE - 1 - move.x, move.y) in legal:
            return move
    return None
