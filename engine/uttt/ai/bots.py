"""
Bots: decision procedures that turn a GameState into a move.

All bots share the same simulator and tactics; they differ only in the
order and choice of heuristics. Each bot owns its own seedable random
generator.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Optional
import logging
import numpy as np

from ..core.moves import Move
from ..core.simulator import GameSimulator
from ..core.state import GameState
from .mcts import MCTS, MCTSConfig
from .tactics import (
    find_winning_move, find_blocking_move, find_defensive_move,
    find_opposite_corner_move, choose_opening_move, random_move,
)

logger = logging.getLogger(__name__)


@dataclass
class BotConfig:
    """Configuration shared by all bots."""
    seed: Optional[int] = None  # None = nondeterministic
    center_first: bool = True  # Opening prefers the board center over corners
    move_time_ms: int = 1000  # Tree search budget per decision
    use_tactics: bool = True  # MCTSBot: check win/block before searching


class Bot(ABC):
    """A player that decides one move per turn."""

    def __init__(self, config: Optional[BotConfig] = None):
        self.config = config or BotConfig()
        self.rng = np.random.default_rng(self.config.seed)

    @property
    def name(self) -> str:
        return type(self).__name__

    def decide_move(self, state: GameState) -> Optional[Move]:
        """
        Choose a legal move for the player to move in `state`.

        The state is never modified. Returns None if there is no legal
        move (terminal position).
        """
        simulator = GameSimulator(state)
        moves = simulator.legal_moves()
        if state.is_terminal() or not moves:
            logger.debug("%s: no legal move at move %d", self.name, state.move_number)
            return None

        move, reason = self._choose(state, simulator, moves)
        logger.debug("%s plays %s (%s)", self.name, move, reason)
        return move

    @abstractmethod
    def _choose(
        self, state: GameState, simulator: GameSimulator, moves: list[Move]
    ) -> tuple[Move, str]:
        """Return (move, reason) for a non-empty list of legal moves."""


class RandomBot(Bot):
    """Uniformly random legal moves."""

    def _choose(self, state, simulator, moves):
        return random_move(moves, self.rng), "random"


class TacticalBot(Bot):
    """
    One-ply tactical player.

    Decision order: immediate win, block an immediate opponent win,
    opening preference on the first move, a move that leaves the opponent
    no immediate win, and finally a random move.
    """

    def _choose(self, state, simulator, moves):
        move = find_winning_move(moves, simulator)
        if move is not None:
            return move, "win"

        move = find_blocking_move(moves, simulator)
        if move is not None:
            return move, "block"

        if state.move_number == 0:
            return choose_opening_move(moves, self.rng, self.config.center_first), "opening"

        move = self._positional(moves)
        if move is not None:
            return move, "corner"

        move = find_defensive_move(moves, simulator)
        if move is not None:
            return move, "defensive"

        return random_move(moves, self.rng), "random"

    def _positional(self, moves: list[Move]) -> Optional[Move]:
        """Hook for a positional preference between opening and defense."""
        return None


class CornerTacticalBot(TacticalBot):
    """TacticalBot that opens in the center and prefers paired corners."""

    def __init__(self, config: Optional[BotConfig] = None):
        super().__init__(config)
        self.config = replace(self.config, center_first=True)

    def _positional(self, moves):
        return find_opposite_corner_move(moves)


class MCTSBot(Bot):
    """Time-boxed tree search, optionally guarded by win/block tactics."""

    def __init__(self, config: Optional[BotConfig] = None, mcts_config: Optional[MCTSConfig] = None):
        super().__init__(config)
        self.mcts = MCTS(config=mcts_config or MCTSConfig(move_time_ms=self.config.move_time_ms))
        self.last_info: dict = {}

    def _choose(self, state, simulator, moves):
        if self.config.use_tactics:
            move = find_winning_move(moves, simulator)
            if move is not None:
                return move, "win"
            move = find_blocking_move(moves, simulator)
            if move is not None:
                return move, "block"

        tree, self.last_info = self.mcts.search(state)
        move = self.mcts.select_move(tree)
        if move is None:
            return random_move(moves, self.rng), "random"
        return move, f"search ({self.last_info['iterations']} iterations)"


BOTS = {
    'random': RandomBot,
    'tactical': TacticalBot,
    'corner': CornerTacticalBot,
    'mcts': MCTSBot,
}


def create_bot(kind: str, config: Optional[BotConfig] = None) -> Bot:
    """Create a bot by name: random, tactical, corner or mcts."""
    try:
        cls = BOTS[kind]
    except KeyError:
        raise ValueError(f"Unknown bot kind: {kind!r} (choose from {', '.join(BOTS)})") from None
    return cls(config)
