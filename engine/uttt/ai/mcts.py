"""
Monte Carlo Tree Search for Ultimate Tic-Tac-Toe.

Implements UCB1 selection over a tree stored as an arena of nodes
addressed by index. The simulation step is a static position evaluation
(see evaluator.py) rather than a random playout.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional
import logging
import math

from ..core.moves import Move
from ..core.simulator import GameSimulator
from ..core.state import GameState
from .evaluator import PositionEvaluator
from .time_manager import TimeConfig, TimeManager

logger = logging.getLogger(__name__)

ROOT = 0


@dataclass
class MCTSConfig:
    """Configuration for MCTS."""
    move_time_ms: int = 1000  # Wall-clock budget per decision
    exploration: float = 2.0  # Constant under the square root of the UCB1 bonus
    value_scale: float = 100.0  # Evaluator scores are divided by this before backup
    max_iterations: Optional[int] = None  # Optional hard cap (deterministic tests)


@dataclass
class Node:
    """A node in the search tree. Links are arena indices, not references."""
    simulator: GameSimulator
    parent: Optional[int] = None
    move: Optional[Move] = None

    # Statistics
    visits: int = 0
    score: float = 0.0

    children: list[int] = field(default_factory=list)
    is_expanded: bool = False

    @property
    def value(self) -> float:
        """Average backed-up score, positive favors X."""
        if self.visits == 0:
            return 0.0
        return self.score / self.visits


class SearchTree:
    """Arena of search nodes. Index 0 is the root."""

    def __init__(self, state: GameState):
        self.nodes: list[Node] = [Node(simulator=GameSimulator(state))]

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def root(self) -> Node:
        return self.nodes[ROOT]

    def node(self, index: int) -> Node:
        if not 0 <= index < len(self.nodes):
            raise ValueError(f"No node at index {index}")
        return self.nodes[index]

    def children(self, index: int) -> list[Node]:
        return [self.nodes[i] for i in self.node(index).children]

    def expand(self, index: int) -> list[int]:
        """
        Add one child per legal move of the node's position.

        Returns the new child indices (empty for terminal positions or an
        already expanded node).
        """
        node = self.node(index)
        if node.is_expanded:
            return []

        created = []
        for move in node.simulator.legal_moves():
            child_sim = node.simulator.copy()
            child_sim.apply_move(move)
            self.nodes.append(Node(simulator=child_sim, parent=index, move=move))
            created.append(len(self.nodes) - 1)

        node.children.extend(created)
        node.is_expanded = True
        return created

    def backpropagate(self, index: int, score: float) -> None:
        """Add score and a visit to the node and every ancestor up to the root."""
        self.node(index)
        current: Optional[int] = index
        while current is not None:
            node = self.nodes[current]
            node.visits += 1
            node.score += score
            current = node.parent

    def depth(self, index: int) -> int:
        depth = 0
        current = self.node(index).parent
        while current is not None:
            depth += 1
            current = self.nodes[current].parent
        return depth


def ucb1(child: Node, parent_visits: int, parent_player: int, exploration: float) -> float:
    """
    UCB1 = exploitation + sqrt(exploration * ln(parent_visits) / child_visits)

    Exploitation is the child's average score seen by the player who moved
    into it: scores favor X, so they are negated when O is choosing.
    Unvisited children score +inf.
    """
    if child.visits == 0:
        return math.inf
    exploitation = child.value if parent_player == 0 else -child.value
    if parent_visits <= 0:
        return exploitation
    return exploitation + math.sqrt(exploration * math.log(parent_visits) / child.visits)


class MCTS:
    """
    Time-boxed Monte Carlo Tree Search.

    Each iteration runs Selection -> Expansion -> Simulation ->
    Backpropagation until the decision's deadline passes.
    """

    def __init__(
        self,
        evaluator: Optional[PositionEvaluator] = None,
        config: Optional[MCTSConfig] = None,
        time_manager: Optional[TimeManager] = None,
    ):
        self.evaluator = evaluator or PositionEvaluator()
        self.config = config or MCTSConfig()
        self.time_manager = time_manager or TimeManager(
            TimeConfig(move_time_ms=self.config.move_time_ms)
        )

    def select_child(self, tree: SearchTree, index: int) -> Optional[int]:
        """Index of the child with the highest UCB1 score (first wins ties)."""
        parent = tree.node(index)
        best_score = -math.inf
        best_child = None
        for child_index in parent.children:
            child = tree.nodes[child_index]
            score = ucb1(child, parent.visits, parent.simulator.current_player,
                         self.config.exploration)
            if score > best_score:
                best_score = score
                best_child = child_index
        return best_child

    def _select(self, tree: SearchTree) -> int:
        """SELECT: descend through expanded nodes to a leaf."""
        index = ROOT
        while True:
            node = tree.nodes[index]
            if not node.is_expanded or not node.children:
                return index
            index = self.select_child(tree, index)

    def _iterate(self, tree: SearchTree) -> None:
        """Run one search iteration."""
        leaf = self._select(tree)

        # EXPAND: a leaf that has been evaluated before grows its children
        node = tree.nodes[leaf]
        if not node.is_expanded and not node.simulator.is_over and (
            node.visits > 0 or leaf == ROOT
        ):
            created = tree.expand(leaf)
            if created:
                leaf = created[0]

        # SIMULATE: static evaluation
        score = self.evaluator.evaluate(tree.nodes[leaf].simulator) / self.config.value_scale

        # BACKUP
        tree.backpropagate(leaf, score)

    def search(self, state: GameState) -> tuple[SearchTree, dict]:
        """
        Run MCTS from the given state until the time budget is spent.

        Returns (tree, info) where info holds search statistics.
        """
        tree = SearchTree(state)
        deadline = self.time_manager.start()
        tree.expand(ROOT)

        iterations = 0
        cap = self.config.max_iterations
        while not self.time_manager.expired():
            if cap is not None and iterations >= cap:
                break
            self._iterate(tree)
            iterations += 1

        elapsed = self.time_manager.elapsed()
        self.time_manager.update(elapsed, iterations)

        info = {
            'iterations': iterations,
            'nodes': len(tree),
            'elapsed_time': elapsed,
            'deadline': deadline,
            'root_visits': tree.root.visits,
        }
        logger.debug("Search finished: %d iterations, %d nodes in %.3fs",
                     iterations, len(tree), elapsed)
        return tree, info

    def select_move(self, tree: SearchTree) -> Optional[Move]:
        """Move of the root child preferred by UCB1, or None without children."""
        best = self.select_child(tree, ROOT)
        if best is None:
            return None
        return tree.nodes[best].move

    def get_best_move(self, state: GameState) -> Optional[Move]:
        """Convenience method: search and return best move."""
        tree, _ = self.search(state)
        return self.select_move(tree)

    def analyze(self, tree: SearchTree, top_k: int = 5) -> list[dict]:
        """
        Analyze search results.

        Returns the most visited root children with their statistics.
        """
        moves = []
        for child in tree.children(ROOT):
            moves.append({
                'move': child.move,
                'algebraic': str(child.move),
                'visits': child.visits,
                'value': child.value,
            })

        moves.sort(key=lambda m: m['visits'], reverse=True)
        return moves[:top_k]
