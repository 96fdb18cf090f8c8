"""Tests for the arena search tree, UCB1 and time-boxed MCTS."""

import math
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from uttt.core.moves import Move
from uttt.core.simulator import GameSimulator
from uttt.core.state import GameState
from uttt.ai.mcts import MCTS, MCTSConfig, Node, SearchTree, ROOT, ucb1
from uttt.ai.time_manager import TimeConfig, TimeManager

from positions import x_to_win, o_to_win


class FakeClock:
    """Clock that advances one second per call."""

    def __init__(self):
        self.now = -1.0

    def __call__(self):
        self.now += 1.0
        return self.now


def long_search(max_iterations):
    return MCTS(config=MCTSConfig(move_time_ms=60_000, max_iterations=max_iterations))


class TestUCB1:
    def _child(self, visits, score):
        return Node(simulator=GameSimulator(GameState.new_game()), visits=visits, score=score)

    def test_formula(self):
        child = self._child(visits=4, score=2.0)
        expected = 0.5 + math.sqrt(2.0 * math.log(16) / 4)
        assert ucb1(child, 16, 0, 2.0) == pytest.approx(expected)

    def test_unvisited_is_infinite(self):
        assert ucb1(self._child(0, 0.0), 10, 0, 2.0) == math.inf

    def test_exploitation_negated_for_o(self):
        child = self._child(visits=4, score=2.0)
        bonus = math.sqrt(2.0 * math.log(16) / 4)
        assert ucb1(child, 16, 1, 2.0) == pytest.approx(-0.5 + bonus)


class TestSearchTree:
    def test_root_expansion(self):
        tree = SearchTree(GameState.new_game())
        created = tree.expand(ROOT)
        assert len(created) == 81
        assert len(tree) == 82
        assert all(tree.nodes[i].parent == ROOT for i in created)
        assert tree.nodes[created[0]].move == Move(0, 0)

    def test_children_have_move_applied(self):
        tree = SearchTree(GameState.new_game())
        tree.expand(ROOT)
        child = tree.children(ROOT)[40]
        assert child.move == Move(4, 4)
        assert child.simulator.state.board[4, 4] == 0
        assert child.simulator.current_player == 1
        assert tree.root.simulator.state.board[4, 4] != 0

    def test_second_expand_is_noop(self):
        tree = SearchTree(GameState.new_game())
        tree.expand(ROOT)
        assert tree.expand(ROOT) == []
        assert len(tree) == 82

    def test_terminal_node_has_no_children(self):
        simulator = GameSimulator(x_to_win())
        simulator.apply_move(Move(2, 8))
        tree = SearchTree(simulator.state)
        assert tree.expand(ROOT) == []

    @pytest.mark.parametrize("index", [-1, 1, 100])
    def test_invalid_index(self, index):
        tree = SearchTree(GameState.new_game())
        with pytest.raises(ValueError):
            tree.node(index)
        with pytest.raises(ValueError):
            tree.backpropagate(index, 1.0)

    def test_backpropagate_updates_path_only(self):
        tree = SearchTree(GameState.new_game())
        children = tree.expand(ROOT)
        grandchildren = tree.expand(children[0])
        tree.backpropagate(grandchildren[3], 0.5)

        assert tree.nodes[grandchildren[3]].visits == 1
        assert tree.nodes[children[0]].visits == 1
        assert tree.root.visits == 1
        assert tree.root.score == pytest.approx(0.5)
        assert tree.nodes[children[1]].visits == 0
        assert tree.nodes[grandchildren[0]].visits == 0
        assert tree.depth(grandchildren[3]) == 2

    def test_deep_chain_backpropagation(self):
        tree = SearchTree(GameState.new_game())
        simulator = tree.root.simulator
        for _ in range(5000):
            tree.nodes.append(Node(simulator=simulator, parent=len(tree.nodes) - 1))

        tree.backpropagate(len(tree) - 1, -1.0)
        assert tree.depth(len(tree) - 1) == 5000
        assert all(node.visits == 1 for node in tree.nodes)
        assert tree.root.score == -1.0


class TestSearch:
    def test_iteration_cap(self):
        tree, info = long_search(30).search(GameState.new_game())
        assert info['iterations'] == 30
        assert info['root_visits'] == 30
        assert tree.root.visits == 30
        # Every iteration visits a fresh root child
        assert info['nodes'] == 82

    def test_stops_at_deadline(self):
        time_manager = TimeManager(TimeConfig(move_time_ms=5000, clock=FakeClock()))
        mcts = MCTS(config=MCTSConfig(move_time_ms=5000), time_manager=time_manager)
        _, info = mcts.search(GameState.new_game())
        assert info['iterations'] == 4
        assert info['deadline'] == 5.0
        assert time_manager.move_count == 1

    def test_state_untouched(self):
        state = GameState.new_game()
        before = state.copy()
        long_search(50).search(state)
        assert state == before

    def test_finds_winning_move_for_x(self):
        assert long_search(100).get_best_move(x_to_win()) == Move(2, 8)

    def test_finds_winning_move_for_o(self):
        assert long_search(100).get_best_move(o_to_win()) == Move(2, 8)

    def test_no_move_in_terminal_position(self):
        simulator = GameSimulator(x_to_win())
        simulator.apply_move(Move(2, 8))
        assert long_search(5).get_best_move(simulator.state) is None

    def test_analyze(self):
        mcts = long_search(200)
        tree, _ = mcts.search(x_to_win())
        top = mcts.analyze(tree, top_k=3)
        assert len(top) == 3
        assert top[0]['move'] == Move(2, 8)
        assert top[0]['algebraic'] == 'c9'
        assert top[0]['value'] == pytest.approx(100.0)
        assert top[0]['visits'] >= top[1]['visits'] >= top[2]['visits']
