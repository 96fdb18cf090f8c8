#!/usr/bin/env python3
"""
Terminal client: watch two bots play one game of Ultimate Tic-Tac-Toe.
"""

from __future__ import annotations
import argparse
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from uttt.core.moves import Move
from uttt.core.notation import GameRecord
from uttt.core.simulator import GameOutcome, GameSimulator
from uttt.core.state import GameState
from uttt.ai.bots import BOTS, Bot, BotConfig, create_bot

logger = logging.getLogger(__name__)


@dataclass
class GameResult:
    """Outcome of one bot-vs-bot game."""
    winner: Optional[int]  # 0 = X, 1 = O, None = tie or unfinished
    outcome: GameOutcome
    moves: list[Move] = field(default_factory=list)
    final_state: GameState = field(default_factory=GameState.new_game)


def play_game(
    bot_x: Bot,
    bot_o: Bot,
    state: Optional[GameState] = None,
    verbose: bool = False,
) -> GameResult:
    """
    Play bot_x (player 0) against bot_o (player 1) until the game ends.

    A bot that returns an illegal move or no move ends the game; the
    error is logged and the game is reported as unfinished.
    """
    simulator = GameSimulator(state if state is not None else GameState.new_game())
    bots = (bot_x, bot_o)
    moves: list[Move] = []

    while not simulator.is_over:
        bot = bots[simulator.current_player]
        move = bot.decide_move(simulator.state)
        if move is None:
            logger.error("%s returned no move at move %d", bot.name, simulator.state.move_number)
            break
        if not simulator.apply_move(move):
            logger.error("%s played illegal move %s", bot.name, move)
            break
        moves.append(move)

        if verbose:
            print(f"Move {len(moves)}: {bot.name} plays {move}")
            print(simulator.state)
            print()

    return GameResult(
        winner=simulator.winner,
        outcome=simulator.outcome,
        moves=moves,
        final_state=simulator.state,
    )


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Ultimate Tic-Tac-Toe bot vs bot')
    parser.add_argument('--x', dest='bot_x', choices=sorted(BOTS), default='tactical',
                        help='Bot playing X (moves first)')
    parser.add_argument('--o', dest='bot_o', choices=sorted(BOTS), default='mcts',
                        help='Bot playing O')
    parser.add_argument('--time-ms', type=int, default=1000,
                        help='Tree search budget per move (ms)')
    parser.add_argument('--seed', type=int, default=None, help='Random seed')
    parser.add_argument('--quiet', action='store_true', help='Only print the result')
    parser.add_argument('--verbose', action='store_true', help='Debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    def make(kind: str, offset: int) -> Bot:
        seed = None if args.seed is None else args.seed + offset
        return create_bot(kind, BotConfig(seed=seed, move_time_ms=args.time_ms))

    bot_x = make(args.bot_x, 0)
    bot_o = make(args.bot_o, 1)

    result = play_game(bot_x, bot_o, verbose=not args.quiet)

    record = GameRecord(x_player=bot_x.name, o_player=bot_o.name, moves=result.moves)
    record.update_result(record.replay())
    print(record.to_text())

    if result.outcome is GameOutcome.WIN:
        winner = bot_x if result.winner == 0 else bot_o
        print(f"\n{winner.name} wins after {len(result.moves)} moves")
    elif result.outcome is GameOutcome.TIE:
        print(f"\nTie after {len(result.moves)} moves")
    else:
        print("\nGame unfinished")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
