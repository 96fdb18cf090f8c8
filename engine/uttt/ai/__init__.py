"""AI components: tactics, static evaluation, tree search and bots."""

from .mcts import MCTS, MCTSConfig
from .evaluator import PositionEvaluator
from .bots import Bot, BotConfig, create_bot
