"""Core game logic: board geometry, state, moves and the rules simulator."""

from .board import *
from .moves import Move, MoveGenerator
from .state import GameState
from .simulator import GameOutcome, GameSimulator
