"""
Game records for Ultimate Tic-Tac-Toe.

Format example:
```
[X "TacticalBot"]
[O "MCTSBot"]
[Result "1-0"]

1. e5 e6 2. d8 b6 3. e7 ...
```

Each token is one move in algebraic notation (see moves.py). Move
numbers increment after both players have moved.
"""

from __future__ import annotations
import re
from dataclasses import dataclass, field

from .moves import Move, move_to_algebraic, algebraic_to_move
from .simulator import GameOutcome, GameSimulator, simulate
from .state import GameState

_TAG_RE = re.compile(r'^\[(\w+)\s+"([^"]*)"\]$')
_MOVE_NUMBER_RE = re.compile(r'^\d+\.$')

RESULTS = ("1-0", "0-1", "1/2-1/2", "*")


@dataclass
class GameRecord:
    """Record of a complete or in-progress game."""

    x_player: str = "Player X"
    o_player: str = "Player O"
    result: str = "*"  # "1-0" = X wins, "0-1" = O wins, "1/2-1/2" = tie, "*" = ongoing
    moves: list[Move] = field(default_factory=list)

    def replay(self, state: GameState | None = None) -> GameSimulator:
        """
        Re-apply the recorded moves from the starting position (or `state`).

        Raises ValueError at the first illegal move.
        """
        return simulate(state if state is not None else GameState.new_game(), self.moves)

    def update_result(self, simulator: GameSimulator) -> None:
        """Set the result tag from a simulator's outcome."""
        if simulator.outcome is GameOutcome.WIN:
            self.result = "1-0" if simulator.winner == 0 else "0-1"
        elif simulator.outcome is GameOutcome.TIE:
            self.result = "1/2-1/2"
        else:
            self.result = "*"

    def to_text(self) -> str:
        """Export to a tagged, numbered text format."""
        lines = [
            f'[X "{self.x_player}"]',
            f'[O "{self.o_player}"]',
            f'[Result "{self.result}"]',
            "",
        ]

        tokens = []
        for i, move in enumerate(self.moves):
            if i % 2 == 0:
                tokens.append(f"{i // 2 + 1}.")
            tokens.append(move_to_algebraic(move))
        tokens.append(self.result)
        lines.append(" ".join(tokens))
        return "\n".join(lines)

    @classmethod
    def from_text(cls, text: str) -> GameRecord:
        """Parse the format written by to_text()."""
        record = cls()
        body = []
        for line in text.strip().splitlines():
            line = line.strip()
            if not line:
                continue
            match = _TAG_RE.match(line)
            if match:
                name, value = match.groups()
                if name == "X":
                    record.x_player = value
                elif name == "O":
                    record.o_player = value
                elif name == "Result":
                    record.result = value
                continue
            body.append(line)

        for token in " ".join(body).split():
            if _MOVE_NUMBER_RE.match(token) or token in RESULTS:
                continue
            record.moves.append(algebraic_to_move(token))
        return record
