"""Ultimate Tic-Tac-Toe rules engine and move search."""

__version__ = "0.1.0"
