"""
Time management for the tree search.

Each decision gets a fixed wall-clock budget. The search loop checks
expired() between iterations; an iteration that is already running is
always allowed to finish, so the budget is advisory, not preemptive.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable
import time


@dataclass
class TimeConfig:
    """Configuration for time-boxed search."""

    # Budget per decision in milliseconds
    move_time_ms: int = 1000

    # Clock returning seconds; injectable for tests
    clock: Callable[[], float] = time.time


@dataclass
class TimeManager:
    """
    Tracks the deadline of the current decision and accumulates search
    statistics across decisions.
    """

    config: TimeConfig = field(default_factory=TimeConfig)

    start_time: float = field(init=False, default=0.0)
    deadline: float = field(init=False, default=0.0)

    # Statistics for analysis
    total_iterations: int = 0
    total_time_used: float = 0.0
    move_count: int = 0

    def start(self) -> float:
        """Begin timing a decision. Returns the deadline."""
        self.start_time = self.config.clock()
        self.deadline = self.start_time + self.config.move_time_ms / 1000.0
        return self.deadline

    def expired(self) -> bool:
        return self.config.clock() >= self.deadline

    def remaining(self) -> float:
        """Seconds left before the deadline (never negative)."""
        return max(0.0, self.deadline - self.config.clock())

    def elapsed(self) -> float:
        return self.config.clock() - self.start_time

    def update(self, elapsed_time: float, iterations: int) -> None:
        """
        Record a finished decision.

        Args:
            elapsed_time: Time spent on this decision (seconds)
            iterations: Number of search iterations completed
        """
        self.total_iterations += iterations
        self.total_time_used += elapsed_time
        self.move_count += 1

    @property
    def avg_iterations_per_move(self) -> float:
        if self.move_count == 0:
            return 0.0
        return self.total_iterations / self.move_count

    @property
    def avg_time_per_move(self) -> float:
        """Average time per decision so far (seconds)."""
        if self.move_count == 0:
            return 0.0
        return self.total_time_used / self.move_count

    def stats(self) -> dict:
        """Return statistics about time management."""
        return {
            'move_count': self.move_count,
            'total_iterations': self.total_iterations,
            'total_time_used': self.total_time_used,
            'avg_iterations_per_move': self.avg_iterations_per_move,
            'avg_time_per_move': self.avg_time_per_move,
        }


def create_time_manager(move_time_ms: int = 1000) -> TimeManager:
    """Create a time manager with the given per-move budget."""
    return TimeManager(config=TimeConfig(move_time_ms=move_time_ms))
