"""Termination policies for bounded crawls.

A policy answers two questions for the traversal engine:
- may another fetch be dispatched?
- may a freshly fetched record still be accepted?

Count budgets close both at the target. Time budgets close dispatch at
the deadline but keep accepting whatever was already in flight.
"""

import time
from abc import ABC, abstractmethod
from typing import Callable, Optional

from ...config import CountBudget, RunBudget, TimeBudget

Clock = Callable[[], float]


class TerminationPolicy(ABC):
    """Abstract base class for termination policies."""

    def __init__(self, clock: Clock = time.monotonic):
        self.clock = clock
        self.started_at: Optional[float] = None

    def start(self) -> None:
        """Mark the start of the run."""
        self.started_at = self.clock()

    @abstractmethod
    def is_terminal(self, accepted: int) -> bool:
        """Check whether the run should stop dispatching.

        Args:
            accepted: Number of records accepted so far
        """
        pass

    def accepts(self, accepted: int) -> bool:
        """Check whether one more record may be accepted."""
        return True

    def elapsed(self) -> float:
        """Seconds since start()."""
        if self.started_at is None:
            return 0.0
        return self.clock() - self.started_at

    @property
    @abstractmethod
    def reason(self) -> str:
        """Short name for why this policy stops a run."""
        pass


class CountPolicy(TerminationPolicy):
    """Terminal once ``target`` records have been accepted.

    Failed fetches consume no headroom.
    """

    def __init__(self, target: int, clock: Clock = time.monotonic):
        super().__init__(clock)
        self.target = target

    def remaining(self, accepted: int) -> int:
        return max(self.target - accepted, 0)

    def is_terminal(self, accepted: int) -> bool:
        return accepted >= self.target

    def accepts(self, accepted: int) -> bool:
        return accepted < self.target

    @property
    def reason(self) -> str:
        return "count_reached"


class DeadlinePolicy(TerminationPolicy):
    """Terminal once the wall-clock deadline has passed.

    This is a cutoff for dispatching, not a per-fetch timeout.
    """

    def __init__(self, duration: float, clock: Clock = time.monotonic):
        super().__init__(clock)
        self.duration = duration
        self.deadline: Optional[float] = None

    def start(self) -> None:
        super().start()
        self.deadline = self.started_at + self.duration

    def is_terminal(self, accepted: int) -> bool:
        if self.deadline is None:
            return False
        return self.clock() >= self.deadline

    @property
    def reason(self) -> str:
        return "deadline_passed"


def create_termination_policy(budget: RunBudget, clock: Clock = time.monotonic) -> TerminationPolicy:
    """Factory function to create the policy for a budget.

    Args:
        budget: CountBudget or TimeBudget
        clock: Monotonic time source (injectable for tests)

    Returns:
        Fresh TerminationPolicy instance
    """
    if isinstance(budget, CountBudget):
        return CountPolicy(budget.count, clock)
    if isinstance(budget, TimeBudget):
        return DeadlinePolicy(budget.duration, clock)
    raise ValueError(f"Unknown budget: {budget!r}")
