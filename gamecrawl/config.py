"""Configuration system for gamecrawl.

This module defines how callers specify a crawl: where to start,
when to stop, and how aggressively to fetch.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from .errors import ConfigError, NodeId

# Portal
DEFAULT_SEED = 400


@dataclass(frozen=True)
class CountBudget:
    """Stop once ``count`` records have been collected."""

    count: int
    kind: str = field(default="count", init=False)


@dataclass(frozen=True)
class TimeBudget:
    """Stop dispatching once ``duration`` seconds have elapsed."""

    duration: float
    kind: str = field(default="time", init=False)


RunBudget = Union[CountBudget, TimeBudget]


def seed_list(seeds: Sequence[NodeId]) -> Sequence[NodeId]:
    # A lone string stays whole so validate() can reject it
    if isinstance(seeds, (str, bytes)):
        return seeds
    return list(seeds)


def budget_from_options(
    count: Optional[int] = None,
    duration: Optional[float] = None,
) -> RunBudget:
    """Build a budget from mutually exclusive options.

    Exactly one of ``count`` or ``duration`` must be given.

    Raises:
        ConfigError: If both or neither are given
    """
    if count is not None and duration is not None:
        raise ConfigError(["count and duration budgets are mutually exclusive"])
    if count is not None:
        return CountBudget(count)
    if duration is not None:
        return TimeBudget(duration)
    raise ConfigError(["a count or duration budget is required"])


@dataclass
class CrawlConfig:
    """Complete configuration for one crawl run.

    The CrawlPlan validates this before anything is fetched.
    """

    seeds: Sequence[NodeId] = field(default_factory=list)
    budget: Optional[RunBudget] = None

    # Dispatch
    max_concurrent: int = 1
    max_retries: int = 0
    retry_backoff: float = 0.0  # Seconds before the first retry, doubled per retry

    # Depth control
    max_depth: Optional[int] = None  # Links are not followed beyond this depth

    @classmethod
    def by_count(cls, seeds: Sequence[NodeId], count: int, **kwargs) -> 'CrawlConfig':
        """Create config that stops after ``count`` records."""
        return cls(seeds=seed_list(seeds), budget=CountBudget(count), **kwargs)

    @classmethod
    def by_time(cls, seeds: Sequence[NodeId], duration: float, **kwargs) -> 'CrawlConfig':
        """Create config that stops dispatching after ``duration`` seconds."""
        return cls(seeds=seed_list(seeds), budget=TimeBudget(duration), **kwargs)

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if isinstance(self.seeds, (str, bytes)):
            errors.append("seeds must be a sequence of ids, not a single string")
        elif not self.seeds:
            errors.append("at least one seed is required")
        elif any(seed is None for seed in self.seeds):
            errors.append("seeds cannot be None")

        if self.budget is None:
            errors.append("a count or duration budget is required")
        elif isinstance(self.budget, CountBudget):
            if self.budget.count <= 0:
                errors.append("count budget must be positive")
        elif isinstance(self.budget, TimeBudget):
            if self.budget.duration <= 0:
                errors.append("time budget must be positive")
        else:
            errors.append(f"unknown budget type: {type(self.budget).__name__}")

        if self.max_concurrent <= 0:
            errors.append("max_concurrent must be positive")

        if self.max_retries < 0:
            errors.append("max_retries cannot be negative")

        if self.retry_backoff < 0:
            errors.append("retry_backoff cannot be negative")

        if self.max_depth is not None and self.max_depth < 0:
            errors.append("max_depth cannot be negative")

        return errors

    def check(self) -> None:
        """Raise ConfigError if the configuration is invalid."""
        errors = self.validate()
        if errors:
            raise ConfigError(errors)
