"""Core abstractions for async crawling.

This module defines the fetcher capability, the per-run data structures
and the traversal engine that ties them together.
"""

from .node import FetchedNode, FrontierEntry, NodeRecord
from .fetcher import AsyncFetcher
from .frontier import Frontier, VisitedSet
from .termination import (
    TerminationPolicy,
    CountPolicy,
    DeadlinePolicy,
    create_termination_policy,
)
from .collector import FailedNode, ResultCollector, RunResult, StopReason
from .traverser import AsyncCrawlTraverser, AttemptState, CrawlRun, NodeAttempt

__all__ = [
    # Nodes
    'FetchedNode',
    'FrontierEntry',
    'NodeRecord',
    # Fetcher
    'AsyncFetcher',
    # Frontier
    'Frontier',
    'VisitedSet',
    # Termination
    'TerminationPolicy',
    'CountPolicy',
    'DeadlinePolicy',
    'create_termination_policy',
    # Collection
    'FailedNode',
    'ResultCollector',
    'RunResult',
    'StopReason',
    # Traversal
    'AsyncCrawlTraverser',
    'AttemptState',
    'CrawlRun',
    'NodeAttempt',
]
