"""Asynchronous crawl engine for gamecrawl.

Fetches run as asyncio tasks; the traverser keeps up to ``max_concurrent``
of them in flight while a single loop owns the frontier and results.
"""

# Core abstractions
from .core import (
    AsyncFetcher,
    AsyncCrawlTraverser,
    FetchedNode,
    FrontierEntry,
    NodeRecord,
    Frontier,
    VisitedSet,
    TerminationPolicy,
    CountPolicy,
    DeadlinePolicy,
    create_termination_policy,
    ResultCollector,
    RunResult,
    FailedNode,
    StopReason,
)

# Fetchers
from .adapters import SteamStoreFetcher

# Error policies
from .error_policies import (
    FetchDecision,
    FetchErrorPolicy,
    SkipAllPolicy,
    RetryTransientPolicy,
    ThresholdPolicy,
)

# Planning and orchestration
from .planning import CrawlPlan

# High-level API
from .api import (
    build_config,
    crawl_async,
    iter_records_async,
)

__all__ = [
    # Core abstractions
    'AsyncFetcher',
    'AsyncCrawlTraverser',
    # Nodes
    'FetchedNode',
    'FrontierEntry',
    'NodeRecord',
    # Frontier
    'Frontier',
    'VisitedSet',
    # Termination
    'TerminationPolicy',
    'CountPolicy',
    'DeadlinePolicy',
    'create_termination_policy',
    # Collection
    'ResultCollector',
    'RunResult',
    'FailedNode',
    'StopReason',
    # Fetchers
    'SteamStoreFetcher',
    # Error policies
    'FetchDecision',
    'FetchErrorPolicy',
    'SkipAllPolicy',
    'RetryTransientPolicy',
    'ThresholdPolicy',
    # Planning
    'CrawlPlan',
    # High-level API
    'build_config',
    'crawl_async',
    'iter_records_async',
]
