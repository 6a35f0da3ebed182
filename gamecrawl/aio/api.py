"""High-level async API for gamecrawl.

This module provides simple async functions for common crawl
operations. All of them go through CrawlPlan.
"""

from typing import AsyncIterator, Optional, Sequence

from ..config import CrawlConfig, seed_list, budget_from_options
from ..errors import NodeId
from .core import AsyncFetcher, NodeRecord, RunResult
from .error_policies import FetchErrorPolicy
from .planning import CrawlPlan


def build_config(
    seeds: Sequence[NodeId],
    count: Optional[int] = None,
    duration: Optional[float] = None,
    max_concurrent: int = 1,
    max_retries: int = 0,
    retry_backoff: float = 0.0,
    max_depth: Optional[int] = None
) -> CrawlConfig:
    """Build a CrawlConfig from keyword options.

    Raises:
        ConfigError: If both or neither of count and duration are given
    """
    return CrawlConfig(
        seeds=seed_list(seeds),
        budget=budget_from_options(count, duration),
        max_concurrent=max_concurrent,
        max_retries=max_retries,
        retry_backoff=retry_backoff,
        max_depth=max_depth,
    )


async def crawl_async(
    seeds: Sequence[NodeId],
    count: Optional[int] = None,
    duration: Optional[float] = None,
    fetcher: Optional[AsyncFetcher] = None,
    max_concurrent: int = 1,
    max_retries: int = 0,
    retry_backoff: float = 0.0,
    max_depth: Optional[int] = None,
    error_policy: Optional[FetchErrorPolicy] = None
) -> RunResult:
    """Crawl game entries reachable from ``seeds``.

    Args:
        seeds: Starting node ids (Steam app ids for the default fetcher)
        count: Stop after this many records (exclusive with duration)
        duration: Stop dispatching after this many seconds
        fetcher: Custom fetcher (defaults to SteamStoreFetcher)
        max_concurrent: Maximum fetches in flight
        max_retries: Retries per node for transient failures
        retry_backoff: Seconds before the first retry
        max_depth: Do not follow links beyond this depth
        error_policy: Custom failure policy

    Returns:
        RunResult with records in acceptance order and attempt counts

    Example:
        >>> result = await crawl_async([400], count=10)
        >>> [record.name for record in result]
    """
    config = build_config(
        seeds, count, duration, max_concurrent, max_retries, retry_backoff, max_depth
    )
    plan = CrawlPlan(config, fetcher=fetcher, error_policy=error_policy)
    return await plan.execute()


async def iter_records_async(
    seeds: Sequence[NodeId],
    count: Optional[int] = None,
    duration: Optional[float] = None,
    fetcher: Optional[AsyncFetcher] = None,
    max_concurrent: int = 1,
    max_retries: int = 0,
    max_depth: Optional[int] = None
) -> AsyncIterator[NodeRecord]:
    """Stream records as they are accepted.

    Breaking out of the loop early abandons any fetches still in flight.

    Example:
        >>> async for record in iter_records_async([400], duration=30):
        ...     print(record.node_id, record.name)
    """
    config = build_config(
        seeds, count, duration, max_concurrent, max_retries, max_depth=max_depth
    )
    plan = CrawlPlan(config, fetcher=fetcher)
    async for record in plan.stream():
        yield record
