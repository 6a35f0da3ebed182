"""Synchronous API for gamecrawl.

Thin wrappers around the async API for callers without an event loop
of their own.
"""

import asyncio
from typing import Optional, Sequence

from .aio.api import crawl_async
from .aio.core import AsyncFetcher, RunResult
from .aio.error_policies import FetchErrorPolicy
from .errors import NodeId


def crawl(
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
    """Crawl game entries reachable from ``seeds`` and block until done.

    Must not be called from inside a running event loop; use
    ``gamecrawl.aio.crawl_async`` there.

    Example:
        >>> result = crawl([400], count=5)
        >>> result.summary()['collected']
        5
    """
    return asyncio.run(crawl_async(
        seeds,
        count=count,
        duration=duration,
        fetcher=fetcher,
        max_concurrent=max_concurrent,
        max_retries=max_retries,
        retry_backoff=retry_backoff,
        max_depth=max_depth,
        error_policy=error_policy,
    ))
