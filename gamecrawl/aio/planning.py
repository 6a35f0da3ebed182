"""Async execution planning for crawls.

This module provides the CrawlPlan class that validates configuration
and wires a fetcher, traverser and error policy together.
"""

import time
from typing import AsyncIterator, Optional

from ..config import CrawlConfig
from ..errors import ConfigError
from .core import AsyncCrawlTraverser, AsyncFetcher, NodeRecord, RunResult
from .core.termination import Clock
from .core.traverser import CrawlRun
from .error_policies import FetchErrorPolicy


class CrawlPlan:
    """Orchestrates a crawl with configuration validation.

    Invalid configuration raises ConfigError here, before any fetch is
    attempted.
    """

    def __init__(
        self,
        config: CrawlConfig,
        fetcher: Optional[AsyncFetcher] = None,
        error_policy: Optional[FetchErrorPolicy] = None,
        clock: Clock = time.monotonic
    ):
        """Initialize crawl plan.

        Args:
            config: Crawl configuration
            fetcher: Fetcher (a SteamStoreFetcher is created if None)
            error_policy: Custom failure policy
            clock: Monotonic time source
        """
        errors = config.validate()
        if errors:
            raise ConfigError(errors)

        self.config = config
        self._owns_fetcher = fetcher is None
        self.fetcher = fetcher if fetcher is not None else self._create_fetcher()
        self.traverser = AsyncCrawlTraverser(
            max_concurrent=config.max_concurrent,
            max_retries=config.max_retries,
            retry_backoff=config.retry_backoff,
            max_depth=config.max_depth,
            error_policy=error_policy,
            clock=clock,
        )
        self.last_run: Optional[CrawlRun] = None

    def _create_fetcher(self) -> AsyncFetcher:
        from .adapters.steam import SteamStoreFetcher
        return SteamStoreFetcher()

    def new_run(self) -> CrawlRun:
        self.last_run = self.traverser.new_run(self.config.seeds, self.config.budget)
        return self.last_run

    async def execute(self) -> RunResult:
        """Run the crawl to completion."""
        run = self.new_run()
        try:
            async for _ in self.traverser.traverse(run, self.fetcher):
                pass
        finally:
            await self.close()
        return run.result()

    async def stream(self) -> AsyncIterator[NodeRecord]:
        """Yield records as they are accepted.

        The finished RunResult is available afterwards via
        ``plan.last_run.result()``.
        """
        run = self.new_run()
        records = self.traverser.traverse(run, self.fetcher)
        try:
            async for record in records:
                yield record
        finally:
            # Cancel and drain in-flight fetches before the fetcher goes away
            await records.aclose()
            await self.close()

    async def close(self):
        """Close the fetcher if this plan created it."""
        if self._owns_fetcher:
            await self.fetcher.close()
