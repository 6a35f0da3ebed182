"""gamecrawl - bounded breadth-first crawler for linked game entries.

Start from one or more seed ids, follow the links each entry's page
exposes, and stop after a fixed number of entries or a fixed time.

    from gamecrawl import crawl
    result = crawl([400], count=20)

    from gamecrawl.aio import crawl_async
    result = await crawl_async([400], duration=60, max_concurrent=4)
"""

__version__ = "0.1.0"

from . import aio
from .api import crawl
from .config import CountBudget, CrawlConfig, TimeBudget, budget_from_options
from .errors import (
    ConfigError,
    CrawlAbortedError,
    FetchError,
    GameCrawlError,
    PermanentFetchError,
    TransientFetchError,
)
from .log import configure_logging

__all__ = [
    "__version__",
    "aio",
    "crawl",
    "CountBudget",
    "TimeBudget",
    "CrawlConfig",
    "budget_from_options",
    "configure_logging",
    "GameCrawlError",
    "ConfigError",
    "FetchError",
    "TransientFetchError",
    "PermanentFetchError",
    "CrawlAbortedError",
]
