"""Exception hierarchy for gamecrawl.

All exceptions derive from GameCrawlError so callers can catch any
crawl-related failure with a single except clause.
"""

from typing import Any, List, Optional, Union

NodeId = Union[int, str]


class GameCrawlError(Exception):
    """Base exception for all gamecrawl errors."""


class ConfigError(GameCrawlError):
    """Raised when a crawl is configured inconsistently.

    The run never starts when this is raised. ``errors`` lists every
    problem found, not just the first.
    """

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__(f"Invalid configuration: {', '.join(self.errors)}")


class FetchError(GameCrawlError):
    """A fetch of a single node failed.

    Fetchers raise one of the two subclasses; the engine decides what
    to do based on the kind.
    """

    kind = "unknown"

    def __init__(
        self,
        message: str,
        node_id: Optional[NodeId] = None,
        status: Optional[int] = None,
    ):
        self.node_id = node_id
        self.status = status
        super().__init__(message)


class TransientFetchError(FetchError):
    """Network hiccup, timeout, rate limit or server error. May be retried."""

    kind = "transient"


class PermanentFetchError(FetchError):
    """Missing or unparseable entry. Never retried."""

    kind = "permanent"


class CrawlAbortedError(GameCrawlError):
    """Raised by an opt-in error policy to stop the whole run."""

    def __init__(self, message: str, failures: Optional[List[Any]] = None):
        self.failures = failures or []
        super().__init__(message)
