"""Async fetcher abstraction.

Defines the single capability the traversal engine needs from a data
source: fetch one node, returning its metadata and outbound links.
"""

from abc import ABC, abstractmethod

from ...errors import NodeId
from .node import FetchedNode


class AsyncFetcher(ABC):
    """Abstract base class for async fetchers.

    Fetchers bridge between the generic traversal logic and a specific
    source of game entries (a web store, an API, an in-memory graph).
    Transport, parsing and rate limiting are the fetcher's business.
    """

    def __init__(self):
        self.fetch_count = 0

    @abstractmethod
    async def fetch(self, node_id: NodeId) -> FetchedNode:
        """Fetch a single node.

        Args:
            node_id: Identifier of the node to fetch

        Returns:
            FetchedNode with metadata and outbound links

        Raises:
            TransientFetchError: Failure that may succeed if retried
            PermanentFetchError: Failure that will not succeed on retry
        """
        pass

    def get_stats(self) -> dict:
        """Get fetcher statistics, logged when a crawl finishes."""
        return {'fetch_count': self.fetch_count}

    async def close(self):
        """Clean up fetcher resources.

        Override if the fetcher holds connections.
        """
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
