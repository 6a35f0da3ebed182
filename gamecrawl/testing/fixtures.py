"""Test fixtures for gamecrawl consumers.

FakeGraphFetcher serves a fixed in-memory graph so traversal behaviour can
be tested without any network access.
"""

import asyncio
import time
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..aio.core.fetcher import AsyncFetcher
from ..aio.core.node import FetchedNode
from ..errors import NodeId, PermanentFetchError, TransientFetchError


class FakeGraphFetcher(AsyncFetcher):
    """Deterministic fetcher backed by an adjacency mapping.

    Example:
        fetcher = FakeGraphFetcher(
            {'A': ['B', 'C'], 'B': ['D'], 'C': ['D'], 'D': []},
            transient_failures={'B': 1},
        )

    Nodes missing from the graph fail permanently, like a 404.
    """

    def __init__(
        self,
        graph: Mapping[NodeId, Sequence[NodeId]],
        metadata: Optional[Mapping[NodeId, Dict[str, Any]]] = None,
        transient_failures: Optional[Mapping[NodeId, int]] = None,
        permanent_failures: Iterable[NodeId] = (),
        delays: Optional[Mapping[NodeId, float]] = None,
        clock=time.monotonic
    ):
        """Initialize the fake graph.

        Args:
            graph: node id -> outbound link ids
            metadata: Optional per-node metadata (defaults to a generated name)
            transient_failures: node id -> number of initial attempts that fail
            permanent_failures: Node ids that always fail permanently
            delays: node id -> seconds to sleep inside fetch
            clock: Time source used for the dispatch log
        """
        super().__init__()
        self.graph = {node_id: list(links) for node_id, links in graph.items()}
        self.metadata = dict(metadata or {})
        self.transient_failures = dict(transient_failures or {})
        self.permanent_failures = set(permanent_failures)
        self.delays = dict(delays or {})
        self.clock = clock
        self.calls: List[NodeId] = []
        self.dispatch_log: List[Tuple[NodeId, float]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch(self, node_id: NodeId) -> FetchedNode:
        self.fetch_count += 1
        self.calls.append(node_id)
        self.dispatch_log.append((node_id, self.clock()))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            delay = self.delays.get(node_id, 0)
            if delay:
                await asyncio.sleep(delay)
            else:
                await asyncio.sleep(0)

            if node_id in self.permanent_failures or node_id not in self.graph:
                raise PermanentFetchError(f"No such entry: {node_id}", node_id, 404)

            remaining = self.transient_failures.get(node_id, 0)
            if remaining > 0:
                self.transient_failures[node_id] = remaining - 1
                raise TransientFetchError(f"Temporary failure for {node_id}", node_id, 503)

            metadata = self.metadata.get(node_id, {'name': f"Game {node_id}"})
            return FetchedNode(metadata=metadata, links=tuple(self.graph[node_id]))
        finally:
            self.in_flight -= 1

    def attempts_for(self, node_id: NodeId) -> int:
        """How many times a node was fetched."""
        return self.calls.count(node_id)


class FakeClock:
    """Manually advanced clock for deadline tests."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TickingFetcher(FakeGraphFetcher):
    """FakeGraphFetcher that advances a FakeClock on every fetch.

    Lets deadline behaviour be tested without real sleeping.
    """

    def __init__(self, graph, clock: FakeClock, step: float = 1.0, **kwargs):
        super().__init__(graph, clock=clock, **kwargs)
        self.step = step

    async def fetch(self, node_id: NodeId) -> FetchedNode:
        try:
            return await super().fetch(node_id)
        finally:
            self.clock.advance(self.step)


def chain_graph(length: int) -> Dict[int, List[int]]:
    """Graph 0 -> 1 -> ... -> length-1."""
    return {i: ([i + 1] if i + 1 < length else []) for i in range(length)}


def wide_graph(root: NodeId, width: int) -> Dict[Any, List[Any]]:
    """Root linking to ``width`` leaves named '<root>-<n>'."""
    leaves = [f"{root}-{n}" for n in range(width)]
    graph: Dict[Any, List[Any]] = {root: leaves}
    for leaf in leaves:
        graph[leaf] = []
    return graph
