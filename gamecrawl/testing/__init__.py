"""Testing utilities for gamecrawl."""

from .fixtures import FakeClock, FakeGraphFetcher, TickingFetcher, chain_graph, wide_graph

__all__ = ['FakeGraphFetcher', 'FakeClock', 'TickingFetcher', 'chain_graph', 'wide_graph']
