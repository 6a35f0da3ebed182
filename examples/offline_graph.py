#!/usr/bin/env python3
"""
Offline crawl over an in-memory graph.

This example demonstrates:
- Plugging a custom fetcher into the crawler
- Count versus time budgets on the same graph
- Transient failures being retried
"""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from gamecrawl.aio import crawl_async
from gamecrawl.testing import FakeGraphFetcher


GRAPH = {
    "portal": ["portal-2", "half-life-2"],
    "portal-2": ["portal", "the-talos-principle"],
    "half-life-2": ["half-life", "portal"],
    "the-talos-principle": ["portal-2"],
    "half-life": [],
}


async def main():
    """Run the same graph under different budgets."""
    by_count = await crawl_async(["portal"], count=3, fetcher=FakeGraphFetcher(GRAPH))
    print("Count budget of 3:")
    for record in by_count:
        print(f"  {record.node_id} (from {record.discovered_from})")

    flaky = FakeGraphFetcher(GRAPH, transient_failures={"half-life-2": 2}, delays={"half-life": 0.05})
    by_time = await crawl_async(["portal"], duration=1.0, fetcher=flaky, max_concurrent=2, max_retries=2)
    print("\nTime budget of 1s with a flaky node:")
    print(f"  Collected: {by_time.node_ids}")
    print(f"  Retried: {by_time.retried}")
    print(f"  Stop reason: {by_time.stop_reason.value}")


if __name__ == "__main__":
    asyncio.run(main())
