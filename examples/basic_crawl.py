#!/usr/bin/env python3
"""
Basic crawl example against the live Steam store.

This example demonstrates:
- Streaming records as they are collected
- A count budget with a few concurrent fetches
- Reading the run summary afterwards
"""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from gamecrawl import CrawlConfig, configure_logging
from gamecrawl.aio import CrawlPlan


async def main():
    """Crawl outward from one app and print what was found."""
    seeds = [int(arg) for arg in sys.argv[1:]] or [400]
    configure_logging("INFO")

    config = CrawlConfig.by_count(seeds, 20, max_concurrent=4, max_retries=1, retry_backoff=0.5)
    plan = CrawlPlan(config)

    print(f"Crawling from: {', '.join(map(str, seeds))}")
    print("-" * 50)

    async for record in plan.stream():
        tags = ", ".join(record.metadata.get("tags", [])[:3])
        print(f"  [{record.depth}] {record.node_id:>7} {record.name} ({tags})")

    summary = plan.last_run.result().summary()
    print(f"\nCrawl Summary:")
    print(f"  Collected: {summary['collected']}")
    print(f"  Attempted: {summary['attempted']}")
    print(f"  Failed: {summary['failed']}")
    print(f"  Stopped: {summary['stop_reason']} after {summary['elapsed']}s")


if __name__ == "__main__":
    asyncio.run(main())
