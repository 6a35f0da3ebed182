"""Command line interface for gamecrawl.

Usage:
    gamecrawl 400 --count 25
    gamecrawl 400 620 --time 60 --concurrency 4 --retries 1 --json
"""

import argparse
import asyncio
import json
import sys
from typing import List, Optional

from .aio.api import build_config
from .aio.core import RunResult
from .aio.planning import CrawlPlan
from .config import DEFAULT_SEED
from .errors import ConfigError
from .log import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gamecrawl",
        description="Crawl Steam store apps breadth-first from one or more seed app ids.",
    )
    parser.add_argument(
        "seeds", nargs="*", type=int, default=[DEFAULT_SEED],
        help=f"Seed app ids (default: {DEFAULT_SEED})",
    )
    budget = parser.add_mutually_exclusive_group(required=True)
    budget.add_argument("--count", type=int, help="Stop after this many apps")
    budget.add_argument("--time", type=float, dest="duration", help="Stop dispatching after this many seconds")
    parser.add_argument("--concurrency", type=int, default=1, help="Fetches in flight (default: 1)")
    parser.add_argument("--retries", type=int, default=0, help="Retries for transient failures (default: 0)")
    parser.add_argument("--backoff", type=float, default=0.0, help="Seconds before the first retry")
    parser.add_argument("--max-depth", type=int, help="Do not follow links beyond this depth")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument(
        "--log-level", default="WARNING", type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: WARNING)",
    )
    return parser


def format_text(result: RunResult) -> str:
    lines = []
    for record in result:
        tags = ", ".join(record.metadata.get("tags") or [])
        price = record.metadata.get("price") or "-"
        lines.append(f"{record.node_id}\t{record.name}\t{price}\t{tags}")

    summary = result.summary()
    lines.append(
        f"collected={summary['collected']} attempted={summary['attempted']} "
        f"succeeded={summary['succeeded']} failed={summary['failed']} "
        f"stop={summary['stop_reason']} elapsed={summary['elapsed']}s"
    )
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        config = build_config(
            args.seeds,
            count=args.count,
            duration=args.duration,
            max_concurrent=args.concurrency,
            max_retries=args.retries,
            retry_backoff=args.backoff,
            max_depth=args.max_depth,
        )
        plan = CrawlPlan(config)
    except ConfigError as e:
        print(f"gamecrawl: {e}", file=sys.stderr)
        return 2

    try:
        result = asyncio.run(plan.execute())
    except KeyboardInterrupt:
        return 130

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(format_text(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
