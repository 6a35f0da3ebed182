#!/usr/bin/env python
"""
Simple Test Runner for gamecrawl
================================

Runs all tests except slow ones and the ones that talk to the live
Steam store.

Usage:
    python run_tests.py           # Run all offline, non-slow tests
    python run_tests.py --slow    # Also run slow tests
    python run_tests.py --live    # Also run tests against store.steampowered.com
"""

import subprocess
import sys
import argparse
from pathlib import Path


def run_tests(include_slow=False, include_live=False):
    """Run the test suite."""
    cmd = [
        sys.executable, "-m", "pytest",
        "--tb=short",               # Short traceback format
        "--durations=10",           # Show 10 slowest tests
        "-v"                        # Verbose output
    ]

    excluded = []
    if not include_slow:
        excluded.append("slow")
    if not include_live:
        excluded.append("live")

    if excluded:
        cmd.extend(["-m", " and ".join(f"not {marker}" for marker in excluded)])
        print(f"Running all tests EXCEPT: {', '.join(excluded)}")
    else:
        print("Running ALL tests including slow and live ones...")
    print("=" * 60)

    result = subprocess.run(cmd, cwd=Path(__file__).parent)
    return result.returncode


def main():
    parser = argparse.ArgumentParser(description="Test runner for gamecrawl")
    parser.add_argument("--slow", action="store_true", help="Include slow tests")
    parser.add_argument("--live", action="store_true", help="Include tests that hit the live store")

    args = parser.parse_args()
    return run_tests(include_slow=args.slow, include_live=args.live)


if __name__ == "__main__":
    sys.exit(main())
