"""Async crawl traversal.

The traverser pulls entries from the frontier, dispatches fetches (up to
``max_concurrent`` at once), feeds discovered links back into the frontier
and stops when the termination policy says so.

One coordinating loop owns all run state. Fetch tasks only report their
outcome; enqueueing and result submission happen in the loop, between
awaits, so they are atomic without locks.
"""

import asyncio
import time
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import AsyncIterator, Deque, Dict, Optional, Sequence

from ...config import RunBudget
from ...errors import FetchError, NodeId
from ...log import get_logger
from ..error_policies import FetchDecision, FetchErrorPolicy, RetryTransientPolicy
from .collector import FailedNode, ResultCollector, RunResult, StopReason
from .fetcher import AsyncFetcher
from .frontier import Frontier
from .node import FetchedNode, FrontierEntry, NodeRecord
from .termination import Clock, TerminationPolicy, create_termination_policy

logger = get_logger(__name__)


class AttemptState(Enum):
    """Lifecycle of one node's fetch attempts."""
    PENDING = "pending"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    RETRY_PENDING = "retry_pending"
    FAILED = "failed"


@dataclass
class NodeAttempt:
    """Per-node retry state machine.

    PENDING -> IN_FLIGHT -> SUCCEEDED | RETRY_PENDING | FAILED, and
    RETRY_PENDING -> IN_FLIGHT through the normal dispatch gate.
    """

    entry: FrontierEntry
    attempts: int = 0
    state: AttemptState = AttemptState.PENDING
    fetched: Optional[FetchedNode] = None
    error: Optional[FetchError] = None

    @property
    def node_id(self) -> NodeId:
        return self.entry.node_id


@dataclass
class CrawlRun:
    """All mutable state for a single run. Discarded when the run ends."""

    seeds: Sequence[NodeId]
    policy: TerminationPolicy
    error_policy: FetchErrorPolicy
    frontier: Frontier = field(default_factory=Frontier)
    collector: Optional[ResultCollector] = None
    retry_queue: Deque[NodeAttempt] = field(default_factory=deque)
    in_flight: Dict[asyncio.Future, NodeAttempt] = field(default_factory=dict)
    stop_reason: Optional[StopReason] = None

    def __post_init__(self):
        if self.collector is None:
            self.collector = ResultCollector(self.policy)

    def next_attempt(self) -> Optional[NodeAttempt]:
        """Retries go first, then fresh frontier entries in FIFO order."""
        if self.retry_queue:
            return self.retry_queue.popleft()
        entry = self.frontier.dequeue()
        if entry is None:
            return None
        return NodeAttempt(entry)

    def result(self) -> RunResult:
        return self.collector.get_result(self.stop_reason)


class AsyncCrawlTraverser:
    """Breadth-first crawl over a graph of linked game entries.

    With ``max_concurrent == 1`` records come out in strict BFS order and
    repeated runs over the same responses give identical results. Higher
    concurrency trades that ordering for throughput.
    """

    def __init__(
        self,
        max_concurrent: int = 1,
        max_retries: int = 0,
        retry_backoff: float = 0.0,
        max_depth: Optional[int] = None,
        error_policy: Optional[FetchErrorPolicy] = None,
        clock: Clock = time.monotonic
    ):
        """Initialize traverser.

        Args:
            max_concurrent: Maximum fetches in flight at once
            max_retries: Retries per node for transient failures
            retry_backoff: Seconds before the first retry
            max_depth: Links are not followed from nodes at this depth
            error_policy: Custom failure policy (overrides retry settings)
            clock: Monotonic time source
        """
        self.max_concurrent = max_concurrent
        self.max_retries = max_retries
        self.retry_backoff = retry_backoff
        self.max_depth = max_depth
        self.error_policy = error_policy
        self.clock = clock

    def new_run(self, seeds: Sequence[NodeId], budget: RunBudget) -> CrawlRun:
        """Allocate fresh state for one run."""
        error_policy = self.error_policy or RetryTransientPolicy(
            max_retries=self.max_retries,
            base_delay=self.retry_backoff,
        )
        return CrawlRun(
            seeds=list(seeds),
            policy=create_termination_policy(budget, self.clock),
            error_policy=error_policy,
        )

    async def crawl(
        self,
        seeds: Sequence[NodeId],
        fetcher: AsyncFetcher,
        budget: RunBudget
    ) -> RunResult:
        """Run a complete crawl and return its result."""
        run = self.new_run(seeds, budget)
        async for _ in self.traverse(run, fetcher):
            pass
        return run.result()

    async def traverse(self, run: CrawlRun, fetcher: AsyncFetcher) -> AsyncIterator[NodeRecord]:
        """Traverse with streaming, yielding records as they are accepted.

        Once the policy turns terminal nothing new is dispatched; fetches
        already in flight are awaited and their records go through the
        collector's acceptance check.
        """
        run.policy.start()
        run.frontier.seed(run.seeds)
        logger.info(
            "crawl_started",
            seeds=list(run.seeds),
            stops_on=run.policy.reason,
            max_concurrent=self.max_concurrent,
        )

        try:
            while True:
                self._dispatch(run, fetcher)
                if not run.in_flight:
                    break

                done, _ = await asyncio.wait(
                    list(run.in_flight), return_when=asyncio.FIRST_COMPLETED
                )
                # Dispatch order, so simultaneous completions stay deterministic
                for task in [t for t in run.in_flight if t in done]:
                    attempt = run.in_flight.pop(task)
                    task.result()
                    record = self._complete(run, attempt)
                    if record is not None:
                        yield record
        except GeneratorExit:
            if run.stop_reason is None:
                run.stop_reason = StopReason.STREAM_CLOSED
            raise
        finally:
            # Only reached with work in flight if the consumer stopped early
            # or something raised. Wait for the cancellations to land so the
            # fetcher is idle before anyone closes it.
            pending = list(run.in_flight)
            run.in_flight.clear()
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        self._abandon_retries(run)
        if run.stop_reason is None:
            run.stop_reason = StopReason.FRONTIER_EXHAUSTED
        logger.info("crawl_finished", fetcher=fetcher.get_stats(), **run.result().summary())

    def _dispatch(self, run: CrawlRun, fetcher: AsyncFetcher) -> None:
        """Start fetches until the concurrency limit, policy or frontier stops us."""
        while len(run.in_flight) < self.max_concurrent:
            if run.policy.is_terminal(run.collector.accepted):
                if run.stop_reason is None:
                    run.stop_reason = StopReason(run.policy.reason)
                return

            attempt = run.next_attempt()
            if attempt is None:
                return

            attempt.attempts += 1
            attempt.state = AttemptState.IN_FLIGHT
            attempt.fetched = None
            attempt.error = None
            delay = run.error_policy.retry_delay(attempt.attempts)
            task = asyncio.ensure_future(self._fetch(fetcher, attempt, delay))
            run.in_flight[task] = attempt

    async def _fetch(self, fetcher: AsyncFetcher, attempt: NodeAttempt, delay: float) -> None:
        """Run one fetch attempt. Only typed fetch failures are caught."""
        if delay > 0:
            await asyncio.sleep(delay)
        try:
            attempt.fetched = await fetcher.fetch(attempt.node_id)
        except FetchError as e:
            if e.node_id is None:
                e.node_id = attempt.node_id
            attempt.error = e

    def _complete(self, run: CrawlRun, attempt: NodeAttempt) -> Optional[NodeRecord]:
        """Advance the attempt's state machine after its fetch finished.

        Returns:
            The accepted record, or None
        """
        collector = run.collector

        if attempt.error is None:
            attempt.state = AttemptState.SUCCEEDED
            collector.record_attempt(succeeded=True)
            record = NodeRecord.from_fetch(attempt.entry, attempt.fetched)
            if not collector.submit(record):
                return None
            self._expand(run, record)
            return record

        collector.record_attempt(succeeded=False)
        decision = run.error_policy.decide(attempt.error, attempt.node_id, attempt.attempts)

        if decision is FetchDecision.RETRY:
            attempt.state = AttemptState.RETRY_PENDING
            collector.record_retry()
            run.retry_queue.append(attempt)
            return None

        attempt.state = AttemptState.FAILED
        collector.record_failure(self._failed_node(attempt))
        run.error_policy.on_final_failure(attempt.error, attempt.node_id, attempt.attempts)
        return None

    def _expand(self, run: CrawlRun, record: NodeRecord) -> None:
        """Enqueue the record's unvisited links one level deeper."""
        if self.max_depth is not None and record.depth >= self.max_depth:
            return
        for link in record.links:
            run.frontier.enqueue(link, record.depth + 1, record.node_id)

    def _abandon_retries(self, run: CrawlRun) -> None:
        """Nodes still waiting for a retry when the budget ran out count as failed."""
        while run.retry_queue:
            attempt = run.retry_queue.popleft()
            attempt.state = AttemptState.FAILED
            run.collector.record_failure(self._failed_node(attempt))
            logger.debug("retry_abandoned", node_id=attempt.node_id, attempts=attempt.attempts)

    @staticmethod
    def _failed_node(attempt: NodeAttempt) -> FailedNode:
        error = attempt.error
        return FailedNode(
            node_id=attempt.node_id,
            kind=error.kind,
            message=str(error),
            attempts=attempt.attempts,
            status=error.status,
        )
