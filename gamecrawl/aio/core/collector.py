"""Result collection for crawl traversal.

The collector accumulates accepted records in acceptance order and keeps
the attempt counters that make partial results observable.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from ...errors import NodeId
from ...log import get_logger
from .node import NodeRecord
from .termination import TerminationPolicy

logger = get_logger(__name__)


class StopReason(Enum):
    """Why a run ended."""
    COUNT_REACHED = "count_reached"
    DEADLINE_PASSED = "deadline_passed"
    FRONTIER_EXHAUSTED = "frontier_exhausted"
    STREAM_CLOSED = "stream_closed"


@dataclass(frozen=True)
class FailedNode:
    """A node that contributed nothing because every attempt failed."""
    node_id: NodeId
    kind: str
    message: str
    attempts: int
    status: Optional[int] = None


@dataclass
class RunResult:
    """Outcome of one crawl run."""

    records: List[NodeRecord] = field(default_factory=list)
    attempted: int = 0   # Fetch attempts, retries included
    succeeded: int = 0   # Successful fetches, discarded ones included
    failed: int = 0      # Nodes that failed on their final attempt
    retried: int = 0     # Attempts scheduled as retries
    discarded: int = 0   # Successful fetches that arrived after acceptance closed
    failures: List[FailedNode] = field(default_factory=list)
    stop_reason: Optional[StopReason] = None
    elapsed: float = 0.0

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)

    @property
    def node_ids(self) -> List[NodeId]:
        return [record.node_id for record in self.records]

    def summary(self) -> Dict[str, Any]:
        return {
            'collected': len(self.records),
            'attempted': self.attempted,
            'succeeded': self.succeeded,
            'failed': self.failed,
            'retried': self.retried,
            'discarded': self.discarded,
            'stop_reason': self.stop_reason.value if self.stop_reason else None,
            'elapsed': round(self.elapsed, 3),
        }

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serialisable form of the whole result."""
        return {
            'summary': self.summary(),
            'records': [record.to_dict() for record in self.records],
            'failures': [
                {
                    'id': failure.node_id,
                    'kind': failure.kind,
                    'message': failure.message,
                    'attempts': failure.attempts,
                    'status': failure.status,
                }
                for failure in self.failures
            ],
        }


class ResultCollector:
    """Accumulates accepted records for one run.

    ``submit`` checks the termination policy and appends in one step, so
    two fetches finishing together cannot both squeeze past a count cap.
    """

    def __init__(self, policy: TerminationPolicy):
        self.policy = policy
        self.reset()

    def reset(self):
        """Reset collector state."""
        self.records: List[NodeRecord] = []
        self._accepted_ids: Set[NodeId] = set()
        self.attempted = 0
        self.succeeded = 0
        self.retried = 0
        self.discarded = 0
        self.failures: List[FailedNode] = []

    @property
    def accepted(self) -> int:
        return len(self.records)

    def record_attempt(self, succeeded: bool) -> None:
        """Count one completed fetch attempt."""
        self.attempted += 1
        if succeeded:
            self.succeeded += 1

    def record_retry(self) -> None:
        self.retried += 1

    def record_failure(self, failure: FailedNode) -> None:
        self.failures.append(failure)

    def submit(self, record: NodeRecord) -> bool:
        """Accept a record if acceptance is still open.

        Returns:
            True if the record was appended
        """
        if record.node_id in self._accepted_ids:
            logger.debug("duplicate_record_ignored", node_id=record.node_id)
            return False

        if not self.policy.accepts(self.accepted):
            self.discarded += 1
            logger.debug("record_discarded", node_id=record.node_id, accepted=self.accepted)
            return False

        self._accepted_ids.add(record.node_id)
        self.records.append(record)
        return True

    def get_result(self, stop_reason: Optional[StopReason] = None) -> RunResult:
        """Build the final RunResult."""
        return RunResult(
            records=list(self.records),
            attempted=self.attempted,
            succeeded=self.succeeded,
            failed=len(self.failures),
            retried=self.retried,
            discarded=self.discarded,
            failures=list(self.failures),
            stop_reason=stop_reason,
            elapsed=self.policy.elapsed(),
        )
