"""
Fetch error policies for gamecrawl.

A policy decides, for each failed fetch attempt, whether the node gets
another attempt or is skipped. Policies also keep error records so a
caller can inspect what went wrong after the run.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List

from ..errors import CrawlAbortedError, FetchError, NodeId, TransientFetchError
from ..log import get_logger

logger = get_logger(__name__)


class FetchDecision(Enum):
    """What to do after a failed attempt."""
    RETRY = "retry"
    SKIP = "skip"


class FetchErrorPolicy(ABC):
    """
    Base class for fetch error policies.

    Subclasses implement different strategies for failed fetches. The
    traversal engine calls ``decide`` once per failed attempt and
    ``on_final_failure`` once per node that is given up on.
    """

    def __init__(self, verbose: bool = True):
        """
        Initialize the policy.

        Args:
            verbose: If True, log final failures at WARNING instead of DEBUG
        """
        self.verbose = verbose
        self.errors: List[Dict[str, Any]] = []

    @abstractmethod
    def decide(self, error: FetchError, node_id: NodeId, attempt: int) -> FetchDecision:
        """
        Decide what happens after a failed attempt.

        Args:
            error: The typed fetch failure
            node_id: Node whose fetch failed
            attempt: 1-based number of the attempt that failed

        Returns:
            FetchDecision.RETRY or FetchDecision.SKIP
        """
        pass

    def retry_delay(self, attempt: int) -> float:
        """Seconds to wait before attempt number ``attempt`` (2 or more)."""
        return 0.0

    def on_final_failure(self, error: FetchError, node_id: NodeId, attempts: int) -> None:
        """
        Record a node that is being skipped.

        Override to escalate (see ThresholdPolicy).
        """
        self.errors.append({
            'node_id': node_id,
            'error': error,
            'error_type': type(error).__name__,
            'kind': error.kind,
            'error_message': str(error),
            'attempts': attempts,
        })
        log = logger.warning if self.verbose else logger.debug
        log("fetch_failed", node_id=node_id, kind=error.kind, attempts=attempts, error=str(error))

    def get_statistics(self) -> dict:
        """
        Get statistics about errors encountered.

        Returns:
            Dictionary with error counts and details
        """
        return {
            'total_errors': len(self.errors),
            'transient_errors': sum(1 for e in self.errors if e['kind'] == 'transient'),
            'permanent_errors': sum(1 for e in self.errors if e['kind'] == 'permanent'),
            'errors': self.errors,
        }


class SkipAllPolicy(FetchErrorPolicy):
    """
    Policy that never retries.

    Every failure, transient or permanent, skips the node.
    """

    def decide(self, error: FetchError, node_id: NodeId, attempt: int) -> FetchDecision:
        return FetchDecision.SKIP


class RetryTransientPolicy(FetchErrorPolicy):
    """
    Policy that retries transient failures a bounded number of times.

    Permanent failures are skipped straight away. Delays grow
    exponentially: ``base_delay * backoff_factor ** (retry - 1)``.
    """

    def __init__(
        self,
        max_retries: int = 0,
        base_delay: float = 0.0,
        backoff_factor: float = 2.0,
        verbose: bool = True
    ):
        """
        Initialize retry policy.

        Args:
            max_retries: Maximum number of retries per node
            base_delay: Seconds before the first retry
            backoff_factor: Multiplier for exponential backoff
            verbose: If True, log final failures at WARNING
        """
        super().__init__(verbose)
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.backoff_factor = backoff_factor
        self.retry_counts: Dict[NodeId, int] = {}

    def decide(self, error: FetchError, node_id: NodeId, attempt: int) -> FetchDecision:
        if not isinstance(error, TransientFetchError):
            return FetchDecision.SKIP
        if attempt > self.max_retries:
            return FetchDecision.SKIP
        self.retry_counts[node_id] = self.retry_counts.get(node_id, 0) + 1
        logger.debug("fetch_retry_scheduled", node_id=node_id, attempt=attempt + 1, error=str(error))
        return FetchDecision.RETRY

    def retry_delay(self, attempt: int) -> float:
        if attempt < 2 or self.base_delay <= 0:
            return 0.0
        return self.base_delay * self.backoff_factor ** (attempt - 2)


class ThresholdPolicy(RetryTransientPolicy):
    """
    Policy that tolerates failed nodes up to a threshold, then aborts.

    Useful when some failures are expected but too many indicate a
    systemic problem (blocked IP, site down) that should halt the crawl.
    """

    def __init__(self, max_errors: int = 10, max_retries: int = 0, **kwargs):
        """
        Initialize threshold policy.

        Args:
            max_errors: Maximum failed nodes to tolerate before aborting
            max_retries: Retries per node for transient failures
        """
        super().__init__(max_retries=max_retries, **kwargs)
        self.max_errors = max_errors

    def on_final_failure(self, error: FetchError, node_id: NodeId, attempts: int) -> None:
        super().on_final_failure(error, node_id, attempts)
        if len(self.errors) > self.max_errors:
            raise CrawlAbortedError(
                f"Error threshold exceeded ({self.max_errors} failed nodes)",
                failures=list(self.errors),
            ) from error
