"""Frontier and visited-set management.

Nodes are marked visited when they are enqueued, not when they are
fetched, so a node discovered by several in-flight fetches is queued
exactly once.
"""

from collections import deque
from typing import Deque, Iterable, Iterator, Optional, Set

from ...errors import NodeId
from .node import FrontierEntry


class VisitedSet:
    """Identifiers already enqueued or completed. Only ever grows."""

    def __init__(self):
        self._seen: Set[NodeId] = set()

    def mark(self, node_id: NodeId) -> bool:
        """Mark a node as seen.

        Returns:
            True if the node was new, False if already seen
        """
        if node_id in self._seen:
            return False
        self._seen.add(node_id)
        return True

    def __contains__(self, node_id: NodeId) -> bool:
        return node_id in self._seen

    def __len__(self) -> int:
        return len(self._seen)

    def __iter__(self) -> Iterator[NodeId]:
        return iter(self._seen)


class Frontier:
    """FIFO queue of nodes waiting to be fetched.

    FIFO order gives breadth-first expansion: every node at depth N is
    dequeued before any node at depth N+1.
    """

    def __init__(self, visited: Optional[VisitedSet] = None):
        self.visited = visited if visited is not None else VisitedSet()
        self._queue: Deque[FrontierEntry] = deque()

    def seed(self, seeds: Iterable[NodeId]) -> int:
        """Enqueue seeds in caller order at depth 0.

        Returns:
            Number of seeds actually enqueued (duplicates collapse)
        """
        return sum(1 for node_id in seeds if self.enqueue(node_id))

    def enqueue(
        self,
        node_id: NodeId,
        depth: int = 0,
        discovered_from: Optional[NodeId] = None
    ) -> bool:
        """Add a node unless it has been seen before.

        Check and mark happen together; there is no await in here.

        Returns:
            True if the node was added
        """
        if not self.visited.mark(node_id):
            return False
        self._queue.append(FrontierEntry(node_id, depth, discovered_from))
        return True

    def dequeue(self) -> Optional[FrontierEntry]:
        """Remove and return the oldest entry, or None if empty."""
        if not self._queue:
            return None
        return self._queue.popleft()

    def __len__(self) -> int:
        return len(self._queue)

    def __bool__(self) -> bool:
        return bool(self._queue)
