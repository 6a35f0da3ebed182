"""Node data types for crawl traversal.

A node is one game entry. Fetchers return a FetchedNode; the engine
wraps it into an immutable NodeRecord once the fetch succeeds.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Tuple

from ...errors import NodeId


def unique_links(links: Iterable[NodeId], exclude: Optional[NodeId] = None) -> Tuple[NodeId, ...]:
    """Deduplicate links, keeping first-seen order.

    Args:
        links: Outbound node identifiers, possibly repeated
        exclude: Identifier to drop (usually the node itself)

    Returns:
        Tuple of unique identifiers in discovery order
    """
    seen = set()
    ordered = []
    for link in links:
        if link == exclude or link in seen:
            continue
        seen.add(link)
        ordered.append(link)
    return tuple(ordered)


def _freeze(value: Any) -> Any:
    """Read-only copy of a metadata value (lists become tuples, dicts proxies)."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(_freeze(item) for item in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [_thaw(item) for item in value]
    return value


@dataclass(frozen=True)
class FetchedNode:
    """What a fetcher returns for one node: metadata and outbound links."""

    metadata: Mapping[str, Any]
    links: Tuple[NodeId, ...] = ()


@dataclass(frozen=True)
class FrontierEntry:
    """A node waiting to be fetched.

    ``discovered_from`` is the node whose links referenced this one,
    or None for seeds.
    """

    node_id: NodeId
    depth: int = 0
    discovered_from: Optional[NodeId] = None


@dataclass(frozen=True)
class NodeRecord:
    """Metadata for a successfully fetched node.

    Records are never mutated after creation. ``metadata`` is exposed as a
    read-only mapping (nested lists become tuples) and ``links`` as a tuple.
    """

    node_id: NodeId
    metadata: Mapping[str, Any] = field(default_factory=dict)
    links: Tuple[NodeId, ...] = ()
    depth: int = 0
    discovered_from: Optional[NodeId] = None

    def __post_init__(self):
        object.__setattr__(self, 'metadata', _freeze(self.metadata))
        object.__setattr__(self, 'links', unique_links(self.links, exclude=self.node_id))

    @classmethod
    def from_fetch(cls, entry: FrontierEntry, fetched: FetchedNode) -> 'NodeRecord':
        """Build a record from the frontier entry and the fetch response."""
        return cls(
            node_id=entry.node_id,
            metadata=fetched.metadata,
            links=tuple(fetched.links),
            depth=entry.depth,
            discovered_from=entry.discovered_from,
        )

    @property
    def name(self) -> Optional[str]:
        """Display name of the entry, if the fetcher provided one."""
        return self.metadata.get('name')

    def to_dict(self) -> dict:
        """Plain-dict form for serialisation."""
        return {
            'id': self.node_id,
            'depth': self.depth,
            'discovered_from': self.discovered_from,
            'metadata': _thaw(self.metadata),
            'links': list(self.links),
        }
