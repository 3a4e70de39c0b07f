"""
Value types for advisory documents and the indices that hold them.

An Index groups Documents by package name. Each Document carries the
Advisories tracked for that package, and each Advisory carries an ordered
timeline of Events.

Design decisions:
- Frozen dataclasses so that snapshots can be shared between inputs and
  diff results without copying
- Aliases are a frozenset (unordered), events are a tuple (ordered)
- Timestamps are always timezone-aware UTC datetimes
- to_dict() emits the same keys the YAML documents use
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List, Mapping, Optional, Tuple


logger = logging.getLogger(__name__)


class EventType(Enum):
    """Advisory lifecycle markers."""
    DETECTION = "detection"
    TRUE_POSITIVE_DETERMINATION = "true-positive-determination"
    FIXED = "fixed"
    FALSE_POSITIVE_DETERMINATION = "false-positive-determination"
    ANALYSIS_NOT_PLANNED = "analysis-not-planned"
    FIX_NOT_PLANNED = "fix-not-planned"
    PENDING_UPSTREAM_FIX = "pending-upstream-fix"


def format_timestamp(value: datetime) -> str:
    """Render a UTC timestamp as ISO-8601 with a trailing Z."""
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass(frozen=True)
class Event:
    """
    One entry in an advisory's timeline.

    Events have no identifier. Two events are the same event only if
    timestamp, type and data are all equal. The data mapping is copied
    into a read-only view on construction and is left out of the hash.
    """
    timestamp: datetime
    type: EventType
    data: Optional[Mapping[str, Any]] = field(default=None, hash=False)  # fixed-version, note, etc.

    def __post_init__(self):
        if self.data is not None:
            object.__setattr__(self, "data", MappingProxyType(dict(self.data)))

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "timestamp": format_timestamp(self.timestamp),
            "type": self.type.value,
        }
        if self.data is not None:
            result["data"] = dict(self.data)
        return result


@dataclass(frozen=True)
class Advisory:
    """Tracked handling of one vulnerability identifier for a package."""
    id: str
    aliases: FrozenSet[str] = frozenset()
    events: Tuple[Event, ...] = ()

    @property
    def latest_event(self) -> Optional[Event]:
        """Most recent event by timestamp, or None for an empty timeline."""
        if not self.events:
            return None
        return max(self.events, key=lambda e: e.timestamp)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"id": self.id}
        if self.aliases:
            result["aliases"] = sorted(self.aliases)
        result["events"] = [event.to_dict() for event in self.events]
        return result


@dataclass(frozen=True)
class Package:
    name: str


@dataclass(frozen=True)
class Document:
    """
    Advisory data for a single package.

    The package name is the join key between two indices. The schema
    version is an opaque tag, compared for equality only.
    """
    schema_version: str
    package: Package
    advisories: Tuple[Advisory, ...] = ()

    @property
    def name(self) -> str:
        return self.package.name

    def get(self, advisory_id: str) -> Optional[Advisory]:
        """Return the advisory with the given id, if present."""
        for advisory in self.advisories:
            if advisory.id == advisory_id:
                return advisory
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schema-version": self.schema_version,
            "package": {"name": self.package.name},
            "advisories": [advisory.to_dict() for advisory in self.advisories],
        }


class Index:
    """
    Collection of advisory documents keyed by package name.

    Package names are expected to be unique; loaders reject duplicates
    before an Index is built. When an Index is constructed directly from
    documents that repeat a name, the last occurrence wins.
    """

    def __init__(self, documents: Iterable[Document] = ()):
        self._documents: Dict[str, Document] = {}
        for document in documents:
            if document.name in self._documents:
                logger.warning(
                    f"Duplicate package {document.name} in index, keeping last occurrence"
                )
            self._documents[document.name] = document

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[Document]:
        for name in sorted(self._documents):
            yield self._documents[name]

    def __contains__(self, name: object) -> bool:
        return name in self._documents

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Index):
            return NotImplemented
        return self._documents == other._documents

    def __repr__(self) -> str:
        return f"Index({self.names()!r})"

    def get(self, name: str) -> Optional[Document]:
        return self._documents.get(name)

    def names(self) -> List[str]:
        """Package names in sorted order."""
        return sorted(self._documents)
