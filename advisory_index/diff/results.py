"""
Result records produced by the diff engine.

Three nested levels:
- IndexDiffResult: documents added, removed and modified
- DocumentDiffResult: advisories added, removed and modified in one document
- DiffResult: full before/after snapshot of one advisory plus the events
  that entered or left its timeline
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..model import Advisory, Document, Event


@dataclass
class DiffResult:
    """
    Change to a single advisory.

    added and removed are the complete new and old advisories, not
    field-level patches. A change outside the timeline (e.g. aliases)
    leaves both event lists empty.
    """
    id: str
    added: Advisory
    removed: Advisory
    added_events: List[Event] = field(default_factory=list)
    removed_events: List[Event] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "added": self.added.to_dict(),
            "removed": self.removed.to_dict(),
            "added_events": [e.to_dict() for e in self.added_events],
            "removed_events": [e.to_dict() for e in self.removed_events],
        }


@dataclass
class DocumentDiffResult:
    """Advisory-level changes within one package document."""
    name: str
    added: List[Advisory] = field(default_factory=list)
    removed: List[Advisory] = field(default_factory=list)
    modified: List[DiffResult] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.removed or self.modified)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "added": [a.to_dict() for a in self.added],
            "removed": [a.to_dict() for a in self.removed],
            "modified": [m.to_dict() for m in self.modified],
        }


@dataclass
class IndexDiffResult:
    """
    Top-level delta between two indices.

    An empty result is the expected outcome for identical indices.
    """
    added: List[Document] = field(default_factory=list)
    removed: List[Document] = field(default_factory=list)
    modified: List[DocumentDiffResult] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.removed or self.modified)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "added": [d.to_dict() for d in self.added],
            "removed": [d.to_dict() for d in self.removed],
            "modified": [m.to_dict() for m in self.modified],
        }
