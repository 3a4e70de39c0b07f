"""
Metrics collection for diff runs.

This module provides DiffMetrics, a dataclass that tracks observability
metrics for a single diff run:
- Counts of documents added, removed and modified
- Counts of advisories added, removed and modified
- Counts of timeline events added and removed
- Source health indicators
- Errors encountered

Design decisions:
- Single metrics object per run for simplicity
- Counts are derived from the IndexDiffResult, never tracked separately
- Serializable to_dict() for the JSON export
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..diff import IndexDiffResult


@dataclass
class DiffMetrics:
    """
    Metrics for a single diff run.

    Designed to be serialized to JSON next to the diff itself.
    """
    run_id: str
    started_at: datetime
    completed_at: Optional[datetime] = None

    # Document level
    documents_added: int = 0
    documents_removed: int = 0
    documents_modified: int = 0

    # Advisory level (documents added/removed count all their advisories)
    advisories_added: int = 0
    advisories_removed: int = 0
    advisories_modified: int = 0

    # Event level, within modified advisories
    events_added: int = 0
    events_removed: int = 0

    errors: int = 0

    # Key: "old" | "new", Value: dict with health status
    source_health: Dict[str, Dict] = field(default_factory=dict)

    issues: List[Dict] = field(default_factory=list)

    def record_result(self, result: IndexDiffResult):
        """
        Accumulate counts from a diff result.

        Args:
            result: Output of index_diff()
        """
        self.documents_added += len(result.added)
        self.documents_removed += len(result.removed)
        self.documents_modified += len(result.modified)

        self.advisories_added += sum(len(doc.advisories) for doc in result.added)
        self.advisories_removed += sum(len(doc.advisories) for doc in result.removed)

        for doc_diff in result.modified:
            self.advisories_added += len(doc_diff.added)
            self.advisories_removed += len(doc_diff.removed)
            self.advisories_modified += len(doc_diff.modified)
            for adv_diff in doc_diff.modified:
                self.events_added += len(adv_diff.added_events)
                self.events_removed += len(adv_diff.removed_events)

    def record_error(self, error: str, context: Dict = None):
        """
        Record an error encountered during the run.

        Args:
            error: Error message
            context: Optional dict with additional context (e.g., source)
        """
        self.errors += 1
        self.issues.append({
            "type": "error",
            "message": error,
            "context": context or {}
        })

    @property
    def has_changes(self) -> bool:
        return bool(self.documents_added or self.documents_removed or self.documents_modified)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_id": self.run_id,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "documents_added": self.documents_added,
            "documents_removed": self.documents_removed,
            "documents_modified": self.documents_modified,
            "advisories_added": self.advisories_added,
            "advisories_removed": self.advisories_removed,
            "advisories_modified": self.advisories_modified,
            "events_added": self.events_added,
            "events_removed": self.events_removed,
            "errors": self.errors,
            "source_health": self.source_health,
            "issues": self.issues
        }
