"""
Structural diffs between two snapshots of an advisory index.

Usage:
    from advisory_index import DirectorySource, index_diff

    old = DirectorySource({"path": "advisories-before"}).load()
    new = DirectorySource({"path": "advisories"}).load()
    result = index_diff(old, new)
"""
from .diff import DiffResult, DocumentDiffResult, IndexDiffResult, advisory_diff, document_diff, index_diff
from .ingestion import DirectorySource, GitSource
from .model import Advisory, Document, Event, EventType, Index, Package

__version__ = "0.1.0"

__all__ = [
    "index_diff",
    "document_diff",
    "advisory_diff",
    "IndexDiffResult",
    "DocumentDiffResult",
    "DiffResult",
    "DirectorySource",
    "GitSource",
    "Index",
    "Document",
    "Package",
    "Advisory",
    "Event",
    "EventType",
]
