"""
Diff engine for advisory indices.

Main exports:
- index_diff: Compare two indices (public entry point)
- document_diff: Compare two versions of one package document
- advisory_diff: Compare two versions of one advisory
- IndexDiffResult, DocumentDiffResult, DiffResult: Result records
- partition_by_key, membership_difference, sequence_equal: Shared primitives
"""
from .compare import (
    Partition,
    advisories_equal,
    documents_equal,
    membership_difference,
    partition_by_key,
    sequence_equal,
)
from .engine import advisory_diff, document_diff, index_diff
from .results import DiffResult, DocumentDiffResult, IndexDiffResult

__all__ = [
    "index_diff",
    "document_diff",
    "advisory_diff",
    "IndexDiffResult",
    "DocumentDiffResult",
    "DiffResult",
    "Partition",
    "partition_by_key",
    "membership_difference",
    "sequence_equal",
    "advisories_equal",
    "documents_equal",
]
