"""
Index diff engine.

Compares two advisory indices top-down:
1. index_diff: match documents by package name
2. document_diff: match advisories within a document pair by id
3. advisory_diff: snapshot a changed advisory and derive its event delta

Every function is pure. Inputs are only read, and each call builds a new
result tree.
"""
import logging
from typing import Optional

from ..model import Advisory, Document, Index
from .compare import advisories_equal, documents_equal, membership_difference, partition_by_key
from .results import DiffResult, DocumentDiffResult, IndexDiffResult


logger = logging.getLogger(__name__)


def advisory_diff(old: Advisory, new: Advisory) -> Optional[DiffResult]:
    """
    Diff two versions of the same advisory.

    Args:
        old: Advisory from the earlier snapshot
        new: Advisory from the later snapshot

    Returns:
        DiffResult with both snapshots and the event delta, or None if
        the advisories are identical

    Raises:
        ValueError: If the advisories have different ids
    """
    if old.id != new.id:
        raise ValueError(f"Cannot diff advisory {old.id} against {new.id}")

    if advisories_equal(old, new):
        return None

    return DiffResult(
        id=new.id,
        added=new,
        removed=old,
        added_events=membership_difference(new.events, old.events),
        removed_events=membership_difference(old.events, new.events),
    )


def document_diff(old: Document, new: Document) -> Optional[DocumentDiffResult]:
    """
    Diff two versions of the same package document.

    Args:
        old: Document from the earlier snapshot
        new: Document from the later snapshot

    Returns:
        DocumentDiffResult, or None if nothing changed at advisory level

    Raises:
        ValueError: If the documents belong to different packages
    """
    if old.name != new.name:
        raise ValueError(f"Cannot diff document {old.name} against {new.name}")

    if documents_equal(old, new):
        return None

    advisories = partition_by_key(
        old.advisories, new.advisories, key=lambda adv: adv.id, equal=advisories_equal
    )

    result = DocumentDiffResult(
        name=new.name,
        added=advisories.added,
        removed=advisories.removed,
    )
    for old_advisory, new_advisory in advisories.modified:
        diff = advisory_diff(old_advisory, new_advisory)
        if diff is not None:
            result.modified.append(diff)

    # Schema-version-only changes carry no advisory delta
    if result.is_empty:
        logger.debug(f"Document {new.name} differs only outside its advisories")
        return None

    return result


def index_diff(old: Index, new: Index) -> IndexDiffResult:
    """
    Diff two advisory indices.

    Args:
        old: Index from the earlier snapshot
        new: Index from the later snapshot

    Returns:
        IndexDiffResult; empty when the indices are identical
    """
    documents = partition_by_key(old, new, key=lambda doc: doc.name, equal=documents_equal)

    result = IndexDiffResult(
        added=documents.added,
        removed=documents.removed,
    )
    for old_document, new_document in documents.modified:
        diff = document_diff(old_document, new_document)
        if diff is not None:
            result.modified.append(diff)

    logger.debug(
        f"Index diff: {len(result.added)} added, {len(result.removed)} removed, "
        f"{len(result.modified)} modified, {len(documents.unchanged)} unchanged"
    )
    return result
