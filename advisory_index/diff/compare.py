"""
Comparison primitives shared by the diff layers.

Two kinds of comparison are kept deliberately separate:
- Keyed comparison (documents by package name, advisories by id), where
  the order of the input collections never matters
- Sequence comparison (event timelines), where equality is ordered but
  the added/removed event lists are computed by membership

Design decisions:
- partition_by_key() is the one place that matches two collections by key
- Output lists are sorted by key so results are reproducible
- Duplicate keys within one input resolve to the last occurrence
"""
import operator
from dataclasses import dataclass, field
from typing import Callable, Dict, Generic, Iterable, List, Sequence, Tuple, TypeVar

from ..model import Advisory, Document


T = TypeVar("T")


@dataclass
class Partition(Generic[T]):
    """
    Result of matching two keyed collections.

    modified holds (old, new) pairs whose keys match but whose values
    are not equal.
    """
    added: List[T] = field(default_factory=list)
    removed: List[T] = field(default_factory=list)
    modified: List[Tuple[T, T]] = field(default_factory=list)
    unchanged: List[T] = field(default_factory=list)


def _by_key(items: Iterable[T], key: Callable[[T], str]) -> Dict[str, T]:
    keyed: Dict[str, T] = {}
    for item in items:
        keyed[key(item)] = item
    return keyed


def partition_by_key(
    old: Iterable[T],
    new: Iterable[T],
    key: Callable[[T], str],
    equal: Callable[[T, T], bool] = operator.eq,
) -> Partition[T]:
    """
    Split two keyed collections into added, removed, modified and unchanged.

    Args:
        old: Collection from the earlier snapshot
        new: Collection from the later snapshot
        key: Extracts the join key from an item
        equal: Value equality used for items present on both sides

    Returns:
        Partition with every collection sorted by key
    """
    old_by_key = _by_key(old, key)
    new_by_key = _by_key(new, key)

    partition: Partition[T] = Partition()
    for k in sorted(old_by_key.keys() | new_by_key.keys()):
        if k not in old_by_key:
            partition.added.append(new_by_key[k])
        elif k not in new_by_key:
            partition.removed.append(old_by_key[k])
        elif equal(old_by_key[k], new_by_key[k]):
            partition.unchanged.append(new_by_key[k])
        else:
            partition.modified.append((old_by_key[k], new_by_key[k]))

    return partition


def sequence_equal(a: Sequence[T], b: Sequence[T]) -> bool:
    """Ordered, element-wise equality."""
    if len(a) != len(b):
        return False
    return all(x == y for x, y in zip(a, b))


def membership_difference(items: Sequence[T], reference: Sequence[T]) -> List[T]:
    """
    Items not present in reference, in the order they appear in items.

    Membership is tested by equality, so position within either
    sequence does not matter.
    """
    return [item for item in items if item not in reference]


def advisories_equal(a: Advisory, b: Advisory) -> bool:
    """Deep equality of id, alias set and ordered timeline."""
    return (
        a.id == b.id
        and a.aliases == b.aliases
        and sequence_equal(a.events, b.events)
    )


def documents_equal(a: Document, b: Document) -> bool:
    """
    Deep equality of two documents.

    Advisories are compared as a mapping keyed by id, so their order
    within the document is ignored.
    """
    if a.schema_version != b.schema_version or a.package != b.package:
        return False

    advisories = partition_by_key(
        a.advisories, b.advisories, key=lambda adv: adv.id, equal=advisories_equal
    )
    return not (advisories.added or advisories.removed or advisories.modified)
