"""
pm_engines.references -- Soft resolution of referential ids.

Responsibility:
    Resolve the ids a project record uses to point at its own members
    (task assignees, risk owners, task dependencies, milestone dependent
    tasks) to a display attribute, falling back to a sentinel when the id
    does not resolve.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - A dangling id is a soft failure: ``resolve_or_default`` returns
      ``UNKNOWN`` (or the caller's default) and never raises.
    - Lookup is a linear scan unless the caller passes a prebuilt
      ``RecordIndex``.

Usage:
    from pm_engines.references import RecordIndex, resolve_or_default

    resolve_or_default(project.resources, "res-001")        # "Sarah Johnson"
    resolve_or_default(project.resources, "res-999")        # "Unknown"

    index = RecordIndex(project.tasks)
    resolve_or_default(index, "task-002", attribute="title")
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Generic, Protocol, TypeVar

from pm_kernel.logging_config import get_logger

logger = get_logger("engines.references")

UNKNOWN = "Unknown"


class _Identified(Protocol):
    id: str


R = TypeVar("R", bound=_Identified)


class RecordIndex(Mapping, Generic[R]):
    """
    Read-only id -> record mapping for O(1) repeated resolution.

    Contract:
        Built once from a record collection.  When ids repeat, the first
        record wins, matching what a linear scan would find.
    """

    def __init__(self, records: Iterable[R]):
        by_id: dict[str, R] = {}
        for record in records:
            by_id.setdefault(record.id, record)
        self._by_id = by_id

    def __getitem__(self, record_id: str) -> R:
        return self._by_id[record_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_id)

    def __len__(self) -> int:
        return len(self._by_id)


def find_record(records: Iterable[R] | RecordIndex[R], record_id: str) -> R | None:
    """Return the first record with ``id == record_id``, or None."""
    if isinstance(records, RecordIndex):
        return records.get(record_id)
    for record in records:
        if record.id == record_id:
            return record
    return None


def resolve_or_default(
    records: Iterable[Any] | RecordIndex[Any],
    record_id: str,
    attribute: str = "name",
    default: str = UNKNOWN,
) -> str:
    """
    Resolve ``record_id`` to one of the record's attributes.

    Postconditions:
        Returns ``getattr(record, attribute)`` for the first matching
        record, otherwise ``default``.  Never raises for a missing id.
    """
    record = find_record(records, record_id)
    if record is None:
        logger.debug("reference_unresolved", extra={
            "record_id": record_id,
            "attribute": attribute,
        })
        return default
    return getattr(record, attribute)


def resolve_many(
    records: Iterable[Any] | RecordIndex[Any],
    record_ids: Iterable[str],
    attribute: str = "name",
    default: str = UNKNOWN,
) -> tuple[str, ...]:
    """Resolve each id in order; every dangling id maps to ``default``."""
    if not isinstance(records, RecordIndex):
        records = RecordIndex(records)
    return tuple(
        resolve_or_default(records, record_id, attribute, default)
        for record_id in record_ids
    )
