"""
Query composition for record reads.

Every read goes through exclude_removed(): the caller's filter is
AND-composed with "not soft deleted" for each flag spelling. Only
RecordRepository.erase_all() uses a caller filter verbatim.

Usage:
    from docstore.services.crud.filters import exclude_removed, by_identity

    exclude_removed({"author": "alice"})
    # {"author": "alice", "$and": [{"is_removed": {"$ne": True}},
    #                              {"IsRemoved": {"$ne": True}}]}
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING
from pymongo.collection import Collection
from pymongo.cursor import Cursor

from shared.config.constants import DEFAULT_SORT, RecordFields

from .context import OperationContext
from .soft_delete import removed_flag_fields


def removed_predicates(fields: Sequence[str] | None = None) -> list[dict[str, Any]]:
    """One ``{flag: {"$ne": True}}`` clause per soft delete flag spelling."""
    if fields is None:
        fields = removed_flag_fields()
    return [{name: {"$ne": True}} for name in fields]


def exclude_removed(
    filter: Mapping[str, Any] | None = None,
    fields: Sequence[str] | None = None,
) -> dict[str, Any]:
    """
    AND-compose a filter with the soft delete exclusion.

    The caller's mapping is copied, never modified. An existing top-level
    ``$and`` is extended rather than replaced.
    """
    composed = dict(filter) if filter else {}
    clauses = removed_predicates(fields)
    if "$and" in composed:
        composed["$and"] = list(composed["$and"]) + clauses
    else:
        composed["$and"] = clauses
    return composed


def by_identity(
    record_id: ObjectId,
    filter: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Composed filter pinned to one record; soft deleted records stay hidden."""
    pinned = dict(filter) if filter else {}
    pinned[RecordFields.ID] = record_id
    return exclude_removed(pinned)


def parse_sort(sort: Iterable[str] | None) -> list[tuple[str, int]]:
    """
    Translate ``"-field"`` / ``"field"`` keys into pymongo sort pairs.

    An empty or missing sort falls back to DEFAULT_SORT.
    """
    keys = list(sort) if sort else list(DEFAULT_SORT)
    pairs = []
    for key in keys:
        if key.startswith("-"):
            pairs.append((key[1:], DESCENDING))
        else:
            pairs.append((key.lstrip("+"), ASCENDING))
    return pairs


def projection(columns: Iterable[str]) -> dict[str, int]:
    """Projection document selecting ``columns``."""
    return {column: 1 for column in columns}


def build_cursor(
    collection: Collection,
    ctx: OperationContext | None = None,
    filter: Mapping[str, Any] | None = None,
    fields: Mapping[str, int] | None = None,
) -> Cursor:
    """
    Cursor over the non-removed documents matching the context.

    Args:
        collection: Collection to query
        ctx: Query state (filter, sort, skip, limit)
        filter: Already composed filter; overrides the context's filter
        fields: Optional projection

    Returns:
        pymongo Cursor, ready for further chaining
    """
    ctx = ctx or OperationContext()
    if filter is None:
        filter = exclude_removed(ctx.filter)

    cursor = collection.find(filter, fields).sort(parse_sort(ctx.sort))
    if ctx.skip:
        cursor = cursor.skip(ctx.skip)
    if ctx.limit:
        cursor = cursor.limit(ctx.limit)
    return cursor
