"""
Change log service.
Records who changed which record, when, why, and the resulting stored state.
"""

from typing import Any, Optional

from bson import ObjectId
from pymongo import DESCENDING
from pymongo.collection import Collection

from docstore.models import ChangeLog, ChangeOperation
from shared.config.logging import get_logger
from shared.config.constants import RecordFields
from shared.infrastructure.db import store_errors
from shared.utils.exceptions import NotFoundError

from .accessor import new_identity, utcnow

logger = get_logger(__name__)


def read_snapshot(collection: Collection, record_id: ObjectId, model_name: str) -> dict[str, Any]:
    """
    Current stored state of a record, soft deleted or not.

    Raises:
        NotFoundError: if no document has this identity
    """
    with store_errors("read_snapshot", collection=collection.name, record_id=str(record_id)):
        document = collection.find_one({RecordFields.ID: record_id})
    if document is None:
        raise NotFoundError(model_name, record_id, collection=collection.name)
    return document


def write_change_log(log_collection: Collection, entry: ChangeLog) -> ChangeLog:
    """Persist a change log entry, upserted by its own identity."""
    document = entry.model_dump(by_alias=True, exclude={"id"})
    with store_errors("write_change_log", collection=log_collection.name, log_id=str(entry.id)):
        log_collection.update_one(
            {RecordFields.ID: entry.id}, {"$set": document}, upsert=True
        )
    return entry


def record_change(
    collection: Collection,
    log_collection: Collection,
    *,
    model_name: str,
    record_id: ObjectId,
    operation: ChangeOperation,
    operator: str,
    reason: str = "",
) -> ChangeLog:
    """
    Log a change to a record.

    The snapshot is re-read from the store rather than taken from the
    caller's copy, so it holds exactly what the store holds.

    Args:
        collection: Collection of the record
        log_collection: Change log collection
        model_name: Record type name
        record_id: Identity of the record
        operation: CREATE, UPDATE, DELETE or ERASE
        operator: Who made the change
        reason: Free-text reason

    Returns:
        The persisted ChangeLog entry

    Raises:
        NotFoundError: if the record cannot be re-read
    """
    snapshot = read_snapshot(collection, record_id, model_name)

    entry = ChangeLog(
        id=new_identity(),
        created_at=utcnow(),
        created_by=operator,
        change_reason=reason,
        operation=operation,
        model_obj_id=record_id,
        model_name=model_name,
        model_value=snapshot,
    )
    write_change_log(log_collection, entry)

    logger.info(
        "Change logged",
        operation=entry.operation,
        model=model_name,
        record_id=str(record_id),
        operator=operator,
        log_id=str(entry.id),
    )
    return entry


def list_changes(
    log_collection: Collection,
    *,
    model_name: Optional[str] = None,
    record_id: Optional[ObjectId] = None,
    operation: Optional[ChangeOperation] = None,
    limit: int = 0,
) -> list[ChangeLog]:
    """
    Change log entries, newest first.

    Args:
        log_collection: Change log collection
        model_name: Only entries of this record type
        record_id: Only entries of this record
        operation: Only entries of this kind
        limit: Maximum entries (0 = all)
    """
    query: dict[str, Any] = {}
    if model_name is not None:
        query["model_name"] = model_name
    if record_id is not None:
        query["model_obj_id"] = record_id
    if operation is not None:
        query["operation"] = ChangeOperation(operation).value

    with store_errors("list_changes", collection=log_collection.name):
        cursor = log_collection.find(query).sort(
            [(RecordFields.CREATED_AT, DESCENDING), (RecordFields.ID, DESCENDING)]
        )
        if limit:
            cursor = cursor.limit(limit)
        return [ChangeLog.model_validate(document) for document in cursor]


def changed_fields(before: dict[str, Any], after: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """
    Per-field difference between two snapshots.

    Returns:
        {field: {"old": value_before, "new": value_after}} for every field
        whose value differs, including fields present on one side only.
    """
    changes = {}
    for key in set(before.keys()) | set(after.keys()):
        old_val = before.get(key)
        new_val = after.get(key)
        if old_val != new_val:
            changes[key] = {"old": old_val, "new": new_val}
    return changes
