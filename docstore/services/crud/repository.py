"""
Repository Pattern for document record access.

One RecordRepository serves one record type. Mutations stamp the audit
fields on the caller's record and upsert it by identity; reads hide soft
deleted records; the *_with_log variants append a change log entry.

Usage:
    from docstore.services.crud import RecordRepository, OperationContext

    repo = RecordRepository(Article, db)
    ctx = OperationContext(operator="alice", reason="initial import")

    article = repo.create(Article(title="A"), ctx)
    repo.save_with_log(article, ctx)
    repo.delete_with_log(article, OperationContext(operator="bob"))

    # Reads
    repo.count()
    repo.find_all(OperationContext(filter={"author": "alice"}, limit=20))
    repo.get(article.id)
"""

from __future__ import annotations

from typing import Any, Generic, Sequence, TypeVar

from bson import ObjectId
from pymongo.collection import Collection
from pymongo.cursor import Cursor
from pymongo.database import Database

from docstore.models import ChangeLog, ChangeOperation, Record
from shared.config.constants import RecordFields
from shared.config.logging import get_logger
from shared.config.settings import settings
from shared.infrastructure.correlation import operation_scope
from shared.infrastructure.db import get_collection, store_errors
from shared.utils.exceptions import NotFoundError

from .accessor import (
    ensure_record_model,
    from_document,
    record_identity,
    stamp_created,
    stamp_removed,
    stamp_updated,
    to_document,
)
from .audit import list_changes, record_change
from .context import OperationContext
from .filters import build_cursor, by_identity, exclude_removed, projection

logger = get_logger(__name__)

RecordT = TypeVar("RecordT", bound=Record)


class RecordRepository(Generic[RecordT]):
    """
    Create / read / update / soft delete / erase for one record type.

    The repository only holds collection handles, which pymongo allows
    to share between threads. Per-call state travels in OperationContext.
    """

    def __init__(
        self,
        model: type[RecordT],
        database: Database,
        *,
        collection_name: str | None = None,
        change_log_collection: str | None = None,
    ):
        ensure_record_model(model)
        self._model = model
        self._collection = get_collection(database, collection_name or model)
        self._log_collection = database[
            change_log_collection or settings.change_log_collection
        ]

    @property
    def model(self) -> type[RecordT]:
        """The record model class."""
        return self._model

    @property
    def model_name(self) -> str:
        """Record type name written to change log entries."""
        return self._model.__name__

    @property
    def collection(self) -> Collection:
        """Collection holding the records."""
        return self._collection

    @property
    def log_collection(self) -> Collection:
        """Change log collection."""
        return self._log_collection

    # =========================================================================
    # Mutations
    # =========================================================================

    def _upsert(self, record: RecordT, operation: str) -> None:
        record_id = record_identity(record)
        with store_errors(operation, collection=self._collection.name, record_id=str(record_id)):
            self._collection.update_one(
                {RecordFields.ID: record_id},
                {"$set": to_document(record)},
                upsert=True,
            )

    def create(self, record: RecordT, ctx: OperationContext) -> RecordT:
        """
        Store a new record.

        Assigns a fresh identity and created_at/by, then upserts. Calling
        it twice on the same object stores two records.
        """
        stamp_created(record, ctx.operator)
        self._upsert(record, "create")
        logger.info(
            "Record created",
            collection=self._collection.name,
            record_id=str(record.id),
            operator=ctx.operator,
        )
        return record

    def save(self, record: RecordT, ctx: OperationContext) -> RecordT:
        """
        Store changes to a record.

        Sets updated_at/by and upserts by identity. An identity that is not
        stored yet is inserted.

        Raises:
            SchemaViolationError: if the record has no identity
        """
        record_identity(record)
        stamp_updated(record, ctx.operator)
        self._upsert(record, "save")
        logger.info(
            "Record saved",
            collection=self._collection.name,
            record_id=str(record.id),
            operator=ctx.operator,
        )
        return record

    def delete(self, record: RecordT, ctx: OperationContext) -> RecordT:
        """
        Soft delete a record.

        Sets is_removed and removed_at/by; the document stays in the
        collection but every filtered read skips it.
        """
        record_identity(record)
        stamp_removed(record, ctx.operator)
        self._upsert(record, "delete")
        logger.info(
            "Record soft deleted",
            collection=self._collection.name,
            record_id=str(record.id),
            operator=ctx.operator,
        )
        return record

    def erase(self, record: RecordT, ctx: OperationContext | None = None) -> bool:
        """
        Permanently remove a record.

        Returns:
            True if a document was removed, False if none existed
        """
        record_id = record_identity(record)
        with store_errors("erase", collection=self._collection.name, record_id=str(record_id)):
            result = self._collection.delete_one({RecordFields.ID: record_id})
        logger.info(
            "Record erased",
            collection=self._collection.name,
            record_id=str(record_id),
            operator=ctx.operator if ctx else None,
            removed=result.deleted_count,
        )
        return result.deleted_count > 0

    def _log(self, record: RecordT, operation: ChangeOperation, ctx: OperationContext) -> ChangeLog:
        return record_change(
            self._collection,
            self._log_collection,
            model_name=self.model_name,
            record_id=record_identity(record),
            operation=operation,
            operator=ctx.operator,
            reason=ctx.reason,
        )

    def create_with_log(self, record: RecordT, ctx: OperationContext) -> ChangeLog:
        """Create, then log the stored state as CREATE."""
        with operation_scope():
            self.create(record, ctx)
            return self._log(record, ChangeOperation.CREATE, ctx)

    def save_with_log(self, record: RecordT, ctx: OperationContext) -> ChangeLog:
        """
        Save, then log the stored state as UPDATE.

        If logging fails the save is kept and the error is raised.
        """
        with operation_scope():
            self.save(record, ctx)
            return self._log(record, ChangeOperation.UPDATE, ctx)

    def delete_with_log(self, record: RecordT, ctx: OperationContext) -> ChangeLog:
        """
        Soft delete, then log the stored state as DELETE.

        If logging fails the soft delete is kept and the error is raised.
        """
        with operation_scope():
            self.delete(record, ctx)
            return self._log(record, ChangeOperation.DELETE, ctx)

    def erase_with_log(self, record: RecordT, ctx: OperationContext) -> ChangeLog:
        """
        Log the stored state as ERASE, then erase.

        The entry is written first: after the erase there is nothing left
        to snapshot. A failed log write leaves the record in place.
        """
        with operation_scope():
            entry = self._log(record, ChangeOperation.ERASE, ctx)
            self.erase(record, ctx)
            return entry

    # =========================================================================
    # Reads
    # =========================================================================

    def cursor(self, ctx: OperationContext | None = None) -> Cursor:
        """Filtered, sorted cursor for further chaining."""
        return build_cursor(self._collection, ctx)

    def count(self, ctx: OperationContext | None = None) -> int:
        """Count non-removed records matching the context filter."""
        ctx = ctx or OperationContext()
        options: dict[str, Any] = {}
        if ctx.skip:
            options["skip"] = ctx.skip
        if ctx.limit:
            options["limit"] = ctx.limit
        with store_errors("count", collection=self._collection.name):
            return self._collection.count_documents(exclude_removed(ctx.filter), **options)

    def find_all(self, ctx: OperationContext | None = None) -> list[RecordT]:
        """All non-removed records matching the context."""
        with store_errors("find_all", collection=self._collection.name):
            documents = list(self.cursor(ctx))
        logger.debug(
            "Records found", collection=self._collection.name, count=len(documents)
        )
        return [from_document(self._model, document) for document in documents]

    def _find_one(self, filter: dict[str, Any], operation: str, fields: dict[str, int] | None = None) -> dict[str, Any] | None:
        with store_errors(operation, collection=self._collection.name):
            for document in build_cursor(
                self._collection, OperationContext(limit=1), filter=filter, fields=fields
            ):
                return document
        return None

    def get(self, record_id: ObjectId, ctx: OperationContext | None = None) -> RecordT:
        """
        Record by identity.

        Raises:
            NotFoundError: if it does not exist or is soft deleted
        """
        filter = by_identity(record_id, ctx.filter if ctx else None)
        document = self._find_one(filter, "get")
        if document is None:
            raise NotFoundError(self.model_name, record_id, collection=self._collection.name)
        return from_document(self._model, document)

    def get_by_query(self, ctx: OperationContext) -> RecordT:
        """
        First non-removed record matching the context (in its sort order).

        Raises:
            NotFoundError: if nothing matches
        """
        ctx_first = OperationContext(
            filter=ctx.filter, sort=ctx.sort, skip=ctx.skip, limit=1
        )
        with store_errors("get_by_query", collection=self._collection.name):
            documents = list(self.cursor(ctx_first))
        if not documents:
            raise NotFoundError(self.model_name, collection=self._collection.name)
        return from_document(self._model, documents[0])

    def find_with_select(
        self, columns: Sequence[str], ctx: OperationContext | None = None
    ) -> list[dict[str, Any]]:
        """
        Matching records restricted to ``columns``.

        Returns raw documents: a projection rarely satisfies the model.
        """
        with store_errors("find_with_select", collection=self._collection.name):
            return list(build_cursor(self._collection, ctx, fields=projection(columns)))

    def get_with_select(
        self,
        record_id: ObjectId,
        columns: Sequence[str],
        ctx: OperationContext | None = None,
    ) -> dict[str, Any]:
        """
        One record by identity, restricted to ``columns``.

        Raises:
            NotFoundError: if it does not exist or is soft deleted
        """
        filter = by_identity(record_id, ctx.filter if ctx else None)
        document = self._find_one(filter, "get_with_select", fields=projection(columns))
        if document is None:
            raise NotFoundError(self.model_name, record_id, collection=self._collection.name)
        return document

    def distinct(self, key: str, ctx: OperationContext | None = None) -> list[Any]:
        """Distinct values of ``key`` across non-removed matching records."""
        ctx = ctx or OperationContext()
        with store_errors("distinct", collection=self._collection.name, key=key):
            return self._collection.distinct(key, exclude_removed(ctx.filter))

    def erase_all(self, ctx: OperationContext) -> int:
        """
        Permanently remove every document matching the context filter.

        The filter is used verbatim: soft deleted documents match too.
        An empty filter removes the whole collection.

        Returns:
            Number of documents removed
        """
        filter = dict(ctx.filter) if ctx.filter else {}
        with store_errors("erase_all", collection=self._collection.name):
            result = self._collection.delete_many(filter)
        logger.warning(
            "Records erased in bulk",
            collection=self._collection.name,
            operator=ctx.operator,
            removed=result.deleted_count,
        )
        return result.deleted_count

    # =========================================================================
    # Change log
    # =========================================================================

    def history(self, record: RecordT | ObjectId, limit: int = 0) -> list[ChangeLog]:
        """Change log entries of one record, newest first."""
        record_id = record if isinstance(record, ObjectId) else record_identity(record)
        return list_changes(
            self._log_collection,
            model_name=self.model_name,
            record_id=record_id,
            limit=limit,
        )
