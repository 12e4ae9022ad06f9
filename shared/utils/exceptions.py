"""
Centralized exceptions for the record access layer.

Three failure classes:
- SchemaViolationError: the record type does not honour the record
  contract. A defect in calling code, raised before the store is touched.
- StoreError: the document store rejected or failed an operation.
- NotFoundError: an identity-scoped read found no document.

Usage:
    from shared.utils.exceptions import NotFoundError, StoreError

    raise NotFoundError("Article", record_id)
    raise StoreError("upsert", collection="Article")
"""

from typing import Any

from shared.config.logging import get_logger

logger = get_logger(__name__)


class AppException(Exception):
    """
    Base exception with automatic logging.

    All custom exceptions inherit from this class so every failure is
    logged once, with its context, at the point it is raised.
    """

    def __init__(
        self,
        detail: str,
        log_level: str = "warning",
        **log_context: Any,
    ):
        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, **log_context)

        super().__init__(detail)
        self.detail = detail
        self.context = log_context


# =============================================================================
# Not Found
# =============================================================================


class NotFoundError(AppException):
    """
    No document matched an identity-scoped lookup.

    Usage:
        raise NotFoundError("Article", record_id)
        raise NotFoundError("Article", record_id, collection="articles")
    """

    def __init__(self, entity: str, entity_id: Any = None, **log_context: Any):
        if entity_id is not None:
            detail = f"{entity} with id {entity_id} not found"
        else:
            detail = f"{entity} not found"

        super().__init__(
            detail,
            log_level="warning",
            entity=entity,
            entity_id=str(entity_id) if entity_id is not None else None,
            **log_context,
        )
        self.entity = entity
        self.entity_id = entity_id


# =============================================================================
# Schema Violations
# =============================================================================


class SchemaViolationError(AppException):
    """
    A record type is missing a well-known field or rejects its value.

    Usage:
        raise SchemaViolationError("Article", "created_at", "field is not declared")
    """

    def __init__(self, model: str, field: str | None, reason: str, **log_context: Any):
        if field:
            detail = f"{model}.{field}: {reason}"
        else:
            detail = f"{model}: {reason}"

        super().__init__(detail, log_level="error", model=model, field=field, **log_context)
        self.model = model
        self.field = field


# =============================================================================
# Store Errors
# =============================================================================


class StoreError(AppException):
    """
    The document store failed an operation.

    The driver exception is kept both as ``__cause__`` and ``original``.
    """

    def __init__(
        self,
        operation: str,
        original: BaseException | None = None,
        **log_context: Any,
    ):
        detail = f"Document store error during {operation}"
        if original is not None:
            detail = f"{detail}: {original}"

        super().__init__(detail, log_level="error", operation=operation, **log_context)
        self.operation = operation
        self.original = original
