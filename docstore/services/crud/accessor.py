"""
Record field access for the well-known identity, audit and soft delete fields.

Functions here work on any pydantic model that declares the fields of the
Record contract. Anything else is a defect in calling code and fails with
SchemaViolationError before the store is touched.
"""

from datetime import datetime, timezone
from typing import Any, TypeVar

from bson import ObjectId
from pydantic import BaseModel, ValidationError

from shared.config.constants import WELL_KNOWN_FIELDS
from shared.utils.exceptions import SchemaViolationError


T = TypeVar("T", bound=BaseModel)


def utcnow() -> datetime:
    """Current UTC time truncated to milliseconds, the precision of BSON dates."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def new_identity() -> ObjectId:
    """Fresh store identity."""
    return ObjectId()


def ensure_record_model(model: type) -> None:
    """
    Check a model class against the Record contract.

    Raises:
        SchemaViolationError: if the class is not a pydantic model or
            does not declare every well-known field.
    """
    name = getattr(model, "__name__", repr(model))
    if not isinstance(model, type) or not issubclass(model, BaseModel):
        raise SchemaViolationError(name, None, "is not a pydantic model")

    missing = [field for field in WELL_KNOWN_FIELDS if field not in model.model_fields]
    if missing:
        raise SchemaViolationError(
            name, missing[0], "field is not declared", missing=missing
        )


def _check_field(record: Any, name: str) -> None:
    model_name = type(record).__name__
    if name not in WELL_KNOWN_FIELDS:
        raise SchemaViolationError(model_name, name, "not a well-known record field")
    if not isinstance(record, BaseModel) or name not in type(record).model_fields:
        raise SchemaViolationError(model_name, name, "field is not declared")


def get_field(record: Any, name: str) -> Any:
    """Read a well-known field."""
    _check_field(record, name)
    return getattr(record, name)


def set_field(record: T, name: str, value: Any) -> T:
    """
    Write a well-known field in place.

    The caller's reference sees the new value, so a later persist of the
    same object stores it.

    Raises:
        SchemaViolationError: unknown field, or a value the model rejects.
    """
    _check_field(record, name)
    try:
        setattr(record, name, value)
    except ValidationError as exc:
        raise SchemaViolationError(
            type(record).__name__, name, "incompatible value type",
            value_type=type(value).__name__,
        ) from exc
    return record


def record_identity(record: Any) -> ObjectId:
    """
    Identity of a record that must already be stored.

    Raises:
        SchemaViolationError: if no identity has been assigned.
    """
    record_id = get_field(record, "id")
    if record_id is None:
        raise SchemaViolationError(type(record).__name__, "id", "identity is not assigned")
    return record_id


def stamp_created(record: T, operator: str, at: datetime | None = None) -> T:
    """Assign a fresh identity and the created_at/by stamps."""
    set_field(record, "id", new_identity())
    set_field(record, "created_at", at or utcnow())
    set_field(record, "created_by", operator)
    return record


def stamp_updated(record: T, operator: str, at: datetime | None = None) -> T:
    """Set updated_at/by on a record being saved."""
    set_field(record, "updated_at", at or utcnow())
    set_field(record, "updated_by", operator)
    return record


def stamp_removed(record: T, operator: str, at: datetime | None = None) -> T:
    """Flag a record as soft deleted, with removed_at/by."""
    set_field(record, "removed_at", at or utcnow())
    set_field(record, "removed_by", operator)
    set_field(record, "is_removed", True)
    return record


def to_document(record: BaseModel) -> dict[str, Any]:
    """
    Fields of a record as a ``$set`` payload.

    ``_id`` is left out: it is the upsert key and immutable once stored.
    """
    return record.model_dump(by_alias=True, exclude={"id"})


def from_document(model: type[T], document: dict[str, Any]) -> T:
    """Build a record from a stored document."""
    try:
        return model.model_validate(document)
    except ValidationError as exc:
        raise SchemaViolationError(
            model.__name__, None, "stored document does not match the model",
            record_id=str(document.get("_id")),
        ) from exc


__all__ = [
    "utcnow",
    "new_identity",
    "ensure_record_model",
    "get_field",
    "set_field",
    "record_identity",
    "stamp_created",
    "stamp_updated",
    "stamp_removed",
    "to_document",
    "from_document",
]
