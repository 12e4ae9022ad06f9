"""
Base classes for all stored documents.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field


class DocumentModel(BaseModel):
    """
    Base class for every stored document.

    ``id`` is persisted under ``_id``; assignment is validated so a value
    of the wrong type is rejected where it is set, not when it is stored.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=True,
        arbitrary_types_allowed=True,
    )

    id: Optional[ObjectId] = Field(default=None, alias="_id")


class Record(DocumentModel):
    """
    Capability contract for records managed by RecordRepository.

    Fields added:
    - created_at/by, updated_at/by, removed_at/by: Audit stamps
    - is_removed: Soft delete flag (True = deleted, hidden from reads)

    Subclasses add their own fields. The collection defaults to the
    class name; set ``__collection__`` to override it.

        class Article(Record):
            __collection__ = "articles"

            title: str = ""
    """

    created_at: Optional[datetime] = None
    created_by: Optional[str] = None
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None
    removed_at: Optional[datetime] = None
    removed_by: Optional[str] = None
    is_removed: bool = False

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        state = "removed" if self.is_removed else "active"
        return f"<{class_name}(id={self.id}, {state})>"
