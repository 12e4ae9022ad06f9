"""
Change Log Model.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from bson import ObjectId
from pydantic import ConfigDict, Field

from .base import DocumentModel


class ChangeOperation(str, Enum):
    """Kind of mutation a change log entry records."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    ERASE = "ERASE"


class ChangeLog(DocumentModel):
    """
    Immutable entry of the change log.

    Records who changed which record, when, why, and the record's stored
    state at that moment. Entries reference the record by identity only;
    they are appended and never updated or removed.
    """

    model_config = ConfigDict(use_enum_values=True, protected_namespaces=(), frozen=True)

    created_at: Optional[datetime] = None
    created_by: Optional[str] = None
    change_reason: str = ""
    operation: ChangeOperation

    # What was changed
    model_obj_id: ObjectId
    model_name: str
    model_value: dict[str, Any] = Field(default_factory=dict)
