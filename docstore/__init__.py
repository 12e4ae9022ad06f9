"""
Generic record access over a MongoDB document store.

Uniform create / read / update / soft delete / erase for any Record model,
with an append-only change log of who changed what and why.
"""

from docstore.models import ChangeLog, ChangeOperation, Record
from docstore.services.crud import OperationContext, RecordRepository

__all__ = [
    "ChangeLog",
    "ChangeOperation",
    "OperationContext",
    "Record",
    "RecordRepository",
]
