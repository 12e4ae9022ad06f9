"""
Document Models Package.

- base: DocumentModel and the Record capability contract
- change_log: ChangeLog, ChangeOperation
"""

from .base import DocumentModel, Record
from .change_log import ChangeLog, ChangeOperation

__all__ = [
    "DocumentModel",
    "Record",
    "ChangeLog",
    "ChangeOperation",
]
