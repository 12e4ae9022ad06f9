"""
Services module.

- crud/: Repository, field accessor, filters, soft delete, change log
"""

from .crud import OperationContext, RecordRepository

__all__ = ["OperationContext", "RecordRepository"]
