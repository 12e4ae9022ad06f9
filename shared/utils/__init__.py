"""
Utilities module: Exceptions.
"""

from shared.utils.exceptions import (
    AppException,
    NotFoundError,
    SchemaViolationError,
    StoreError,
)

__all__ = [
    "AppException",
    "NotFoundError",
    "SchemaViolationError",
    "StoreError",
]
