"""
Centralized constants for the record access layer.
Avoids magic strings for the well-known record fields.

Usage:
    from shared.config.constants import RecordFields, DEFAULT_SORT

    doc[RecordFields.CREATED_BY]
"""

from typing import Final


class RecordFields:
    """Stored keys of the well-known record fields."""

    ID: Final[str] = "_id"
    CREATED_AT: Final[str] = "created_at"
    CREATED_BY: Final[str] = "created_by"
    UPDATED_AT: Final[str] = "updated_at"
    UPDATED_BY: Final[str] = "updated_by"
    REMOVED_AT: Final[str] = "removed_at"
    REMOVED_BY: Final[str] = "removed_by"
    IS_REMOVED: Final[str] = "is_removed"


# Attribute names every record model must declare
WELL_KNOWN_FIELDS: Final[tuple[str, ...]] = (
    "id",
    "created_at",
    "created_by",
    "updated_at",
    "updated_by",
    "removed_at",
    "removed_by",
    "is_removed",
)

# Newest-updated first, then newest-created
DEFAULT_SORT: Final[tuple[str, ...]] = (
    f"-{RecordFields.UPDATED_AT}",
    f"-{RecordFields.CREATED_AT}",
)
