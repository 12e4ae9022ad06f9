"""
CRUD Services - Generic operations for document records.

Provides:
- RecordRepository: create/save/delete/erase and filtered reads for one record type
- OperationContext: operator, reason and query state of one operation
- accessor: well-known field access and audit stamping
- filters: soft delete exclusion, identity pinning, sort defaults
- soft_delete: soft delete flag spellings and their migration
- audit: change log writes and history
"""

from .accessor import (
    ensure_record_model,
    get_field,
    set_field,
    record_identity,
    stamp_created,
    stamp_updated,
    stamp_removed,
    new_identity,
    utcnow,
)
from .audit import changed_fields, list_changes, record_change
from .context import OperationContext
from .filters import (
    DEFAULT_SORT,
    build_cursor,
    by_identity,
    exclude_removed,
    parse_sort,
    projection,
)
from .repository import RecordRepository
from .soft_delete import migrate_removed_flag, removed_flag_fields

__all__ = [
    # Repository
    "RecordRepository",
    "OperationContext",
    # Accessor
    "ensure_record_model",
    "get_field",
    "set_field",
    "record_identity",
    "stamp_created",
    "stamp_updated",
    "stamp_removed",
    "new_identity",
    "utcnow",
    # Filters
    "DEFAULT_SORT",
    "build_cursor",
    "by_identity",
    "exclude_removed",
    "parse_sort",
    "projection",
    # Soft delete
    "migrate_removed_flag",
    "removed_flag_fields",
    # Change log
    "changed_fields",
    "list_changes",
    "record_change",
]
