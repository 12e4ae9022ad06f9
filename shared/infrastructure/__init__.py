"""
Infrastructure: document store access and operation correlation.
"""

from shared.infrastructure.correlation import (
    CorrelationIdFilter,
    get_operation_id,
    operation_scope,
)
from shared.infrastructure.db import (
    collection_name_for,
    get_client,
    get_collection,
    get_database,
    get_db_context,
    store_errors,
)

__all__ = [
    "CorrelationIdFilter",
    "get_operation_id",
    "operation_scope",
    "collection_name_for",
    "get_client",
    "get_collection",
    "get_database",
    "get_db_context",
    "store_errors",
]
