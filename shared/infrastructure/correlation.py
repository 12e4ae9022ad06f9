"""
Operation correlation IDs.

Every compound mutation (save + change log, log + erase) runs inside one
operation scope; all log lines it emits carry the same operation_id.
"""

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

# Context variable for the operation ID (thread and task local)
operation_id_var: ContextVar[str] = ContextVar("operation_id", default="")


def get_operation_id() -> str:
    """Get the current operation ID, empty outside any scope."""
    return operation_id_var.get()


@contextmanager
def operation_scope(operation_id: str | None = None) -> Iterator[str]:
    """
    Bind an operation ID for the duration of the block.

    Nested scopes reuse the outer ID unless one is passed explicitly,
    so a save_with_log and the save it performs log under one ID.

    Usage:
        with operation_scope() as op_id:
            repo.save_with_log(record, ctx)
    """
    current = operation_id_var.get()
    if operation_id is None:
        operation_id = current or str(uuid.uuid4())

    token = operation_id_var.set(operation_id)
    try:
        yield operation_id
    finally:
        operation_id_var.reset(token)


class CorrelationIdFilter:
    """
    Logging filter that adds operation_id to log records.

    Usage:
        import logging
        handler = logging.StreamHandler()
        handler.addFilter(CorrelationIdFilter())
    """

    def filter(self, record) -> bool:
        record.operation_id = operation_id_var.get() or "-"
        return True
