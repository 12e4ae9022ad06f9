"""
Logging for the record access layer.

Loggers returned by get_logger() accept keyword arguments as structured
data:

    logger.info("Record saved", collection="Article", record_id=str(record.id))

The data lands on ``record.extra_data``. Production output is one JSON
object per line; development output is a single readable line with the
data as ``key=value`` pairs. Both carry the current operation_id (see
shared.infrastructure.correlation) so the steps of one compound mutation
can be grouped.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Mapping

from shared.config.settings import settings

NO_OPERATION = "-"


def record_fields(record: logging.LogRecord) -> tuple[str | None, Mapping[str, Any]]:
    """Operation id (None outside a scope) and structured data of a record."""
    operation_id = getattr(record, "operation_id", None)
    if operation_id == NO_OPERATION:
        operation_id = None
    return operation_id, getattr(record, "extra_data", None) or {}


class JsonFormatter(logging.Formatter):
    """One JSON object per record, for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        operation_id, data = record_fields(record)
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if operation_id:
            entry["operation_id"] = operation_id
        if data:
            entry["data"] = dict(data)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        if settings.debug:
            entry["source"] = f"{record.pathname}:{record.lineno}"
        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Single line per record: time, level, operation, logger, message, data."""

    def format(self, record: logging.LogRecord) -> str:
        operation_id, data = record_fields(record)
        parts = [
            datetime.fromtimestamp(record.created).strftime("%H:%M:%S"),
            f"{record.levelname:<8}",
        ]
        if operation_id:
            parts.append(f"[{operation_id[:8]}]")
        parts.append(f"{record.name}: {record.getMessage()}")
        parts.extend(f"{key}={value}" for key, value in data.items())

        line = " ".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class DataLogger(logging.Logger):
    """Logger whose methods take structured data as keyword arguments."""

    def _log(
        self,
        level: int,
        msg: object,
        args: Any,
        exc_info: Any = None,
        extra: Mapping[str, Any] | None = None,
        stack_info: bool = False,
        stacklevel: int = 1,
        **data: Any,
    ) -> None:
        extra = dict(extra) if extra else {}
        extra["extra_data"] = data or None
        super()._log(
            level,
            msg,
            args,
            exc_info=exc_info,
            extra=extra,
            stack_info=stack_info,
            stacklevel=stacklevel + 1,
        )


logging.setLoggerClass(DataLogger)


def setup_logging() -> None:
    """
    Configure the root logger once at process startup.

    JSON lines in production, console lines elsewhere. DEBUG when
    settings.debug is on.
    """
    # Deferred: the shared.infrastructure package imports this module
    from shared.infrastructure.correlation import CorrelationIdFilter

    level = logging.DEBUG if settings.debug else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(
        JsonFormatter() if settings.environment == "production" else ConsoleFormatter()
    )

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    logging.getLogger("pymongo").setLevel(logging.WARNING)


def get_logger(name: str) -> DataLogger:
    """
    Logger for a module.

    Usage:
        logger = get_logger(__name__)
        logger.warning("Records erased in bulk", collection="Article", removed=3)
    """
    return logging.getLogger(name)  # type: ignore[return-value]
