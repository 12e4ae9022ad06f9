"""
Document store connection and collection resolution.

The record layer never opens connections on its own: callers pass a
pymongo Database (or use get_database() for the one configured in
settings). Collection names map one record type to one collection.
"""

from collections.abc import Generator, Iterator
from contextlib import contextmanager
from functools import lru_cache
from typing import Any

from bson.errors import BSONError
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from shared.config.settings import settings
from shared.utils.exceptions import StoreError


@lru_cache
def get_client() -> MongoClient:
    """
    Process-wide client built from settings.

    The client pools connections internally and is safe to share
    between threads.
    """
    return MongoClient(
        settings.mongo_url,
        serverSelectionTimeoutMS=settings.mongo_server_selection_timeout_ms,
        tz_aware=True,
    )


def get_database(name: str | None = None) -> Database:
    """Database handle for ``name`` (defaults to settings.mongo_database)."""
    return get_client()[name or settings.mongo_database]


@contextmanager
def get_db_context(name: str | None = None) -> Generator[Database, None, None]:
    """
    Context manager for a dedicated client, closed on exit.

    Usage:
        with get_db_context() as db:
            RecordRepository(Article, db).count()
    """
    client = MongoClient(
        settings.mongo_url,
        serverSelectionTimeoutMS=settings.mongo_server_selection_timeout_ms,
        tz_aware=True,
    )
    try:
        yield client[name or settings.mongo_database]
    finally:
        client.close()


def collection_name_for(model: Any) -> str:
    """
    Resolve the collection name of a record type.

    A plain string is used as is. A class (or instance) uses its
    ``__collection__`` attribute when set, otherwise its class name.
    """
    if isinstance(model, str):
        return model
    cls = model if isinstance(model, type) else type(model)
    return getattr(cls, "__collection__", None) or cls.__name__


def get_collection(database: Database, model: Any) -> Collection:
    """Collection handle for a record type or explicit name."""
    return database[collection_name_for(model)]


@contextmanager
def store_errors(operation: str, **log_context: Any) -> Iterator[None]:
    """
    Translate driver and encoding failures into StoreError.

    Usage:
        with store_errors("upsert", collection=collection.name):
            collection.update_one(...)

    The driver exception is chained, never swallowed.
    """
    try:
        yield
    except (PyMongoError, BSONError) as exc:
        raise StoreError(operation, original=exc, **log_context) from exc
