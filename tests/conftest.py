"""
Pytest configuration and fixtures for record access tests.
"""

from typing import Optional

import mongomock
import pytest

from docstore.models import Record
from docstore.services.crud import OperationContext, RecordRepository


class Article(Record):
    """Record model used across the tests."""

    title: str = ""
    author: Optional[str] = None
    views: int = 0


class Note(Record):
    """Record model stored under an explicit collection name."""

    __collection__ = "notes"

    text: str = ""


@pytest.fixture(scope="function")
def mongo_client():
    """
    In-memory document store for each test.
    Uses mongomock for isolation.
    """
    client = mongomock.MongoClient(tz_aware=True)
    try:
        yield client
    finally:
        client.close()


@pytest.fixture
def db(mongo_client):
    """Database handle on the in-memory store."""
    return mongo_client["docstore_test"]


@pytest.fixture
def repo(db):
    """Repository for Article records."""
    return RecordRepository(Article, db)


@pytest.fixture
def alice():
    """Context for operations performed by alice."""
    return OperationContext(operator="alice", reason="testing")


@pytest.fixture
def bob():
    """Context for operations performed by bob."""
    return OperationContext(operator="bob", reason="cleanup")


@pytest.fixture
def seed_articles(repo, alice):
    """Three stored articles by two authors."""
    return [
        repo.create(Article(title="First", author="alice", views=3), alice),
        repo.create(Article(title="Second", author="alice", views=5), alice),
        repo.create(Article(title="Third", author="carol", views=1), alice),
    ]
