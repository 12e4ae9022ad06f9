"""
Tests for the change log.

Tests verify:
- Each *_with_log operation appends exactly one entry
- Snapshot ordering: after the mutation for create/save/delete, before it for erase
- Log failures do not roll back the primary mutation
- History queries and snapshot diffs
"""

from unittest.mock import patch

import pytest
from bson import ObjectId
from pydantic import ValidationError
from pymongo.errors import AutoReconnect

from docstore.models import ChangeLog, ChangeOperation
from docstore.services.crud import OperationContext
from docstore.services.crud.audit import changed_fields, list_changes, record_change
from shared.utils.exceptions import NotFoundError, StoreError
from tests.conftest import Article


def _log_count(repo) -> int:
    return repo.log_collection.count_documents({})


class TestSaveWithLog:
    """Tests for save_with_log()."""

    def test_one_entry_with_post_save_state(self, repo, alice, bob):
        article = repo.create(Article(title="A"), alice)
        article.title = "B"

        entry = repo.save_with_log(article, OperationContext(operator="bob", reason="retitle"))

        assert _log_count(repo) == 1
        assert entry.operation == ChangeOperation.UPDATE
        assert entry.created_by == "bob"
        assert entry.change_reason == "retitle"
        assert entry.model_obj_id == article.id
        assert entry.model_name == "Article"
        assert entry.model_value["title"] == "B"
        assert entry.model_value["updated_by"] == "bob"
        assert entry.model_value["updated_at"] is not None

    def test_stored_entry_matches_returned_entry(self, repo, alice):
        article = repo.create(Article(title="A"), alice)
        entry = repo.save_with_log(article, alice)

        document = repo.log_collection.find_one({"_id": entry.id})
        assert document["operation"] == "UPDATE"
        assert document["model_obj_id"] == article.id
        assert document["created_by"] == "alice"
        assert document["change_reason"] == "testing"

    def test_log_failure_keeps_the_save(self, repo, alice, bob):
        article = repo.create(Article(title="A"), alice)
        article.title = "B"

        with patch.object(
            repo.log_collection, "update_one", side_effect=AutoReconnect("lost")
        ):
            with pytest.raises(StoreError):
                repo.save_with_log(article, bob)

        assert repo.get(article.id).title == "B"
        assert _log_count(repo) == 0


class TestCreateWithLog:
    """Tests for create_with_log()."""

    def test_logs_created_state(self, repo, alice):
        article = Article(title="A")
        entry = repo.create_with_log(article, alice)

        assert entry.operation == ChangeOperation.CREATE
        assert entry.model_obj_id == article.id
        assert entry.model_value["created_by"] == "alice"


class TestDeleteWithLog:
    """Tests for delete_with_log()."""

    def test_logs_removed_state(self, repo, alice, bob):
        article = repo.create(Article(title="A"), alice)
        entry = repo.delete_with_log(article, bob)

        assert _log_count(repo) == 1
        assert entry.operation == ChangeOperation.DELETE
        assert entry.model_value["is_removed"] is True
        assert entry.model_value["removed_by"] == "bob"
        assert repo.find_all() == []


class TestEraseWithLog:
    """Tests for erase_with_log()."""

    def test_logs_pre_erase_state_then_erases(self, repo, alice, bob):
        article = repo.create(Article(title="A", views=7), alice)
        entry = repo.erase_with_log(article, bob)

        assert _log_count(repo) == 1
        assert entry.operation == ChangeOperation.ERASE
        assert entry.model_value["_id"] == article.id
        assert entry.model_value["views"] == 7
        with pytest.raises(NotFoundError):
            repo.get(article.id)
        assert repo.collection.find_one({"_id": article.id}) is None

    def test_erase_of_soft_deleted_record_is_logged(self, repo, alice, bob):
        article = repo.create(Article(title="A"), alice)
        repo.delete(article, bob)

        entry = repo.erase_with_log(article, bob)
        assert entry.model_value["is_removed"] is True

    def test_missing_record_is_not_erased_or_logged(self, repo, alice):
        ghost = Article(id=ObjectId(), title="ghost")
        with pytest.raises(NotFoundError):
            repo.erase_with_log(ghost, alice)
        assert _log_count(repo) == 0

    def test_log_failure_leaves_record_in_place(self, repo, alice):
        article = repo.create(Article(title="A"), alice)

        with patch.object(
            repo.log_collection, "update_one", side_effect=AutoReconnect("lost")
        ):
            with pytest.raises(StoreError):
                repo.erase_with_log(article, alice)

        assert repo.get(article.id).title == "A"


class TestRecordChange:
    """Tests for record_change()."""

    def test_missing_record_raises_not_found(self, repo):
        with pytest.raises(NotFoundError):
            record_change(
                repo.collection,
                repo.log_collection,
                model_name="Article",
                record_id=ObjectId(),
                operation=ChangeOperation.UPDATE,
                operator="alice",
            )

    def test_snapshot_comes_from_store(self, repo, alice):
        article = repo.create(Article(title="stored"), alice)
        article.title = "unsaved edit"

        entry = record_change(
            repo.collection,
            repo.log_collection,
            model_name="Article",
            record_id=article.id,
            operation=ChangeOperation.UPDATE,
            operator="alice",
        )
        assert entry.model_value["title"] == "stored"

    def test_entries_are_immutable(self, repo, alice):
        article = repo.create(Article(title="stored"), alice)
        entry = repo.save_with_log(article, alice)

        with pytest.raises(ValidationError):
            entry.change_reason = "rewritten"
        assert repo.history(article)[0].change_reason == "testing"


class TestHistory:
    """Tests for history() / list_changes()."""

    def test_history_is_newest_first(self, repo, alice, bob):
        article = repo.create(Article(title="A"), alice)
        repo.save_with_log(article, alice)
        repo.delete_with_log(article, bob)

        history = repo.history(article)
        assert [e.operation for e in history] == [ChangeOperation.DELETE, ChangeOperation.UPDATE]
        assert all(isinstance(e, ChangeLog) for e in history)

    def test_history_by_identity_with_limit(self, repo, alice):
        article = repo.create(Article(title="A"), alice)
        repo.save_with_log(article, alice)
        repo.save_with_log(article, alice)

        assert len(repo.history(article.id, limit=1)) == 1

    def test_list_changes_filters(self, repo, alice):
        first = repo.create(Article(title="A"), alice)
        second = repo.create(Article(title="B"), alice)
        repo.save_with_log(first, alice)
        repo.erase_with_log(second, alice)

        erased = list_changes(repo.log_collection, operation=ChangeOperation.ERASE)
        assert [e.model_obj_id for e in erased] == [second.id]
        assert len(list_changes(repo.log_collection, model_name="Article")) == 2
        assert list_changes(repo.log_collection, model_name="Note") == []

    def test_changed_fields_between_entries(self, repo, alice, bob):
        article = repo.create(Article(title="A", views=1), alice)
        before = repo.save_with_log(article, alice)
        article.views = 2
        after = repo.save_with_log(article, bob)

        changes = changed_fields(before.model_value, after.model_value)
        assert changes["views"] == {"old": 1, "new": 2}
        assert changes["updated_by"] == {"old": "alice", "new": "bob"}
        assert "title" not in changes


class TestChangedFields:
    """Tests for changed_fields()."""

    def test_one_sided_fields(self):
        assert changed_fields({"a": 1}, {"b": 2}) == {
            "a": {"old": 1, "new": None},
            "b": {"old": None, "new": 2},
        }

    def test_identical_snapshots(self):
        assert changed_fields({"a": 1}, {"a": 1}) == {}
