import sqlite3
import time
from datetime import datetime

import pytest

from todo_rpc.db import SQLiteRepository
from todo_rpc.repositories import InMemoryRepository


@pytest.fixture(params=["sqlite", "memory"])
def store(request, tmp_path):
    if request.param == "sqlite":
        return SQLiteRepository(str(tmp_path / "store.db"))
    return InMemoryRepository()


class TestRepositoryContract:
    def test_create_assigns_id_and_created_at(self, store):
        todo = store.create("Water plants")
        assert isinstance(todo["id"], int)
        assert todo["description"] == "Water plants"
        assert todo["completed"] is False
        assert isinstance(todo["created_at"], datetime)
        assert todo["created_at"].tzinfo is not None

    def test_ids_are_unique(self, store):
        first = store.create("First todo")
        second = store.create("Second todo")
        assert first["id"] != second["id"]

    def test_list_empty(self, store):
        assert store.list() == []

    def test_list_is_ordered_by_creation(self, store):
        for name in ("Oldest todo", "Middle todo", "Newest todo"):
            store.create(name)
            time.sleep(0.002)
        items = store.list()
        assert [t["description"] for t in items] == ["Oldest todo", "Middle todo", "Newest todo"]
        created = [t["created_at"] for t in items]
        assert created == sorted(created)

    def test_update_sets_only_completed(self, store):
        todo = store.create("Learn Python")
        updated = store.update(todo["id"], True)
        assert updated is not None
        assert updated["completed"] is True
        assert updated["description"] == todo["description"]
        assert updated["created_at"] == todo["created_at"]
        assert store.get(todo["id"])["completed"] is True

    def test_update_missing_returns_none_and_creates_nothing(self, store):
        assert store.update(99999, True) is None
        assert store.list() == []

    def test_delete(self, store):
        todo = store.create("Temporary")
        assert store.delete(todo["id"]) is True
        assert store.get(todo["id"]) is None
        assert store.delete(todo["id"]) is False

    def test_returned_entities_are_copies(self, store):
        todo = store.create("Immutable")
        todo["completed"] = True
        assert store.get(todo["id"])["completed"] is False


class TestSQLiteDurability:
    def test_rows_survive_reopen(self, tmp_path):
        path = str(tmp_path / "durable.db")
        first = SQLiteRepository(path)
        created = first.create("Persist me")
        first.update(created["id"], True)

        reopened = SQLiteRepository(path)
        items = reopened.list()
        assert len(items) == 1
        assert items[0]["id"] == created["id"]
        assert items[0]["completed"] is True
        assert items[0]["created_at"] == created["created_at"]

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "todos.db"
        SQLiteRepository(str(path)).create("x")
        assert path.exists()

    def test_store_rejects_null_description(self, tmp_path):
        store = SQLiteRepository(str(tmp_path / "todos.db"))
        with pytest.raises(sqlite3.IntegrityError):
            store.create(None)  # type: ignore[arg-type]
        assert store.list() == []
