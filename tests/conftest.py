import os

import pytest
from fastapi.testclient import TestClient

# Keep imports of the app from creating ./data/todos.db during tests
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")

from todo_rpc.db import SQLiteRepository  # noqa: E402
from todo_rpc.main import app  # noqa: E402
from todo_rpc.repositories import get_repository  # noqa: E402


@pytest.fixture
def repo(tmp_path):
    """A fresh SQLite store per test."""
    return SQLiteRepository(str(tmp_path / "todos.db"))


@pytest.fixture
def client(repo):
    app.dependency_overrides[get_repository] = lambda: repo
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
