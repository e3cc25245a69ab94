from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from functools import lru_cache
from threading import RLock
from typing import List, Optional

from .models import TodoEntity
from .settings import get_settings


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract repository contract for todo storage backends."""

    @abstractmethod
    def create(self, description: str) -> TodoEntity:
        """Insert a new todo and return it with store-assigned id and created_at."""

    @abstractmethod
    def get(self, todo_id: int) -> Optional[TodoEntity]:
        """Return a TodoEntity by id, or None if not found."""

    @abstractmethod
    def list(self) -> List[TodoEntity]:
        """Return every todo ordered by created_at ascending, then id."""

    @abstractmethod
    def update(self, todo_id: int, completed: bool) -> Optional[TodoEntity]:
        """Set the completion flag. Return the updated entity or None if not found."""

    @abstractmethod
    def delete(self, todo_id: int) -> bool:
        """Delete a TodoEntity by id. Return True if deleted, False if not found."""


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: dict[int, TodoEntity] = {}
        self._next_id = 1

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)

    def create(self, description: str) -> TodoEntity:
        with self._lock:
            entity: TodoEntity = {
                "id": self._next_id,
                "description": description,
                "completed": False,
                "created_at": self._now(),
            }
            self._next_id += 1
            self._items[entity["id"]] = entity
            return entity.copy()

    def get(self, todo_id: int) -> Optional[TodoEntity]:
        with self._lock:
            item = self._items.get(todo_id)
            return None if item is None else item.copy()

    def list(self) -> List[TodoEntity]:
        with self._lock:
            items = sorted(self._items.values(), key=lambda t: (t["created_at"], t["id"]))
            # Return copies to avoid external mutation
            return [t.copy() for t in items]

    def update(self, todo_id: int, completed: bool) -> Optional[TodoEntity]:
        with self._lock:
            existing = self._items.get(todo_id)
            if existing is None:
                return None
            existing["completed"] = completed
            return existing.copy()

    def delete(self, todo_id: int) -> bool:
        with self._lock:
            return self._items.pop(todo_id, None) is not None


# PUBLIC_INTERFACE
@lru_cache(maxsize=1)
def get_repository() -> Repository:
    """
    Return the process-wide repository configured by settings.
    - sqlite: SQLiteRepository at SQLITE_DB_PATH
    - memory: InMemoryRepository
    """
    settings = get_settings()
    if settings.persistence_backend == "memory":
        return InMemoryRepository()

    from .db import SQLiteRepository

    return SQLiteRepository(settings.sqlite_db_path)
