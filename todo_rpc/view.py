"""
List view/controller for the todo client.

The local list is a cache of store state: it is replaced wholesale on load,
patched by id with the server's response on toggle, extended with the
server's record on create, and filtered by id on a confirmed delete. A failed
remote call is logged and leaves the list exactly as it was.
"""
from __future__ import annotations

import logging
from typing import List, Optional

import httpx

from .client import RpcError, TodoRpcClient
from .schemas import TodoOut

logger = logging.getLogger(__name__)

_REMOTE_ERRORS = (RpcError, httpx.HTTPError)


# PUBLIC_INTERFACE
class TodoListView:
    """
    Holds the client-side todo list and applies user actions to it.

    Every action awaits its remote call before touching state, one call at a
    time on the running event loop.
    """

    def __init__(self, client: TodoRpcClient) -> None:
        self._client = client
        self.todos: List[TodoOut] = []
        self.draft: str = ""
        self.is_loading = False
        self.is_creating = False

    @property
    def total_count(self) -> int:
        return len(self.todos)

    @property
    def completed_count(self) -> int:
        return sum(1 for t in self.todos if t.completed)

    @property
    def progress_percent(self) -> int:
        if not self.todos:
            return 0
        return round(self.completed_count * 100 / self.total_count)

    def find(self, todo_id: int) -> Optional[TodoOut]:
        return next((t for t in self.todos if t.id == todo_id), None)

    async def load(self) -> None:
        """Fetch the full list and replace local state."""
        self.is_loading = True
        try:
            self.todos = await self._client.get_todos()
        except _REMOTE_ERRORS as exc:
            logger.error("Failed to load todos: %s", exc)
        finally:
            self.is_loading = False

    async def submit(self) -> Optional[TodoOut]:
        """
        Create a todo from the current draft.

        Blank drafts are ignored. On success the new record is appended and
        the draft is cleared; on failure the draft is kept for another try.
        """
        description = self.draft.strip()
        if not description:
            return None

        self.is_creating = True
        try:
            created = await self._client.create_todo(description)
        except _REMOTE_ERRORS as exc:
            logger.error("Failed to create todo: %s", exc)
            return None
        finally:
            self.is_creating = False

        self.todos = [*self.todos, created]
        self.draft = ""
        return created

    async def toggle(self, todo: TodoOut) -> Optional[TodoOut]:
        """Flip completion and replace the local record with the server's copy."""
        try:
            updated = await self._client.update_todo(todo.id, not todo.completed)
        except _REMOTE_ERRORS as exc:
            logger.error("Failed to update todo %s: %s", todo.id, exc)
            return None

        self.todos = [updated if t.id == todo.id else t for t in self.todos]
        return updated

    async def remove(self, todo_id: int) -> bool:
        """Delete a todo; drop it locally only when the server reports success."""
        try:
            result = await self._client.delete_todo(todo_id)
        except _REMOTE_ERRORS as exc:
            logger.error("Failed to delete todo %s: %s", todo_id, exc)
            return False

        if result.success:
            self.todos = [t for t in self.todos if t.id != todo_id]
        return result.success

    def render(self) -> str:
        """Render the list as plain text."""
        lines = ["Todo App"]
        if self.is_loading:
            lines.append("Loading...")

        if not self.todos:
            lines.append("No todos yet! Add one above to get started.")
            return "\n".join(lines)

        lines.append(
            f"Progress: {self.completed_count} of {self.total_count} completed ({self.progress_percent}%)"
        )
        for todo in self.todos:
            mark = "x" if todo.completed else " "
            created = todo.created_at.strftime("%Y-%m-%d %H:%M")
            line = f"[{mark}] #{todo.id} {todo.description}  (created {created})"
            if todo.completed:
                line += "  Done"
            lines.append(line)
        return "\n".join(lines)
