from __future__ import annotations

from typing import Any, Dict, List, Optional


class TodoError(Exception):
    """Base class for errors raised by the todo handlers."""

    code = "INTERNAL_SERVER_ERROR"
    status_code = 500

    def data(self) -> Dict[str, Any]:
        return {}


# PUBLIC_INTERFACE
class InvalidInput(TodoError):
    """
    Raised when procedure input fails validation. Nothing reaches the store.
    """

    code = "BAD_REQUEST"
    status_code = 400

    def __init__(self, message: str = "Invalid input", issues: Optional[List[Dict[str, Any]]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.issues = issues or []

    def data(self) -> Dict[str, Any]:
        return {"issues": self.issues}


# PUBLIC_INTERFACE
class NotFound(TodoError):
    """Raised when an update targets a todo id that does not exist."""

    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, todo_id: int) -> None:
        self.todo_id = todo_id
        self.message = f"Todo with id {todo_id} not found"
        super().__init__(self.message)

    def data(self) -> Dict[str, Any]:
        return {"id": self.todo_id}
