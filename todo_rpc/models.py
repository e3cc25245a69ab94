from __future__ import annotations

from datetime import datetime
from typing import TypedDict


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    Storage-level representation of a Todo row.

    Fields:
    - id: Unique integer identifier, assigned by the store
    - description: Non-empty text (stripped and length-checked via schemas)
    - completed: Boolean completion flag, the only mutable field
    - created_at: UTC creation timestamp, assigned by the store
    """

    id: int
    description: str
    completed: bool
    created_at: datetime
