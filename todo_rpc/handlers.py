"""
Procedure handlers: one function per remote operation.

Each handler accepts either the validated pydantic input model or a raw
mapping. Raw input is validated before the store is touched, and validation
failures raise InvalidInput. Store errors are logged and re-raised unchanged.
"""
from __future__ import annotations

import logging
from typing import Any, List, Mapping, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from .errors import InvalidInput, NotFound
from .repositories import Repository
from .schemas import CreateTodoInput, DeleteResult, DeleteTodoInput, TodoOut, UpdateTodoInput

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _coerce(model: Type[M], payload: Union[M, Mapping[str, Any]]) -> M:
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise InvalidInput(
            f"Invalid input for {model.__name__}",
            issues=exc.errors(include_url=False, include_context=False),
        ) from exc


# PUBLIC_INTERFACE
def create_todo(payload: Union[CreateTodoInput, Mapping[str, Any]], repo: Repository) -> TodoOut:
    """
    Insert a new todo. The store assigns id and created_at; completed starts false.

    Raises:
        InvalidInput: description is missing, not a string, or empty after stripping.
    """
    data = _coerce(CreateTodoInput, payload)
    try:
        created = repo.create(data.description)
    except Exception:
        logger.exception("Todo creation failed")
        raise
    logger.info("Created todo %s", created["id"])
    return TodoOut(**created)


# PUBLIC_INTERFACE
def get_todos(repo: Repository) -> List[TodoOut]:
    """Return every todo, oldest first."""
    try:
        items = repo.list()
    except Exception:
        logger.exception("Fetching todos failed")
        raise
    return [TodoOut(**it) for it in items]


# PUBLIC_INTERFACE
def update_todo(payload: Union[UpdateTodoInput, Mapping[str, Any]], repo: Repository) -> TodoOut:
    """
    Set the completion flag of an existing todo.

    Raises:
        InvalidInput: id is not an integer or completed is not a boolean.
        NotFound: no todo has the given id.
    """
    data = _coerce(UpdateTodoInput, payload)
    try:
        updated = repo.update(data.id, data.completed)
    except Exception:
        logger.exception("Todo update failed for id %s", data.id)
        raise
    if updated is None:
        raise NotFound(data.id)
    logger.info("Todo %s completed=%s", data.id, data.completed)
    return TodoOut(**updated)


# PUBLIC_INTERFACE
def delete_todo(payload: Union[DeleteTodoInput, Mapping[str, Any]], repo: Repository) -> DeleteResult:
    """
    Delete a todo by id. A missing id is reported as success=False, not an error.
    """
    data = _coerce(DeleteTodoInput, payload)
    try:
        removed = repo.delete(data.id)
    except Exception:
        logger.exception("Todo deletion failed for id %s", data.id)
        raise
    if removed:
        logger.info("Deleted todo %s", data.id)
    else:
        logger.debug("Delete requested for missing todo %s", data.id)
    return DeleteResult(success=removed)
