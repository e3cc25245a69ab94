from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from .. import handlers
from ..repositories import Repository, get_repository
from ..schemas import (
    CreateTodoInput,
    DeleteResult,
    DeleteTodoInput,
    RpcErrorResponse,
    RpcResponse,
    TodoOut,
    UpdateTodoInput,
)
from ..utils import rpc_result

router = APIRouter(
    prefix="/trpc",
    tags=["todos"],
)

_BAD_REQUEST = {"model": RpcErrorResponse, "description": "Invalid input"}
_STORE_FAILURE = {"model": RpcErrorResponse, "description": "Store failure"}


def _get_repo(repo: Repository = Depends(get_repository)) -> Repository:
    """
    Dependency wrapper for repository to keep signatures clean.
    """
    return repo


# PUBLIC_INTERFACE
@router.get(
    "/getTodos",
    response_model=RpcResponse[List[TodoOut]],
    summary="getTodos",
    description="Return every todo ordered by creation time, oldest first.",
    responses={500: _STORE_FAILURE},
)
def get_todos(repo: Repository = Depends(_get_repo)) -> dict:
    """
    List all todos.
    """
    return rpc_result(handlers.get_todos(repo))


# PUBLIC_INTERFACE
@router.post(
    "/createTodo",
    response_model=RpcResponse[TodoOut],
    status_code=status.HTTP_200_OK,
    summary="createTodo",
    description="Create a todo from a non-empty description and return the stored record.",
    responses={400: _BAD_REQUEST, 500: _STORE_FAILURE},
)
def create_todo(payload: CreateTodoInput, repo: Repository = Depends(_get_repo)) -> dict:
    """
    Create a new Todo.
    """
    return rpc_result(handlers.create_todo(payload, repo))


# PUBLIC_INTERFACE
@router.post(
    "/updateTodo",
    response_model=RpcResponse[TodoOut],
    summary="updateTodo",
    description="Set the completion flag of an existing todo.",
    responses={
        400: _BAD_REQUEST,
        404: {"model": RpcErrorResponse, "description": "Todo not found"},
        500: _STORE_FAILURE,
    },
)
def update_todo(payload: UpdateTodoInput, repo: Repository = Depends(_get_repo)) -> dict:
    """
    Toggle completion of a Todo. Unknown ids are answered with NOT_FOUND.
    """
    return rpc_result(handlers.update_todo(payload, repo))


# PUBLIC_INTERFACE
@router.post(
    "/deleteTodo",
    response_model=RpcResponse[DeleteResult],
    summary="deleteTodo",
    description="Delete a todo by id. success is false when nothing matched.",
    responses={400: _BAD_REQUEST, 500: _STORE_FAILURE},
)
def delete_todo(payload: DeleteTodoInput, repo: Repository = Depends(_get_repo)) -> dict:
    """
    Delete a Todo.
    """
    return rpc_result(handlers.delete_todo(payload, repo))
