from __future__ import annotations

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

DESCRIPTION_MAX_LENGTH = 500

# Ids are stored as signed 64-bit SQLite integers
ID_MIN = -(2**63)
ID_MAX = 2**63 - 1

T = TypeVar("T")


# PUBLIC_INTERFACE
class CreateTodoInput(BaseModel):
    """
    Input for the createTodo procedure.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"description": "Buy groceries"}},
    )

    description: str = Field(
        ...,
        description="What needs to be done",
        strict=True,
    )

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        """
        Strip whitespace and enforce 1..500 length.
        """
        s = v.strip()
        if not (1 <= len(s) <= DESCRIPTION_MAX_LENGTH):
            raise ValueError(
                f"description length must be between 1 and {DESCRIPTION_MAX_LENGTH} characters"
            )
        return s


# PUBLIC_INTERFACE
class UpdateTodoInput(BaseModel):
    """
    Input for the updateTodo procedure. Only the completion flag can change.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"id": 1, "completed": True}},
    )

    id: int = Field(..., strict=True, ge=ID_MIN, le=ID_MAX, description="Identifier of the todo to update")
    completed: bool = Field(..., strict=True, description="New completion status")


# PUBLIC_INTERFACE
class DeleteTodoInput(BaseModel):
    """
    Input for the deleteTodo procedure.
    """

    model_config = ConfigDict(json_schema_extra={"example": {"id": 1}})

    id: int = Field(..., strict=True, ge=ID_MIN, le=ID_MAX, description="Identifier of the todo to delete")


# PUBLIC_INTERFACE
class DeleteResult(BaseModel):
    """
    Outcome of deleteTodo. success is false when no row matched the id.
    """

    success: bool = Field(..., description="Whether a todo was removed")


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 123,
                "description": "Buy groceries",
                "completed": False,
                "created_at": "2025-01-25T10:15:30.123000Z",
            }
        }
    )

    id: int = Field(..., description="Unique identifier of the todo item")
    description: str = Field(..., description="What needs to be done")
    completed: bool = Field(..., description="Completion status flag")
    created_at: datetime = Field(..., description="Creation timestamp")


class RpcData(BaseModel, Generic[T]):
    data: T


# PUBLIC_INTERFACE
class RpcResponse(BaseModel, Generic[T]):
    """
    Success envelope shared by every procedure: {"result": {"data": ...}}.
    """

    result: RpcData[T]


class RpcErrorBody(BaseModel):
    code: str = Field(..., description="Machine readable error code, e.g. NOT_FOUND")
    message: str = Field(..., description="Human readable error message")
    data: dict = Field(default_factory=dict, description="Error specific details")


# PUBLIC_INTERFACE
class RpcErrorResponse(BaseModel):
    """
    Error envelope shared by every procedure: {"error": {...}}.
    """

    error: RpcErrorBody
