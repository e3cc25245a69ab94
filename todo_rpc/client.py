"""
Async client for the todo remote procedures.

Usage:
    async with TodoRpcClient("http://localhost:8000") as client:
        todo = await client.create_todo("Buy milk")
        await client.update_todo(todo.id, True)
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
from pydantic import TypeAdapter

from .schemas import DeleteResult, TodoOut
from .settings import get_settings

_TODO_LIST = TypeAdapter(List[TodoOut])


# PUBLIC_INTERFACE
class RpcError(Exception):
    """
    Raised when a procedure call answers with an error envelope or a non-2xx status.
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int,
        data: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.data = data or {}

    def __repr__(self) -> str:
        return f"RpcError(code={self.code!r}, status_code={self.status_code}, message={self.message!r})"


# PUBLIC_INTERFACE
class TodoRpcClient:
    """
    Thin typed wrapper over httpx.AsyncClient, one method per procedure.

    A custom transport can be injected, e.g. httpx.ASGITransport to call an
    in-process app without a running server.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = 10.0,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=(base_url or get_settings().api_base_url) + "/trpc",
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> "TodoRpcClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _unwrap(self, response: httpx.Response) -> Any:
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            err = body["error"]
            raise RpcError(
                code=str(err.get("code", "INTERNAL_SERVER_ERROR")),
                message=str(err.get("message", response.reason_phrase)),
                status_code=response.status_code,
                data=err.get("data") or {},
            )
        if response.is_error or not isinstance(body, dict) or not isinstance(body.get("result"), dict):
            raise RpcError(
                code="INTERNAL_SERVER_ERROR",
                message=f"Unexpected response {response.status_code} from {response.request.url}",
                status_code=response.status_code,
            )
        return body["result"].get("data")

    async def _query(self, procedure: str) -> Any:
        response = await self._client.get(f"/{procedure}")
        return self._unwrap(response)

    async def _mutate(self, procedure: str, payload: Dict[str, Any]) -> Any:
        response = await self._client.post(f"/{procedure}", json=payload)
        return self._unwrap(response)

    # PUBLIC_INTERFACE
    async def get_todos(self) -> List[TodoOut]:
        """Call getTodos."""
        return _TODO_LIST.validate_python(await self._query("getTodos"))

    # PUBLIC_INTERFACE
    async def create_todo(self, description: str) -> TodoOut:
        """Call createTodo."""
        return TodoOut.model_validate(await self._mutate("createTodo", {"description": description}))

    # PUBLIC_INTERFACE
    async def update_todo(self, todo_id: int, completed: bool) -> TodoOut:
        """Call updateTodo. Raises RpcError with code NOT_FOUND for unknown ids."""
        data = await self._mutate("updateTodo", {"id": todo_id, "completed": completed})
        return TodoOut.model_validate(data)

    # PUBLIC_INTERFACE
    async def delete_todo(self, todo_id: int) -> DeleteResult:
        """Call deleteTodo."""
        return DeleteResult.model_validate(await self._mutate("deleteTodo", {"id": todo_id}))
