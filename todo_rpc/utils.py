from __future__ import annotations

from typing import Any, Dict, Optional


# PUBLIC_INTERFACE
def rpc_result(data: Any) -> Dict[str, Any]:
    """
    Wrap a procedure's output in the success envelope.

    Returns:
        Dict shaped as {"result": {"data": data}}.
    """
    return {"result": {"data": data}}


# PUBLIC_INTERFACE
def rpc_error(code: str, message: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Build the error envelope returned for failed procedure calls.

    Args:
        code: Machine readable code (BAD_REQUEST, NOT_FOUND, INTERNAL_SERVER_ERROR).
        message: Human readable message.
        data: Optional details, e.g. the missing id or validation issues.

    Returns:
        Dict shaped as {"error": {"code": ..., "message": ..., "data": {...}}}.
    """
    return {"error": {"code": code, "message": message, "data": data or {}}}
