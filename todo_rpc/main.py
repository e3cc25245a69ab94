import logging
import sqlite3

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .errors import TodoError
from .logging_config import setup_logging
from .routers import rpc as rpc_router
from .settings import get_settings
from .utils import rpc_error

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "todos",
        "description": "Remote procedures to create, list, toggle, and delete todos.",
    },
]

_settings = get_settings()
setup_logging(_settings.log_level)

app = FastAPI(
    title="Todo RPC",
    description="Typed remote-procedure API for a single list of todos.",
    version="0.1.0",
    openapi_tags=openapi_tags,
)

# Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
allow_all = (_settings.cors_allow_origins == ["*"]) or (len(_settings.cors_allow_origins) == 0)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if allow_all else _settings.cors_allow_origins,
    allow_credentials=not allow_all,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return the error envelope for request bodies that fail validation.

    Response format:
        {
            "error": {
                "code": "BAD_REQUEST",
                "message": "Request validation failed",
                "data": {"issues": [... pydantic/fastapi error details ...]}
            }
        }
    """
    return JSONResponse(
        status_code=400,
        content=rpc_error(
            "BAD_REQUEST",
            "Request validation failed",
            {"issues": jsonable_encoder(exc.errors())},
        ),
    )


@app.exception_handler(TodoError)
async def todo_error_handler(request: Request, exc: TodoError) -> JSONResponse:
    """Render InvalidInput and NotFound with their code, message, and details."""
    return JSONResponse(
        status_code=exc.status_code,
        content=rpc_error(exc.code, str(exc), jsonable_encoder(exc.data())),
    )


@app.exception_handler(sqlite3.Error)
async def store_error_handler(request: Request, exc: sqlite3.Error) -> JSONResponse:
    """Surface store failures with their original message."""
    logger.error("Store failure on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content=rpc_error("INTERNAL_SERVER_ERROR", str(exc), {"type": type(exc).__name__}),
    )


# PUBLIC_INTERFACE
@app.get("/", summary="Health Check", tags=["health"])
def health_check():
    """
    Health check endpoint.

    Returns:
        A JSON object indicating service health.
    """
    return {"message": "Healthy", "backend": _settings.persistence_backend}


app.include_router(rpc_router.router)
