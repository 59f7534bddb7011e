"""Error Handlers: global exception handlers for the gateway API.

Invariants:
    - ToolboxError -> structured JSON with numeric code, kind and message
    - 429 responses carry a Retry-After header when the error knows one
    - RequestValidationError -> 400 with field-level details
    - Exception (catch-all) -> 500, never leaks internal details

Design Decisions:
    - Three-layer handler: domain (ToolboxError), validation (pydantic), catch-all
    - Tool-call failures never reach these handlers: the dispatcher turns them
      into isError results. Only transport-level failures (stream open) land here
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from toolbox_gateway.core.domain_types import ErrorCode
from toolbox_gateway.core.errors import ToolboxError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_toolbox_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_toolbox_error_handler(app: FastAPI) -> None:

    @app.exception_handler(ToolboxError)
    async def toolbox_error_handler(request: Request, exc: ToolboxError):
        """Handle gateway errors raised outside a tool call."""
        logger.log(
            exc.log_level,
            f"{exc.kind}: {exc.message}",
            extra={"error_code": int(exc.code)},
            exc_info=exc.log_level >= logging.ERROR,
        )
        headers = None
        retry_after = exc.data.get("retry_after")
        if exc.http_status == status.HTTP_429_TOO_MANY_REQUESTS and retry_after is not None:
            headers = {"Retry-After": str(retry_after)}
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(), headers=headers,
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle malformed requests (bad JSON-RPC envelope, missing sessionId)."""
        logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": int(ErrorCode.INTERNAL_ERROR),
                    "kind": "InternalError",
                    "message": "An unexpected error occurred",
                },
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }
