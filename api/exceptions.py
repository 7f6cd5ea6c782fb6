"""
Custom exceptions and error handlers for the API.

Every error leaves the API as {"error": "<message>"}.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.logging_config import logger


class APIError(HTTPException):
    """Base API error with structured error response."""

    def __init__(
        self,
        status_code: int,
        error: str,
        message: str,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.error = error
        self.message = message
        super().__init__(status_code=status_code, detail=message, headers=headers)


class ValidationError(APIError):
    """Missing or malformed request fields."""

    def __init__(self, message: str):
        super().__init__(status_code=400, error="validation_error", message=message)


class AuthenticationError(APIError):
    """Missing, invalid or expired token, or bad credentials."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(
            status_code=401,
            error="unauthorized",
            message=message,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ConflictError(APIError):
    """Unique field already taken."""

    def __init__(self, message: str):
        super().__init__(status_code=409, error="conflict", message=message)


class NotFoundError(APIError):
    """Resource not found error."""

    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            status_code=404,
            error="not_found",
            message=f"{resource} with ID {identifier} not found",
        )


class InternalError(APIError):
    """Store failure or unexpected error. The message stays generic."""

    def __init__(self, message: str = "Internal server error"):
        super().__init__(status_code=500, error="internal_error", message=message)


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions and return the error envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
        headers=exc.headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework HTTP errors (unknown route, wrong method) in the same envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report body/path/query validation failures as 400."""
    problems = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ())[1:]) or "request"
        problems.append(f"{field}: {err.get('msg', 'invalid value')}")
    message = "Invalid request: " + "; ".join(problems) if problems else "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions without leaking details."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
    )
