"""
Error taxonomy and the uniform error envelope.

Business code raises the ``APIError`` subclasses below; the handlers
registered by ``register_exception_handlers`` render every failure as::

    {"success": false, "message": ..., "statusCode": ..., "errors": [...],
     "timestamp": ..., "path": ...}
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.logger import logger


class InvalidConfiguration(ValueError):
    """Raised while loading settings; fatal at startup."""


class APIError(HTTPException):
    """Base API error with consistent structure"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        errors: Optional[List[Any]] = None,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.errors = errors or []


class ValidationError(APIError):
    def __init__(self, detail: str = "Validation failed", errors: Optional[List[Any]] = None):
        super().__init__(status.HTTP_400_BAD_REQUEST, detail, errors=errors)


class NotFoundError(APIError):
    """Absent, or present but outside the caller's region scope."""

    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status.HTTP_404_NOT_FOUND, detail)


class ForbiddenError(APIError):
    def __init__(self, detail: str = "Forbidden resource"):
        super().__init__(status.HTTP_403_FORBIDDEN, detail)


class ConflictError(APIError):
    def __init__(self, detail: str = "Resource conflict"):
        super().__init__(status.HTTP_409_CONFLICT, detail)


class UnauthorizedError(APIError):
    def __init__(self, detail: str = "Invalid or expired token"):
        super().__init__(
            status.HTTP_401_UNAUTHORIZED,
            detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


def error_body(request: Request, status_code: int, message: str, errors: Optional[List[Any]] = None) -> dict:
    return {
        "success": False,
        "message": message,
        "statusCode": status_code,
        "errors": errors if errors else [message],
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "path": request.url.path,
    }


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    errors = getattr(exc, "errors", None)
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} -> {exc.status_code}: {message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(request, exc.status_code, message, errors),
        headers=getattr(exc, "headers", None),
    )


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        errors.append(f"{location}: {err.get('msg')}" if location else err.get("msg"))
    logger.info(f"{request.method} {request.url.path} -> 422: {errors}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_body(request, status.HTTP_422_UNPROCESSABLE_ENTITY, "Validation failed", errors),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {type(exc).__name__}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"),
    )


def register_exception_handlers(app):
    """Register all exception handlers with the FastAPI app"""
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
