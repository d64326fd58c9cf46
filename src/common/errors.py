# src/common/errors.py

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

class AppError(Exception):
    """Base class for errors that map onto an HTTP status and a client-facing message."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Server error occurred"

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)

class ValidationError(AppError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    message = "Parameters failed validation"

class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Resource not found"

class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    message = "Resource already exists"

class RepositoryError(AppError):
    """
    A data-access failure. The message shown to clients stays generic;
    the underlying exception is kept as __cause__ for logging.
    """

    def __init__(self, entity: str, message: str | None = None):
        self.entity = entity
        super().__init__(message or f"Failed to query {entity} records")

def _error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"ok": False, "message": message}, headers=headers)

async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, RepositoryError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc.__cause__ or exc)
        return _error_response(exc.status_code, "Server error occurred")
    return _error_response(exc.status_code, exc.message)

async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("query", "body", "path"))
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg", ""))
    return _error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, "; ".join(messages) or ValidationError.message)

async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server error occurred")

def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
