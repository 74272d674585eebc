"""
Application exceptions and the global FastAPI exception handlers.
Every error response uses the same envelope: {"error": {"message", "details", "path"}}.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
from typing import Any, Dict, Optional


logger = logging.getLogger(__name__)


class AppException(Exception):
    """Base application exception."""
    def __init__(self, message: str, status_code: int = 500, details: Any = None):
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class PersistenceError(AppException):
    """
    The backend rejected a read or write.

    Raised for constraint violations, transport failures and remote
    authorization denials. The message is passed through as-is.
    """
    def __init__(self, message: str, status_code: int = status.HTTP_409_CONFLICT, details: Any = None):
        super().__init__(message, status_code=status_code, details=details)


class AuthorizationError(AppException):
    """The caller's identity may not touch the referenced row."""
    def __init__(self, message: str = "Not allowed", details: Any = None):
        super().__init__(message, status_code=status.HTTP_403_FORBIDDEN, details=details)


class FormValidationError(AppException):
    """Input failed validation before any backend call; carries per-field messages."""
    def __init__(self, field_errors: Dict[str, str], message: Optional[str] = None):
        self.field_errors = field_errors
        super().__init__(
            message or "Validation error",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=field_errors,
        )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handle custom application exceptions."""
    logger.error(
        f"Application exception: {exc.message}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
            "details": exc.details,
        },
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "message": exc.message,
                "details": exc.details,
                "path": request.url.path,
            }
        },
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions."""
    logger.warning(
        f"HTTP exception: {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
        },
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "message": exc.detail,
                "status_code": exc.status_code,
                "path": request.url.path,
            }
        },
        headers=getattr(exc, "headers", None),
    )


def _serialize_validation_errors(errors: list) -> list:
    """Convert validation errors to JSON-serializable format."""
    serialized = []
    for error in errors:
        serialized_error = {}
        for key, value in error.items():
            if key == "ctx" and isinstance(value, dict):
                # ctx may hold the raised ValueError itself
                serialized_ctx = {}
                for ctx_key, ctx_value in value.items():
                    if isinstance(ctx_value, Exception):
                        serialized_ctx[ctx_key] = str(ctx_value)
                    else:
                        serialized_ctx[ctx_key] = ctx_value
                serialized_error[key] = serialized_ctx
            elif isinstance(value, Exception):
                serialized_error[key] = str(value)
            else:
                serialized_error[key] = value
        serialized.append(serialized_error)
    return serialized


def field_messages(errors: list) -> Dict[str, str]:
    """
    Collapse pydantic errors into one message per field.

    The field name is the last string element of the error location, so
    body-level and model-level errors map onto the same keys.
    """
    messages: Dict[str, str] = {}
    for error in errors:
        names = [part for part in error.get("loc", ()) if isinstance(part, str) and part != "body"]
        field = names[-1] if names else "__all__"
        messages.setdefault(field, error.get("msg", "Invalid value"))
    return messages


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation errors."""
    serialized_errors = _serialize_validation_errors(exc.errors())

    logger.warning(
        f"Validation error: {serialized_errors}",
        extra={
            "path": request.url.path,
            "errors": serialized_errors,
        },
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": {
                "message": "Validation error",
                "details": serialized_errors,
                "fields": field_messages(serialized_errors),
                "path": request.url.path,
            }
        },
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(
        f"Unhandled exception: {str(exc)}",
        extra={
            "path": request.url.path,
            "exception_type": type(exc).__name__,
        },
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "message": "Internal server error",
                "path": request.url.path,
            }
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
