"""
Global Exception Handlers for the FastAPI Application.

``AppError`` instances raised by services are translated into their mapped
status code and client-facing body. Every other unhandled exception is logged
with an error id, request context and full traceback, and returned as 500.
"""

import traceback
import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from booktalks_buddy.core.errors import USER_MESSAGES, AppError, ErrorSeverity, ErrorType
from booktalks_buddy.core.logging_config import get_logger
from booktalks_buddy.core.monitoring import log_error

logger = get_logger(__name__)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """
    Translate a service error into an HTTP response.

    Low-severity errors (bad input, missing rows, conflicts) are logged at
    info level; permission and server failures at warning or above.

    Args:
        request: The HTTP request that raised the error
        exc: The classified application error

    Returns:
        JSONResponse with ``error``, ``error_type`` and optionally ``field`` / ``code``
    """
    message = f"{exc.error_type.value} error in {request.method} {request.url.path}: {exc.message}"
    extra = {
        "method": request.method,
        "path": request.url.path,
        "error_type": exc.error_type.value,
        "status_code": exc.status_code,
    }
    if exc.severity in (ErrorSeverity.high, ErrorSeverity.critical):
        logger.warning(message, extra=extra)
        log_error(exc.error_type.value, exc.message, {**exc.context, **extra})
    else:
        logger.info(message, extra=extra)
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler to log detailed error information.

    This handler is called for any unhandled exception in the application.
    It logs the full error context and returns a JSON response with an error ID
    that clients can use to reference the error when reporting issues.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        JSONResponse with error details and error ID
    """
    error_id = uuid.uuid4().hex[:12]

    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {exc}",
        exc_info=exc,
        extra={
            "error_id": error_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "client": request.client.host if request.client else "unknown",
            "error_type": type(exc).__name__,
            "traceback": "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
        },
    )
    log_error(type(exc).__name__, str(exc), {"error_id": error_id, "path": request.url.path})

    return JSONResponse(
        status_code=500,
        content={
            "error": USER_MESSAGES[ErrorType.server],
            "error_type": ErrorType.server.value,
            "error_id": error_id,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")
