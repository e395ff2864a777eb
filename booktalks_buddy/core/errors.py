"""
Application error taxonomy.

Every failure the service reports to a client is expressed as an ``AppError``
carrying a flat ``ErrorType``. The type decides the HTTP status code, whether
the failure is worth retrying, and the message shown to the end user.

Helpers:
- ``classify_error``: turn any exception (database, HTTP client, timeout) into an ``AppError``
- ``with_retry``: run an async operation with exponential backoff, retrying only retryable errors
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

import httpx
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorType(str, Enum):
    """Flat classification of application failures."""

    network = "network"
    timeout = "timeout"
    validation = "validation"
    permission = "permission"
    not_found = "not_found"
    conflict = "conflict"
    auth = "auth"
    server = "server"
    unknown = "unknown"


class ErrorSeverity(str, Enum):
    """How loudly a failure should be surfaced."""

    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"


USER_MESSAGES: Dict[ErrorType, str] = {
    ErrorType.network: "Connection problem. Please check your internet connection and try again.",
    ErrorType.timeout: "The request took too long. Please try again.",
    ErrorType.validation: "Please check your input and try again.",
    ErrorType.permission: "You don't have permission to perform this action.",
    ErrorType.not_found: "The requested item could not be found.",
    ErrorType.conflict: "This item already exists.",
    ErrorType.auth: "Please sign in to continue.",
    ErrorType.server: "Something went wrong on our side. Please try again later.",
    ErrorType.unknown: "An unexpected error occurred.",
}

STATUS_CODES: Dict[ErrorType, int] = {
    ErrorType.validation: 400,
    ErrorType.auth: 401,
    ErrorType.permission: 403,
    ErrorType.not_found: 404,
    ErrorType.conflict: 409,
    ErrorType.network: 503,
    ErrorType.timeout: 503,
    ErrorType.server: 500,
    ErrorType.unknown: 500,
}

RETRYABLE_TYPES = frozenset({ErrorType.network, ErrorType.timeout, ErrorType.server})

# Postgres SQLSTATE codes
UNIQUE_VIOLATION = "23505"
INSUFFICIENT_PRIVILEGE = "42501"


class AppError(Exception):
    """Error raised by services and translated into an HTTP response at the edge.

    Attributes:
        message: Developer-facing message, also used as the user message when no
            explicit one is given for validation/permission/conflict failures.
        error_type: Flat classification deciding status code and retry policy.
        severity: Surface level for logs and telemetry.
        recoverable: Whether the user can fix the situation themselves.
        retryable: Whether repeating the same call might succeed.
        context: Extra structured data for logging.
        field: Offending input field for validation failures.
    """

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.unknown,
        *,
        severity: ErrorSeverity = ErrorSeverity.medium,
        recoverable: bool = True,
        retryable: Optional[bool] = None,
        context: Optional[Dict[str, Any]] = None,
        field: Optional[str] = None,
        user_message: Optional[str] = None,
        code: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.severity = severity
        self.recoverable = recoverable
        self.retryable = error_type in RETRYABLE_TYPES if retryable is None else retryable
        self.context = context or {}
        self.field = field
        self.code = code
        if user_message is not None:
            self.user_message = user_message
        elif error_type in (ErrorType.validation, ErrorType.permission, ErrorType.conflict, ErrorType.not_found):
            self.user_message = message
        else:
            self.user_message = USER_MESSAGES[error_type]

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.error_type]

    def to_response(self) -> Dict[str, Any]:
        """Body returned to API clients."""
        body: Dict[str, Any] = {"error": self.user_message, "error_type": self.error_type.value}
        if self.field:
            body["field"] = self.field
        if self.code:
            body["code"] = self.code
        return body

    def __repr__(self) -> str:
        return f"AppError(type={self.error_type.value}, message={self.message!r})"


class ValidationError(AppError):
    """Invalid user input. Never retried."""

    def __init__(self, message: str, field: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(
            message, ErrorType.validation, severity=ErrorSeverity.low, retryable=False, field=field, **kwargs
        )


class PermissionDeniedError(AppError):
    """The caller lacks the entitlement for the action."""

    def __init__(self, message: str = USER_MESSAGES[ErrorType.permission], **kwargs: Any) -> None:
        super().__init__(
            message, ErrorType.permission, severity=ErrorSeverity.high, recoverable=False, retryable=False, **kwargs
        )


class NotFoundError(AppError):
    """Row is missing or invisible to the caller."""

    def __init__(self, message: str = USER_MESSAGES[ErrorType.not_found], **kwargs: Any) -> None:
        super().__init__(message, ErrorType.not_found, severity=ErrorSeverity.low, retryable=False, **kwargs)


class ConflictError(AppError):
    """A uniqueness rule would be broken."""

    def __init__(self, message: str = USER_MESSAGES[ErrorType.conflict], **kwargs: Any) -> None:
        super().__init__(message, ErrorType.conflict, severity=ErrorSeverity.low, retryable=False, **kwargs)


class AuthenticationError(AppError):
    """Missing, malformed or expired credentials."""

    def __init__(self, message: str = "Authentication required", **kwargs: Any) -> None:
        super().__init__(
            message,
            ErrorType.auth,
            severity=ErrorSeverity.medium,
            retryable=False,
            user_message=message,
            **kwargs,
        )


def _db_error_code(exc: DBAPIError) -> Optional[str]:
    orig = getattr(exc, "orig", None)
    for attr in ("sqlstate", "pgcode"):
        code = getattr(orig, attr, None)
        if code:
            return str(code)
    return None


def classify_error(exc: BaseException, context: Optional[Dict[str, Any]] = None) -> AppError:
    """
    Turn an arbitrary exception into an ``AppError``.

    Args:
        exc: The exception raised by a database call, HTTP client or service.
        context: Optional structured context merged into the resulting error.

    Returns:
        The classified error. An ``AppError`` input is returned unchanged.
    """
    if isinstance(exc, AppError):
        return exc

    text = str(exc).lower()
    ctx = dict(context or {})

    if isinstance(exc, IntegrityError):
        code = _db_error_code(exc)
        if code == UNIQUE_VIOLATION or "unique" in text or "duplicate" in text:
            return ConflictError(context=ctx, code=UNIQUE_VIOLATION)
        return ValidationError("The data violates a database constraint.", context=ctx)

    if isinstance(exc, DBAPIError) and _db_error_code(exc) == INSUFFICIENT_PRIVILEGE:
        return PermissionDeniedError(context=ctx, code=INSUFFICIENT_PRIVILEGE)

    if "permission" in text:
        return PermissionDeniedError(context=ctx)

    if isinstance(exc, (asyncio.TimeoutError, TimeoutError, httpx.TimeoutException)):
        return AppError(str(exc) or "Operation timed out", ErrorType.timeout, context=ctx)

    if isinstance(exc, (httpx.TransportError, ConnectionError, OperationalError)) or "network" in text:
        return AppError(str(exc) or "Network failure", ErrorType.network, context=ctx)

    return AppError(str(exc) or type(exc).__name__, ErrorType.server, severity=ErrorSeverity.high, context=ctx)


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    operation_id: str,
    max_retries: int = 3,
    base_delay: float = 1.0,
) -> T:
    """
    Await ``operation`` with exponential backoff.

    The delay before attempt ``n`` (0-based, after a failure) is
    ``base_delay * 2**n``. Validation, permission, auth, conflict and not-found
    errors are raised on the first occurrence.

    Args:
        operation: Zero-argument coroutine factory.
        operation_id: Label used in log lines.
        max_retries: Number of attempts in total.
        base_delay: Initial delay in seconds.

    Returns:
        Whatever ``operation`` returns on its first successful attempt.

    Raises:
        AppError: The classified error of the last failed attempt.
        ValueError: ``max_retries`` is less than 1.
    """
    if max_retries < 1:
        raise ValueError(f"max_retries must be at least 1, got {max_retries}")

    last_error: Optional[AppError] = None
    for attempt in range(max_retries):
        try:
            return await operation()
        except Exception as exc:
            last_error = classify_error(exc, {"operation_id": operation_id, "attempt": attempt + 1})
            if not last_error.retryable or attempt == max_retries - 1:
                break
            delay = base_delay * (2**attempt)
            logger.warning(
                f"Operation {operation_id} failed (attempt {attempt + 1}/{max_retries}), retrying in {delay:.2f}s: "
                f"{last_error.message}"
            )
            await asyncio.sleep(delay)

    logger.error(f"Operation {operation_id} failed: {last_error.message}")
    raise last_error
