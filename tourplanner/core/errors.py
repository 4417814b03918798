"""Error taxonomy for the request layer.

Every error that reaches a client is rendered as ``{"error": {"code", "message"}}``,
optionally with ``details``. Route handlers raise these; the app's exception
handlers and the request gate turn them into responses.
"""

import math
from enum import Enum
from typing import Any, Dict, List, Optional

from fastapi.responses import JSONResponse


class ErrorCode(str, Enum):
    """Machine readable error codes used in response bodies."""

    UNAUTHORIZED = "UNAUTHORIZED"
    CSRF_TOKEN_INVALID = "CSRF_TOKEN_INVALID"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    AUTH_UNAVAILABLE = "AUTH_UNAVAILABLE"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    SESSION_FAILED = "SESSION_FAILED"
    CONFLICT = "CONFLICT"
    BAD_REQUEST = "BAD_REQUEST"
    INTERNAL_ERROR = "INTERNAL_ERROR"


def error_body(code: str, message: str, details: Optional[Any] = None) -> Dict[str, Any]:
    """Build the structured error payload."""
    error: Dict[str, Any] = {"code": str(code), "message": message}
    if details is not None:
        error["details"] = details
    return {"error": error}


class GateError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500
    code: str = ErrorCode.INTERNAL_ERROR.value
    message: str = "Internal Server Error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.message = message or self.message
        self.code = code or self.code
        self.status_code = status_code or self.status_code
        self.details = details
        self.headers = dict(headers or {})
        super().__init__(self.message)

    def to_response(self) -> JSONResponse:
        return JSONResponse(
            status_code=self.status_code,
            content=error_body(self.code, self.message, self.details),
            headers=self.headers or None,
        )


class AuthenticationFailure(GateError):
    """Session missing, expired or invalid."""

    status_code = 401
    code = ErrorCode.UNAUTHORIZED.value
    message = "Authentication required"


class CsrfFailure(GateError):
    """Missing or mismatched anti-forgery token."""

    status_code = 403
    code = ErrorCode.CSRF_TOKEN_INVALID.value
    message = "Invalid or missing CSRF token. Please refresh the page and try again."


class RateLimitExceeded(GateError):
    """Too many requests for one client within a window."""

    status_code = 429
    code = ErrorCode.RATE_LIMIT_EXCEEDED.value
    message = "Too many requests. Please try again later."

    def __init__(self, retry_after_ms: int, message: Optional[str] = None):
        self.retry_after_ms = retry_after_ms
        super().__init__(message, headers={"Retry-After": str(retry_after_seconds(retry_after_ms))})


class TransportFault(GateError):
    """The auth service could not be reached or did not answer in time."""

    status_code = 503
    code = ErrorCode.AUTH_UNAVAILABLE.value
    message = "Authentication service unavailable. Please try again later."


class ValidationFailure(GateError):
    """Malformed input at the handler boundary."""

    status_code = 400
    code = ErrorCode.VALIDATION_ERROR.value
    message = "Invalid input"

    def __init__(self, details: List[Dict[str, str]], message: Optional[str] = None):
        super().__init__(message, details=details)


class DatabaseError(GateError):
    """Categorized failure from the persistence layer."""


def retry_after_seconds(retry_after_ms: int) -> int:
    """Convert a millisecond wait into a Retry-After header value."""
    return max(1, math.ceil(retry_after_ms / 1000))


class PostgresErrorCode(str, Enum):
    """PostgreSQL error codes the persistence layer distinguishes."""

    UNIQUE_VIOLATION = "23505"
    FOREIGN_KEY_VIOLATION = "23503"
    NOT_NULL_VIOLATION = "23502"
    CHECK_VIOLATION = "23514"


_DATABASE_ERRORS = {
    PostgresErrorCode.UNIQUE_VIOLATION.value: (409, ErrorCode.CONFLICT, "Email is already taken"),
    PostgresErrorCode.FOREIGN_KEY_VIOLATION.value: (
        400,
        ErrorCode.BAD_REQUEST,
        "Referenced record does not exist",
    ),
    PostgresErrorCode.NOT_NULL_VIOLATION.value: (400, ErrorCode.BAD_REQUEST, "Required field is missing"),
    PostgresErrorCode.CHECK_VIOLATION.value: (400, ErrorCode.BAD_REQUEST, "Invalid data provided"),
}


def map_database_error(error: Any) -> DatabaseError:
    """Map a database error (anything with a ``code``) to a DatabaseError.

    Args:
        error: Exception or error payload from the database client

    Returns:
        DatabaseError with the HTTP status and message for that error code
    """
    code = getattr(error, "code", None)
    if code is None and isinstance(error, dict):
        code = error.get("code")

    status_code, error_code, message = _DATABASE_ERRORS.get(
        str(code) if code is not None else "",
        (500, ErrorCode.INTERNAL_ERROR, "Internal Server Error"),
    )
    return DatabaseError(message, code=error_code.value, status_code=status_code)
