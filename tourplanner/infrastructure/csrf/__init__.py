"""CSRF protection module."""

from tourplanner.infrastructure.csrf.guard import (
    CSRF_COOKIE_NAME,
    CSRF_HEADER_NAME,
    CsrfToken,
    check_csrf_protection,
    get_or_create_csrf_token,
    validate_csrf_token,
)

__all__ = [
    "CSRF_COOKIE_NAME",
    "CSRF_HEADER_NAME",
    "CsrfToken",
    "check_csrf_protection",
    "get_or_create_csrf_token",
    "validate_csrf_token",
]
