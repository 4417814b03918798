"""Structured logging configuration for the tour planner request layer.

Uses structlog for JSON-formatted, production-ready logging with context management.
Sensitive values (tokens, cookies, secrets) are redacted and PII is masked before
anything is rendered.
"""

import logging
from typing import Any

import structlog

from tourplanner.config import config

SENSITIVE_FIELDS = (
    "password",
    "token",
    "access_token",
    "refresh_token",
    "api_key",
    "apikey",
    "secret",
    "privatekey",
    "private_key",
    "authorization",
    "cookie",
    "session",
    "csrf",
    "otp",
    "code",
    "verification_code",
    "reset_token",
    "magic_link",
)

MASKABLE_FIELDS = ("email", "phone", "phonenumber", "phone_number")

# Keys structlog itself emits
STRUCTURAL_KEYS = frozenset({"event", "level", "timestamp", "request_id", "logger", "exception"})

# Contain a sensitive fragment but never hold secrets
SAFE_KEYS = frozenset({"status_code", "error_code"})

REDACTED = "[REDACTED]"


def mask_value(value: str) -> str:
    """Keep only the first and last two characters of a value."""
    if not value or len(value) <= 4:
        return "***"
    return f"{value[:2]}***{value[-2:]}"


def sanitize(obj: Any, max_depth: int = 5) -> Any:
    """Return a copy of obj with sensitive keys redacted and PII masked."""
    if max_depth <= 0:
        return "[Max Depth Reached]"

    if isinstance(obj, (list, tuple)):
        return [sanitize(item, max_depth - 1) for item in obj]

    if not isinstance(obj, dict):
        return obj

    sanitized = {}
    for key, value in obj.items():
        lower_key = str(key).lower()
        if lower_key in SAFE_KEYS:
            sanitized[key] = value
        elif any(field in lower_key for field in SENSITIVE_FIELDS):
            sanitized[key] = REDACTED
        elif any(field in lower_key for field in MASKABLE_FIELDS):
            sanitized[key] = mask_value(str(value))
        else:
            sanitized[key] = sanitize(value, max_depth - 1)
    return sanitized


def sanitize_event(logger: Any, method_name: str, event_dict: dict) -> dict:
    """structlog processor applying sanitize() to user supplied context."""
    structural = {k: v for k, v in event_dict.items() if k in STRUCTURAL_KEYS}
    context = {k: v for k, v in event_dict.items() if k not in STRUCTURAL_KEYS}
    return {**sanitize(context), **structural}


def configure_logging():
    """Configure structured logging with JSON output for production observability."""
    level = getattr(logging, config.log_level(), logging.INFO)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            sanitize_event,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return structlog.get_logger()


# Global logger instance
logger = configure_logging()


def get_logger():
    """Get the configured logger instance."""
    return logger
