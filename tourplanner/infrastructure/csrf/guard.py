"""CSRF (cross-site request forgery) protection.

Double-submit tokens: a random token lives in a cookie the page can read, and
state-changing requests must echo it in the ``x-csrf-token`` header.
"""

import re
import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional

from fastapi import Request

from tourplanner.config import config
from tourplanner.core.cookies import CookieStore
from tourplanner.core.errors import CsrfFailure
from tourplanner.core.logging import logger

CSRF_TOKEN_BYTES = 32
CSRF_COOKIE_NAME = "csrf-token"
CSRF_HEADER_NAME = "x-csrf-token"

STATE_CHANGING_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})

_TOKEN_PATTERN = re.compile(rf"^[0-9a-f]{{{CSRF_TOKEN_BYTES * 2}}}$")


@dataclass(frozen=True)
class CsrfToken:
    """Anti-forgery token.

    ``issued_at`` is only known for tokens minted during the current request;
    tokens read back from the cookie carry None.
    """

    value: str
    issued_at: Optional[datetime] = None

    @property
    def minted(self) -> bool:
        return self.issued_at is not None


def is_well_formed(token: Optional[str]) -> bool:
    return bool(token) and bool(_TOKEN_PATTERN.match(token))


def get_or_create_csrf_token(
    cookies: CookieStore,
    *,
    secure: Optional[bool] = None,
    max_age: Optional[int] = None,
) -> CsrfToken:
    """Return the stored token, minting and storing a new one if absent or malformed.

    Args:
        cookies: Cookie store of the current request
        secure: Mark the cookie Secure (defaults to production mode)
        max_age: Cookie lifetime in seconds (defaults to CSRF_COOKIE_MAX_AGE)

    Returns:
        CsrfToken; calling twice on the same store yields the same value
    """
    existing = cookies.get(CSRF_COOKIE_NAME)
    if is_well_formed(existing):
        return CsrfToken(value=existing)

    token = CsrfToken(
        value=secrets.token_hex(CSRF_TOKEN_BYTES),
        issued_at=datetime.now(timezone.utc),
    )
    cookies.set(
        CSRF_COOKIE_NAME,
        token.value,
        max_age=max_age if max_age is not None else config.csrf_cookie_max_age(),
        # Readable by the page so it can echo the value back
        httponly=False,
        secure=config.is_production() if secure is None else secure,
        samesite="lax",
    )
    logger.debug("csrf_token_issued")
    return token


def validate_csrf_token(request: Request, cookies: CookieStore) -> bool:
    """Compare header token to stored token in constant time."""
    stored = cookies.get(CSRF_COOKIE_NAME)
    supplied = request.headers.get(CSRF_HEADER_NAME)

    if not stored or not supplied:
        return False

    return secrets.compare_digest(stored.encode("utf-8"), supplied.encode("utf-8"))


def check_csrf_protection(
    request: Request,
    cookies: CookieStore,
    exempt_paths: Iterable[str] = (),
    path: Optional[str] = None,
) -> Optional[CsrfFailure]:
    """Check a request for a valid CSRF token.

    Args:
        request: Incoming request
        cookies: Cookie store holding the issued token
        exempt_paths: Exact paths that skip the check (e.g. sign-in before a session exists)
        path: Path to match against exempt_paths (defaults to the request path)

    Returns:
        CsrfFailure (403) when a state-changing request lacks a matching token,
        None otherwise
    """
    if request.method.upper() not in STATE_CHANGING_METHODS:
        return None

    path = (path or request.url.path).rstrip("/") or "/"
    if path in {p.rstrip("/") or "/" for p in exempt_paths}:
        return None

    if not validate_csrf_token(request, cookies):
        logger.warning("csrf_check_failed", method=request.method, path=request.url.path)
        return CsrfFailure()

    return None
