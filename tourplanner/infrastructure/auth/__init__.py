"""Authentication module.

Session validation against the managed auth service, plus FastAPI dependencies
for handlers that need the caller's identity.
"""

from tourplanner.infrastructure.auth.backend import AuthBackend, SupabaseAuthBackend
from tourplanner.infrastructure.auth.deps import (
    get_auth_backend,
    get_current_user,
    get_session_validator,
    require_identity,
)
from tourplanner.infrastructure.auth.models import (
    ACCESS_TOKEN_COOKIE,
    REFRESH_TOKEN_COOKIE,
    AuthContext,
    ClientIdentity,
)
from tourplanner.infrastructure.auth.session import SessionValidator

__all__ = [
    "ACCESS_TOKEN_COOKIE",
    "REFRESH_TOKEN_COOKIE",
    "AuthBackend",
    "AuthContext",
    "ClientIdentity",
    "SessionValidator",
    "SupabaseAuthBackend",
    "get_auth_backend",
    "get_current_user",
    "get_session_validator",
    "require_identity",
]
