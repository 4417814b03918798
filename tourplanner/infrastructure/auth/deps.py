"""FastAPI authentication dependencies.

API handlers authorize themselves; these resolve the caller on demand.
"""

from typing import Optional

from fastapi import Request

from tourplanner.core.errors import AuthenticationFailure
from tourplanner.infrastructure.auth.backend import AuthBackend
from tourplanner.infrastructure.auth.models import AuthContext, ClientIdentity
from tourplanner.infrastructure.auth.session import SessionValidator


def get_session_validator(request: Request) -> SessionValidator:
    """Get the SessionValidator from app state."""
    return request.app.state.session_validator


def get_auth_backend(request: Request) -> AuthBackend:
    """Get the AuthBackend from app state."""
    return request.app.state.auth_backend


async def get_current_user(request: Request) -> Optional[ClientIdentity]:
    """Identity for the request, or None if unauthenticated.

    Reuses an identity the request gate already resolved.

    Raises:
        TransportFault: 503 if the auth service is unreachable
    """
    identity = getattr(request.state, "identity", None)
    if identity is not None:
        return identity

    identity = await get_session_validator(request).validate_session(
        AuthContext.from_cookies(request.cookies)
    )
    request.state.identity = identity
    return identity


async def require_identity(request: Request) -> ClientIdentity:
    """Identity for the request.

    Raises:
        AuthenticationFailure: 401 when there is no valid session
    """
    identity = await get_current_user(request)
    if identity is None:
        raise AuthenticationFailure()
    return identity
