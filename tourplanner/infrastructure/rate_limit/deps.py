"""FastAPI rate limiting dependencies.

Provides reusable per-endpoint rate limiting for route protection.
"""

from typing import Callable, Optional

from fastapi import Request

from tourplanner.core.errors import RateLimitExceeded
from tourplanner.infrastructure.rate_limit.limiter import RateLimiter, RateLimitResult
from tourplanner.infrastructure.rate_limit.presets import get_preset


def get_client_identifier(request: Request, user_id: Optional[str] = None) -> str:
    """Derive the rate limit key for a request.

    Authenticated users are keyed by id. Everyone else is keyed by the client
    IP (first X-Forwarded-For hop, X-Real-IP, CF-Connecting-IP, then the socket
    peer) combined with a User-Agent prefix to separate clients behind one NAT.
    Proxy headers are only as trustworthy as the proxy in front of the app.
    """
    if user_id:
        return f"user:{user_id}"

    headers = request.headers
    forwarded_for = headers.get("x-forwarded-for")
    ip = (
        (forwarded_for.split(",")[0].strip() if forwarded_for else None)
        or headers.get("x-real-ip")
        or headers.get("cf-connecting-ip")
        or (request.client.host if request.client else None)
        or "unknown"
    )
    user_agent = headers.get("user-agent") or "unknown"
    return f"{ip}:{user_agent[:50]}"


def get_rate_limiter(request: Request) -> RateLimiter:
    """Get the shared RateLimiter from app state."""
    return request.app.state.rate_limiter


def enforce_rate_limit(limiter: RateLimiter, client_key: str, preset_name: str) -> RateLimitResult:
    """Check a preset for client_key.

    Raises:
        RateLimitExceeded: 429 with Retry-After when over the limit
    """
    result = limiter.check(client_key, get_preset(preset_name))
    if not result.success:
        raise RateLimitExceeded(result.retry_after)
    return result


def rate_limit(preset_name: str) -> Callable:
    """FastAPI dependency factory enforcing a named preset.

    Usage:
        @router.post("/api/auth/signin", dependencies=[Depends(rate_limit("AUTH"))])
        async def signin(...):
            ...
    """

    async def dependency(request: Request) -> RateLimitResult:
        identity = getattr(request.state, "identity", None)
        client_key = get_client_identifier(request, identity.user_id if identity else None)
        return enforce_rate_limit(get_rate_limiter(request), client_key, preset_name)

    return dependency
