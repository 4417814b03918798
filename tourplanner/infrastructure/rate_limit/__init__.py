"""Rate limiting module.

Fixed window counters (the limits library) with named presets per endpoint.
"""

from tourplanner.infrastructure.rate_limit.deps import (
    enforce_rate_limit,
    get_client_identifier,
    get_rate_limiter,
    rate_limit,
)
from tourplanner.infrastructure.rate_limit.limiter import RateLimiter, RateLimitResult
from tourplanner.infrastructure.rate_limit.presets import (
    RateLimitConfig,
    get_preset,
    get_rate_limit_mode,
)

__all__ = [
    "RateLimiter",
    "RateLimitResult",
    "RateLimitConfig",
    "enforce_rate_limit",
    "get_client_identifier",
    "get_preset",
    "get_rate_limit_mode",
    "get_rate_limiter",
    "rate_limit",
]
