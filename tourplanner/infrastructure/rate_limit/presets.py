"""Rate limit presets.

Development mode (the default outside production) uses relaxed limits so local
iteration does not trip them. ``TEST_MODE=true`` switches back to the production
numbers, which is what CI and integration tests should run with.
"""

from dataclasses import dataclass
from typing import Dict

from tourplanner.config import config

MINUTE_MS = 60 * 1000


@dataclass(frozen=True)
class RateLimitConfig:
    """A named window/limit pair. The name partitions the counters."""

    name: str
    window_ms: int
    max_requests: int


def is_relaxed() -> bool:
    """True when development limits apply."""
    return not config.test_mode() and config.is_development()


def get_rate_limit_mode() -> Dict[str, object]:
    """Report the active limit mode for debugging and health output."""
    test_mode = config.test_mode()
    relaxed = is_relaxed()
    if test_mode:
        mode = "test"
    elif relaxed:
        mode = "development"
    else:
        mode = "production"
    return {"mode": mode, "test_mode_enabled": test_mode, "is_development": relaxed}


def build_presets(relaxed: bool) -> Dict[str, RateLimitConfig]:
    return {
        # 3 per 15 minutes (20 in development)
        "MAGIC_LINK": RateLimitConfig("MAGIC_LINK", 15 * MINUTE_MS, 20 if relaxed else 3),
        # 5 per minute (50 in development)
        "AUTH": RateLimitConfig("AUTH", MINUTE_MS, 50 if relaxed else 5),
        # 100 per minute (1000 in development)
        "API": RateLimitConfig("API", MINUTE_MS, 1000 if relaxed else 100),
    }


def get_preset(name: str) -> RateLimitConfig:
    """Look up a preset for the current environment.

    Raises:
        KeyError: if no preset has that name
    """
    return build_presets(is_relaxed())[name]

