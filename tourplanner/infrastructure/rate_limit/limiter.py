"""Rate limiting for the tour planner request layer.

Fixed-window counters from the ``limits`` library. Each preset becomes one
rate limit item and the preset name is the first identifier, so different
endpoints never share a budget. In-memory storage (the default) expires
stale windows itself; a ``redis://`` URI shares counters between workers.
"""

import time
from dataclasses import dataclass
from typing import Dict, Optional

from limits import RateLimitItem, RateLimitItemPerSecond
from limits.storage import storage_from_string
from limits.strategies import FixedWindowRateLimiter

from tourplanner.config import config
from tourplanner.core.logging import logger
from tourplanner.infrastructure.rate_limit.presets import RateLimitConfig


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of one rate limit check.

    ``retry_after`` is in milliseconds and is 0 when the request is allowed.
    ``reset_at`` is the epoch time (seconds) at which the window ends.
    """

    success: bool
    retry_after: int
    remaining: int
    reset_at: float


class RateLimiter:
    """Fixed window rate limiter keyed by (preset name, client key).

    Args:
        storage_uri: ``limits`` storage URI (defaults to RATE_LIMIT_STORAGE_URI,
            ``memory://`` when unset)
    """

    def __init__(self, storage_uri: Optional[str] = None):
        self.storage_uri = storage_uri or config.rate_limit_storage_uri()
        self._storage = storage_from_string(self.storage_uri)
        self._strategy = FixedWindowRateLimiter(self._storage)
        self._items: Dict[RateLimitConfig, RateLimitItem] = {}

    def _item(self, preset: RateLimitConfig) -> RateLimitItem:
        item = self._items.get(preset)
        if item is None:
            item = RateLimitItemPerSecond(preset.max_requests, max(1, preset.window_ms // 1000))
            self._items[preset] = item
        return item

    def check(self, client_key: str, preset: RateLimitConfig) -> RateLimitResult:
        """Count one request for client_key against preset.

        Args:
            client_key: Client identifier (user id or network address)
            preset: Preset deciding window length and limit

        Returns:
            RateLimitResult; ``success`` is False once the post-increment count
            exceeds ``preset.max_requests``
        """
        item = self._item(preset)
        allowed = self._strategy.hit(item, preset.name, client_key)
        stats = self._strategy.get_window_stats(item, preset.name, client_key)

        if allowed:
            return RateLimitResult(
                success=True, retry_after=0, remaining=stats.remaining, reset_at=stats.reset_time
            )

        retry_after = max(1, int((stats.reset_time - time.time()) * 1000))
        logger.warning(
            "rate_limit_exceeded",
            client_key=client_key,
            preset=preset.name,
            limit=preset.max_requests,
            retry_after_ms=retry_after,
        )
        return RateLimitResult(
            success=False, retry_after=retry_after, remaining=0, reset_at=stats.reset_time
        )

    def reset(self, client_key: str, preset: Optional[RateLimitConfig] = None) -> None:
        """Forget counters for client_key (one preset, or every preset seen so far)."""
        presets = [preset] if preset is not None else list(self._items)
        for p in presets:
            self._strategy.clear(self._item(p), p.name, client_key)

    def clear(self) -> None:
        """Drop every counter."""
        self._storage.reset()
        self._items.clear()
