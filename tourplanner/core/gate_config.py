"""Request gate policy.

Immutable configuration for which paths are API, protected, guest-only or
CSRF-exempt, and how locales resolve.
"""

from dataclasses import dataclass
from typing import Tuple

from tourplanner.config import config


@dataclass(frozen=True)
class GateConfig:
    """Policy for the request gate.

    Paths are locale-stripped. ``protected_prefixes`` match with "starts with",
    except "/" which must match exactly. ``guest_only_paths`` (pages a
    signed-in user is sent away from) match exactly.
    """

    supported_locales: Tuple[str, ...] = ("en-US", "pl-PL")
    default_locale: str = "en-US"
    api_prefix: str = "/api"
    protected_prefixes: Tuple[str, ...] = ("/", "/tours", "/profile", "/invitations")
    guest_only_paths: Tuple[str, ...] = ("/login", "/register")
    csrf_exempt_paths: Tuple[str, ...] = (
        "/api/auth/signin",
        "/api/auth/signup",
        "/api/auth/magic-link",
        "/api/auth/session",
    )
    login_path: str = "/login"
    locale_cookie: str = "i18next"
    locale_cookie_max_age: int = 365 * 24 * 60 * 60
    secure_cookies: bool = False
    api_rate_limit_enabled: bool = True
    api_rate_limit_preset: str = "API"
    auth_timeout: float = 5.0

    @classmethod
    def from_env(cls) -> "GateConfig":
        """Build the policy from environment configuration."""
        return cls(
            supported_locales=tuple(config.supported_locales()),
            default_locale=config.default_locale(),
            secure_cookies=config.is_production(),
            auth_timeout=config.auth_timeout_seconds(),
        )
