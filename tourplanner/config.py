"""Configuration management for the tour planner request layer.

Centralizes all environment variable access for better testability and maintainability.
"""

import os
import re
from typing import List, Optional

from pydantic import BaseModel, ValidationError, field_validator, model_validator

LOCALE_PATTERN = re.compile(r"^[a-z]{2}-[A-Z]{2}$")


class ConfigurationError(Exception):
    """Raised when required environment configuration is missing or invalid."""

    def __init__(self, problems: List[str]):
        self.problems = problems
        super().__init__("Environment validation failed:\n" + "\n".join(f"  - {p}" for p in problems))


class Config:
    """Application configuration loaded from environment variables."""

    # Supabase configuration
    @staticmethod
    def supabase_url() -> Optional[str]:
        """Get Supabase project URL from environment."""
        return os.environ.get("SUPABASE_URL")

    @staticmethod
    def supabase_anon_key() -> Optional[str]:
        """Get Supabase anon (public) key from environment."""
        return os.environ.get("SUPABASE_ANON_KEY")

    @staticmethod
    def supabase_service_role_key() -> Optional[str]:
        """Get Supabase service role key from environment."""
        return os.environ.get("SUPABASE_SERVICE_ROLE_KEY")

    # Locales
    @staticmethod
    def default_locale() -> str:
        """Get the locale used when a request carries no recognised locale."""
        return os.environ.get("DEFAULT_LOCALE", "en-US")

    @staticmethod
    def supported_locales() -> List[str]:
        """Get the allow-listed locales."""
        raw = os.environ.get("SUPPORTED_LOCALES", "en-US,pl-PL")
        return [item.strip() for item in raw.split(",") if item.strip()]

    # Runtime mode
    @staticmethod
    def environment() -> str:
        """Get the runtime environment name (development, production, test)."""
        return os.environ.get("APP_ENV", "development").lower()

    @staticmethod
    def test_mode() -> bool:
        """Production-like rate limits outside production."""
        return os.environ.get("TEST_MODE", "").lower() == "true"

    @staticmethod
    def log_level() -> str:
        return os.environ.get("LOG_LEVEL", "INFO").upper()

    # Security
    @staticmethod
    def auth_timeout_seconds() -> float:
        """Upper bound for one round trip to the auth service."""
        return float(os.environ.get("AUTH_TIMEOUT_SECONDS", "5.0"))

    @staticmethod
    def csrf_cookie_max_age() -> int:
        return int(os.environ.get("CSRF_COOKIE_MAX_AGE", str(24 * 60 * 60)))

    @staticmethod
    def rate_limit_storage_uri() -> str:
        """Get the limits storage URI (memory:// keeps counters per process)."""
        return os.environ.get("RATE_LIMIT_STORAGE_URI", "memory://")

    # Helper methods
    @staticmethod
    def is_production() -> bool:
        return Config.environment() == "production"

    @staticmethod
    def is_development() -> bool:
        return Config.environment() == "development"

    @staticmethod
    def is_configured() -> bool:
        """Check if all required configuration is present."""
        return all([
            Config.supabase_url(),
            Config.supabase_anon_key(),
            Config.supabase_service_role_key(),
        ])

    @staticmethod
    def get_missing_config() -> list[str]:
        """Get list of missing required configuration keys."""
        missing = []
        if not Config.supabase_url():
            missing.append("SUPABASE_URL")
        if not Config.supabase_anon_key():
            missing.append("SUPABASE_ANON_KEY")
        if not Config.supabase_service_role_key():
            missing.append("SUPABASE_SERVICE_ROLE_KEY")
        return missing


class EnvironmentSettings(BaseModel):
    """Shape of a valid environment, checked at startup."""

    supabase_url: str
    supabase_anon_key: str
    supabase_service_role_key: str
    default_locale: str
    supported_locales: List[str]

    @field_validator("supabase_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("must be a valid http(s) URL")
        return v

    @field_validator("supabase_anon_key", "supabase_service_role_key")
    @classmethod
    def validate_jwt_key(cls, v: str) -> str:
        if not v.startswith("eyJ"):
            raise ValueError("must be a valid JWT token")
        return v

    @field_validator("default_locale")
    @classmethod
    def validate_locale(cls, v: str) -> str:
        if not LOCALE_PATTERN.match(v):
            raise ValueError("must be in format 'en-US'")
        return v

    @field_validator("supported_locales")
    @classmethod
    def validate_locales(cls, v: List[str]) -> List[str]:
        bad = [locale for locale in v if not LOCALE_PATTERN.match(locale)]
        if bad:
            raise ValueError(f"invalid locales: {', '.join(bad)}")
        return v

    @model_validator(mode="after")
    def default_is_supported(self) -> "EnvironmentSettings":
        if self.default_locale not in self.supported_locales:
            raise ValueError("DEFAULT_LOCALE must be one of SUPPORTED_LOCALES")
        return self


def validate_environment() -> EnvironmentSettings:
    """Validate the environment and return the parsed settings.

    Raises:
        ConfigurationError: listing every missing or malformed variable
    """
    raw = {
        "supabase_url": Config.supabase_url() or "",
        "supabase_anon_key": Config.supabase_anon_key() or "",
        "supabase_service_role_key": Config.supabase_service_role_key() or "",
        "default_locale": Config.default_locale(),
        "supported_locales": Config.supported_locales(),
    }
    try:
        return EnvironmentSettings(**raw)
    except ValidationError as e:
        problems = []
        for err in e.errors():
            field = ".".join(str(part) for part in err["loc"]) or "environment"
            problems.append(f"{field.upper()}: {err['msg']}")
        raise ConfigurationError(problems) from e


# Singleton instance for easy access
config = Config()
