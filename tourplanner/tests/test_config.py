"""Unit tests for environment configuration."""

import pytest

from tourplanner.config import ConfigurationError, config, validate_environment
from tourplanner.core.gate_config import GateConfig

VALID_ENV = {
    "SUPABASE_URL": "https://project.supabase.co",
    "SUPABASE_ANON_KEY": "eyJhbGciOiJIUzI1NiJ9.anon",
    "SUPABASE_SERVICE_ROLE_KEY": "eyJhbGciOiJIUzI1NiJ9.service",
    "DEFAULT_LOCALE": "en-US",
    "SUPPORTED_LOCALES": "en-US,pl-PL",
}


@pytest.fixture
def valid_env(monkeypatch):
    for key, value in VALID_ENV.items():
        monkeypatch.setenv(key, value)


class TestValidateEnvironment:
    """Test validate_environment."""

    def test_valid(self, valid_env):
        """Test a complete environment parses."""
        settings = validate_environment()

        assert settings.supabase_url == "https://project.supabase.co"
        assert settings.supported_locales == ["en-US", "pl-PL"]

    def test_missing_values_are_listed(self, monkeypatch):
        """Test every missing Supabase variable is reported."""
        for key in ("SUPABASE_URL", "SUPABASE_ANON_KEY", "SUPABASE_SERVICE_ROLE_KEY"):
            monkeypatch.delenv(key, raising=False)

        with pytest.raises(ConfigurationError) as exc_info:
            validate_environment()

        problems = " ".join(exc_info.value.problems)
        assert "SUPABASE_URL" in problems
        assert "SUPABASE_ANON_KEY" in problems
        assert "SUPABASE_SERVICE_ROLE_KEY" in problems

    def test_bad_url(self, valid_env, monkeypatch):
        """Test a URL without scheme is rejected."""
        monkeypatch.setenv("SUPABASE_URL", "project.supabase.co")

        with pytest.raises(ConfigurationError, match="SUPABASE_URL"):
            validate_environment()

    def test_bad_locale(self, valid_env, monkeypatch):
        """Test a malformed default locale is rejected."""
        monkeypatch.setenv("DEFAULT_LOCALE", "english")

        with pytest.raises(ConfigurationError, match="DEFAULT_LOCALE"):
            validate_environment()

    def test_default_must_be_supported(self, valid_env, monkeypatch):
        """Test the default locale must be allow-listed."""
        monkeypatch.setenv("DEFAULT_LOCALE", "de-DE")

        with pytest.raises(ConfigurationError, match="SUPPORTED_LOCALES"):
            validate_environment()


class TestConfig:
    """Test Config accessors."""

    def test_missing_config(self, monkeypatch):
        """Test get_missing_config names absent keys."""
        monkeypatch.delenv("SUPABASE_URL", raising=False)
        monkeypatch.setenv("SUPABASE_ANON_KEY", "eyJ")
        monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "eyJ")

        assert config.get_missing_config() == ["SUPABASE_URL"]
        assert not config.is_configured()

    def test_environment_mode(self, monkeypatch):
        """Test APP_ENV decides production mode."""
        monkeypatch.setenv("APP_ENV", "Production")

        assert config.is_production()
        assert not config.is_development()


class TestGateConfig:
    """Test GateConfig.from_env."""

    def test_from_env(self, monkeypatch):
        """Test locales, cookie security and timeout come from the environment."""
        monkeypatch.setenv("SUPPORTED_LOCALES", "en-US, de-DE")
        monkeypatch.setenv("DEFAULT_LOCALE", "de-DE")
        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.setenv("AUTH_TIMEOUT_SECONDS", "2.5")

        gate = GateConfig.from_env()

        assert gate.supported_locales == ("en-US", "de-DE")
        assert gate.default_locale == "de-DE"
        assert gate.secure_cookies is True
        assert gate.auth_timeout == 2.5

    def test_defaults(self):
        """Test the built-in policy."""
        gate = GateConfig()

        assert gate.guest_only_paths == ("/login", "/register")
        assert "/api/auth/session" in gate.csrf_exempt_paths
        assert "/api/auth/signup" in gate.csrf_exempt_paths
