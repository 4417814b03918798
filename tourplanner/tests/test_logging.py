"""Unit tests for log sanitization."""

from tourplanner.core.logging import mask_value, sanitize, sanitize_event


class TestSanitize:
    """Test sanitize."""

    def test_secrets_redacted(self):
        """Test token, cookie and password fields are redacted."""
        result = sanitize(
            {"access_token": "eyJabc", "Cookie": "a=b", "password": "hunter2", "path": "/tours"}
        )

        assert result == {
            "access_token": "[REDACTED]",
            "Cookie": "[REDACTED]",
            "password": "[REDACTED]",
            "path": "/tours",
        }

    def test_pii_masked(self):
        """Test email addresses keep only their edges."""
        assert sanitize({"email": "jane@example.com"}) == {"email": "ja***om"}

    def test_status_and_error_codes_survive(self):
        """Test code fields that hold no secrets are kept."""
        result = sanitize({"status_code": 429, "error_code": "RATE_LIMIT_EXCEEDED", "code": "123"})

        assert result == {"status_code": 429, "error_code": "RATE_LIMIT_EXCEEDED", "code": "[REDACTED]"}

    def test_nested(self):
        """Test nested dicts and lists are sanitized."""
        result = sanitize({"users": [{"email": "jane@example.com", "id": "u1"}]})

        assert result == {"users": [{"email": "ja***om", "id": "u1"}]}

    def test_max_depth(self):
        """Test deep structures are cut off."""
        assert sanitize({"a": {"b": {"c": 1}}}, max_depth=2) == {"a": {"b": "[Max Depth Reached]"}}

    def test_short_values(self):
        """Test short values are fully masked."""
        assert mask_value("ab") == "***"
        assert mask_value("") == "***"


class TestSanitizeEvent:
    """Test the structlog processor."""

    def test_structural_keys_untouched(self):
        """Test event and request_id pass while context is sanitized."""
        event = {"event": "session_established", "request_id": "r1", "refresh_token": "x"}

        result = sanitize_event(None, "info", event)

        assert result == {
            "event": "session_established",
            "request_id": "r1",
            "refresh_token": "[REDACTED]",
        }
