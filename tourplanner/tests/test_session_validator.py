"""Unit tests for session validation."""

import time

import pytest

from tourplanner.core.errors import DatabaseError, TransportFault
from tourplanner.infrastructure.auth import AuthContext, ClientIdentity, SessionValidator
from tourplanner.infrastructure.auth.jwt import may_be_valid, read_unverified_claims
from tourplanner.tests.conftest import FakeAuthBackend, make_token


class SlowBackend(FakeAuthBackend):
    def get_user(self, access_token):
        time.sleep(0.5)
        return super().get_user(access_token)


class BrokenBackend(FakeAuthBackend):
    def get_user(self, access_token):
        raise ValueError("unexpected payload")


class FakeProfiles:
    def __init__(self, profiles=None, error=None):
        self.profiles = profiles or {}
        self.error = error

    def get_profile(self, user_id):
        if self.error is not None:
            raise self.error
        return self.profiles.get(user_id)


class TestTokenPrecheck:
    """Test the local JWT pre-check."""

    def test_valid_shape(self):
        """Test a well formed unexpired token may be valid."""
        assert may_be_valid(make_token())

    def test_expired(self):
        """Test an expired token is refused locally."""
        assert not may_be_valid(make_token(expires_in=-1))

    def test_missing_subject(self):
        """Test a token without subject is refused."""
        assert not may_be_valid(make_token(sub=None))

    def test_garbage(self):
        """Test a non-JWT string is refused."""
        assert read_unverified_claims("not.a.jwt") is None
        assert not may_be_valid("garbage")

    def test_bad_exp(self):
        """Test a non-numeric exp claim is refused."""
        assert not may_be_valid(make_token(exp="tomorrow"))

    def test_injected_clock(self):
        """Test expiry is judged against the supplied time."""
        token = make_token(expires_in=60)

        assert not may_be_valid(token, now=time.time() + 120)


class TestSessionValidator:
    """Test SessionValidator.validate_session."""

    @pytest.mark.asyncio
    async def test_valid_session_resolves(self):
        """Test a token confirmed by the service yields the identity."""
        backend = FakeAuthBackend()
        token = backend.add_session(user_id="u1", email="a@example.com")
        validator = SessionValidator(backend, timeout=1.0)

        identity = await validator.validate_session(AuthContext(token, "refresh"))

        assert identity == ClientIdentity(user_id="u1", email="a@example.com")

    @pytest.mark.asyncio
    async def test_incomplete_context(self):
        """Test a missing refresh token short-circuits without a round trip."""
        backend = FakeAuthBackend()
        token = backend.add_session()
        validator = SessionValidator(backend, timeout=1.0)

        assert await validator.validate_session(AuthContext(token, None)) is None
        assert await validator.validate_session(AuthContext()) is None
        assert backend.get_user_calls == 0

    @pytest.mark.asyncio
    async def test_expired_token_skips_service(self):
        """Test an expired token is refused before the round trip."""
        backend = FakeAuthBackend()
        validator = SessionValidator(backend, timeout=1.0)

        identity = await validator.validate_session(
            AuthContext(make_token(expires_in=-10), "refresh")
        )

        assert identity is None
        assert backend.get_user_calls == 0

    @pytest.mark.asyncio
    async def test_tampered_token_rejected_by_service(self):
        """Test a well formed token the service does not know yields None."""
        backend = FakeAuthBackend()
        backend.add_session()
        validator = SessionValidator(backend, timeout=1.0)

        identity = await validator.validate_session(
            AuthContext(make_token(sub="user-1", tampered=True), "refresh")
        )

        assert identity is None
        assert backend.get_user_calls == 1

    @pytest.mark.asyncio
    async def test_timeout_raises_transport_fault(self):
        """Test a slow service raises TransportFault."""
        backend = SlowBackend()
        token = backend.add_session()
        validator = SessionValidator(backend, timeout=0.05)

        with pytest.raises(TransportFault):
            await validator.validate_session(AuthContext(token, "refresh"))

    @pytest.mark.asyncio
    async def test_unreachable_service(self):
        """Test a transport fault from the backend propagates."""
        backend = FakeAuthBackend()
        token = backend.add_session()
        backend.unreachable = True
        validator = SessionValidator(backend, timeout=1.0)

        with pytest.raises(TransportFault):
            await validator.validate_session(AuthContext(token, "refresh"))

    @pytest.mark.asyncio
    async def test_unexpected_error_becomes_transport_fault(self):
        """Test unexpected backend errors are reported as TransportFault."""
        backend = BrokenBackend()
        validator = SessionValidator(backend, timeout=1.0)

        with pytest.raises(TransportFault):
            await validator.validate_session(AuthContext(make_token(), "refresh"))


class TestProfileRequirement:
    """Test validation with a profile lookup."""

    @pytest.mark.asyncio
    async def test_profile_attached(self):
        """Test the profile row is attached to the identity."""
        backend = FakeAuthBackend()
        token = backend.add_session(user_id="u1")
        profiles = FakeProfiles({"u1": {"id": "u1", "display_name": "Jane"}})
        validator = SessionValidator(backend, timeout=1.0, profiles=profiles)

        identity = await validator.validate_session(AuthContext(token, "refresh"))

        assert identity.profile == {"id": "u1", "display_name": "Jane"}
        assert identity.to_dict()["profile"]["display_name"] == "Jane"

    @pytest.mark.asyncio
    async def test_missing_profile(self):
        """Test a user without a profile does not resolve."""
        backend = FakeAuthBackend()
        token = backend.add_session(user_id="u1")
        validator = SessionValidator(backend, timeout=1.0, profiles=FakeProfiles())

        assert await validator.validate_session(AuthContext(token, "refresh")) is None

    @pytest.mark.asyncio
    async def test_profile_lookup_failure(self):
        """Test a database failure during lookup is a TransportFault."""
        backend = FakeAuthBackend()
        token = backend.add_session(user_id="u1")
        profiles = FakeProfiles(error=DatabaseError("boom"))
        validator = SessionValidator(backend, timeout=1.0, profiles=profiles)

        with pytest.raises(TransportFault):
            await validator.validate_session(AuthContext(token, "refresh"))
