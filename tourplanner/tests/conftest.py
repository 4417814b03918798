"""Shared fixtures: an in-memory auth backend and a gated test app."""

import time
from typing import Dict, List, Optional, Set, Tuple

import jwt
import pytest
from fastapi import Request
from fastapi.testclient import TestClient

from tourplanner.api import create_app
from tourplanner.core.errors import TransportFault
from tourplanner.core.gate_config import GateConfig
from tourplanner.infrastructure.auth import ClientIdentity

SIGNING_KEY = "tourplanner-test-signing-key-0123456789abcdef"


def make_token(sub: Optional[str] = "user-1", expires_in: int = 3600, **claims) -> str:
    """Build a JWT shaped like a Supabase access token."""
    payload = {"exp": int(time.time()) + expires_in, "role": "authenticated", **claims}
    if sub is not None:
        payload["sub"] = sub
    return jwt.encode(payload, SIGNING_KEY, algorithm="HS256")


class FakeAuthBackend:
    """AuthBackend keeping users and sent links in memory."""

    def __init__(self):
        self.sessions: Dict[str, ClientIdentity] = {}
        self.registered: Set[str] = set()
        self.magic_links: List[Tuple[str, str, bool]] = []
        self.signed_out: List[str] = []
        self.unreachable = False
        self.get_user_calls = 0

    def add_session(self, user_id: str = "user-1", email: str = "jane@example.com") -> str:
        token = make_token(sub=user_id)
        self.sessions[token] = ClientIdentity(user_id=user_id, email=email)
        self.registered.add(email)
        return token

    def get_user(self, access_token: str) -> Optional[ClientIdentity]:
        self.get_user_calls += 1
        if self.unreachable:
            raise TransportFault()
        return self.sessions.get(access_token)

    def user_exists(self, email: str) -> bool:
        return email in self.registered

    def send_magic_link(self, email: str, redirect_to: str, create_user: bool) -> None:
        self.magic_links.append((email, redirect_to, create_user))

    def sign_out(self, access_token: str) -> None:
        self.signed_out.append(access_token)


@pytest.fixture(autouse=True)
def production_limits(monkeypatch):
    """Run with the production rate limit numbers."""
    monkeypatch.setenv("TEST_MODE", "true")
    monkeypatch.setenv("APP_ENV", "test")


@pytest.fixture
def backend():
    return FakeAuthBackend()


@pytest.fixture
def gate_config():
    return GateConfig()


@pytest.fixture
def app(backend, gate_config):
    app = create_app(auth_backend=backend, gate_config=gate_config)

    @app.post("/api/tours/drafts")
    async def create_draft():
        return {"created": True}

    @app.get("/{locale}/")
    async def home(request: Request):
        return {"page": "home", "locale": request.state.locale}

    @app.get("/{locale}/login")
    async def login(request: Request):
        return {"page": "login", "locale": request.state.locale}

    @app.get("/{locale}/tours")
    async def tours(request: Request):
        identity = getattr(request.state, "identity", None)
        return {
            "page": "tours",
            "locale": request.state.locale,
            "user_id": identity.user_id if identity else None,
        }

    return app


@pytest.fixture
def client(app):
    with TestClient(app, follow_redirects=False) as client:
        yield client


@pytest.fixture
def signed_in(client, backend):
    """Put a valid session in the client's cookie jar."""
    token = backend.add_session()
    client.cookies.set("sb-access-token", token)
    client.cookies.set("sb-refresh-token", "refresh-1")
    return token
