"""Auth models.

Type-safe dataclasses for what the session layer reads and resolves.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

ACCESS_TOKEN_COOKIE = "sb-access-token"
REFRESH_TOKEN_COOKIE = "sb-refresh-token"


@dataclass(frozen=True)
class AuthContext:
    """Session tokens presented by a request."""

    access_token: Optional[str] = None
    refresh_token: Optional[str] = None

    @classmethod
    def from_cookies(cls, cookies: Mapping[str, str]) -> "AuthContext":
        return cls(
            access_token=cookies.get(ACCESS_TOKEN_COOKIE) or None,
            refresh_token=cookies.get(REFRESH_TOKEN_COOKIE) or None,
        )

    @property
    def is_complete(self) -> bool:
        return bool(self.access_token and self.refresh_token)

    @property
    def is_empty(self) -> bool:
        return not self.access_token and not self.refresh_token


@dataclass(frozen=True)
class ClientIdentity:
    """A user confirmed by the auth service for the current request."""

    user_id: str
    email: str
    profile: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.user_id, "email": self.email, "profile": self.profile}
