"""Auth service collaborator.

``AuthBackend`` is everything the request layer needs from the managed auth
service. ``SupabaseAuthBackend`` implements it over supabase-py; tests supply
their own implementations.
"""

from typing import Optional, Protocol

import httpx
from supabase import AuthError, AuthRetryableError

from tourplanner.core.errors import TransportFault
from tourplanner.core.logging import logger
from tourplanner.infrastructure.auth.models import ClientIdentity
from tourplanner.infrastructure.database.client import SupabaseClient


class AuthBackend(Protocol):
    """Blocking calls to the auth service. Callers run them in a worker thread."""

    def get_user(self, access_token: str) -> Optional[ClientIdentity]:
        """Resolve an access token; None if the service rejects it.

        Raises:
            TransportFault: if the service cannot be reached
        """
        ...

    def user_exists(self, email: str) -> bool:
        ...

    def send_magic_link(self, email: str, redirect_to: str, create_user: bool) -> None:
        ...

    def sign_out(self, access_token: str) -> None:
        ...


class SupabaseAuthBackend:
    """AuthBackend backed by Supabase Auth."""

    def __init__(self, client: Optional[SupabaseClient] = None):
        self._client = client or SupabaseClient()

    @property
    def auth(self):
        return self._client.client.auth

    def get_user(self, access_token: str) -> Optional[ClientIdentity]:
        try:
            # Server-side check of the JWT, not a decode of local state
            response = self.auth.get_user(access_token)
        except AuthRetryableError as e:
            logger.warning("auth_service_unreachable", error=e.message)
            raise TransportFault() from e
        except AuthError as e:
            logger.info("auth_token_rejected", error=e.message)
            return None
        except httpx.HTTPError as e:
            logger.warning("auth_service_unreachable", error=str(e))
            raise TransportFault() from e

        if response is None or response.user is None:
            return None
        return ClientIdentity(user_id=response.user.id, email=response.user.email or "")

    def user_exists(self, email: str) -> bool:
        users = self.auth.admin.list_users()
        return any(user.email == email for user in users)

    def send_magic_link(self, email: str, redirect_to: str, create_user: bool) -> None:
        self.auth.sign_in_with_otp(
            {
                "email": email,
                "options": {"email_redirect_to": redirect_to, "should_create_user": create_user},
            }
        )

    def sign_out(self, access_token: str) -> None:
        self.auth.admin.sign_out(access_token)
