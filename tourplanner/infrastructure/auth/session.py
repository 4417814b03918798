"""Session validation.

Resolves the session tokens a request carries to a ClientIdentity by asking the
auth service. Cookie presence alone never yields an identity.
"""

import asyncio
import time
from dataclasses import replace
from typing import Callable, Optional

from tourplanner.config import config
from tourplanner.core.errors import DatabaseError, TransportFault
from tourplanner.core.logging import logger
from tourplanner.infrastructure.auth.backend import AuthBackend
from tourplanner.infrastructure.auth.jwt import may_be_valid
from tourplanner.infrastructure.auth.models import AuthContext, ClientIdentity
from tourplanner.infrastructure.database.repositories import ProfileRepository


class SessionValidator:
    """Validates sessions against the auth service with a bounded wait.

    Args:
        backend: Auth service collaborator
        timeout: Seconds to wait for each round trip (defaults to AUTH_TIMEOUT_SECONDS)
        profiles: When given, users without a profile row do not resolve
        clock: Wall clock used for the local expiry pre-check
    """

    def __init__(
        self,
        backend: AuthBackend,
        timeout: Optional[float] = None,
        profiles: Optional[ProfileRepository] = None,
        clock: Callable[[], float] = time.time,
    ):
        self._backend = backend
        self._timeout = timeout if timeout is not None else config.auth_timeout_seconds()
        self._profiles = profiles
        self._clock = clock

    async def validate_session(self, auth: AuthContext) -> Optional[ClientIdentity]:
        """Resolve auth to an identity.

        Returns:
            ClientIdentity if the service confirms an active session, else None

        Raises:
            TransportFault: if the auth service is unreachable or too slow
        """
        if not auth.is_complete:
            return None

        if not may_be_valid(auth.access_token, now=self._clock()):
            return None

        identity = await self._call(self._backend.get_user, auth.access_token)
        if identity is None:
            return None

        if self._profiles is None:
            return identity

        try:
            profile = await self._call(self._profiles.get_profile, identity.user_id)
        except DatabaseError as e:
            raise TransportFault("Profile lookup failed") from e

        if profile is None:
            logger.warning("profile_missing_for_user", user_id=identity.user_id)
            return None
        return replace(identity, profile=profile)

    async def _call(self, func, *args):
        try:
            return await asyncio.wait_for(asyncio.to_thread(func, *args), timeout=self._timeout)
        except asyncio.TimeoutError as e:
            logger.warning("auth_round_trip_timeout", timeout=self._timeout)
            raise TransportFault("Authentication service timed out") from e
        except (TransportFault, DatabaseError):
            raise
        except Exception as e:
            logger.error("auth_round_trip_failed", error=str(e), error_type=type(e).__name__)
            raise TransportFault() from e
