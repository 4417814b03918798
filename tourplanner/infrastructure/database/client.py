"""Shared service-role Supabase client.

Created lazily on first use. The client never stores a user session: per-user
checks pass the access token explicitly, so concurrent requests cannot leak
state into each other through it.
"""

import threading
from typing import Optional

from supabase import Client, ClientOptions, create_client

from tourplanner.config import config
from tourplanner.core.logging import logger


class SupabaseClient:
    """Process-wide holder of the service-role client."""

    _instance: Optional["SupabaseClient"] = None
    _lock = threading.Lock()
    _client: Optional[Client] = None

    def __new__(cls):
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def client(self) -> Client:
        """Service-role client, created on first access.

        Raises:
            RuntimeError: if SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY is missing
        """
        with self._lock:
            if self._client is None:
                url = config.supabase_url()
                key = config.supabase_service_role_key()
                if not url or not key:
                    raise RuntimeError(
                        "Supabase not configured. Set SUPABASE_URL and "
                        "SUPABASE_SERVICE_ROLE_KEY environment variables."
                    )

                options = ClientOptions(auto_refresh_token=False, persist_session=False)
                SupabaseClient._client = create_client(url, key, options=options)
                logger.info("supabase_client_initialized", url=url)

            return self._client

    def is_configured(self) -> bool:
        return bool(config.supabase_url() and config.supabase_service_role_key())
