"""Base repository interface.

Implements Repository pattern with Dependency Inversion principle.
All concrete repositories inherit from BaseRepository.
"""

from abc import ABC, abstractmethod
from typing import Callable, Generic, Optional, TypeVar

from postgrest.exceptions import APIError

from tourplanner.core.errors import map_database_error
from tourplanner.core.logging import logger
from tourplanner.infrastructure.database.client import SupabaseClient

T = TypeVar("T")
R = TypeVar("R")


class BaseRepository(ABC, Generic[T]):
    """Abstract base repository for database operations.

    Provides dependency inversion - depend on repository interface, not concrete tables.
    """

    def __init__(self, client: Optional[SupabaseClient] = None):
        """Initialize repository with Supabase client."""
        self._client: SupabaseClient = client or SupabaseClient()

    @property
    def db(self):
        """Get Supabase client instance."""
        return self._client.client

    @abstractmethod
    def table_name(self) -> str:
        """Return the table name this repository manages."""
        pass

    def _run(self, operation: str, query: Callable[[], R]) -> R:
        """Execute a query, translating PostgREST errors into DatabaseError.

        Raises:
            DatabaseError: categorized by Postgres error code
        """
        try:
            return query()
        except APIError as e:
            error = map_database_error(e)
            logger.error(
                "database_operation_failed",
                table=self.table_name(),
                operation=operation,
                status_code=error.status_code,
                error=e.message,
            )
            raise error from e
