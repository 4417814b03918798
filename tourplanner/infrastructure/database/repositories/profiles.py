"""User profile repository.

Profiles are created for every registered user; a user without a profile row
is treated as not (fully) signed in.
"""

from typing import Any, Dict, Optional

from tourplanner.infrastructure.database.repositories.base import BaseRepository


class ProfileRepository(BaseRepository[Dict[str, Any]]):
    """Repository for profiles table operations."""

    def table_name(self) -> str:
        """Return table name."""
        return "profiles"

    def get_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Get the profile row for a user.

        Args:
            user_id: User UUID

        Returns:
            Profile dict, or None when the user has no profile

        Raises:
            DatabaseError: if the query fails
        """
        result = self._run(
            "get_profile",
            lambda: self.db.table(self.table_name())
            .select("*")
            .eq("id", user_id)
            .maybe_single()
            .execute(),
        )
        # maybe_single() yields None (older clients) or an empty response
        if result is None or not result.data:
            return None
        return result.data
