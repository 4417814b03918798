"""Database module.

Provides the Supabase client singleton and repository pattern for database operations.
"""

from tourplanner.infrastructure.database.client import SupabaseClient
from tourplanner.infrastructure.database.repositories import BaseRepository, ProfileRepository

__all__ = [
    "SupabaseClient",
    "BaseRepository",
    "ProfileRepository",
]
