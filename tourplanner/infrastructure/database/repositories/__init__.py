"""Repository implementations.

Implements Repository pattern with Dependency Inversion principle.
"""

from tourplanner.infrastructure.database.repositories.base import BaseRepository
from tourplanner.infrastructure.database.repositories.profiles import ProfileRepository

__all__ = [
    "BaseRepository",
    "ProfileRepository",
]
