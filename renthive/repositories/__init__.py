"""
Repository layer for data access operations.
Provides abstraction over database operations with async SQLAlchemy.
"""

from renthive.repositories.base import BaseRepository
from renthive.repositories.user import UserRepository
from renthive.repositories.property import PropertyRepository
from renthive.repositories.favorite import FavoriteRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "PropertyRepository",
    "FavoriteRepository",
]
