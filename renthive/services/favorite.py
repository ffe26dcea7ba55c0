"""
Favorites service: per-user bookmarks of properties.
"""

from typing import Any, List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from renthive.repositories.favorite import FavoriteRepository
from renthive.repositories.property import PropertyRepository
from renthive.services.property import parse_uuid
from renthive.models.property import Property
from renthive.models.user import User
from renthive.utils.exceptions import (
    AlreadyFavoritedError,
    BackendError,
    BadRequestError,
    PropertyNotFoundError,
)
import uuid
import logging

logger = logging.getLogger(__name__)


class FavoriteService:
    """
    Favorites service.

    Every operation checks the property id first: a missing id is a 400,
    an unknown property a 404.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.favorite_repo = FavoriteRepository(db_session)
        self.property_repo = PropertyRepository(db_session)

    def _require_id(self, property_id: Optional[str]) -> Optional[uuid.UUID]:
        if property_id is None or not str(property_id).strip():
            raise BadRequestError("Property ID is required")
        return parse_uuid(str(property_id).strip())

    async def _require_property(self, property_id: Optional[uuid.UUID]) -> Property:
        if property_id is None:
            raise PropertyNotFoundError()
        try:
            property_obj = await self.property_repo.get_by_id(property_id)
        except Exception as e:
            raise BackendError("fetch property", e)
        if property_obj is None:
            raise PropertyNotFoundError()
        return property_obj

    async def list_favorites(self, user: User) -> List[Property]:
        """The user's favorited properties, most recent first."""
        try:
            return await self.favorite_repo.list_favorite_properties(user.id)
        except Exception as e:
            raise BackendError("fetch favorites", e)

    async def add_favorite(self, user: User, property_id: Optional[str]) -> Property:
        """
        Favorite a property.

        Raises:
            BadRequestError: Missing id
            PropertyNotFoundError: Unknown property
            AlreadyFavoritedError: The pair already exists
        """
        parsed_id = self._require_id(property_id)
        property_obj = await self._require_property(parsed_id)

        try:
            inserted = await self.favorite_repo.add(user.id, property_obj.id)
        except Exception as e:
            raise BackendError("add to favorites", e)

        if not inserted:
            raise AlreadyFavoritedError()

        logger.info(f"User {user.id} favorited property {property_obj.id}")
        return property_obj

    async def remove_favorite(self, user: User, property_id: Optional[str]) -> bool:
        """
        Remove a favorite. Absent pairs (and unknown ids) are not an error.

        Returns:
            True if a favorite was actually removed
        """
        parsed_id = self._require_id(property_id)
        if parsed_id is None:
            return False

        try:
            removed = await self.favorite_repo.remove(user.id, parsed_id)
        except Exception as e:
            raise BackendError("remove from favorites", e)

        if removed:
            logger.info(f"User {user.id} unfavorited property {parsed_id}")
        return removed

    async def toggle_favorite(self, user: User, property_id: Optional[str]) -> Tuple[Property, bool]:
        """
        Flip membership atomically.

        Returns:
            Tuple of (property, new membership)
        """
        parsed_id = self._require_id(property_id)
        property_obj = await self._require_property(parsed_id)

        try:
            is_favorite = await self.favorite_repo.toggle(user.id, property_obj.id)
        except Exception as e:
            raise BackendError("toggle favorite", e)

        logger.info(f"User {user.id} toggled property {property_obj.id}: favorite={is_favorite}")
        return property_obj, is_favorite

    async def is_favorite(self, user: User, property_id: Any) -> bool:
        parsed_id = parse_uuid(property_id)
        if parsed_id is None:
            return False
        try:
            return await self.favorite_repo.is_favorite(user.id, parsed_id)
        except Exception as e:
            raise BackendError("fetch favorites", e)

    async def count_favorites(self, user: User) -> int:
        try:
            return await self.favorite_repo.count({"user_id": user.id})
        except Exception as e:
            raise BackendError("fetch favorites", e)
