"""
Favorite repository.

Membership changes go through single statements on the unique
(user_id, property_id) pair, so concurrent requests cannot create
duplicate rows. Two toggles racing on an absent pair may both report
True; the pair then exists once.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, and_, desc
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from renthive.repositories.base import BaseRepository
from renthive.models.favorite import Favorite
from renthive.models.property import Property
from typing import List
import uuid
import logging

logger = logging.getLogger(__name__)


class FavoriteRepository(BaseRepository[Favorite]):
    """Repository for user favorites."""

    def __init__(self, db: AsyncSession):
        super().__init__(Favorite, db)

    def _insert_ignore(self, user_id: uuid.UUID, property_id: uuid.UUID):
        """INSERT ... ON CONFLICT DO NOTHING for the current dialect."""
        insert = postgresql_insert if self.dialect_name == "postgresql" else sqlite_insert
        return (
            insert(Favorite)
            .values(id=uuid.uuid4(), user_id=user_id, property_id=property_id)
            .on_conflict_do_nothing(index_elements=["user_id", "property_id"])
        )

    def _pair(self, user_id: uuid.UUID, property_id: uuid.UUID):
        return and_(Favorite.user_id == user_id, Favorite.property_id == property_id)

    async def add(self, user_id: uuid.UUID, property_id: uuid.UUID) -> bool:
        """
        Add a favorite.

        Returns:
            True if a row was inserted, False if the pair already existed
        """
        try:
            result = await self.db.execute(self._insert_ignore(user_id, property_id))
            await self.db.commit()
            inserted = result.rowcount > 0
            logger.debug(f"Favorite add user={user_id} property={property_id} inserted={inserted}")
            return inserted
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to add favorite for user {user_id}: {e}")
            raise

    async def remove(self, user_id: uuid.UUID, property_id: uuid.UUID) -> bool:
        """
        Remove a favorite. Removing an absent pair is not an error.

        Returns:
            True if a row was deleted
        """
        try:
            result = await self.db.execute(delete(Favorite).where(self._pair(user_id, property_id)))
            await self.db.commit()
            return result.rowcount > 0
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to remove favorite for user {user_id}: {e}")
            raise

    async def toggle(self, user_id: uuid.UUID, property_id: uuid.UUID) -> bool:
        """
        Flip membership of the pair inside one transaction.

        A conditional delete runs first; when it removed nothing the pair is
        inserted with conflicts ignored.

        Returns:
            The new membership: True if the property is now a favorite
        """
        try:
            deleted = await self.db.execute(delete(Favorite).where(self._pair(user_id, property_id)))
            if deleted.rowcount > 0:
                is_favorite = False
            else:
                await self.db.execute(self._insert_ignore(user_id, property_id))
                is_favorite = True
            await self.db.commit()
            logger.debug(f"Favorite toggle user={user_id} property={property_id} now={is_favorite}")
            return is_favorite
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to toggle favorite for user {user_id}: {e}")
            raise

    async def is_favorite(self, user_id: uuid.UUID, property_id: uuid.UUID) -> bool:
        try:
            result = await self.db.execute(select(Favorite.id).where(self._pair(user_id, property_id)))
            return result.first() is not None
        except Exception as e:
            logger.error(f"Failed to check favorite for user {user_id}: {e}")
            raise

    async def list_favorite_properties(self, user_id: uuid.UUID) -> List[Property]:
        """Properties favorited by the user, most recently favorited first."""
        try:
            query = (
                select(Property)
                .join(Favorite, Favorite.property_id == Property.id)
                .where(Favorite.user_id == user_id)
                .order_by(desc(Favorite.created_at), desc(Favorite.id))
            )
            result = await self.db.execute(query)
            properties = list(result.scalars().all())
            logger.debug(f"Retrieved {len(properties)} favorites for user {user_id}")
            return properties
        except Exception as e:
            logger.error(f"Failed to list favorites for user {user_id}: {e}")
            raise
