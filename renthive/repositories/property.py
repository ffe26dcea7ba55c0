"""
Property repository for managing listings with filtering, sorting and pagination.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, and_, or_, func, cast, desc, asc, String
from renthive.repositories.base import BaseRepository
from renthive.models.property import Property, PropertyStatus
from renthive.models.favorite import Favorite
from renthive.schemas.property import PropertyFilters, SortOption
from typing import Optional, List, Dict, Any, Tuple
import json
import uuid
import logging

logger = logging.getLogger(__name__)


# Every ordering ends with the primary key so that pages never overlap.
SORT_ORDERINGS = {
    SortOption.NEWEST: (desc(Property.created_at), desc(Property.id)),
    SortOption.OLDEST: (asc(Property.created_at), asc(Property.id)),
    SortOption.PRICE_ASC: (asc(Property.price), asc(Property.id)),
    SortOption.PRICE_DESC: (desc(Property.price), desc(Property.id)),
}


class PropertyRepository(BaseRepository[Property]):
    """
    Repository for property listings.
    Filtering, ordering and pagination all happen in the database.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    async def create_property(self, property_data: Dict[str, Any]) -> Property:
        """
        Create a new property with validation.

        Raises:
            ValueError: If validation fails
            Exception: If database operation fails
        """
        try:
            property_obj = Property(**property_data)
            property_obj.validate_all()

            created_property = await self.create(property_data)
            logger.info(f"Created property: {created_property.title} (ID: {created_property.id})")
            return created_property
        except ValueError as e:
            logger.warning(f"Property validation failed: {e}")
            raise
        except Exception as e:
            logger.error(f"Failed to create property: {e}")
            raise

    async def list_properties(
        self,
        filters: PropertyFilters,
        skip: int = 0,
        limit: int = 10,
        sort_by: SortOption = SortOption.NEWEST
    ) -> Tuple[List[Property], int]:
        """
        List properties matching every supplied filter.

        Args:
            filters: Filter criteria, combined with AND
            skip: Number of records to skip for pagination
            limit: Maximum number of records to return
            sort_by: Sort key; ties are broken by id

        Returns:
            Tuple of (properties list, total count)
        """
        try:
            query = select(Property)
            count_query = select(func.count(Property.id))

            conditions = self._build_filter_conditions(filters)
            if conditions:
                query = query.where(and_(*conditions))
                count_query = count_query.where(and_(*conditions))

            count_result = await self.db.execute(count_query)
            total_count = count_result.scalar()

            query = query.order_by(*SORT_ORDERINGS[sort_by]).offset(skip).limit(limit)

            result = await self.db.execute(query)
            properties = result.scalars().all()

            logger.debug(f"Property list returned {len(properties)} of {total_count} total results")
            return list(properties), total_count
        except Exception as e:
            logger.error(f"Failed to list properties: {e}")
            raise

    def _build_filter_conditions(self, filters: PropertyFilters) -> List:
        """
        Build SQLAlchemy filter conditions from list filters.

        Returns:
            List of SQLAlchemy conditions
        """
        conditions = []

        if filters.status is not None:
            conditions.append(Property.status == filters.status)

        if filters.owner_id is not None:
            conditions.append(Property.owner_id == filters.owner_id)

        # Location filter (case-insensitive partial match)
        if filters.location:
            conditions.append(
                or_(
                    Property.city.icontains(filters.location, autoescape=True),
                    Property.state.icontains(filters.location, autoescape=True),
                    Property.address.icontains(filters.location, autoescape=True),
                )
            )

        # Price range filters
        if filters.min_price is not None:
            conditions.append(Property.price >= filters.min_price)
        if filters.max_price is not None:
            conditions.append(Property.price <= filters.max_price)

        # Room minimums
        if filters.bedrooms is not None:
            conditions.append(Property.bedrooms >= filters.bedrooms)
        if filters.bathrooms is not None:
            conditions.append(Property.bathrooms >= filters.bathrooms)

        # Area filters
        if filters.min_area is not None:
            conditions.append(Property.area >= filters.min_area)
        if filters.max_area is not None:
            conditions.append(Property.area <= filters.max_area)

        if filters.category:
            conditions.append(Property.category.in_(filters.category))

        if filters.featured is not None:
            conditions.append(Property.featured == filters.featured)

        # Tags are matched against the stored JSON text in their encoded form
        if filters.amenities:
            amenities_text = cast(Property.amenities, String)
            for tag in filters.amenities:
                conditions.append(amenities_text.icontains(json.dumps(tag), autoescape=True))

        return conditions

    async def get_properties_by_owner(
        self,
        owner_id: uuid.UUID,
        skip: int = 0,
        limit: int = 10
    ) -> Tuple[List[Property], int]:
        """
        Get every property listed by a user, whatever its status.

        Returns:
            Tuple of (properties list, total count)
        """
        filters = PropertyFilters(owner_id=owner_id, status=None)
        return await self.list_properties(filters, skip=skip, limit=limit, sort_by=SortOption.NEWEST)

    async def get_status_counts(self, owner_id: uuid.UUID) -> Dict[str, int]:
        """Number of the owner's listings per status, zero-filled."""
        try:
            query = (
                select(Property.status, func.count(Property.id))
                .where(Property.owner_id == owner_id)
                .group_by(Property.status)
            )
            result = await self.db.execute(query)
            counts = {status.value: 0 for status in PropertyStatus}
            for status, count in result.all():
                counts[status.value] = count
            return counts
        except Exception as e:
            logger.error(f"Failed to get status counts for owner {owner_id}: {e}")
            raise

    async def update_property_status(self, property_id: uuid.UUID, status: PropertyStatus) -> Optional[Property]:
        """Persist a status change. Legality is checked by the caller."""
        try:
            updated_property = await self.update(property_id, {"status": status})
            if updated_property:
                logger.info(f"Updated property {property_id} status to {status.value}")
            return updated_property
        except Exception as e:
            logger.error(f"Failed to update property status {property_id}: {e}")
            raise

    async def delete_property(self, property_id: uuid.UUID) -> bool:
        """
        Delete a property together with every favorite pointing at it.

        Returns:
            True if the property was deleted, False if not found
        """
        try:
            await self.db.execute(delete(Favorite).where(Favorite.property_id == property_id))
            result = await self.db.execute(delete(Property).where(Property.id == property_id))
            await self.db.commit()

            deleted = result.rowcount > 0
            if deleted:
                logger.info(f"Deleted property {property_id}")
            return deleted
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to delete property {property_id}: {e}")
            raise

    async def remove_image_url(self, owner_id: uuid.UUID, url: str) -> int:
        """
        Remove an image URL from every property of ``owner_id`` that lists it.

        Returns:
            Number of properties changed
        """
        try:
            query = select(Property).where(
                and_(
                    Property.owner_id == owner_id,
                    cast(Property.images, String).contains(url, autoescape=True),
                )
            )
            result = await self.db.execute(query)
            changed = 0
            for property_obj in result.scalars().all():
                if url in (property_obj.images or []):
                    property_obj.images = [image for image in property_obj.images if image != url]
                    changed += 1

            if changed:
                await self.db.commit()
                logger.info(f"Removed image {url} from {changed} properties of owner {owner_id}")
            return changed
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to remove image {url} from properties: {e}")
            raise
