"""
Property service for managing listings with business logic validation.
Handles CRUD operations, ownership checks, status transitions and listing queries.
"""

from typing import Optional, List, Dict, Any, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from renthive.repositories.property import PropertyRepository
from renthive.models.property import Property, PropertyStatus
from renthive.models.user import User
from renthive.schemas.property import PropertyCreate, PropertyUpdate, PropertyFilters, SortOption
from renthive.utils.exceptions import (
    BackendError,
    PropertyNotFoundError,
    PropertyOwnershipError,
    PropertyStatusError,
    ValidationError,
)
import uuid
import logging

logger = logging.getLogger(__name__)


def parse_uuid(value: Any) -> Optional[uuid.UUID]:
    """Parse an identifier coming from a URL or body; None when malformed."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


class PropertyService:
    """
    Property service for listing management.

    Repository failures are logged and surfaced as ``BackendError`` so the
    client only ever sees a generic message.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)

    async def list_properties(
        self,
        filters: PropertyFilters,
        page: int = 1,
        limit: int = 10,
        sort_by: SortOption = SortOption.NEWEST
    ) -> Tuple[List[Property], int]:
        """
        List one page of properties.

        Args:
            filters: Filter criteria
            page: 1-based page number; offset is (page - 1) * limit
            limit: Page length

        Returns:
            Tuple of (page of properties, total matching count)
        """
        skip = (page - 1) * limit
        try:
            return await self.property_repo.list_properties(filters, skip=skip, limit=limit, sort_by=sort_by)
        except Exception as e:
            raise BackendError("fetch properties", e)

    async def get_property(self, property_id: Any) -> Optional[Property]:
        """
        Fetch one property.

        Returns:
            The property, or None when no such row exists (including malformed ids)

        Raises:
            BackendError: If the lookup itself failed
        """
        parsed_id = parse_uuid(property_id)
        if parsed_id is None:
            return None
        try:
            return await self.property_repo.get_by_id(parsed_id)
        except Exception as e:
            raise BackendError("fetch property", e)

    async def require_property(self, property_id: Any) -> Property:
        property_obj = await self.get_property(property_id)
        if property_obj is None:
            raise PropertyNotFoundError()
        return property_obj

    async def create_property(self, property_data: PropertyCreate, current_user: User) -> Property:
        """
        Create a listing owned by ``current_user``. New listings start as available.

        Raises:
            ValidationError: If property data is invalid
        """
        create_data = property_data.model_dump()
        create_data["owner_id"] = current_user.id
        create_data["status"] = PropertyStatus.AVAILABLE

        try:
            property_obj = await self.property_repo.create_property(create_data)
        except ValueError as e:
            raise ValidationError(str(e))
        except Exception as e:
            raise BackendError("create property", e)

        logger.info(f"Property created by user {current_user.email}: {property_obj.title} (ID: {property_obj.id})")
        return property_obj

    async def update_property(self, property_id: Any, property_data: PropertyUpdate, current_user: User) -> Property:
        """
        Update the fields that were sent.

        Raises:
            PropertyNotFoundError: If the property doesn't exist
            PropertyOwnershipError: If the caller is not the owner
            ValidationError: If no fields were sent
        """
        existing_property = await self.require_property(property_id)
        self._ensure_owner(existing_property, current_user)

        update_data = property_data.model_dump(exclude_unset=True)
        if not update_data:
            raise ValidationError("No valid fields provided for update")

        try:
            updated_property = await self.property_repo.update(existing_property.id, update_data)
        except Exception as e:
            raise BackendError("update property", e)

        if updated_property is None:
            raise PropertyNotFoundError()

        logger.info(f"Property updated by user {current_user.email}: {existing_property.id}")
        return updated_property

    async def change_status(self, property_id: Any, new_status: PropertyStatus, current_user: User) -> Property:
        """
        Move a listing to ``new_status``.

        Setting the current status again is a no-op.

        Raises:
            PropertyStatusError: If the transition is not allowed
        """
        property_obj = await self.require_property(property_id)
        self._ensure_owner(property_obj, current_user)

        if property_obj.status == new_status:
            return property_obj

        if not property_obj.can_transition_to(new_status):
            raise PropertyStatusError(property_obj.status.value, new_status.value)

        try:
            updated = await self.property_repo.update_property_status(property_obj.id, new_status)
        except Exception as e:
            raise BackendError("update property status", e)

        if updated is None:
            raise PropertyNotFoundError()
        return updated

    async def delete_property(self, property_id: Any, current_user: User) -> bool:
        """
        Delete a listing and its favorites.

        Raises:
            PropertyNotFoundError: If the property doesn't exist
            PropertyOwnershipError: If the caller is not the owner
        """
        property_obj = await self.require_property(property_id)
        self._ensure_owner(property_obj, current_user)

        try:
            deleted = await self.property_repo.delete_property(property_obj.id)
        except Exception as e:
            raise BackendError("delete property", e)

        if not deleted:
            raise PropertyNotFoundError()

        logger.info(f"Property deleted by user {current_user.email}: {property_obj.id}")
        return True

    async def list_user_properties(self, user: User, page: int = 1, limit: int = 10) -> Tuple[List[Property], int]:
        """Every listing owned by ``user``, newest first, any status."""
        try:
            return await self.property_repo.get_properties_by_owner(user.id, skip=(page - 1) * limit, limit=limit)
        except Exception as e:
            raise BackendError("fetch properties", e)

    async def get_owner_statistics(self, user: User) -> Dict[str, Any]:
        """Listing counts per status for the owner dashboard."""
        try:
            counts = await self.property_repo.get_status_counts(user.id)
        except Exception as e:
            raise BackendError("fetch property statistics", e)
        return {"total": sum(counts.values()), "by_status": counts}

    async def remove_image_from_listings(self, user: User, url: str) -> int:
        try:
            return await self.property_repo.remove_image_url(user.id, url)
        except Exception as e:
            raise BackendError("update property images", e)

    def _ensure_owner(self, property_obj: Property, user: User) -> None:
        if property_obj.owner_id != user.id:
            logger.warning(f"User {user.id} attempted to modify property {property_obj.id} owned by {property_obj.owner_id}")
            raise PropertyOwnershipError()
