"""
Pydantic schemas for favorites requests and responses.
Field names follow the camelCase used by the browser client.
"""

from pydantic import BaseModel, Field
from typing import Optional
from renthive.schemas.property import PropertyResponse


class FavoriteRequest(BaseModel):
    """Body of POST /api/favorites and POST /api/favorites/toggle."""

    propertyId: Optional[str] = Field(
        None,
        description="ID of the property to favorite",
        examples=["123e4567-e89b-12d3-a456-426614174000"]
    )


class FavoriteToggleResponse(BaseModel):
    """Membership after a toggle."""

    propertyId: str
    isFavorite: bool
    property: Optional[PropertyResponse] = Field(
        None,
        description="The property when it is now a favorite"
    )
