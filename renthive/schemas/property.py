"""
Pydantic schemas for property requests and responses.
Handles property CRUD operations, list filters and status changes.
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime
from enum import Enum
import uuid
from renthive.models.property import PropertyCategory, PropertyStatus


def _clean_tags(values: Optional[List[str]]) -> Optional[List[str]]:
    """Strip tags, drop blanks and duplicates while keeping order."""
    if values is None:
        return None
    seen = []
    for value in values:
        tag = value.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


class SortOption(str, Enum):
    """Sort keys accepted by the property list."""
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    NEWEST = "newest"
    OLDEST = "oldest"


class PropertyBase(BaseModel):
    """Base property schema with common fields."""

    title: str = Field(
        ...,
        min_length=3,
        max_length=255,
        description="Property listing title",
        examples=["Sunny 2BR Apartment near the Park"]
    )

    description: str = Field(
        "",
        max_length=5000,
        description="Detailed property description"
    )

    price: int = Field(
        ...,
        ge=0,
        description="Monthly rent in whole currency units",
        examples=[2500]
    )

    bedrooms: int = Field(0, ge=0, le=50, description="Number of bedrooms")
    bathrooms: int = Field(0, ge=0, le=50, description="Number of bathrooms")
    area: int = Field(0, ge=0, le=1000000, description="Area in square feet")

    address: str = Field(..., min_length=1, max_length=255, examples=["12 Elm Street"])
    city: str = Field(..., min_length=1, max_length=100, examples=["Austin"])
    state: str = Field("", max_length=100, examples=["TX"])
    zip_code: str = Field("", max_length=20, examples=["73301"])
    country: str = Field("USA", max_length=100)

    category: PropertyCategory = Field(
        PropertyCategory.APARTMENT,
        description="Kind of dwelling"
    )

    featured: bool = Field(False, description="Whether the listing is promoted")

    amenities: List[str] = Field(default_factory=list, description="Feature tags")
    images: List[str] = Field(default_factory=list, description="Ordered image URLs, first is primary")

    @field_validator('title', 'address', 'city')
    @classmethod
    def validate_required_text(cls, v):
        """Validate and clean required text fields."""
        if not v or not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip()

    @field_validator('amenities')
    @classmethod
    def validate_amenities(cls, v):
        return _clean_tags(v)


class PropertyCreate(PropertyBase):
    """Schema for creating a new property. New listings always start as available."""

    model_config = {
        "json_schema_extra": {
            "example": {
                "title": "Sunny 2BR Apartment near the Park",
                "description": "Bright corner unit with balcony and in-unit laundry.",
                "price": 2500,
                "bedrooms": 2,
                "bathrooms": 1,
                "area": 950,
                "address": "12 Elm Street",
                "city": "Austin",
                "state": "TX",
                "zip_code": "73301",
                "country": "USA",
                "category": "apartment",
                "amenities": ["balcony", "laundry"],
                "images": []
            }
        }
    }


class PropertyUpdate(BaseModel):
    """Schema for updating an existing property. Only supplied fields change."""

    title: Optional[str] = Field(None, min_length=3, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    price: Optional[int] = Field(None, ge=0)
    bedrooms: Optional[int] = Field(None, ge=0, le=50)
    bathrooms: Optional[int] = Field(None, ge=0, le=50)
    area: Optional[int] = Field(None, ge=0, le=1000000)
    address: Optional[str] = Field(None, min_length=1, max_length=255)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    zip_code: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, max_length=100)
    category: Optional[PropertyCategory] = None
    featured: Optional[bool] = None
    amenities: Optional[List[str]] = None
    images: Optional[List[str]] = None

    @field_validator('title', 'address', 'city')
    @classmethod
    def validate_required_text(cls, v):
        """Validate and clean text fields that cannot be blanked."""
        if v is not None:
            if not v.strip():
                raise ValueError("Field cannot be empty")
            return v.strip()
        return v

    @field_validator('amenities')
    @classmethod
    def validate_amenities(cls, v):
        return _clean_tags(v)

    @model_validator(mode='after')
    def validate_not_null(self):
        """Explicit nulls are not allowed for fields that were sent."""
        for name in self.model_fields_set:
            if getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class PropertyStatusUpdate(BaseModel):
    """Schema for a status change request."""

    status: PropertyStatus = Field(..., description="Requested status")


class PropertyResponse(PropertyBase):
    """Schema for property response with additional metadata."""

    id: str = Field(..., description="Property unique identifier")
    status: PropertyStatus = Field(..., description="Listing lifecycle status")
    owner_id: str = Field(..., description="ID of the user who listed this property")
    created_at: datetime
    updated_at: datetime

    is_favorite: Optional[bool] = Field(
        None,
        description="Present on favorites listings"
    )

    model_config = {"from_attributes": True}


class PropertyFilters(BaseModel):
    """
    Filters for the property list.

    All supplied predicates are combined with AND. ``bedrooms`` and
    ``bathrooms`` are minimums; ``location`` matches city, state or address
    case-insensitively; every tag in ``amenities`` must be present.
    """

    min_price: Optional[int] = Field(None, ge=0)
    max_price: Optional[int] = Field(None, ge=0)
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    min_area: Optional[int] = Field(None, ge=0)
    max_area: Optional[int] = Field(None, ge=0)
    category: Optional[List[PropertyCategory]] = None
    location: Optional[str] = None
    amenities: Optional[List[str]] = None
    status: Optional[PropertyStatus] = PropertyStatus.AVAILABLE
    featured: Optional[bool] = None
    owner_id: Optional[uuid.UUID] = None

    @field_validator('location')
    @classmethod
    def validate_location(cls, v):
        if v is not None:
            v = v.strip()
            return v or None
        return v

    @field_validator('amenities')
    @classmethod
    def validate_amenities(cls, v):
        return _clean_tags(v) or None

    @model_validator(mode='after')
    def validate_ranges(self):
        """Validate that range filters are consistent."""
        if self.min_price is not None and self.max_price is not None and self.min_price > self.max_price:
            raise ValueError("min_price cannot be greater than max_price")
        if self.min_area is not None and self.max_area is not None and self.min_area > self.max_area:
            raise ValueError("min_area cannot be greater than max_area")
        return self


class SuccessResponse(BaseModel):
    success: bool = True
