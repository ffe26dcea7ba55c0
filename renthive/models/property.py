"""
Property model for rental listings.
Handles listing data, location fields, lifecycle status and owner relationship.
"""

from sqlalchemy import String, Text, Integer, Boolean, JSON, Enum as SQLEnum, Index, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from renthive.database import Base
import enum
import uuid
from typing import Dict, FrozenSet, List, TYPE_CHECKING

if TYPE_CHECKING:
    from renthive.models.user import User


class PropertyCategory(str, enum.Enum):
    """Kind of dwelling being listed."""
    APARTMENT = "apartment"
    HOUSE = "house"
    CONDO = "condo"
    TOWNHOUSE = "townhouse"
    OTHER = "other"


class PropertyStatus(str, enum.Enum):
    """Lifecycle status of a listing."""
    AVAILABLE = "available"
    PENDING = "pending"
    RENTED = "rented"
    SOLD = "sold"
    MAINTENANCE = "maintenance"


# Legal status changes; a status not listed as a key is terminal.
STATUS_TRANSITIONS: Dict[PropertyStatus, FrozenSet[PropertyStatus]] = {
    PropertyStatus.AVAILABLE: frozenset({
        PropertyStatus.PENDING,
        PropertyStatus.RENTED,
        PropertyStatus.SOLD,
        PropertyStatus.MAINTENANCE,
    }),
    PropertyStatus.PENDING: frozenset({
        PropertyStatus.AVAILABLE,
        PropertyStatus.RENTED,
        PropertyStatus.SOLD,
    }),
    PropertyStatus.RENTED: frozenset({
        PropertyStatus.AVAILABLE,
        PropertyStatus.MAINTENANCE,
    }),
    PropertyStatus.MAINTENANCE: frozenset({
        PropertyStatus.AVAILABLE,
    }),
}


def _enum_values(enum_cls) -> List[str]:
    return [member.value for member in enum_cls]


class Property(Base):
    """
    Property model for managing rental listings.

    ``images`` is an ordered list of public URLs, the first one being the
    primary image. ``amenities`` is a list of unique feature tags.
    """

    __tablename__ = "properties"

    # Basic property information
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Property listing title"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        comment="Detailed property description"
    )

    category: Mapped[PropertyCategory] = mapped_column(
        SQLEnum(PropertyCategory, name="property_category", values_callable=_enum_values),
        nullable=False,
        default=PropertyCategory.APARTMENT,
        index=True,
        comment="Kind of dwelling"
    )

    status: Mapped[PropertyStatus] = mapped_column(
        SQLEnum(PropertyStatus, name="property_status", values_callable=_enum_values),
        nullable=False,
        default=PropertyStatus.AVAILABLE,
        index=True,
        comment="Listing lifecycle status"
    )

    featured: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Whether the listing is promoted"
    )

    # Pricing (whole currency units)
    price: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
        comment="Monthly rent"
    )

    # Property specifications
    bedrooms: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        index=True,
        comment="Number of bedrooms"
    )

    bathrooms: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Number of bathrooms"
    )

    area: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Property area in square feet"
    )

    # Location information
    address: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Street address"
    )

    city: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        index=True,
    )

    state: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        default="",
    )

    zip_code: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="",
    )

    country: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        default="USA",
    )

    amenities: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Feature tags"
    )

    images: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Ordered image URLs, first is primary"
    )

    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="ID of the user who listed this property"
    )

    owner: Mapped["User"] = relationship(
        "User",
        back_populates="properties",
        lazy="noload"
    )

    def __repr__(self) -> str:
        """String representation of the property."""
        return f"<Property(id={self.id}, title={self.title[:30]}..., price={self.price})>"

    def can_transition_to(self, new_status: PropertyStatus) -> bool:
        """
        Check whether the listing may move to ``new_status``.
        Re-applying the current status is always allowed.
        """
        if new_status == self.status:
            return True
        return new_status in STATUS_TRANSITIONS.get(self.status, frozenset())

    def validate_price(self) -> None:
        if self.price is None or self.price < 0:
            raise ValueError("Property price cannot be negative")

    def validate_rooms(self) -> None:
        """
        Validate bedroom and bathroom counts.

        Raises:
            ValueError: If a count is invalid
        """
        if self.bedrooms < 0 or self.bathrooms < 0:
            raise ValueError("Room counts cannot be negative")

        if self.bedrooms > 50 or self.bathrooms > 50:
            raise ValueError("Room count exceeds reasonable limit")

    def validate_area(self) -> None:
        if self.area < 0:
            raise ValueError("Property area cannot be negative")

    def validate_all(self) -> None:
        """
        Run all validation checks on the property.

        Raises:
            ValueError: If any validation fails
        """
        self.validate_price()
        self.validate_rooms()
        self.validate_area()

    def to_dict(self) -> dict:
        """
        Convert property to dictionary.

        Returns:
            Dictionary representation of property
        """
        return {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "price": self.price,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "area": self.area,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "zip_code": self.zip_code,
            "country": self.country,
            "category": self.category.value,
            "status": self.status.value,
            "featured": self.featured,
            "amenities": list(self.amenities or []),
            "images": list(self.images or []),
            "owner_id": str(self.owner_id),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


# Composite indexes for the common browse patterns

# Available listings in a city ordered by price
city_status_price_index = Index(
    'idx_properties_city_status_price',
    Property.city,
    Property.status,
    Property.price
)

# Newest-first browsing of a status
status_created_index = Index(
    'idx_properties_status_created',
    Property.status,
    Property.created_at.desc()
)

# Owner dashboard
owner_created_index = Index(
    'idx_properties_owner_created',
    Property.owner_id,
    Property.created_at.desc()
)
