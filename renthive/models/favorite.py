"""
Favorite model: a user-to-property bookmark.
Rows are created and deleted, never updated.
"""

from sqlalchemy import ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from renthive.database import Base
import uuid
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from renthive.models.user import User
    from renthive.models.property import Property


class Favorite(Base):
    """Unique (user, property) pair."""

    __tablename__ = "favorites"
    __table_args__ = (
        UniqueConstraint("user_id", "property_id", name="uq_favorites_user_property"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    user: Mapped["User"] = relationship("User", back_populates="favorites", lazy="noload")
    property_rel: Mapped["Property"] = relationship("Property", lazy="noload")

    def __repr__(self) -> str:
        return f"<Favorite(user_id={self.user_id}, property_id={self.property_id})>"

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "user_id": str(self.user_id),
            "property_id": str(self.property_id),
            "created_at": self.created_at.isoformat(),
        }
