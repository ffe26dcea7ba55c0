"""
Database models for the RentHive API.
Includes User, Property and Favorite models with relationships and validation.
"""

from renthive.models.user import User
from renthive.models.property import Property, PropertyCategory, PropertyStatus, STATUS_TRANSITIONS
from renthive.models.favorite import Favorite

# Export all models for easy importing
__all__ = [
    "User",
    "Property",
    "PropertyCategory",
    "PropertyStatus",
    "STATUS_TRANSITIONS",
    "Favorite",
]
