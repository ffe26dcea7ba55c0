"""
Service layer for business logic implementation.
Contains services for authentication, listings, favorites, uploads and error handling.
"""

from .auth import AuthService
from .property import PropertyService
from .favorite import FavoriteService
from .upload import UploadService
from .error_handler import ErrorHandlerService

__all__ = [
    "AuthService",
    "PropertyService",
    "FavoriteService",
    "UploadService",
    "ErrorHandlerService"
]
