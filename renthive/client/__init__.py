"""
Async client-side state for RentHive: API client, session, listing stores,
favorites and uploads.
"""

from .api import ApiClient, ApiError
from .session import AuthEvent, SessionManager
from .resources import PropertyListResource, PropertyResource
from .favorites import FavoritesStore
from .state import AppState
from .uploads import UploadStore

__all__ = [
    "ApiClient",
    "ApiError",
    "AuthEvent",
    "SessionManager",
    "PropertyListResource",
    "PropertyResource",
    "FavoritesStore",
    "AppState",
    "UploadStore",
]
