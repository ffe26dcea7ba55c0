"""
API route handlers for RentHive.
"""

from .auth import router as auth_router
from .properties import router as properties_router
from .favorites import router as favorites_router
from .upload import router as upload_router
from .pages import router as pages_router

__all__ = [
    "auth_router",
    "properties_router",
    "favorites_router",
    "upload_router",
    "pages_router",
]
