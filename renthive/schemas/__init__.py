"""
Pydantic schemas for request/response validation.
"""

from renthive.schemas.auth import (
    SignInRequest,
    SignUpRequest,
    PasswordResetRequest,
    PasswordUpdateRequest,
    UserResponse,
    SessionResponse,
    MessageResponse,
)
from renthive.schemas.property import (
    SortOption,
    PropertyCreate,
    PropertyUpdate,
    PropertyStatusUpdate,
    PropertyResponse,
    PropertyFilters,
    SuccessResponse,
)
from renthive.schemas.favorite import FavoriteRequest, FavoriteToggleResponse
from renthive.schemas.upload import (
    UploadedFileResponse,
    UploadResponse,
    DeleteFileRequest,
    DeleteFileResponse,
)

__all__ = [
    "SignInRequest",
    "SignUpRequest",
    "PasswordResetRequest",
    "PasswordUpdateRequest",
    "UserResponse",
    "SessionResponse",
    "MessageResponse",
    "SortOption",
    "PropertyCreate",
    "PropertyUpdate",
    "PropertyStatusUpdate",
    "PropertyResponse",
    "PropertyFilters",
    "SuccessResponse",
    "FavoriteRequest",
    "FavoriteToggleResponse",
    "UploadedFileResponse",
    "UploadResponse",
    "DeleteFileRequest",
    "DeleteFileResponse",
]
