"""
FastAPI dependency injection utilities for authentication and services.
Provides reusable dependencies for route protection and user extraction.
"""

from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from renthive.config import settings
from renthive.database import get_db
from renthive.models.user import User
from renthive.services.auth import AuthService, ResetDelivery, log_reset_token
from renthive.services.favorite import FavoriteService
from renthive.services.property import PropertyService
from renthive.services.upload import UploadService
from renthive.utils.exceptions import APIException, BackendError, UnauthorizedError
from renthive.utils.file_utils import FileStorage


# HTTP Bearer token security scheme; the session cookie is checked first
security = HTTPBearer(auto_error=False)


def get_session_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[str]:
    """
    Session token from the session cookie or, failing that, the
    ``Authorization: Bearer`` header.
    """
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        return token
    if credentials:
        return credentials.credentials
    return None


def get_reset_delivery() -> ResetDelivery:
    """Hook that delivers password reset tokens to users."""
    return log_reset_token


def get_file_storage() -> FileStorage:
    return FileStorage()


async def get_auth_service(
    db: AsyncSession = Depends(get_db),
    reset_delivery: ResetDelivery = Depends(get_reset_delivery)
) -> AuthService:
    """
    Get authentication service instance.

    Args:
        db: Database session
        reset_delivery: Password reset token delivery hook

    Returns:
        AuthService instance
    """
    return AuthService(db, reset_delivery=reset_delivery)


async def get_property_service(db: AsyncSession = Depends(get_db)) -> PropertyService:
    """Get property service instance."""
    return PropertyService(db)


async def get_favorite_service(db: AsyncSession = Depends(get_db)) -> FavoriteService:
    return FavoriteService(db)


async def get_upload_service(
    db: AsyncSession = Depends(get_db),
    storage: FileStorage = Depends(get_file_storage)
) -> UploadService:
    return UploadService(db, storage=storage)


async def get_current_user(
    token: Optional[str] = Depends(get_session_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> User:
    """
    Get current authenticated user from the session token.

    Raises:
        UnauthorizedError: If no token is provided, the token is invalid or
            the account is gone or inactive
    """
    if not token:
        raise UnauthorizedError()

    return await auth_service.get_current_user(token)


async def get_optional_current_user(
    token: Optional[str] = Depends(get_session_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[User]:
    """
    Get current user if a valid session is present, otherwise return None.
    Backend failures still propagate.
    """
    if not token:
        return None

    try:
        return await auth_service.get_current_user(token)
    except BackendError:
        raise
    except APIException:
        return None
