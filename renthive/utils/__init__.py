"""
Utility modules for RentHive.
"""

from .auth import (
    create_access_token,
    create_reset_token,
    verify_token,
    decode_session_token,
    TokenPayload
)

from .exceptions import (
    APIException,
    ValidationError,
    NotFoundError,
    UnauthorizedError,
    ForbiddenError,
    BadRequestError,
    BackendError,
)

# Dependencies are imported directly where needed to avoid circular imports

__all__ = [
    "create_access_token",
    "create_reset_token",
    "verify_token",
    "decode_session_token",
    "TokenPayload",
    "APIException",
    "ValidationError",
    "NotFoundError",
    "UnauthorizedError",
    "ForbiddenError",
    "BadRequestError",
    "BackendError",
]
