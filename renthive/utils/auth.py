"""
Authentication utilities for session token management.
Provides JWT generation and validation for session and password reset tokens.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from renthive.config import settings
import hashlib
import hmac
import uuid


ACCESS_TOKEN = "access"
RESET_TOKEN = "reset"


class TokenPayload:
    """JWT token payload structure."""

    def __init__(self, user_id: str, email: str, token_type: str, exp: datetime, fingerprint: Optional[str] = None):
        self.user_id = user_id
        self.email = email
        self.token_type = token_type
        self.exp = exp
        self.fingerprint = fingerprint

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenPayload":
        """Create TokenPayload from dictionary."""
        return cls(
            user_id=data["sub"],
            email=data["email"],
            token_type=data["type"],
            exp=datetime.fromtimestamp(data["exp"], tz=timezone.utc),
            fingerprint=data.get("pwd"),
        )


def password_fingerprint(hashed_password: str) -> str:
    """Keyed tag of the current password hash; changes whenever the password does."""
    digest = hmac.new(
        settings.jwt_secret_key.encode("utf-8"),
        hashed_password.encode("utf-8"),
        hashlib.sha256
    )
    return digest.hexdigest()[:32]


def _encode(claims: Dict[str, Any], expires_delta: timedelta) -> str:
    now = datetime.now(timezone.utc)
    to_encode = {
        **claims,
        "exp": now + expires_delta,
        "iat": now,
    }
    return jwt.encode(
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm
    )


def create_access_token(
    user_id: uuid.UUID,
    email: str,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create the session token carried in the session cookie.

    Args:
        user_id: User's UUID
        email: User's email address
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    return _encode(
        {"sub": str(user_id), "email": email, "type": ACCESS_TOKEN},
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes),
    )


def create_reset_token(
    user_id: uuid.UUID,
    email: str,
    hashed_password: str,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a short-lived password reset token.

    The token is bound to the current password hash, so it stops working
    once the password has been changed.
    """
    return _encode(
        {
            "sub": str(user_id),
            "email": email,
            "type": RESET_TOKEN,
            "pwd": password_fingerprint(hashed_password),
        },
        expires_delta or timedelta(minutes=settings.reset_token_expire_minutes),
    )


def verify_token(token: str, token_type: str = ACCESS_TOKEN) -> TokenPayload:
    """
    Verify and decode JWT token.

    Args:
        token: JWT token string
        token_type: Expected token type ("access" or "reset")

    Returns:
        Decoded TokenPayload

    Raises:
        JWTError: If token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm]
        )

        if payload.get("type") != token_type:
            raise JWTError(f"Invalid token type. Expected {token_type}")

        if not payload.get("sub") or not payload.get("email"):
            raise JWTError("Invalid token payload")

        return TokenPayload.from_dict(payload)

    except JWTError:
        raise
    except Exception as e:
        raise JWTError(f"Token validation error: {str(e)}")


def decode_session_token(token: Optional[str]) -> Optional[TokenPayload]:
    """Decode a session token, returning None instead of raising."""
    if not token:
        return None
    try:
        return verify_token(token, ACCESS_TOKEN)
    except JWTError:
        return None
