"""
Authentication service: the identity provider behind the session endpoints.
Handles sign-up, sign-in, session lookup and the password reset flow.
"""

from typing import Awaitable, Callable, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from renthive.repositories.user import UserRepository
from renthive.models.user import User, MIN_PASSWORD_LENGTH
from renthive.utils.auth import (
    RESET_TOKEN,
    create_access_token,
    create_reset_token,
    password_fingerprint,
    verify_token,
)
from renthive.utils.exceptions import (
    APIException,
    BackendError,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
    UnauthorizedError,
    UserAlreadyExistsError,
    ValidationError,
    WeakPasswordError,
)
from jose import ExpiredSignatureError, JWTError
import hmac
import uuid
import logging

logger = logging.getLogger(__name__)

# Called with the user and a fresh reset token; sends the token to the user.
ResetDelivery = Callable[[User, str], Awaitable[None]]


async def log_reset_token(user: User, token: str) -> None:
    """Default reset delivery: no mail transport is configured, so log it."""
    logger.debug(f"Password reset token for {user.email}: {token}")


class AuthService:
    """
    Authentication service for managing accounts and sessions.
    Session tokens are JWTs; see ``renthive.utils.auth``.
    """

    def __init__(self, db_session: AsyncSession, reset_delivery: Optional[ResetDelivery] = None):
        self.db = db_session
        self.user_repo = UserRepository(db_session)
        self.reset_delivery = reset_delivery or log_reset_token

    async def sign_up(self, email: str, password: str, full_name: Optional[str] = None) -> Tuple[User, str]:
        """
        Register a new account and open a session for it.

        Returns:
            Tuple of (user, session token)

        Raises:
            WeakPasswordError: If the password is too short
            UserAlreadyExistsError: If the email is already registered
        """
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise WeakPasswordError(MIN_PASSWORD_LENGTH)

        try:
            existing = await self.user_repo.get_by_email(email)
            if existing:
                raise UserAlreadyExistsError()

            user = await self.user_repo.create_user({
                "email": email,
                "password": password,
                "full_name": full_name,
            })
            logger.info(f"User signed up: {user.email}")
            return user, self.create_session_token(user)
        except APIException:
            raise
        except ValueError as e:
            raise ValidationError(str(e))
        except Exception as e:
            raise BackendError("sign up", e)

    async def sign_in(self, email: str, password: str) -> Tuple[User, str]:
        """
        Authenticate with email and password.

        Raises:
            InvalidCredentialsError: Unknown email, wrong password or inactive account
        """
        try:
            user = await self.user_repo.get_by_email(email)
        except Exception as e:
            raise BackendError("sign in", e)

        if not user or not user.verify_password(password) or not user.is_active:
            logger.warning(f"Failed sign-in attempt for email: {email}")
            raise InvalidCredentialsError()

        logger.info(f"User signed in: {user.email}")
        return user, self.create_session_token(user)

    def create_session_token(self, user: User) -> str:
        return create_access_token(user_id=user.id, email=user.email)

    async def get_user_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        try:
            return await self.user_repo.get_by_id(user_id)
        except Exception as e:
            raise BackendError("load user", e)

    async def get_current_user(self, token: str) -> User:
        """
        Resolve the user behind a session token.

        Raises:
            UnauthorizedError: If the token is invalid, expired or the user is gone or inactive
        """
        try:
            payload = verify_token(token)
            user_id = uuid.UUID(payload.user_id)
        except (JWTError, ValueError):
            raise UnauthorizedError()

        user = await self.get_user_by_id(user_id)
        if not user or not user.is_active:
            raise UnauthorizedError()
        return user

    async def request_password_reset(self, email: str) -> None:
        """
        Issue a reset token when the account exists.
        The caller always reports success so accounts cannot be enumerated.
        """
        try:
            user = await self.user_repo.get_by_email(email)
        except Exception as e:
            raise BackendError("request password reset", e)

        if not user or not user.is_active:
            logger.info(f"Password reset requested for unknown or inactive email: {email}")
            return

        token = create_reset_token(user.id, user.email, user.hashed_password)
        await self.reset_delivery(user, token)
        logger.info(f"Password reset token issued for {user.email}")

    async def update_password(
        self,
        new_password: str,
        current_user: Optional[User] = None,
        reset_token: Optional[str] = None
    ) -> User:
        """
        Change a password, authorized by a session or by a reset token.

        Raises:
            UnauthorizedError: Neither a session nor a usable reset token
            TokenExpiredError: The reset token has expired
            WeakPasswordError: The new password is too short
        """
        user = current_user
        if user is None:
            user = await self._user_from_reset_token(reset_token)

        if not new_password or len(new_password) < MIN_PASSWORD_LENGTH:
            raise WeakPasswordError(MIN_PASSWORD_LENGTH)

        try:
            updated = await self.user_repo.update_password(user.id, new_password)
        except ValueError as e:
            raise ValidationError(str(e))
        except Exception as e:
            raise BackendError("update password", e)

        logger.info(f"Password updated for {updated.email}")
        return updated

    async def _user_from_reset_token(self, reset_token: Optional[str]) -> User:
        if not reset_token:
            raise UnauthorizedError()

        try:
            payload = verify_token(reset_token, token_type=RESET_TOKEN)
            user_id = uuid.UUID(payload.user_id)
        except ExpiredSignatureError:
            raise TokenExpiredError()
        except (JWTError, ValueError):
            raise InvalidTokenError()

        user = await self.get_user_by_id(user_id)
        if not user or not user.is_active:
            raise InvalidTokenError()
        if not hmac.compare_digest(payload.fingerprint or "", password_fingerprint(user.hashed_password)):
            raise InvalidTokenError("Reset token has already been used")
        return user
