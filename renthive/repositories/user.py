"""
User repository for authentication operations.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from renthive.repositories.base import BaseRepository
from renthive.models.user import User
from typing import Optional, Dict, Any
import uuid
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """
    Repository for user accounts.
    Handles email normalization and password hashing on create.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def create_user(self, user_data: Dict[str, Any]) -> User:
        """
        Create a new user with email validation and password hashing.

        Args:
            user_data: Must include email and password; full_name is optional

        Returns:
            Created user instance

        Raises:
            ValueError: If validation fails or the email is taken
        """
        try:
            email = User.validate_email_format(user_data["email"])

            existing_user = await self.get_by_email(email)
            if existing_user:
                raise ValueError(f"User with email {email} already exists")

            password = user_data.pop("password")
            hashed_password = User.hash_password(password)

            create_data = {
                **user_data,
                "email": email,
                "hashed_password": hashed_password,
                "is_active": user_data.get("is_active", True)
            }

            created_user = await self.create(create_data)
            logger.info(f"Created user: {created_user.email} (ID: {created_user.id})")
            return created_user
        except ValueError as e:
            logger.warning(f"User validation failed: {e}")
            raise
        except Exception as e:
            logger.error(f"Failed to create user: {e}")
            raise

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address (case-insensitive)."""
        try:
            query = select(User).where(User.email == email.lower().strip())
            result = await self.db.execute(query)
            user = result.scalar_one_or_none()

            if user:
                logger.debug(f"Retrieved user by email: {email}")
            else:
                logger.debug(f"User with email {email} not found")

            return user
        except Exception as e:
            logger.error(f"Failed to get user by email {email}: {e}")
            raise

    async def update_password(self, user_id: uuid.UUID, new_password: str) -> Optional[User]:
        """
        Hash and store a new password.

        Raises:
            ValueError: If the password is too weak
        """
        hashed_password = User.hash_password(new_password)
        user = await self.update(user_id, {"hashed_password": hashed_password})
        if user:
            logger.info(f"Updated password for user {user_id}")
        return user
