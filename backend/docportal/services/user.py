"""User service for managing admin accounts."""

import logging
from typing import Optional

from sqlalchemy import select

from ..config import AdminConfig
from ..errors import ValidationError
from ..models.user import User
from ..utils.security import hash_password
from .base import StoreService

logger = logging.getLogger(__name__)


class UserService(StoreService):
    """Service for managing users."""

    async def get_all_users(self) -> list[User]:
        """Get all users, newest first."""
        result = await self._execute(select(User).order_by(User.created_at.desc(), User.id.desc()))
        return list(result.scalars().all())

    async def get_user_by_id(self, user_id: int) -> Optional[User]:
        """Get a user by ID."""
        result = await self._execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_user_by_username(self, username: str) -> Optional[User]:
        """Get a user by username."""
        result = await self._execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Get a user by email."""
        result = await self._execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def create_user(self, username: str, password: str, email: str) -> User:
        """Create a new user with a bcrypt-hashed password."""
        username = (username or "").strip()
        email = (email or "").strip().lower()
        if not username:
            raise ValidationError("Username is required")
        if not email:
            raise ValidationError("Email is required")
        if not password:
            raise ValidationError("Password is required")

        if await self.get_user_by_username(username):
            raise ValidationError("User already exists")
        if await self.get_user_by_email(email):
            raise ValidationError("Email is already in use")

        user = User(
            username=username,
            email=email,
            password_hash=hash_password(password),
        )
        self.db.add(user)
        await self._flush("create user")
        logger.info(f"Created user '{username}'")
        return user

    async def update_user(
        self,
        user_id: int,
        username: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
    ) -> Optional[User]:
        """Update a user; the password is only changed when one is given."""
        user = await self.get_user_by_id(user_id)
        if user is None:
            return None

        if username is not None and username.strip() != user.username:
            username = username.strip()
            if not username:
                raise ValidationError("Username is required")
            if await self.get_user_by_username(username):
                raise ValidationError("User already exists")
            user.username = username

        if email is not None and email.strip().lower() != user.email:
            email = email.strip().lower()
            if not email:
                raise ValidationError("Email is required")
            if await self.get_user_by_email(email):
                raise ValidationError("Email is already in use")
            user.email = email

        if password:
            user.password_hash = hash_password(password)

        await self._flush("update user")
        return user

    async def delete_user(self, user_id: int, acting_username: Optional[str] = None) -> bool:
        """Delete a user. Users cannot delete their own account."""
        user = await self.get_user_by_id(user_id)
        if user is None:
            return False

        if acting_username is not None and user.username == acting_username:
            raise ValidationError("You cannot delete your own user")

        await self.db.delete(user)
        await self._flush("delete user")
        logger.info(f"Deleted user '{user.username}'")
        return True

    async def ensure_default_admin(self, admin: AdminConfig) -> bool:
        """Create the configured admin account if it does not exist yet."""
        if await self.get_user_by_username(admin.username):
            return False

        await self.create_user(admin.username, admin.password, admin.email)
        logger.warning(
            f"Default admin user '{admin.username}' created, change its password"
        )
        return True
