"""
Users Service

Business logic for user management.
"""
import logging
import re
import bcrypt
from typing import Optional, List
from uuid import UUID

from ..config import Config
from ..models.user import User
from ..storage.user_storage import UserStorage

logger = logging.getLogger("leancoach.services.users")

MIN_PASSWORD_LENGTH = 8


class UsersService:
    """Service for user management"""

    def __init__(self, user_storage: UserStorage):
        self.user_storage = user_storage

    async def register(self, name: str, email: str, password: str) -> User:
        """Self-service registration: the user starts without an organization"""
        return await self._create(org_id=None, name=name, email=email, password=password)

    async def create_user(
        self,
        org_id: UUID,
        name: str,
        email: str,
        password: str,
        is_owner: bool = False
    ) -> User:
        """
        Create a user inside an organization.

        Args:
            org_id: Organization ID
            name: Display name
            email: Email address
            password: Plain text password (will be hashed)
            is_owner: Grant organization ownership

        Raises:
            ValueError: If email is invalid or already exists
        """
        return await self._create(org_id, name, email, password, is_owner)

    async def _create(
        self,
        org_id: Optional[UUID],
        name: str,
        email: str,
        password: str,
        is_owner: bool = False
    ) -> User:
        name = (name or "").strip()
        email = (email or "").lower().strip()

        if not name:
            raise ValueError("Name is required")

        if not self._is_valid_email(email):
            raise ValueError(f"Invalid email format: {email}")

        self._validate_password(password)

        if await self.user_storage.exists_by_email(email):
            raise ValueError(f"User with email '{email}' already exists")

        user = User(
            org_id=org_id,
            name=name,
            email=email,
            password_hash=self._hash_password(password),
            is_owner=is_owner
        )

        created_user = await self.user_storage.create(user)
        logger.info(f"Created user: {created_user.name} <{created_user.email}>")
        return created_user

    async def get_user(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        return await self.user_storage.get_by_id(user_id)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Get user by email"""
        return await self.user_storage.get_by_email(email.lower())

    async def list_users(self, org_id: UUID, active_only: bool = True) -> List[User]:
        """List users in organization"""
        return await self.user_storage.list_by_org(org_id, active_only)

    async def update_user(
        self,
        user_id: UUID,
        name: Optional[str] = None,
        email: Optional[str] = None,
        is_owner: Optional[bool] = None
    ) -> Optional[User]:
        """Update user profile"""
        user = await self.user_storage.get_by_id(user_id)
        if not user:
            return None

        if name:
            user.name = name.strip()

        if email:
            email = email.lower().strip()
            if not self._is_valid_email(email):
                raise ValueError(f"Invalid email format: {email}")
            if await self.user_storage.exists_by_email(email, exclude_id=user_id):
                raise ValueError(f"Email '{email}' already in use")
            user.email = email

        if is_owner is not None:
            user.is_owner = is_owner

        updated = await self.user_storage.update(user)
        logger.info(f"Updated user: {updated.name}")
        return updated

    async def change_password(self, user_id: UUID, current_password: str, new_password: str) -> bool:
        """
        Change user password.

        Raises:
            ValueError: If current password is wrong or new password too weak
        """
        user = await self.user_storage.get_by_id(user_id)
        if not user:
            return False

        if not user.password_hash or not self._check_password(current_password, user.password_hash):
            raise ValueError("Current password is incorrect")

        self._validate_password(new_password)
        user.password_hash = self._hash_password(new_password)
        await self.user_storage.update(user)
        logger.info(f"Changed password for user: {user.email}")
        return True

    async def verify_password(self, user_id: UUID, password: str) -> bool:
        """Verify user password"""
        user = await self.user_storage.get_by_id(user_id)
        if not user or not user.password_hash:
            return False
        return self._check_password(password, user.password_hash)

    async def deactivate_user(self, user_id: UUID) -> bool:
        """Deactivate (soft delete) user"""
        result = await self.user_storage.delete(user_id)
        if result:
            logger.info(f"Deactivated user: {user_id}")
        return result

    async def update_last_seen(self, user_id: UUID) -> None:
        """Update user's last seen timestamp"""
        await self.user_storage.update_last_seen(user_id)

    def _validate_password(self, password: str) -> None:
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    def _hash_password(self, password: str) -> str:
        """Hash password using bcrypt"""
        salt = bcrypt.gensalt(rounds=Config.PASSWORD_SALT_ROUNDS)
        return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')

    def _check_password(self, password: str, password_hash: str) -> bool:
        """Verify password against hash"""
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))

    def _is_valid_email(self, email: str) -> bool:
        """Validate email format"""
        pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
        return bool(re.match(pattern, email))
