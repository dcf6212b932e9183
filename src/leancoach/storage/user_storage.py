"""
User Storage

PostgreSQL storage for users. Emails are stored and compared lower-cased.
"""
import logging
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from .base import BaseStorage
from ..models.user import User

logger = logging.getLogger("leancoach.storage.user")

_FIELDS = (
    "id", "org_id", "name", "email", "password_hash", "is_owner", "is_active",
    "created_at", "updated_at", "last_seen_at",
)
_COLUMNS = ", ".join(_FIELDS)


class UserStorage(BaseStorage):
    """Storage for User entities"""

    async def create(self, user: User) -> User:
        user.email = user.email.lower()
        row = await self.fetchrow(
            f"""
            INSERT INTO users ({_COLUMNS})
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
            RETURNING {_COLUMNS}
            """,
            *(getattr(user, name) for name in _FIELDS)
        )
        return self._row_to_user(row)

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        row = await self.fetchrow(f"SELECT {_COLUMNS} FROM users WHERE id = $1", user_id)
        return self._row_to_user(row) if row else None

    async def get_by_email(self, email: str) -> Optional[User]:
        row = await self.fetchrow(f"SELECT {_COLUMNS} FROM users WHERE email = lower($1)", email)
        return self._row_to_user(row) if row else None

    async def list_by_org(self, org_id: UUID, active_only: bool = True) -> List[User]:
        """Members of an organization, owners first"""
        rows = await self.fetch(
            f"""
            SELECT {_COLUMNS} FROM users
            WHERE org_id = $1 AND (is_active OR NOT $2)
            ORDER BY is_owner DESC, name
            """,
            org_id, active_only
        )
        return [self._row_to_user(row) for row in rows]

    async def update(self, user: User) -> User:
        """Update profile, password hash and flags (not the organization)"""
        user.updated_at = datetime.utcnow()
        row = await self.fetchrow(
            f"""
            UPDATE users
            SET name = $2, email = lower($3), password_hash = $4, is_owner = $5,
                is_active = $6, updated_at = $7
            WHERE id = $1
            RETURNING {_COLUMNS}
            """,
            user.id, user.name, user.email, user.password_hash, user.is_owner,
            user.is_active, user.updated_at
        )
        return self._row_to_user(row)

    async def set_organization(self, user_id: UUID, org_id: Optional[UUID], is_owner: bool = False) -> bool:
        """Attach the user to an organization (or detach with None)"""
        result = await self.execute(
            "UPDATE users SET org_id = $2, is_owner = $3, updated_at = $4 WHERE id = $1",
            user_id, org_id, is_owner and org_id is not None, datetime.utcnow()
        )
        return result == "UPDATE 1"

    async def update_last_seen(self, user_id: UUID) -> None:
        await self.execute("UPDATE users SET last_seen_at = $2 WHERE id = $1", user_id, datetime.utcnow())

    async def delete(self, user_id: UUID) -> bool:
        return await self.soft_delete("users", user_id)

    async def exists_by_email(self, email: str, exclude_id: Optional[UUID] = None) -> bool:
        return await self.fetchval(
            """
            SELECT EXISTS(
                SELECT 1 FROM users
                WHERE email = lower($1) AND ($2::uuid IS NULL OR id <> $2)
            )
            """,
            email, exclude_id
        )

    def _row_to_user(self, row) -> User:
        return User(**{name: row[name] for name in _FIELDS})
