"""
Organization Storage

PostgreSQL storage for organizations (tenants).
"""
import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from .base import BaseStorage
from ..models.organization import Organization

logger = logging.getLogger("leancoach.storage.org")

_COLUMNS = "id, name, slug, description, is_active, openai_api_key_encrypted, created_at, updated_at"


class OrgStorage(BaseStorage):
    """Storage for Organization entities"""

    async def create(self, org: Organization) -> Organization:
        row = await self.fetchrow(
            f"""
            INSERT INTO organizations ({_COLUMNS})
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
            RETURNING {_COLUMNS}
            """,
            org.id, org.name, org.slug, org.description, org.is_active,
            org.openai_api_key_encrypted, org.created_at, org.updated_at
        )
        return self._row_to_org(row)

    async def get_by_id(self, org_id: UUID) -> Optional[Organization]:
        return await self._get_one("id", org_id)

    async def get_by_slug(self, slug: str) -> Optional[Organization]:
        return await self._get_one("slug", slug)

    async def update(self, org: Organization) -> Organization:
        """Update name, slug and description (the API key has its own setter)"""
        org.updated_at = datetime.utcnow()
        row = await self.fetchrow(
            f"""
            UPDATE organizations
            SET name = $2, slug = $3, description = $4, is_active = $5, updated_at = $6
            WHERE id = $1
            RETURNING {_COLUMNS}
            """,
            org.id, org.name, org.slug, org.description, org.is_active, org.updated_at
        )
        return self._row_to_org(row)

    async def set_api_key(self, org_id: UUID, encrypted_key: Optional[str]) -> bool:
        """Store the encrypted key, or clear it with None"""
        result = await self.execute(
            "UPDATE organizations SET openai_api_key_encrypted = $2, updated_at = $3 WHERE id = $1",
            org_id, encrypted_key, datetime.utcnow()
        )
        return result == "UPDATE 1"

    async def delete(self, org_id: UUID) -> bool:
        return await self.soft_delete("organizations", org_id)

    async def exists_by_slug(self, slug: str, exclude_id: Optional[UUID] = None) -> bool:
        return await self.fetchval(
            """
            SELECT EXISTS(
                SELECT 1 FROM organizations
                WHERE slug = $1 AND ($2::uuid IS NULL OR id <> $2)
            )
            """,
            slug, exclude_id
        )

    async def _get_one(self, column: str, value) -> Optional[Organization]:
        row = await self.fetchrow(f"SELECT {_COLUMNS} FROM organizations WHERE {column} = $1", value)
        return self._row_to_org(row) if row else None

    def _row_to_org(self, row) -> Organization:
        return Organization(**{key: row[key] for key in _COLUMNS.split(", ")})
