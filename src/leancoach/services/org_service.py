"""
Organization Service

Business logic for organization management.
"""
import logging
import re
from typing import Optional
from uuid import UUID

from ..encryption import encrypt_api_key, decrypt_api_key, mask_api_key
from ..models.organization import Organization
from ..models.user import User
from ..storage.org_storage import OrgStorage
from ..storage.user_storage import UserStorage

logger = logging.getLogger("leancoach.services.org")


class OrgService:
    """Service for organization management"""

    def __init__(self, storage: OrgStorage, user_storage: Optional[UserStorage] = None):
        self.storage = storage
        self.user_storage = user_storage

    async def create_organization(
        self,
        creator: User,
        name: str,
        slug: Optional[str] = None,
        description: Optional[str] = None
    ) -> Organization:
        """
        Create a new organization owned by its creator.

        Args:
            creator: User creating the organization (becomes owner)
            name: Organization display name
            slug: URL-safe identifier (auto-generated if not provided)
            description: Optional description

        Returns:
            Created organization

        Raises:
            ValueError: If the creator already has an organization or slug is taken
        """
        if creator.org_id:
            raise ValueError("User already belongs to an organization")

        name = (name or "").strip()
        if not name:
            raise ValueError("Organization name is required")

        if not slug:
            slug = self._generate_slug(name)

        if not self._is_valid_slug(slug):
            raise ValueError(f"Invalid slug format: {slug}")

        if await self.storage.exists_by_slug(slug):
            raise ValueError(f"Organization with slug '{slug}' already exists")

        org = Organization(
            name=name,
            slug=slug,
            description=description
        )

        created = await self.storage.create(org)
        await self.user_storage.set_organization(creator.id, created.id, is_owner=True)
        creator.org_id = created.id
        creator.is_owner = True

        logger.info(f"Created organization: {created.name} ({created.slug}), owner {creator.email}")
        return created

    async def get_organization(self, org_id: UUID) -> Optional[Organization]:
        """Get organization by ID"""
        return await self.storage.get_by_id(org_id)

    async def get_organization_by_slug(self, slug: str) -> Optional[Organization]:
        return await self.storage.get_by_slug(slug)

    async def update_organization(
        self,
        org_id: UUID,
        name: Optional[str] = None,
        slug: Optional[str] = None,
        description: Optional[str] = None
    ) -> Optional[Organization]:
        """
        Update organization.

        Returns:
            Updated organization or None if not found
        """
        org = await self.storage.get_by_id(org_id)
        if not org:
            return None

        if name:
            org.name = name.strip()

        if slug:
            if not self._is_valid_slug(slug):
                raise ValueError(f"Invalid slug format: {slug}")
            if await self.storage.exists_by_slug(slug, exclude_id=org_id):
                raise ValueError(f"Organization with slug '{slug}' already exists")
            org.slug = slug

        if description is not None:
            org.description = description

        updated = await self.storage.update(org)
        logger.info(f"Updated organization: {updated.name}")
        return updated

    async def deactivate_organization(self, org_id: UUID) -> bool:
        """Deactivate (soft delete) organization"""
        result = await self.storage.delete(org_id)
        if result:
            logger.info(f"Deactivated organization: {org_id}")
        return result

    # API key management

    async def set_api_key(self, org_id: UUID, api_key: str) -> str:
        """
        Encrypt and store the organization's LLM API key.

        Returns:
            Masked key for display

        Raises:
            ValueError: If key is empty or organization missing
            RuntimeError: If encryption key is not configured
        """
        api_key = (api_key or "").strip()
        encrypted = encrypt_api_key(api_key)
        if not await self.storage.set_api_key(org_id, encrypted):
            raise ValueError("Organization not found")
        logger.info(f"Stored API key for organization {org_id}")
        return mask_api_key(api_key)

    async def remove_api_key(self, org_id: UUID) -> bool:
        result = await self.storage.set_api_key(org_id, None)
        if result:
            logger.info(f"Removed API key for organization {org_id}")
        return result

    def get_masked_api_key(self, org: Organization) -> Optional[str]:
        """Masked form of the stored key, None when no key is set"""
        if not org.openai_api_key_encrypted:
            return None
        return mask_api_key(decrypt_api_key(org.openai_api_key_encrypted))

    def get_api_key(self, org: Organization) -> Optional[str]:
        """Decrypted key, None when no key is set"""
        if not org.openai_api_key_encrypted:
            return None
        return decrypt_api_key(org.openai_api_key_encrypted)

    def _generate_slug(self, name: str) -> str:
        """Generate URL-safe slug from name"""
        slug = name.lower().strip()
        slug = re.sub(r'[^a-z0-9-]', '-', slug)
        slug = re.sub(r'-+', '-', slug)
        slug = slug.strip('-')
        return slug or 'org'

    def _is_valid_slug(self, slug: str) -> bool:
        """Check if slug is valid"""
        return bool(re.match(r'^[a-z0-9][a-z0-9-]*[a-z0-9]$', slug) or
                    re.match(r'^[a-z0-9]$', slug))
