"""
Organization Model

Represents an organization (tenant) in the multi-tenant Lean Coach system.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4


@dataclass
class Organization:
    """
    Organization entity - represents a company/tenant.

    Departments, users and A3 documents are scoped to an organization.
    The organization may store its own LLM API key (encrypted at rest),
    which the coach uses instead of the shared default model.
    """
    id: UUID = field(default_factory=uuid4)
    name: str = ""                                   # "Acme Manufacturing"
    slug: str = ""                                   # "acme-manufacturing"
    description: Optional[str] = None
    is_active: bool = True
    openai_api_key_encrypted: Optional[str] = None   # hex(iv):hex(ciphertext)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def has_api_key(self) -> bool:
        return bool(self.openai_api_key_encrypted)

    def to_dict(self) -> dict:
        """Convert to dictionary for API response"""
        return {
            "id": str(self.id),
            "name": self.name,
            "slug": self.slug,
            "description": self.description,
            "is_active": self.is_active,
            "has_api_key": self.has_api_key,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
