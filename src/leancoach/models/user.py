"""
User Model

Represents a user of the Lean Coach system.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4


@dataclass
class User:
    """
    User entity.

    A newly registered user has no organization until they create one
    (becoming its owner) or are added by an owner. Owners administer the
    whole organization; everything else is governed by department roles.
    """
    id: UUID = field(default_factory=uuid4)
    org_id: Optional[UUID] = None                    # Organization, None until joined
    name: str = ""                                   # Display name
    email: str = ""                                  # Login, stored lower-cased
    password_hash: Optional[str] = None
    is_owner: bool = False                           # Organization owner
    is_active: bool = True
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
    last_seen_at: Optional[datetime] = None

    def to_dict(self, include_sensitive: bool = False) -> dict:
        """Convert to dictionary for API response"""
        result = {
            "id": str(self.id),
            "org_id": str(self.org_id) if self.org_id else None,
            "name": self.name,
            "email": self.email,
            "is_owner": self.is_owner,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "last_seen_at": self.last_seen_at.isoformat() if self.last_seen_at else None,
        }
        if include_sensitive:
            result["password_hash"] = self.password_hash
        return result
