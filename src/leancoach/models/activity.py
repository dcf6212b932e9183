"""
Activity Log Model

Append-only audit trail of changes made to an A3 document.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4


class ActivityAction(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    SECTION_UPDATED = "section_updated"
    STATUS_CHANGED = "status_changed"
    COMMENTED = "commented"
    DELETED = "deleted"
    EXPORTED = "exported"


@dataclass
class ActivityLog:
    """Single activity entry"""
    id: UUID = field(default_factory=uuid4)
    a3_id: UUID = field(default_factory=uuid4)
    user_id: Optional[UUID] = None
    action: ActivityAction = ActivityAction.UPDATED
    details: dict = field(default_factory=dict)
    created_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "a3_id": str(self.a3_id),
            "user_id": str(self.user_id) if self.user_id else None,
            "action": self.action.value,
            "details": self.details,
            "created_at": self.created_at.isoformat(),
        }
