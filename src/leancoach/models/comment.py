"""
Comment Model

Review comments left on an A3 document, optionally pinned to a section.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from .a3_document import SectionType


@dataclass
class Comment:
    """Comment entity"""
    id: UUID = field(default_factory=uuid4)
    a3_id: UUID = field(default_factory=uuid4)
    author_id: UUID = field(default_factory=uuid4)
    section_type: Optional[SectionType] = None       # None = whole document
    content: str = ""
    is_resolved: bool = False
    is_deleted: bool = False
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "a3_id": str(self.a3_id),
            "author_id": str(self.author_id),
            "section_type": self.section_type.value if self.section_type else None,
            "content": self.content,
            "is_resolved": self.is_resolved,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
