"""
Chat Message Model

Messages exchanged with the AI coach in the side panel of an A3 document.
Each user has a private thread per document.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from .a3_document import SectionType


class ChatRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass
class ChatMessage:
    """Chat message entity"""
    id: UUID = field(default_factory=uuid4)
    a3_id: UUID = field(default_factory=uuid4)
    user_id: UUID = field(default_factory=uuid4)     # Thread owner
    role: ChatRole = ChatRole.USER
    content: str = ""
    section_type: Optional[SectionType] = None       # Section in focus, if any
    model: Optional[str] = None                      # Model that produced an assistant reply
    created_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "a3_id": str(self.a3_id),
            "user_id": str(self.user_id),
            "role": self.role.value,
            "content": self.content,
            "section_type": self.section_type.value if self.section_type else None,
            "model": self.model,
            "created_at": self.created_at.isoformat(),
        }
