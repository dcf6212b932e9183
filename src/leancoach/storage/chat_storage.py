"""
Chat Storage

PostgreSQL storage for AI coach chat messages.
"""
import logging
from typing import List
from uuid import UUID

from .base import BaseStorage
from ..models.a3_document import SectionType
from ..models.chat import ChatMessage, ChatRole

logger = logging.getLogger("leancoach.storage.chat")


class ChatStorage(BaseStorage):
    """Storage for ChatMessage entities"""

    async def create(self, message: ChatMessage) -> ChatMessage:
        query = """
            INSERT INTO chat_messages (id, a3_id, user_id, role, content, section_type, model, created_at)
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
            RETURNING *
        """
        row = await self.fetchrow(
            query,
            message.id, message.a3_id, message.user_id, message.role.value,
            message.content,
            message.section_type.value if message.section_type else None,
            message.model, message.created_at
        )
        return self._row_to_message(row)

    async def list_by_a3(self, a3_id: UUID, user_id: UUID, limit: int = 50) -> List[ChatMessage]:
        """Most recent messages of the user's thread, in chronological order"""
        query = """
            SELECT * FROM (
                SELECT * FROM chat_messages
                WHERE a3_id = $1 AND user_id = $2
                ORDER BY created_at DESC
                LIMIT $3
            ) recent
            ORDER BY created_at
        """
        rows = await self.fetch(query, a3_id, user_id, limit)
        return [self._row_to_message(row) for row in rows]

    async def clear(self, a3_id: UUID, user_id: UUID) -> int:
        """Delete the user's thread for a document, returns removed count"""
        result = await self.execute(
            "DELETE FROM chat_messages WHERE a3_id = $1 AND user_id = $2", a3_id, user_id
        )
        return int(result.split()[-1]) if result else 0

    def _row_to_message(self, row) -> ChatMessage:
        return ChatMessage(
            id=row["id"],
            a3_id=row["a3_id"],
            user_id=row["user_id"],
            role=ChatRole(row["role"]),
            content=row["content"],
            section_type=SectionType(row["section_type"]) if row["section_type"] else None,
            model=row["model"],
            created_at=row["created_at"]
        )
