"""
Comment Storage

PostgreSQL storage for A3 comments.
"""
import logging
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from .base import BaseStorage
from ..models.a3_document import SectionType
from ..models.comment import Comment

logger = logging.getLogger("leancoach.storage.comment")


class CommentStorage(BaseStorage):
    """Storage for Comment entities"""

    async def create(self, comment: Comment) -> Comment:
        query = """
            INSERT INTO comments (
                id, a3_id, author_id, section_type, content,
                is_resolved, is_deleted, created_at, updated_at
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
            RETURNING *
        """
        row = await self.fetchrow(
            query,
            comment.id, comment.a3_id, comment.author_id,
            comment.section_type.value if comment.section_type else None,
            comment.content, comment.is_resolved, comment.is_deleted,
            comment.created_at, comment.updated_at
        )
        return self._row_to_comment(row)

    async def get_by_id(self, comment_id: UUID) -> Optional[Comment]:
        row = await self.fetchrow(
            "SELECT * FROM comments WHERE id = $1 AND is_deleted = false", comment_id
        )
        return self._row_to_comment(row) if row else None

    async def list_by_a3(self, a3_id: UUID, include_resolved: bool = True) -> List[Comment]:
        """List comments on a document, oldest first"""
        if include_resolved:
            query = """
                SELECT * FROM comments
                WHERE a3_id = $1 AND is_deleted = false
                ORDER BY created_at
            """
        else:
            query = """
                SELECT * FROM comments
                WHERE a3_id = $1 AND is_deleted = false AND is_resolved = false
                ORDER BY created_at
            """
        rows = await self.fetch(query, a3_id)
        return [self._row_to_comment(row) for row in rows]

    async def update(self, comment_id: UUID, content: str) -> Optional[Comment]:
        query = """
            UPDATE comments SET content = $2, updated_at = $3
            WHERE id = $1 AND is_deleted = false
            RETURNING *
        """
        row = await self.fetchrow(query, comment_id, content, datetime.utcnow())
        return self._row_to_comment(row) if row else None

    async def resolve(self, comment_id: UUID, resolved: bool = True) -> Optional[Comment]:
        query = """
            UPDATE comments SET is_resolved = $2, updated_at = $3
            WHERE id = $1 AND is_deleted = false
            RETURNING *
        """
        row = await self.fetchrow(query, comment_id, resolved, datetime.utcnow())
        return self._row_to_comment(row) if row else None

    async def delete(self, comment_id: UUID) -> bool:
        """Soft delete comment"""
        query = "UPDATE comments SET is_deleted = true, updated_at = $2 WHERE id = $1 AND is_deleted = false"
        result = await self.execute(query, comment_id, datetime.utcnow())
        return "UPDATE 1" in result

    def _row_to_comment(self, row) -> Comment:
        return Comment(
            id=row["id"],
            a3_id=row["a3_id"],
            author_id=row["author_id"],
            section_type=SectionType(row["section_type"]) if row["section_type"] else None,
            content=row["content"],
            is_resolved=row["is_resolved"],
            is_deleted=row["is_deleted"],
            created_at=row["created_at"],
            updated_at=row["updated_at"]
        )
