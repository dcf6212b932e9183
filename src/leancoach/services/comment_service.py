"""
Comment Service

Business logic for review comments on A3 documents.
"""
import logging
from typing import Optional, List
from uuid import UUID

from ..models.activity import ActivityAction
from ..models.a3_document import A3Document, SectionType
from ..models.comment import Comment
from ..models.user import User
from ..storage.comment_storage import CommentStorage
from .activity_service import ActivityService

logger = logging.getLogger("leancoach.services.comment")

MAX_COMMENT_LENGTH = 5000


class CommentService:
    """Service for comment operations"""

    def __init__(self, storage: CommentStorage, activity_service: ActivityService):
        self.storage = storage
        self.activity = activity_service

    async def add_comment(
        self,
        document: A3Document,
        author: User,
        content: str,
        section_type: Optional[SectionType] = None
    ) -> Comment:
        content = self._validate_content(content)
        comment = Comment(
            a3_id=document.id,
            author_id=author.id,
            section_type=section_type,
            content=content,
        )
        created = await self.storage.create(comment)
        await self.activity.record(
            document.id, author.id, ActivityAction.COMMENTED,
            {
                "comment_id": str(created.id),
                "section_type": section_type.value if section_type else None,
            }
        )
        logger.info(f"Comment {created.id} added to A3 {document.id}")
        return created

    async def get_comment(self, comment_id: UUID, a3_id: UUID) -> Optional[Comment]:
        comment = await self.storage.get_by_id(comment_id)
        if not comment or comment.a3_id != a3_id:
            return None
        return comment

    async def list_comments(self, a3_id: UUID, include_resolved: bool = True) -> List[Comment]:
        return await self.storage.list_by_a3(a3_id, include_resolved)

    async def edit_comment(self, comment: Comment, user: User, content: str) -> Optional[Comment]:
        """
        Edit comment text.

        Raises:
            PermissionError: If user is not the comment author
        """
        if comment.author_id != user.id:
            raise PermissionError("Only the author can edit a comment")
        return await self.storage.update(comment.id, self._validate_content(content))

    async def resolve_comment(self, comment: Comment, resolved: bool = True) -> Optional[Comment]:
        return await self.storage.resolve(comment.id, resolved)

    async def delete_comment(self, comment: Comment, user: User) -> bool:
        """
        Delete comment (author or organization owner).

        Raises:
            PermissionError: If user may not delete it
        """
        if comment.author_id != user.id and not user.is_owner:
            raise PermissionError("Only the author or an owner can delete a comment")
        result = await self.storage.delete(comment.id)
        if result:
            logger.info(f"Deleted comment {comment.id}")
        return result

    def _validate_content(self, content: str) -> str:
        content = (content or "").strip()
        if not content:
            raise ValueError("Comment cannot be empty")
        if len(content) > MAX_COMMENT_LENGTH:
            raise ValueError(f"Comment exceeds {MAX_COMMENT_LENGTH} characters")
        return content
