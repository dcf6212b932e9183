"""
A3 Service

Business logic for A3 documents and their sections.
Every mutation is written to the activity log.
"""
import logging
from typing import Optional, List
from uuid import UUID

from ..models.activity import ActivityAction
from ..models.a3_document import A3Document, A3Section, A3Status, SectionType, can_transition
from ..models.user import User
from ..storage.a3_storage import A3Storage
from ..storage.department_storage import DepartmentStorage
from .activity_service import ActivityService

logger = logging.getLogger("leancoach.services.a3")

MAX_TITLE_LENGTH = 200
MAX_SECTION_LENGTH = 20000


class A3Service:
    """Service for A3 document operations"""

    def __init__(
        self,
        storage: A3Storage,
        department_storage: DepartmentStorage,
        activity_service: ActivityService
    ):
        self.storage = storage
        self.department_storage = department_storage
        self.activity = activity_service

    async def create_document(
        self,
        author: User,
        department_id: UUID,
        title: str,
        description: Optional[str] = None
    ) -> A3Document:
        """
        Create an A3 with all eight (empty) sections.

        Raises:
            ValueError: If title is invalid or department is not in the author's org
        """
        title = self._validate_title(title)
        await self._check_department(department_id, author.org_id)

        document = A3Document(
            org_id=author.org_id,
            department_id=department_id,
            author_id=author.id,
            title=title,
            description=description,
        )
        created = await self.storage.create(document)
        await self.activity.record(created.id, author.id, ActivityAction.CREATED, {"title": title})
        logger.info(f"Created A3 {created.id} '{title}' by {author.email}")
        return created

    async def get_document(self, a3_id: UUID, org_id: UUID) -> Optional[A3Document]:
        """Get active document with sections, scoped to organization"""
        document = await self.storage.get_by_id(a3_id)
        if not document or not document.is_active or document.org_id != org_id:
            return None
        return document

    async def list_documents(self, user: User, status: Optional[A3Status] = None) -> List[A3Document]:
        """Documents visible to the user (owners see the whole organization)"""
        if user.is_owner:
            return await self.storage.list_by_org(user.org_id, status)
        return await self.storage.list_visible(user.org_id, user.id, status)

    async def update_document(
        self,
        document: A3Document,
        user: User,
        title: Optional[str] = None,
        description: Optional[str] = None,
        department_id: Optional[UUID] = None
    ) -> A3Document:
        if document.status == A3Status.ARCHIVED:
            raise ValueError("Archived A3 documents cannot be edited")

        changes = {}

        if title is not None:
            document.title = self._validate_title(title)
            changes["title"] = document.title

        if description is not None:
            document.description = description
            changes["description"] = True

        if department_id is not None and department_id != document.department_id:
            await self._check_department(department_id, document.org_id)
            document.department_id = department_id
            changes["department_id"] = str(department_id)

        if not changes:
            return document

        updated = await self.storage.update(document)
        await self.activity.record(document.id, user.id, ActivityAction.UPDATED, changes)
        logger.info(f"Updated A3 {document.id}: {list(changes)}")
        return updated

    async def update_section(
        self,
        document: A3Document,
        user: User,
        section_type: SectionType,
        content: str
    ) -> A3Section:
        """
        Replace the content of one section.

        Raises:
            ValueError: If the document is archived or content too long
        """
        if document.status == A3Status.ARCHIVED:
            raise ValueError("Archived A3 documents cannot be edited")

        content = content or ""
        if len(content) > MAX_SECTION_LENGTH:
            raise ValueError(f"Section content exceeds {MAX_SECTION_LENGTH} characters")

        section = await self.storage.update_section(document.id, section_type, content)
        if not section:
            raise ValueError(f"Section '{section_type.value}' not found")

        await self.activity.record(
            document.id, user.id, ActivityAction.SECTION_UPDATED,
            {"section_type": section_type.value, "length": len(content)}
        )
        return section

    async def change_status(self, document: A3Document, user: User, status: A3Status) -> A3Document:
        """
        Move the document to a new status.

        Raises:
            ValueError: If the transition is not allowed
        """
        if document.status == status:
            return document

        if not can_transition(document.status, status):
            raise ValueError(
                f"Cannot change status from '{document.status.value}' to '{status.value}'"
            )

        previous = document.status
        await self.storage.update_status(document.id, status)
        document.status = status
        await self.activity.record(
            document.id, user.id, ActivityAction.STATUS_CHANGED,
            {"from": previous.value, "to": status.value}
        )
        logger.info(f"A3 {document.id} status {previous.value} -> {status.value}")
        return document

    async def delete_document(self, document: A3Document, user: User) -> bool:
        result = await self.storage.delete(document.id)
        if result:
            await self.activity.record(document.id, user.id, ActivityAction.DELETED)
            logger.info(f"Deleted A3 {document.id}")
        return result

    async def _check_department(self, department_id: UUID, org_id: UUID) -> None:
        department = await self.department_storage.get_by_id(department_id)
        if not department or not department.is_active or department.org_id != org_id:
            raise ValueError("Department not found")

    def _validate_title(self, title: str) -> str:
        title = (title or "").strip()
        if not title:
            raise ValueError("Title is required")
        if len(title) > MAX_TITLE_LENGTH:
            raise ValueError(f"Title exceeds {MAX_TITLE_LENGTH} characters")
        return title
