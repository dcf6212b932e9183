"""
A3 Storage

PostgreSQL storage for A3 documents and their sections.
"""
import logging
from datetime import datetime
from typing import Optional, List
from uuid import UUID, uuid4

from .base import BaseStorage
from ..models.a3_document import A3Document, A3Section, A3Status, SectionType, SECTION_ORDER

logger = logging.getLogger("leancoach.storage.a3")


class A3Storage(BaseStorage):
    """Storage for A3Document entities (sections are stored alongside)"""

    async def create(self, document: A3Document) -> A3Document:
        """Create document together with one section per SectionType"""
        doc_query = """
            INSERT INTO a3_documents (
                id, org_id, department_id, author_id, title, description,
                status, is_active, created_at, updated_at
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
            RETURNING *
        """
        section_query = """
            INSERT INTO a3_sections (id, a3_id, section_type, content, created_at, updated_at)
            VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING *
        """
        existing = {s.section_type: s for s in document.sections}

        async with self.transaction() as conn:
            row = await conn.fetchrow(
                doc_query,
                document.id, document.org_id, document.department_id, document.author_id,
                document.title, document.description, document.status.value,
                document.is_active, document.created_at, document.updated_at
            )
            created = self._row_to_document(row)

            for section_type in SECTION_ORDER:
                section = existing.get(section_type) or A3Section(
                    id=uuid4(), a3_id=document.id, section_type=section_type
                )
                section_row = await conn.fetchrow(
                    section_query,
                    section.id, created.id, section_type.value, section.content,
                    section.created_at, section.updated_at
                )
                created.sections.append(self._row_to_section(section_row))

        return created

    async def get_by_id(self, a3_id: UUID, include_sections: bool = True) -> Optional[A3Document]:
        """Get document by ID (inactive documents included)"""
        row = await self.fetchrow("SELECT * FROM a3_documents WHERE id = $1", a3_id)
        if not row:
            return None
        document = self._row_to_document(row)
        if include_sections:
            document.sections = await self.list_sections(a3_id)
        return document

    async def list_by_org(self, org_id: UUID, status: Optional[A3Status] = None) -> List[A3Document]:
        """List active documents in organization"""
        if status:
            query = """
                SELECT * FROM a3_documents
                WHERE org_id = $1 AND is_active = true AND status = $2
                ORDER BY updated_at DESC
            """
            rows = await self.fetch(query, org_id, status.value)
        else:
            query = """
                SELECT * FROM a3_documents
                WHERE org_id = $1 AND is_active = true
                ORDER BY updated_at DESC
            """
            rows = await self.fetch(query, org_id)
        return [self._row_to_document(row) for row in rows]

    async def list_visible(
        self,
        org_id: UUID,
        user_id: UUID,
        status: Optional[A3Status] = None
    ) -> List[A3Document]:
        """List documents the user authored or that belong to one of their departments"""
        query = """
            SELECT DISTINCT d.* FROM a3_documents d
            LEFT JOIN user_departments ud
              ON ud.department_id = d.department_id AND ud.user_id = $2
            WHERE d.org_id = $1
              AND d.is_active = true
              AND (d.author_id = $2 OR ud.user_id IS NOT NULL)
              AND ($3::text IS NULL OR d.status = $3)
            ORDER BY d.updated_at DESC
        """
        rows = await self.fetch(query, org_id, user_id, status.value if status else None)
        return [self._row_to_document(row) for row in rows]

    async def update(self, document: A3Document) -> A3Document:
        """Update document metadata"""
        document.updated_at = datetime.utcnow()
        query = """
            UPDATE a3_documents
            SET title = $2, description = $3, department_id = $4, updated_at = $5
            WHERE id = $1
            RETURNING *
        """
        row = await self.fetchrow(
            query,
            document.id, document.title, document.description,
            document.department_id, document.updated_at
        )
        updated = self._row_to_document(row)
        updated.sections = document.sections
        return updated

    async def update_status(self, a3_id: UUID, status: A3Status) -> bool:
        """Set document status"""
        query = "UPDATE a3_documents SET status = $2, updated_at = $3 WHERE id = $1"
        result = await self.execute(query, a3_id, status.value, datetime.utcnow())
        return "UPDATE 1" in result

    async def delete(self, a3_id: UUID) -> bool:
        return await self.soft_delete("a3_documents", a3_id)

    # Sections

    async def list_sections(self, a3_id: UUID) -> List[A3Section]:
        rows = await self.fetch("SELECT * FROM a3_sections WHERE a3_id = $1", a3_id)
        sections = [self._row_to_section(row) for row in rows]
        return sorted(sections, key=lambda s: SECTION_ORDER.index(s.section_type))

    async def get_section(self, a3_id: UUID, section_type: SectionType) -> Optional[A3Section]:
        query = "SELECT * FROM a3_sections WHERE a3_id = $1 AND section_type = $2"
        row = await self.fetchrow(query, a3_id, section_type.value)
        return self._row_to_section(row) if row else None

    async def update_section(self, a3_id: UUID, section_type: SectionType, content: str) -> Optional[A3Section]:
        """Replace section content and touch the parent document"""
        now = datetime.utcnow()
        async with self.transaction() as conn:
            row = await conn.fetchrow(
                """
                UPDATE a3_sections SET content = $3, updated_at = $4
                WHERE a3_id = $1 AND section_type = $2
                RETURNING *
                """,
                a3_id, section_type.value, content, now
            )
            if not row:
                return None
            await conn.execute("UPDATE a3_documents SET updated_at = $2 WHERE id = $1", a3_id, now)
        return self._row_to_section(row)

    def _row_to_document(self, row) -> A3Document:
        return A3Document(
            id=row["id"],
            org_id=row["org_id"],
            department_id=row["department_id"],
            author_id=row["author_id"],
            title=row["title"],
            description=row["description"],
            status=A3Status(row["status"]),
            is_active=row["is_active"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            sections=[]
        )

    def _row_to_section(self, row) -> A3Section:
        return A3Section(
            id=row["id"],
            a3_id=row["a3_id"],
            section_type=SectionType(row["section_type"]),
            content=row["content"] or "",
            created_at=row["created_at"],
            updated_at=row["updated_at"]
        )
