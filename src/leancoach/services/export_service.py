"""
Export Service

Produces printable HTML and PDF versions of A3 documents.
"""
import logging
from typing import Optional

from ..export.html import A3HtmlRenderer
from ..export.layout import prepare_regions
from ..export.pdf import PdfRenderer
from ..models.activity import ActivityAction
from ..models.a3_document import A3Document
from ..models.user import User
from ..storage.org_storage import OrgStorage
from ..storage.user_storage import UserStorage
from .activity_service import ActivityService

logger = logging.getLogger("leancoach.services.export")


class ExportService:
    """Service for A3 export"""

    def __init__(
        self,
        org_storage: OrgStorage,
        user_storage: UserStorage,
        activity_service: ActivityService,
        html_renderer: Optional[A3HtmlRenderer] = None,
        pdf_renderer: Optional[PdfRenderer] = None,
    ):
        self.org_storage = org_storage
        self.user_storage = user_storage
        self.activity = activity_service
        self.html_renderer = html_renderer or A3HtmlRenderer()
        self.pdf_renderer = pdf_renderer or PdfRenderer()

    async def render_html(self, document: A3Document) -> str:
        regions = prepare_regions(document)
        truncated = [r.section_type.value for r in regions if r.truncated]
        if truncated:
            logger.info(f"A3 {document.id}: truncated for print: {truncated}")

        org = await self.org_storage.get_by_id(document.org_id)
        author = await self.user_storage.get_by_id(document.author_id)
        return self.html_renderer.render(
            document,
            org_name=org.name if org else "",
            author_name=author.name if author else "",
            regions=regions,
        )

    async def export_html(self, document: A3Document, user: User) -> str:
        html = await self.render_html(document)
        await self.activity.record(document.id, user.id, ActivityAction.EXPORTED, {"format": "html"})
        return html

    async def export_pdf(self, document: A3Document, user: User) -> bytes:
        """
        Render the A3 to PDF.

        Raises:
            ExportError / ExportTimeoutError: From the PDF renderer
        """
        html = await self.render_html(document)
        pdf = await self.pdf_renderer.render(html)
        await self.activity.record(
            document.id, user.id, ActivityAction.EXPORTED, {"format": "pdf", "bytes": len(pdf)}
        )
        logger.info(f"Exported A3 {document.id} to PDF ({len(pdf)} bytes)")
        return pdf

    async def close(self):
        await self.pdf_renderer.close()
