"""
Export Routes

Printable HTML and PDF downloads of an A3.
"""
import logging
import re
from uuid import UUID

from fastapi import APIRouter, HTTPException, Depends
from fastapi.responses import HTMLResponse, Response

from ..export.pdf import ExportError, ExportTimeoutError
from ..models.user import User
from ..services.engine_service import EngineService
from ..services.permissions import can_view_a3
from .auth import get_current_user_record
from .deps import get_engine, load_document

logger = logging.getLogger("leancoach.routes.export")
router = APIRouter(prefix="/a3/{a3_id}/export", tags=["export"])


def _filename(title: str) -> str:
    name = re.sub(r'[^A-Za-z0-9_-]+', '-', title).strip('-').lower()
    return f"a3-{name or 'document'}.pdf"


@router.get("/html", response_class=HTMLResponse)
async def export_html(
    a3_id: UUID,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
):
    document = await load_document(engine, a3_id, user, can_view_a3, "export")
    html = await engine.export_service.export_html(document, user)
    return HTMLResponse(content=html)


@router.get("/pdf")
async def export_pdf(
    a3_id: UUID,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
):
    document = await load_document(engine, a3_id, user, can_view_a3, "export")
    try:
        pdf = await engine.export_service.export_pdf(document, user)
    except ExportTimeoutError:
        logger.error(f"PDF export timed out for A3 {a3_id}")
        raise HTTPException(status_code=500, detail="PDF export timed out")
    except ExportError as e:
        logger.error(f"PDF export failed for A3 {a3_id}: {e}")
        raise HTTPException(status_code=500, detail="PDF export failed")

    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{_filename(document.title)}"'}
    )
