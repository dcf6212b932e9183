"""
Coach Chat Routes

Per-document AI coach conversation for the current user.
"""
import logging
from typing import Optional, List
from uuid import UUID

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel

from ..models.user import User
from ..services.ai_service import AIResponseError
from ..services.engine_service import EngineService
from ..services.permissions import can_view_a3
from .auth import get_current_user_record
from .deps import get_engine, load_document, parse_section_type

logger = logging.getLogger("leancoach.routes.chat")
router = APIRouter(prefix="/a3/{a3_id}/chat", tags=["chat"])


class SendMessageRequest(BaseModel):
    content: str
    section_type: Optional[str] = None


@router.get("")
@router.get("/")
async def get_history(
    a3_id: UUID,
    limit: int = 100,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
) -> List[dict]:
    """Chat history, oldest first"""
    document = await load_document(engine, a3_id, user, can_view_a3)
    messages = await engine.ai_service.get_history(document, user, min(max(limit, 1), 500))
    return [m.to_dict() for m in messages]


@router.post("")
@router.post("/")
async def send_message(
    a3_id: UUID,
    request: SendMessageRequest,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
) -> dict:
    """Send a message to the coach and return its reply"""
    section_type = parse_section_type(request.section_type)
    document = await load_document(engine, a3_id, user, can_view_a3)
    organization = await engine.org_service.get_organization(document.org_id)

    try:
        reply = await engine.ai_service.send_message(
            document, user, request.content,
            organization=organization,
            section_type=section_type
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AIResponseError as e:
        logger.error(f"Coach failed on A3 {a3_id}: {e}")
        raise HTTPException(status_code=500, detail="AI coach failed to respond")
    return reply.to_dict()


@router.post("/review/{section_type}")
async def review_section(
    a3_id: UUID,
    section_type: str,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
) -> dict:
    """Ask the coach to review one section"""
    section = parse_section_type(section_type)
    document = await load_document(engine, a3_id, user, can_view_a3)
    organization = await engine.org_service.get_organization(document.org_id)

    try:
        reply = await engine.ai_service.review_section(document, user, section, organization)
    except AIResponseError as e:
        logger.error(f"Coach review failed on A3 {a3_id}: {e}")
        raise HTTPException(status_code=500, detail="AI coach failed to respond")
    return reply.to_dict()


@router.delete("")
@router.delete("/")
async def clear_history(
    a3_id: UUID,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
):
    document = await load_document(engine, a3_id, user, can_view_a3)
    removed = await engine.ai_service.clear_history(document, user)
    return {"success": True, "deleted": removed}
