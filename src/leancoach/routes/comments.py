"""
Comment Routes

Endpoints for comments on A3 documents.
"""
import logging
from typing import Optional, List
from uuid import UUID

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel

from ..models.comment import Comment
from ..models.user import User
from ..services.engine_service import EngineService
from ..services.permissions import can_view_a3, can_comment_a3
from .auth import get_current_user_record
from .deps import get_engine, load_document, parse_section_type

logger = logging.getLogger("leancoach.routes.comments")
router = APIRouter(prefix="/a3/{a3_id}/comments", tags=["comments"])


class CreateCommentRequest(BaseModel):
    content: str
    section_type: Optional[str] = None


class UpdateCommentRequest(BaseModel):
    content: str


class ResolveCommentRequest(BaseModel):
    resolved: bool = True


async def _get_comment(engine: EngineService, comment_id: UUID, a3_id: UUID) -> Comment:
    comment = await engine.comment_service.get_comment(comment_id, a3_id)
    if not comment or comment.is_deleted:
        raise HTTPException(status_code=404, detail="Comment not found")
    return comment


@router.get("")
@router.get("/")
async def list_comments(
    a3_id: UUID,
    include_resolved: bool = True,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
) -> List[dict]:
    document = await load_document(engine, a3_id, user, can_view_a3)
    comments = await engine.comment_service.list_comments(document.id, include_resolved)
    return [c.to_dict() for c in comments]


@router.post("")
@router.post("/")
async def add_comment(
    a3_id: UUID,
    request: CreateCommentRequest,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
) -> dict:
    """Comment on the document or on one of its sections"""
    section_type = parse_section_type(request.section_type)
    document = await load_document(engine, a3_id, user, can_comment_a3, "comment on")
    try:
        comment = await engine.comment_service.add_comment(document, user, request.content, section_type)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return comment.to_dict()


@router.patch("/{comment_id}")
async def edit_comment(
    a3_id: UUID,
    comment_id: UUID,
    request: UpdateCommentRequest,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
) -> dict:
    document = await load_document(engine, a3_id, user, can_view_a3)
    comment = await _get_comment(engine, comment_id, document.id)
    try:
        updated = await engine.comment_service.edit_comment(comment, user, request.content)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not updated:
        raise HTTPException(status_code=404, detail="Comment not found")
    return updated.to_dict()


@router.post("/{comment_id}/resolve")
async def resolve_comment(
    a3_id: UUID,
    comment_id: UUID,
    request: Optional[ResolveCommentRequest] = None,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
) -> dict:
    """Mark a comment resolved (or reopen it with resolved=false)"""
    document = await load_document(engine, a3_id, user, can_comment_a3, "resolve comments on")
    comment = await _get_comment(engine, comment_id, document.id)
    resolved = request.resolved if request else True
    updated = await engine.comment_service.resolve_comment(comment, resolved)
    if not updated:
        raise HTTPException(status_code=404, detail="Comment not found")
    return updated.to_dict()


@router.delete("/{comment_id}")
async def delete_comment(
    a3_id: UUID,
    comment_id: UUID,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
):
    document = await load_document(engine, a3_id, user, can_view_a3)
    comment = await _get_comment(engine, comment_id, document.id)
    try:
        await engine.comment_service.delete_comment(comment, user)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    return {"success": True, "message": "Comment deleted"}
