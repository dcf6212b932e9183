"""
A3 Routes

Endpoints for A3 documents, sections, status and activity.
"""
import logging
from typing import Optional, List
from uuid import UUID

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel

from ..models.a3_document import A3Status
from ..models.user import User
from ..services.engine_service import EngineService
from ..services.permissions import can_view_a3, can_edit_a3, can_delete_a3
from .auth import get_current_user_record, require_user_organization
from .deps import get_engine, load_document, parse_section_type

logger = logging.getLogger("leancoach.routes.a3")
router = APIRouter(prefix="/a3", tags=["a3"])


class CreateA3Request(BaseModel):
    title: str
    department_id: UUID
    description: Optional[str] = None


class UpdateA3Request(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    department_id: Optional[UUID] = None


class UpdateSectionRequest(BaseModel):
    content: str


class ChangeStatusRequest(BaseModel):
    status: A3Status


@router.get("")
@router.get("/")
async def list_a3_documents(
    status: Optional[A3Status] = None,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
) -> List[dict]:
    """List A3 documents visible to the caller"""
    require_user_organization(user)
    documents = await engine.a3_service.list_documents(user, status)
    return [d.to_dict(include_sections=False) for d in documents]


@router.post("")
@router.post("/")
async def create_a3_document(
    request: CreateA3Request,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
) -> dict:
    """Create an A3 in one of the organization's departments"""
    require_user_organization(user)
    try:
        document = await engine.a3_service.create_document(
            author=user,
            department_id=request.department_id,
            title=request.title,
            description=request.description
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return document.to_dict()


@router.get("/{a3_id}")
async def get_a3_document(
    a3_id: UUID,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
) -> dict:
    document = await load_document(engine, a3_id, user, can_view_a3)
    return document.to_dict()


@router.patch("/{a3_id}")
async def update_a3_document(
    a3_id: UUID,
    request: UpdateA3Request,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
) -> dict:
    document = await load_document(engine, a3_id, user, can_edit_a3, "edit")
    try:
        updated = await engine.a3_service.update_document(
            document, user,
            title=request.title,
            description=request.description,
            department_id=request.department_id
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return updated.to_dict()


@router.delete("/{a3_id}")
async def delete_a3_document(
    a3_id: UUID,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
):
    document = await load_document(
        engine, a3_id, user, lambda u, d, _m: can_delete_a3(u, d), "delete"
    )
    await engine.a3_service.delete_document(document, user)
    return {"success": True, "message": "A3 document deleted"}


@router.put("/{a3_id}/sections/{section_type}")
async def update_section(
    a3_id: UUID,
    section_type: str,
    request: UpdateSectionRequest,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
) -> dict:
    """Replace the content of one section"""
    section = parse_section_type(section_type)
    document = await load_document(engine, a3_id, user, can_edit_a3, "edit")
    try:
        updated = await engine.a3_service.update_section(document, user, section, request.content)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return updated.to_dict()


@router.post("/{a3_id}/status")
async def change_status(
    a3_id: UUID,
    request: ChangeStatusRequest,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
) -> dict:
    document = await load_document(engine, a3_id, user, can_edit_a3, "edit")
    try:
        updated = await engine.a3_service.change_status(document, user, request.status)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return updated.to_dict(include_sections=False)


@router.get("/{a3_id}/activity")
async def list_activity(
    a3_id: UUID,
    limit: int = 100,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
) -> List[dict]:
    document = await load_document(engine, a3_id, user, can_view_a3)
    entries = await engine.activity_service.list_for_document(document.id, min(max(limit, 1), 500))
    return [e.to_dict() for e in entries]
