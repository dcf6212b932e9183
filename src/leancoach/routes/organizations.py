"""
Organizations Routes

Endpoints for the caller's organization and its LLM API key.
"""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel

from ..models.user import User
from ..services.engine_service import EngineService
from .auth import (
    get_current_user_record,
    require_owner_with_organization,
    require_user_organization,
    create_token,
)
from .deps import get_engine

logger = logging.getLogger("leancoach.routes.organizations")
router = APIRouter(prefix="/organizations", tags=["organizations"])


# ============================================
# Request/Response Models
# ============================================

class CreateOrgRequest(BaseModel):
    """Create organization request"""
    name: str
    slug: Optional[str] = None
    description: Optional[str] = None


class UpdateOrgRequest(BaseModel):
    """Update organization request"""
    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None


class OrgResponse(BaseModel):
    """Organization response"""
    id: str
    name: str
    slug: str
    description: Optional[str]
    is_active: bool
    has_api_key: bool
    created_at: str
    updated_at: str


class CreateOrgResponse(BaseModel):
    organization: OrgResponse
    token: str  # Fresh token carrying the new org_id


class SetApiKeyRequest(BaseModel):
    api_key: str


class ApiKeyResponse(BaseModel):
    has_api_key: bool
    masked_key: Optional[str] = None


# ============================================
# Routes
# ============================================

@router.post("", response_model=CreateOrgResponse)
@router.post("/", response_model=CreateOrgResponse)
async def create_organization(
    request: CreateOrgRequest,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
):
    """Create an organization; the caller becomes its owner"""
    try:
        org = await engine.org_service.create_organization(
            creator=user,
            name=request.name,
            slug=request.slug,
            description=request.description
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return CreateOrgResponse(
        organization=OrgResponse(**org.to_dict()),
        token=create_token(user.id, org.id)
    )


@router.get("/current", response_model=OrgResponse)
async def get_current_organization(
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
):
    """Get the caller's organization"""
    org_id = require_user_organization(user)
    org = await engine.org_service.get_organization(org_id)
    if not org or not org.is_active:
        raise HTTPException(status_code=404, detail="Organization not found")
    return OrgResponse(**org.to_dict())


@router.patch("/current", response_model=OrgResponse)
async def update_current_organization(
    request: UpdateOrgRequest,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
):
    """Update organization (owner only)"""
    org_id = require_owner_with_organization(user)

    try:
        org = await engine.org_service.update_organization(
            org_id=org_id,
            name=request.name,
            slug=request.slug,
            description=request.description
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not org:
        raise HTTPException(status_code=404, detail="Organization not found")
    return OrgResponse(**org.to_dict())


@router.delete("/current")
async def deactivate_current_organization(
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
):
    """Deactivate organization (owner only)"""
    org_id = require_owner_with_organization(user)

    if not await engine.org_service.deactivate_organization(org_id):
        raise HTTPException(status_code=404, detail="Organization not found")

    return {"success": True, "message": "Organization deactivated"}


@router.get("/current/api-key", response_model=ApiKeyResponse)
async def get_api_key(
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
):
    """Show whether a key is stored, masked (owner only)"""
    org_id = require_owner_with_organization(user)
    org = await engine.org_service.get_organization(org_id)
    if not org:
        raise HTTPException(status_code=404, detail="Organization not found")

    masked = engine.org_service.get_masked_api_key(org)
    return ApiKeyResponse(has_api_key=masked is not None, masked_key=masked)


@router.put("/current/api-key", response_model=ApiKeyResponse)
async def set_api_key(
    request: SetApiKeyRequest,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
):
    """Store the organization's LLM API key (owner only)"""
    org_id = require_owner_with_organization(user)

    try:
        masked = await engine.org_service.set_api_key(org_id, request.api_key)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ApiKeyResponse(has_api_key=True, masked_key=masked)


@router.delete("/current/api-key", response_model=ApiKeyResponse)
async def remove_api_key(
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
):
    """Remove the organization's LLM API key (owner only)"""
    org_id = require_owner_with_organization(user)
    await engine.org_service.remove_api_key(org_id)
    return ApiKeyResponse(has_api_key=False)
