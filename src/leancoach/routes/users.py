"""
Users Routes

Endpoints for user management inside the caller's organization.
"""
import logging
from typing import Optional, List
from uuid import UUID

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, EmailStr

from ..models.user import User
from ..services.engine_service import EngineService
from .auth import (
    get_current_user_record,
    require_owner_with_organization,
    require_user_organization,
)
from .deps import get_engine

logger = logging.getLogger("leancoach.routes.users")
router = APIRouter(prefix="/users", tags=["users"])


# ============================================
# Request/Response Models
# ============================================

class CreateUserRequest(BaseModel):
    """Create user request (owner only)"""
    name: str
    email: EmailStr
    password: str
    is_owner: bool = False


class UpdateUserRequest(BaseModel):
    """Update user request"""
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    is_owner: Optional[bool] = None


class ChangePasswordRequest(BaseModel):
    """Change password request"""
    current_password: str
    new_password: str


class UserResponse(BaseModel):
    """User response"""
    id: str
    org_id: Optional[str]
    name: str
    email: str
    is_owner: bool
    is_active: bool
    created_at: str
    updated_at: str
    last_seen_at: Optional[str]


async def _get_org_user(engine: EngineService, user_id: UUID, org_id: UUID) -> User:
    target = await engine.users_service.get_user(user_id)
    if not target or target.org_id != org_id:
        raise HTTPException(status_code=404, detail="User not found")
    return target


# ============================================
# Routes
# ============================================

@router.get("", response_model=List[UserResponse])
@router.get("/", response_model=List[UserResponse])
async def list_users(
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
):
    """List users in current organization"""
    org_id = require_user_organization(user)
    users = await engine.users_service.list_users(org_id)
    return [UserResponse(**u.to_dict()) for u in users]


@router.post("", response_model=UserResponse)
@router.post("/", response_model=UserResponse)
async def create_user(
    request: CreateUserRequest,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
):
    """Create a user in the current organization (owner only)"""
    org_id = require_owner_with_organization(user)

    try:
        created = await engine.users_service.create_user(
            org_id=org_id,
            name=request.name,
            email=request.email,
            password=request.password,
            is_owner=request.is_owner
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return UserResponse(**created.to_dict())


@router.post("/me/password")
async def change_my_password(
    request: ChangePasswordRequest,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
):
    """Change the caller's password"""
    try:
        await engine.users_service.change_password(
            user.id, request.current_password, request.new_password
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True}


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
):
    """Get a user of the current organization"""
    org_id = require_user_organization(user)
    target = await _get_org_user(engine, user_id, org_id)
    return UserResponse(**target.to_dict())


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    request: UpdateUserRequest,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
):
    """Update a user (self or owner; only owners change ownership)"""
    org_id = require_user_organization(user)
    await _get_org_user(engine, user_id, org_id)

    if user_id != user.id and not user.is_owner:
        raise HTTPException(status_code=403, detail="Owner access required")
    if request.is_owner is not None and not user.is_owner:
        raise HTTPException(status_code=403, detail="Owner access required")
    if request.is_owner is False and user_id == user.id:
        raise HTTPException(status_code=400, detail="Owners cannot remove their own ownership")

    try:
        updated = await engine.users_service.update_user(
            user_id,
            name=request.name,
            email=request.email,
            is_owner=request.is_owner
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not updated:
        raise HTTPException(status_code=404, detail="User not found")
    return UserResponse(**updated.to_dict())


@router.delete("/{user_id}")
async def deactivate_user(
    user_id: UUID,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
):
    """Deactivate a user (owner only, not self)"""
    org_id = require_owner_with_organization(user)
    if user_id == user.id:
        raise HTTPException(status_code=400, detail="Cannot deactivate yourself")

    await _get_org_user(engine, user_id, org_id)
    await engine.users_service.deactivate_user(user_id)
    return {"success": True, "message": "User deactivated"}
