"""
Department Routes

Endpoints for departments and department membership.
"""
import logging
from typing import Optional, List
from uuid import UUID

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel

from ..models.department import Department, DepartmentRole
from ..models.user import User
from ..services.engine_service import EngineService
from ..services.permissions import can_manage_department
from .auth import (
    get_current_user_record,
    require_owner_with_organization,
    require_user_organization,
)
from .deps import get_engine

logger = logging.getLogger("leancoach.routes.departments")
router = APIRouter(prefix="/departments", tags=["departments"])


class CreateDepartmentRequest(BaseModel):
    name: str
    description: Optional[str] = None


class UpdateDepartmentRequest(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


class SetMemberRequest(BaseModel):
    role: DepartmentRole = DepartmentRole.MEMBER


class DepartmentResponse(BaseModel):
    id: str
    org_id: str
    name: str
    description: Optional[str]
    is_active: bool
    created_at: str
    updated_at: str


class MemberResponse(BaseModel):
    user_id: str
    department_id: str
    role: str
    created_at: str


async def _get_department(engine: EngineService, department_id: UUID, org_id: UUID) -> Department:
    department = await engine.department_service.get_department(department_id, org_id)
    if not department:
        raise HTTPException(status_code=404, detail="Department not found")
    return department


async def _require_manager(engine: EngineService, department: Department, user: User) -> None:
    membership = await engine.department_service.get_membership(department.id, user.id)
    if not can_manage_department(user, department.org_id, membership):
        raise HTTPException(status_code=403, detail="Department manager access required")


@router.get("", response_model=List[DepartmentResponse])
@router.get("/", response_model=List[DepartmentResponse])
async def list_departments(
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
):
    """List departments of the current organization"""
    org_id = require_user_organization(user)
    departments = await engine.department_service.list_departments(org_id)
    return [DepartmentResponse(**d.to_dict()) for d in departments]


@router.post("", response_model=DepartmentResponse)
@router.post("/", response_model=DepartmentResponse)
async def create_department(
    request: CreateDepartmentRequest,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
):
    """Create a department (owner only)"""
    org_id = require_owner_with_organization(user)
    try:
        department = await engine.department_service.create_department(
            org_id, request.name, request.description
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return DepartmentResponse(**department.to_dict())


@router.get("/{department_id}", response_model=DepartmentResponse)
async def get_department(
    department_id: UUID,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
):
    org_id = require_user_organization(user)
    department = await _get_department(engine, department_id, org_id)
    return DepartmentResponse(**department.to_dict())


@router.patch("/{department_id}", response_model=DepartmentResponse)
async def update_department(
    department_id: UUID,
    request: UpdateDepartmentRequest,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
):
    """Rename / describe a department (owner only)"""
    org_id = require_owner_with_organization(user)
    try:
        department = await engine.department_service.update_department(
            department_id, org_id, name=request.name, description=request.description
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not department:
        raise HTTPException(status_code=404, detail="Department not found")
    return DepartmentResponse(**department.to_dict())


@router.delete("/{department_id}")
async def deactivate_department(
    department_id: UUID,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
):
    """Deactivate a department (owner only)"""
    org_id = require_owner_with_organization(user)
    if not await engine.department_service.deactivate_department(department_id, org_id):
        raise HTTPException(status_code=404, detail="Department not found")
    return {"success": True, "message": "Department deactivated"}


@router.get("/{department_id}/members", response_model=List[MemberResponse])
async def list_members(
    department_id: UUID,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
):
    org_id = require_user_organization(user)
    department = await _get_department(engine, department_id, org_id)
    members = await engine.department_service.list_members(department.id)
    return [MemberResponse(**m.to_dict()) for m in members]


@router.put("/{department_id}/members/{member_id}", response_model=MemberResponse)
async def set_member(
    department_id: UUID,
    member_id: UUID,
    request: SetMemberRequest,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
):
    """Add a member or change their role (owner or department manager)"""
    org_id = require_user_organization(user)
    department = await _get_department(engine, department_id, org_id)
    await _require_manager(engine, department, user)

    try:
        membership = await engine.department_service.set_member(department, member_id, request.role)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return MemberResponse(**membership.to_dict())


@router.delete("/{department_id}/members/{member_id}")
async def remove_member(
    department_id: UUID,
    member_id: UUID,
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
):
    """Remove a member (owner or department manager)"""
    org_id = require_user_organization(user)
    department = await _get_department(engine, department_id, org_id)
    await _require_manager(engine, department, user)

    if not await engine.department_service.remove_member(department.id, member_id):
        raise HTTPException(status_code=404, detail="Membership not found")
    return {"success": True}
