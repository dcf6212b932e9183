"""
Route Dependencies

Shared helpers for loading documents with permission checks.
"""
from typing import Callable, Optional
from uuid import UUID

from fastapi import HTTPException

from ..models.a3_document import A3Document, SectionType
from ..models.department import DepartmentMembership
from ..models.user import User
from ..services.engine_service import EngineService, get_engine_service


def get_engine() -> EngineService:
    return get_engine_service()


def parse_section_type(value: Optional[str]) -> Optional[SectionType]:
    """Parse a section type, 400 on unknown values"""
    if value is None:
        return None
    try:
        return SectionType(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown section type: {value}")


async def load_document(
    engine: EngineService,
    a3_id: UUID,
    user: User,
    check: Callable[[User, A3Document, Optional[DepartmentMembership]], bool],
    action: str = "view",
) -> A3Document:
    """
    Load an A3 from the user's organization and apply a permission check.

    Raises:
        HTTPException(400): User has no organization
        HTTPException(404): Document missing or in another organization
        HTTPException(403): Permission check failed
    """
    if not user.org_id:
        raise HTTPException(status_code=400, detail="User must belong to an organization")

    document = await engine.a3_service.get_document(a3_id, user.org_id)
    if not document:
        raise HTTPException(status_code=404, detail="A3 document not found")

    membership = await engine.department_service.get_membership(document.department_id, user.id)
    if not check(user, document, membership):
        raise HTTPException(status_code=403, detail=f"Not allowed to {action} this A3 document")

    return document
