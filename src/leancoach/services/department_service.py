"""
Department Service

Business logic for departments and their members.
"""
import logging
from typing import Optional, List
from uuid import UUID

from ..models.department import Department, DepartmentMembership, DepartmentRole
from ..storage.department_storage import DepartmentStorage
from ..storage.user_storage import UserStorage

logger = logging.getLogger("leancoach.services.department")


class DepartmentService:
    """Service for department management"""

    def __init__(self, storage: DepartmentStorage, user_storage: UserStorage):
        self.storage = storage
        self.user_storage = user_storage

    async def create_department(
        self,
        org_id: UUID,
        name: str,
        description: Optional[str] = None
    ) -> Department:
        """
        Create a department.

        Raises:
            ValueError: If name is empty or already used in the organization
        """
        name = (name or "").strip()
        if not name:
            raise ValueError("Department name is required")

        if await self.storage.exists_by_name(org_id, name):
            raise ValueError(f"Department '{name}' already exists")

        department = Department(org_id=org_id, name=name, description=description)
        created = await self.storage.create(department)
        logger.info(f"Created department: {created.name} in org {org_id}")
        return created

    async def get_department(self, department_id: UUID, org_id: UUID) -> Optional[Department]:
        """Get active department, scoped to organization"""
        department = await self.storage.get_by_id(department_id)
        if not department or department.org_id != org_id or not department.is_active:
            return None
        return department

    async def list_departments(self, org_id: UUID) -> List[Department]:
        return await self.storage.list_by_org(org_id)

    async def update_department(
        self,
        department_id: UUID,
        org_id: UUID,
        name: Optional[str] = None,
        description: Optional[str] = None
    ) -> Optional[Department]:
        department = await self.get_department(department_id, org_id)
        if not department:
            return None

        if name is not None:
            name = name.strip()
            if not name:
                raise ValueError("Department name is required")
            if await self.storage.exists_by_name(org_id, name, exclude_id=department_id):
                raise ValueError(f"Department '{name}' already exists")
            department.name = name

        if description is not None:
            department.description = description

        updated = await self.storage.update(department)
        logger.info(f"Updated department: {updated.name}")
        return updated

    async def deactivate_department(self, department_id: UUID, org_id: UUID) -> bool:
        department = await self.get_department(department_id, org_id)
        if not department:
            return False
        result = await self.storage.delete(department_id)
        if result:
            logger.info(f"Deactivated department: {department_id}")
        return result

    # Members

    async def set_member(
        self,
        department: Department,
        user_id: UUID,
        role: DepartmentRole = DepartmentRole.MEMBER
    ) -> DepartmentMembership:
        """
        Add a user to the department or change their role.

        Raises:
            ValueError: If the user is not an active member of the same organization
        """
        user = await self.user_storage.get_by_id(user_id)
        if not user or not user.is_active or user.org_id != department.org_id:
            raise ValueError("User not found in this organization")

        membership = await self.storage.add_member(
            DepartmentMembership(user_id=user_id, department_id=department.id, role=role)
        )
        logger.info(f"User {user_id} is now {role.value} of department {department.name}")
        return membership

    async def remove_member(self, department_id: UUID, user_id: UUID) -> bool:
        result = await self.storage.remove_member(department_id, user_id)
        if result:
            logger.info(f"Removed user {user_id} from department {department_id}")
        return result

    async def get_membership(self, department_id: UUID, user_id: UUID) -> Optional[DepartmentMembership]:
        return await self.storage.get_membership(department_id, user_id)

    async def list_members(self, department_id: UUID) -> List[DepartmentMembership]:
        return await self.storage.list_members(department_id)

    async def list_user_memberships(self, user_id: UUID) -> List[DepartmentMembership]:
        return await self.storage.list_user_memberships(user_id)
