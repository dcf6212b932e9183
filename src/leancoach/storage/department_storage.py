"""
Department Storage

PostgreSQL storage for departments and department memberships.
"""
import logging
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from .base import BaseStorage
from ..models.department import Department, DepartmentMembership, DepartmentRole

logger = logging.getLogger("leancoach.storage.department")


class DepartmentStorage(BaseStorage):
    """Storage for Department entities and user memberships"""

    async def create(self, department: Department) -> Department:
        """Create a new department"""
        query = """
            INSERT INTO departments (id, org_id, name, description, is_active, created_at, updated_at)
            VALUES ($1, $2, $3, $4, $5, $6, $7)
            RETURNING *
        """
        row = await self.fetchrow(
            query,
            department.id, department.org_id, department.name, department.description,
            department.is_active, department.created_at, department.updated_at
        )
        return self._row_to_department(row)

    async def get_by_id(self, department_id: UUID) -> Optional[Department]:
        """Get department by ID"""
        row = await self.fetchrow("SELECT * FROM departments WHERE id = $1", department_id)
        return self._row_to_department(row) if row else None

    async def list_by_org(self, org_id: UUID, active_only: bool = True) -> List[Department]:
        """List departments in organization"""
        if active_only:
            query = "SELECT * FROM departments WHERE org_id = $1 AND is_active = true ORDER BY name"
        else:
            query = "SELECT * FROM departments WHERE org_id = $1 ORDER BY name"
        rows = await self.fetch(query, org_id)
        return [self._row_to_department(row) for row in rows]

    async def update(self, department: Department) -> Department:
        """Update department"""
        department.updated_at = datetime.utcnow()
        query = """
            UPDATE departments
            SET name = $2, description = $3, is_active = $4, updated_at = $5
            WHERE id = $1
            RETURNING *
        """
        row = await self.fetchrow(
            query,
            department.id, department.name, department.description,
            department.is_active, department.updated_at
        )
        return self._row_to_department(row)

    async def delete(self, department_id: UUID) -> bool:
        return await self.soft_delete("departments", department_id)

    async def exists_by_name(self, org_id: UUID, name: str, exclude_id: Optional[UUID] = None) -> bool:
        """Check if an active department with this name exists in the organization"""
        if exclude_id:
            query = """
                SELECT 1 FROM departments
                WHERE org_id = $1 AND lower(name) = lower($2) AND is_active = true AND id != $3
            """
            result = await self.fetchval(query, org_id, name, exclude_id)
        else:
            query = """
                SELECT 1 FROM departments
                WHERE org_id = $1 AND lower(name) = lower($2) AND is_active = true
            """
            result = await self.fetchval(query, org_id, name)
        return result is not None

    # Memberships

    async def add_member(self, membership: DepartmentMembership) -> DepartmentMembership:
        """Add user to department, or change their role if already a member"""
        query = """
            INSERT INTO user_departments (user_id, department_id, role, created_at)
            VALUES ($1, $2, $3, $4)
            ON CONFLICT (user_id, department_id) DO UPDATE SET role = EXCLUDED.role
            RETURNING *
        """
        row = await self.fetchrow(
            query,
            membership.user_id, membership.department_id,
            membership.role.value, membership.created_at
        )
        return self._row_to_membership(row)

    async def remove_member(self, department_id: UUID, user_id: UUID) -> bool:
        """Remove user from department"""
        query = "DELETE FROM user_departments WHERE department_id = $1 AND user_id = $2"
        result = await self.execute(query, department_id, user_id)
        return "DELETE 1" in result

    async def get_membership(self, department_id: UUID, user_id: UUID) -> Optional[DepartmentMembership]:
        """Get a single membership"""
        query = "SELECT * FROM user_departments WHERE department_id = $1 AND user_id = $2"
        row = await self.fetchrow(query, department_id, user_id)
        return self._row_to_membership(row) if row else None

    async def list_members(self, department_id: UUID) -> List[DepartmentMembership]:
        """List memberships of a department"""
        query = """
            SELECT ud.* FROM user_departments ud
            JOIN users u ON u.id = ud.user_id
            WHERE ud.department_id = $1 AND u.is_active = true
            ORDER BY u.name
        """
        rows = await self.fetch(query, department_id)
        return [self._row_to_membership(row) for row in rows]

    async def list_user_memberships(self, user_id: UUID) -> List[DepartmentMembership]:
        """List all departments a user belongs to"""
        query = """
            SELECT ud.* FROM user_departments ud
            JOIN departments d ON d.id = ud.department_id
            WHERE ud.user_id = $1 AND d.is_active = true
        """
        rows = await self.fetch(query, user_id)
        return [self._row_to_membership(row) for row in rows]

    def _row_to_department(self, row) -> Department:
        return Department(
            id=row["id"],
            org_id=row["org_id"],
            name=row["name"],
            description=row["description"],
            is_active=row["is_active"],
            created_at=row["created_at"],
            updated_at=row["updated_at"]
        )

    def _row_to_membership(self, row) -> DepartmentMembership:
        return DepartmentMembership(
            user_id=row["user_id"],
            department_id=row["department_id"],
            role=DepartmentRole(row["role"]),
            created_at=row["created_at"]
        )
