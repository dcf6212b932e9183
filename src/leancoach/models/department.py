"""
Department Model

Departments group users inside an organization. A3 documents belong to a
department, and a user's role in that department decides what they may do
with its documents.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4


class DepartmentRole(str, Enum):
    """Role of a user inside a department"""
    MANAGER = "manager"   # Edit every A3 in the department, manage members
    MEMBER = "member"     # Read and comment
    VIEWER = "viewer"     # Read only


@dataclass
class Department:
    """Department entity"""
    id: UUID = field(default_factory=uuid4)
    org_id: UUID = field(default_factory=uuid4)
    name: str = ""
    description: Optional[str] = None
    is_active: bool = True
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "org_id": str(self.org_id),
            "name": self.name,
            "description": self.description,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


@dataclass
class DepartmentMembership:
    """Link between a user and a department"""
    user_id: UUID
    department_id: UUID
    role: DepartmentRole = DepartmentRole.MEMBER
    created_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "user_id": str(self.user_id),
            "department_id": str(self.department_id),
            "role": self.role.value,
            "created_at": self.created_at.isoformat(),
        }
