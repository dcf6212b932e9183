"""
A3 Permissions

Role-based checks for A3 documents and departments.

Rules:
- Organization owners can do everything inside their organization.
- Authors keep full access to their own documents.
- Department role decides the rest: managers edit, members comment,
  viewers only read.
- Nothing is allowed across organizations or for inactive users.
"""
from typing import Optional

from ..models.a3_document import A3Document
from ..models.department import DepartmentMembership, DepartmentRole
from ..models.user import User


def _same_org(user: Optional[User], org_id) -> bool:
    return bool(user and user.is_active and user.org_id and user.org_id == org_id)


def _is_owner(user: User) -> bool:
    return user.is_owner


def _is_author(user: User, document: A3Document) -> bool:
    return document.author_id == user.id


def _role(membership: Optional[DepartmentMembership], document: A3Document) -> Optional[DepartmentRole]:
    if membership and membership.department_id == document.department_id:
        return membership.role
    return None


def can_view_a3(
    user: Optional[User],
    document: A3Document,
    membership: Optional[DepartmentMembership] = None
) -> bool:
    if not _same_org(user, document.org_id):
        return False
    if _is_owner(user) or _is_author(user, document):
        return True
    return _role(membership, document) is not None


def can_edit_a3(
    user: Optional[User],
    document: A3Document,
    membership: Optional[DepartmentMembership] = None
) -> bool:
    if not _same_org(user, document.org_id):
        return False
    if _is_owner(user) or _is_author(user, document):
        return True
    return _role(membership, document) == DepartmentRole.MANAGER


def can_comment_a3(
    user: Optional[User],
    document: A3Document,
    membership: Optional[DepartmentMembership] = None
) -> bool:
    if can_edit_a3(user, document, membership):
        return True
    if not _same_org(user, document.org_id):
        return False
    return _role(membership, document) == DepartmentRole.MEMBER


def can_delete_a3(user: Optional[User], document: A3Document) -> bool:
    if not _same_org(user, document.org_id):
        return False
    return _is_owner(user) or _is_author(user, document)


def can_manage_department(
    user: Optional[User],
    department_org_id,
    membership: Optional[DepartmentMembership] = None
) -> bool:
    """Org owners and department managers can manage members"""
    if not _same_org(user, department_org_id):
        return False
    if _is_owner(user):
        return True
    return bool(membership and membership.role == DepartmentRole.MANAGER)
