"""
Lean Coach Data Models

Domain models for organizations, departments, users and A3 documents.
"""
from .organization import Organization
from .user import User
from .department import Department, DepartmentMembership, DepartmentRole
from .a3_document import A3Document, A3Section, A3Status, SectionType
from .comment import Comment
from .activity import ActivityLog, ActivityAction
from .chat import ChatMessage, ChatRole

__all__ = [
    'Organization',
    'User',
    'Department',
    'DepartmentMembership',
    'DepartmentRole',
    'A3Document',
    'A3Section',
    'A3Status',
    'SectionType',
    'Comment',
    'ActivityLog',
    'ActivityAction',
    'ChatMessage',
    'ChatRole',
]
