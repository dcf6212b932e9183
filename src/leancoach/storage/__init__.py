"""
Lean Coach Storage Layer

PostgreSQL storage implementations for Lean Coach entities.
"""
from .base import BaseStorage, StorageError
from .org_storage import OrgStorage
from .user_storage import UserStorage
from .department_storage import DepartmentStorage
from .a3_storage import A3Storage
from .comment_storage import CommentStorage
from .activity_storage import ActivityStorage
from .chat_storage import ChatStorage

__all__ = [
    'BaseStorage',
    'StorageError',
    'OrgStorage',
    'UserStorage',
    'DepartmentStorage',
    'A3Storage',
    'CommentStorage',
    'ActivityStorage',
    'ChatStorage',
]
