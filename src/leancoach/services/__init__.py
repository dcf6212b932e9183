"""
Lean Coach Services

Business logic services for Lean Coach.
"""
from .engine_service import EngineService, get_engine_service, init_engine_service
from .org_service import OrgService
from .users_service import UsersService
from .department_service import DepartmentService
from .activity_service import ActivityService
from .a3_service import A3Service
from .comment_service import CommentService
from .ai_service import AIService, AIResponseError
from .export_service import ExportService
from .prompt_cache import PromptCache

__all__ = [
    'EngineService',
    'get_engine_service',
    'init_engine_service',
    'OrgService',
    'UsersService',
    'DepartmentService',
    'ActivityService',
    'A3Service',
    'CommentService',
    'AIService',
    'AIResponseError',
    'ExportService',
    'PromptCache',
]
