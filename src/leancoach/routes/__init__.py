"""
Lean Coach API Routes

FastAPI route handlers.
"""
from .health import router as health_router
from .auth import router as auth_router
from .organizations import router as organizations_router
from .users import router as users_router
from .departments import router as departments_router
from .a3 import router as a3_router
from .comments import router as comments_router
from .chat import router as chat_router
from .export import router as export_router

__all__ = [
    'health_router',
    'auth_router',
    'organizations_router',
    'users_router',
    'departments_router',
    'a3_router',
    'comments_router',
    'chat_router',
    'export_router',
]
