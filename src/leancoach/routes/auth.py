"""
Authentication Routes

Endpoints for user authentication, plus the auth dependencies and
owner/organization checks used by the other routers.
"""
import jwt
import logging
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, Depends, Header
from pydantic import BaseModel, EmailStr

from ..config import Config
from ..models.user import User
from ..services.engine_service import EngineService
from .deps import get_engine

logger = logging.getLogger("leancoach.routes.auth")
router = APIRouter(prefix="/auth", tags=["auth"])


# ============================================
# Request/Response Models
# ============================================

class LoginRequest(BaseModel):
    """Login request body"""
    email: EmailStr
    password: str


class RegisterRequest(BaseModel):
    """Registration request body"""
    name: str
    email: EmailStr
    password: str


class AuthResponse(BaseModel):
    """Login / registration response"""
    token: str
    user_id: str
    org_id: Optional[str] = None
    name: str
    email: str
    is_owner: bool = False


# ============================================
# Helpers
# ============================================

def create_token(user_id: UUID, org_id: Optional[UUID] = None) -> str:
    """Create JWT token for user"""
    expiration = datetime.utcnow() + timedelta(hours=Config.JWT_EXPIRATION_HOURS)
    payload = {
        "user_id": str(user_id),
        "org_id": str(org_id) if org_id else None,
        "exp": expiration
    }
    return jwt.encode(payload, Config.JWT_SECRET, algorithm=Config.JWT_ALGORITHM)


def verify_token(token: str) -> Optional[dict]:
    """Verify and decode JWT token"""
    try:
        return jwt.decode(token, Config.JWT_SECRET, algorithms=[Config.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None


async def get_current_user(authorization: str = Header(None)) -> dict:
    """Dependency to get current authenticated user claims"""
    if not authorization:
        raise HTTPException(status_code=401, detail="Not authenticated")

    # Expect "Bearer <token>"
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid authorization header format")

    payload = verify_token(parts[1])
    if not payload or "user_id" not in payload:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    try:
        user_id = UUID(payload["user_id"])
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    return {
        "user_id": user_id,
        "org_id": UUID(payload["org_id"]) if payload.get("org_id") else None
    }


async def get_current_user_record(
    current_user: dict = Depends(get_current_user),
    engine: EngineService = Depends(get_engine)
) -> User:
    """Dependency that loads the authenticated, active user from storage"""
    user = await engine.user_storage.get_by_id(current_user["user_id"])
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def require_owner(user: Optional[User]) -> None:
    """
    Verify user is authenticated and is an organization owner.

    Raises:
        HTTPException(401): Not authenticated
        HTTPException(403): Not an owner
    """
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    if not user.is_owner:
        raise HTTPException(status_code=403, detail="Owner access required")


def require_user_organization(user: Optional[User]) -> UUID:
    """
    Verify user belongs to an organization and return its ID.

    Raises:
        HTTPException(401): Not authenticated
        HTTPException(400): No organization
    """
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    if not user.org_id:
        raise HTTPException(status_code=400, detail="User must belong to an organization")
    return user.org_id


def require_owner_with_organization(user: Optional[User]) -> UUID:
    """Owner check plus organization check; returns the organization ID"""
    require_owner(user)
    return require_user_organization(user)


def _auth_response(user: User) -> AuthResponse:
    return AuthResponse(
        token=create_token(user.id, user.org_id),
        user_id=str(user.id),
        org_id=str(user.org_id) if user.org_id else None,
        name=user.name,
        email=user.email,
        is_owner=user.is_owner
    )


# ============================================
# Routes
# ============================================

@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest, engine: EngineService = Depends(get_engine)):
    """
    Authenticate user with email and password.

    Returns JWT token on success.
    """
    users_service = engine.users_service

    user = await users_service.get_user_by_email(request.email)
    if not user or not await users_service.verify_password(user.id, request.password):
        logger.info(f"Login failed for {request.email}")
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not user.is_active:
        logger.info(f"Login failed: user inactive {request.email}")
        raise HTTPException(status_code=403, detail="Account is deactivated")

    await users_service.update_last_seen(user.id)
    logger.info(f"User logged in: {user.email}")
    return _auth_response(user)


@router.post("/register", response_model=AuthResponse)
async def register(request: RegisterRequest, engine: EngineService = Depends(get_engine)):
    """
    Register a new user without an organization.

    The user can then create an organization (becoming its owner) or be
    added to one by an owner.
    """
    try:
        user = await engine.users_service.register(
            name=request.name,
            email=request.email,
            password=request.password
        )
    except ValueError as e:
        logger.info(f"Registration failed: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"User registered: {user.email}")
    return _auth_response(user)


@router.get("/me")
async def get_current_user_info(
    user: User = Depends(get_current_user_record),
    engine: EngineService = Depends(get_engine)
):
    """Get current authenticated user's information and department roles"""
    memberships = await engine.department_service.list_user_memberships(user.id)
    result = user.to_dict()
    result["departments"] = [m.to_dict() for m in memberships]
    return result


@router.post("/refresh")
async def refresh_token(user: User = Depends(get_current_user_record)):
    """Refresh JWT token (picks up organization changes)"""
    return {"token": create_token(user.id, user.org_id)}
