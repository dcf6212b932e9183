"""
Health Check Routes

Endpoints for service health monitoring.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from datetime import datetime

from ..services.engine_service import EngineService
from .deps import get_engine

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
@router.get("/")
async def health_check():
    """Basic health check endpoint"""
    return {
        "status": "healthy",
        "service": "leancoach",
        "timestamp": datetime.utcnow().isoformat()
    }


@router.get("/ready")
async def readiness_check(engine: EngineService = Depends(get_engine)):
    """
    Readiness check - the database answers and the default LLM is reachable.
    Only the database decides readiness; the LLM status is informational.
    """
    database = await engine.org_storage.ping()
    llm = await engine.coach_agent.health_check()
    body = {
        "ready": database,
        "database": database,
        "llm": llm,
        "timestamp": datetime.utcnow().isoformat()
    }
    return JSONResponse(status_code=200 if database else 503, content=body)


@router.get("/live")
async def liveness_check():
    """Liveness check - indicates if service is running"""
    return {
        "alive": True,
        "timestamp": datetime.utcnow().isoformat()
    }
