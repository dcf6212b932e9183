"""
Lean Coach Application

FastAPI application for the Lean A3 AI coach.
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import Config
from .services.engine_service import get_engine_service, init_engine_service
from .routes import (
    health_router,
    auth_router,
    organizations_router,
    users_router,
    departments_router,
    a3_router,
    comments_router,
    chat_router,
    export_router,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("leancoach.app")

logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("asyncpg").setLevel(logging.WARNING)

app = FastAPI(
    title="Lean Coach API",
    description="A3 problem solving with an AI Lean coach",
    version=__version__
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup"""
    logger.info("Starting Lean Coach...")

    try:
        await init_engine_service()
        logger.info("Lean Coach started successfully")
    except Exception as e:
        logger.error(f"Failed to start Lean Coach: {e}")
        raise


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    logger.info("Shutting down Lean Coach...")

    try:
        engine = get_engine_service()
        await engine.close()
        logger.info("Lean Coach shutdown complete")
    except Exception as e:
        logger.error(f"Error during shutdown: {e}")


app.include_router(health_router, prefix="/api/v1")
app.include_router(auth_router, prefix="/api/v1")
app.include_router(organizations_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")
app.include_router(departments_router, prefix="/api/v1")
app.include_router(a3_router, prefix="/api/v1")
app.include_router(comments_router, prefix="/api/v1")
app.include_router(chat_router, prefix="/api/v1")
app.include_router(export_router, prefix="/api/v1")


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": "Lean Coach",
        "version": __version__,
        "status": "running"
    }
