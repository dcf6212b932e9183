"""
Engine Service

Main composite service that manages all storages and services.
Singleton pattern - one instance per process.
"""
import logging
from typing import Optional

from ..agents.coach import CoachAgent
from ..config import Config
from ..storage.org_storage import OrgStorage
from ..storage.user_storage import UserStorage
from ..storage.department_storage import DepartmentStorage
from ..storage.a3_storage import A3Storage
from ..storage.comment_storage import CommentStorage
from ..storage.activity_storage import ActivityStorage
from ..storage.chat_storage import ChatStorage
from .org_service import OrgService
from .users_service import UsersService
from .department_service import DepartmentService
from .activity_service import ActivityService
from .a3_service import A3Service
from .comment_service import CommentService
from .ai_service import AIService
from .export_service import ExportService
from .prompt_cache import PromptCache

logger = logging.getLogger("leancoach.services.engine")

# Singleton instance
_engine_service: Optional["EngineService"] = None


class EngineService:
    """
    Composite engine service.

    Manages:
    - All storage connections (PostgreSQL)
    - Business logic services
    - PDF renderer lifetime
    - Graceful shutdown
    """

    def __init__(self):
        """Initialize engine service with all storages"""
        self.postgres_dsn = Config.get_postgres_dsn()

        # Initialize storages
        self.org_storage = OrgStorage(self.postgres_dsn)
        self.user_storage = UserStorage(self.postgres_dsn)
        self.department_storage = DepartmentStorage(self.postgres_dsn)
        self.a3_storage = A3Storage(self.postgres_dsn)
        self.comment_storage = CommentStorage(self.postgres_dsn)
        self.activity_storage = ActivityStorage(self.postgres_dsn)
        self.chat_storage = ChatStorage(self.postgres_dsn)

        self.prompt_cache = PromptCache(Config.PROMPTS_DIR)
        self.coach_agent = CoachAgent(
            base_url=Config.LLM_BASE_URL,
            default_model=Config.DEFAULT_MODEL,
            timeout=Config.LLM_TIMEOUT,
        )

        # Initialize services (after storages)
        self.org_service = OrgService(self.org_storage, self.user_storage)
        self.users_service = UsersService(self.user_storage)
        self.department_service = DepartmentService(self.department_storage, self.user_storage)
        self.activity_service = ActivityService(self.activity_storage)
        self.a3_service = A3Service(self.a3_storage, self.department_storage, self.activity_service)
        self.comment_service = CommentService(self.comment_storage, self.activity_service)
        self.ai_service = AIService(
            chat_storage=self.chat_storage,
            prompt_cache=self.prompt_cache,
            coach_agent=self.coach_agent,
            api_key_resolver=self.org_service.get_api_key,
        )
        self.export_service = ExportService(
            org_storage=self.org_storage,
            user_storage=self.user_storage,
            activity_service=self.activity_service,
        )

        self._initialized = False
        logger.info("EngineService created")

    @property
    def storages(self) -> list:
        return [
            self.org_storage,
            self.user_storage,
            self.department_storage,
            self.a3_storage,
            self.comment_storage,
            self.activity_storage,
            self.chat_storage,
        ]

    async def initialize(self):
        """Initialize all storages"""
        if self._initialized:
            logger.info("EngineService already initialized")
            return

        logger.info("Initializing EngineService...")
        for storage in self.storages:
            await storage.init()

        self._initialized = True
        logger.info("EngineService initialized successfully")

    async def close(self):
        """Close all connections"""
        logger.info("Closing EngineService...")

        for storage in self.storages:
            await storage.close()
        await self.export_service.close()

        self._initialized = False
        logger.info("EngineService closed")

    @property
    def is_initialized(self) -> bool:
        """Check if service is initialized"""
        return self._initialized


def get_engine_service() -> EngineService:
    """Get or create engine service singleton"""
    global _engine_service
    if _engine_service is None:
        _engine_service = EngineService()
    return _engine_service


async def init_engine_service() -> EngineService:
    """Initialize and return engine service"""
    service = get_engine_service()
    await service.initialize()
    return service
