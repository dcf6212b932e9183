"""
Activity Service

Records and lists the A3 activity log.
"""
import logging
from typing import Optional, List
from uuid import UUID

from ..models.activity import ActivityLog, ActivityAction
from ..storage.activity_storage import ActivityStorage

logger = logging.getLogger("leancoach.services.activity")


class ActivityService:
    """Service for the activity log"""

    def __init__(self, storage: ActivityStorage):
        self.storage = storage

    async def record(
        self,
        a3_id: UUID,
        user_id: Optional[UUID],
        action: ActivityAction,
        details: Optional[dict] = None
    ) -> ActivityLog:
        entry = ActivityLog(a3_id=a3_id, user_id=user_id, action=action, details=details or {})
        created = await self.storage.create(entry)
        logger.debug(f"Activity {action.value} on {a3_id} by {user_id}")
        return created

    async def list_for_document(self, a3_id: UUID, limit: int = 100) -> List[ActivityLog]:
        return await self.storage.list_by_a3(a3_id, limit)
