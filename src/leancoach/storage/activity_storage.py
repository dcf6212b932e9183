"""
Activity Storage

PostgreSQL storage for the A3 activity log.
"""
import logging
from typing import List
from uuid import UUID

from .base import BaseStorage
from ..models.activity import ActivityLog, ActivityAction

logger = logging.getLogger("leancoach.storage.activity")


class ActivityStorage(BaseStorage):
    """Append-only storage for ActivityLog entries"""

    async def create(self, entry: ActivityLog) -> ActivityLog:
        query = """
            INSERT INTO activity_logs (id, a3_id, user_id, action, details, created_at)
            VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING *
        """
        row = await self.fetchrow(
            query,
            entry.id, entry.a3_id, entry.user_id, entry.action.value,
            entry.details, entry.created_at
        )
        return self._row_to_entry(row)

    async def list_by_a3(self, a3_id: UUID, limit: int = 100) -> List[ActivityLog]:
        """List entries for a document, newest first"""
        query = """
            SELECT * FROM activity_logs
            WHERE a3_id = $1
            ORDER BY created_at DESC
            LIMIT $2
        """
        rows = await self.fetch(query, a3_id, limit)
        return [self._row_to_entry(row) for row in rows]

    def _row_to_entry(self, row) -> ActivityLog:
        return ActivityLog(
            id=row["id"],
            a3_id=row["a3_id"],
            user_id=row["user_id"],
            action=ActivityAction(row["action"]),
            details=row["details"] or {},
            created_at=row["created_at"]
        )
