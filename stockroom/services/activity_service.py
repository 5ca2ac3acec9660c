"""
Activity Service - Append-only audit trail
"""

from typing import Any, Dict, List, Optional
import logging

from stockroom.models import ActivityLog, ActionType
from stockroom.repositories import ActivityRepository
from stockroom.utils.filters import matches_activity_category

logger = logging.getLogger(__name__)


class ActivityService:
    """Writes and reads activity entries"""

    def __init__(self):
        self.activity_repo = ActivityRepository()

    def record(self, action_type: ActionType, user_id: Optional[str] = None,
               item_id: Optional[str] = None, pick_list_id: Optional[str] = None,
               details: Optional[Dict[str, Any]] = None) -> ActivityLog:
        """
        Stage an entry in the caller's transaction

        Nothing is committed here so the entry lands together with the
        change it describes, or not at all.
        """
        entry = ActivityLog(
            user_id=user_id,
            action_type=action_type.value,
            item_id=item_id,
            pick_list_id=pick_list_id,
            details=details or {}
        )
        self.activity_repo.add(entry)
        logger.debug(f"Recorded {action_type.value} by {user_id}")
        return entry

    def list_activity(self, category: str = 'all', limit: int = 50, offset: int = 0) -> List[Dict[str, Any]]:
        """Most recent first, filtered by category (all, item, pick_list, quantity)"""
        try:
            # Category filtering runs over a page of raw rows
            entries = self.activity_repo.page(limit=limit, offset=offset)
            return [
                entry.to_dict() for entry in entries
                if matches_activity_category(entry.action_type, category)
            ]
        except Exception as e:
            logger.error(f"Error listing activity: {str(e)}")
            raise

    def recent(self, limit: int = 10) -> List[Dict[str, Any]]:
        return [entry.to_dict() for entry in self.activity_repo.recent(limit)]

    def for_item(self, item_id: str, limit: int = 20) -> List[Dict[str, Any]]:
        return [entry.to_dict() for entry in self.activity_repo.for_item(item_id, limit)]
