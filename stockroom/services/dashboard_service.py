"""
Dashboard Service - Stock totals and current work at a glance
"""

from typing import Dict, Any
import logging

from stockroom.models.enums import ACTIVE_PICK_LIST_STATUSES
from stockroom.repositories import ItemRepository, PickListRepository
from stockroom.services.activity_service import ActivityService
from stockroom.services.workflow import progress_summary

logger = logging.getLogger(__name__)


class DashboardService:

    def __init__(self):
        self.item_repo = ItemRepository()
        self.pick_list_repo = PickListRepository()
        self.activity = ActivityService()

    def get_dashboard(self, active_limit: int = 5, activity_limit: int = 10) -> Dict[str, Any]:
        try:
            items = self.item_repo.list_active()
            active_lists = self.pick_list_repo.active(ACTIVE_PICK_LIST_STATUSES, limit=active_limit)
            active_total = self.pick_list_repo.count_active(ACTIVE_PICK_LIST_STATUSES)

            pick_lists = []
            for pick_list in active_lists:
                data = pick_list.to_dict()
                data.update(progress_summary(pick_list.lines))
                pick_lists.append(data)

            return {
                'total_items': len(items),
                'total_value': round(sum(item.stock_value for item in items), 2),
                'low_stock_count': sum(1 for item in items if item.is_low_stock),
                'active_pick_lists': pick_lists,
                'active_pick_list_count': active_total,
                'recent_activity': self.activity.recent(activity_limit)
            }
        except Exception as e:
            logger.error(f"Error building dashboard: {str(e)}")
            raise
