"""
Pick List Repository Implementation
"""

from typing import List, Optional
from datetime import datetime
from sqlalchemy import func, update
from stockroom.database import db
from stockroom.models import PickList, PickListItem, PickListComment, PickListStatus
from .base import PickListRepositoryInterface


class PickListRepository(PickListRepositoryInterface):
    """Concrete implementation of pick list repository"""

    def get_by_id(self, pick_list_id: str, lock: bool = False) -> Optional[PickList]:
        """Get pick list by ID, optionally taking a row lock"""
        query = PickList.query.filter_by(id=pick_list_id)
        if lock:
            query = query.with_for_update().populate_existing()
        return query.first()

    def search(self, status: Optional[str] = None, query: Optional[str] = None) -> List[PickList]:
        """Filter by status and name, most recently updated first"""
        q = PickList.query
        if status and status != 'all':
            q = q.filter(PickList.status == PickListStatus(status))
        if query and query.strip():
            q = q.filter(PickList.name.ilike(f"%{query.strip()}%"))
        return q.order_by(PickList.updated_at.desc()).all()

    def active(self, statuses, limit: int = 5) -> List[PickList]:
        return PickList.query.filter(
            PickList.status.in_(list(statuses))
        ).order_by(PickList.updated_at.desc()).limit(limit).all()

    def count_active(self, statuses) -> int:
        return PickList.query.filter(PickList.status.in_(list(statuses))).count()

    def add(self, pick_list: PickList) -> PickList:
        db.session.add(pick_list)
        db.session.flush()
        return pick_list

    def delete(self, pick_list: PickList) -> None:
        """Delete the list; lines and comments cascade"""
        db.session.delete(pick_list)
        db.session.flush()

    def touch(self, pick_list: PickList) -> None:
        pick_list.updated_at = datetime.utcnow()

    def get_line(self, line_id: str, lock: bool = False) -> Optional[PickListItem]:
        query = PickListItem.query.filter_by(id=line_id)
        if lock:
            query = query.with_for_update().populate_existing()
        return query.first()

    def list_lines(self, pick_list_id: str) -> List[PickListItem]:
        return PickListItem.query.filter_by(pick_list_id=pick_list_id).order_by(
            PickListItem.sort_order, PickListItem.created_at
        ).all()

    def max_sort_order(self, pick_list_id: str) -> int:
        value = db.session.query(func.max(PickListItem.sort_order)).filter(
            PickListItem.pick_list_id == pick_list_id
        ).scalar()
        return value or 0

    def add_line(self, line: PickListItem) -> PickListItem:
        db.session.add(line)
        db.session.flush()
        return line

    def remove_line(self, line: PickListItem) -> None:
        db.session.delete(line)
        db.session.flush()

    def record_pick(self, line_id: str, previous: int, quantity_picked: int, actor_id: Optional[str]) -> bool:
        """
        Store a new picked quantity if nobody changed it since it was read

        Returns:
            False when the line no longer holds ``previous``
        """
        result = db.session.execute(
            update(PickListItem)
            .where(PickListItem.id == line_id, PickListItem.quantity_picked == previous)
            .values(
                quantity_picked=quantity_picked,
                picked_at=datetime.utcnow(),
                picked_by=actor_id
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def add_comment(self, comment: PickListComment) -> PickListComment:
        db.session.add(comment)
        db.session.flush()
        return comment

    def list_comments(self, pick_list_id: str) -> List[PickListComment]:
        return PickListComment.query.filter_by(pick_list_id=pick_list_id).order_by(
            PickListComment.created_at
        ).all()
