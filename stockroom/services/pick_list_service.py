"""
Pick List Service - Pick list lifecycle and atomic line picking
"""

from typing import List, Dict, Any, Optional
import logging

from stockroom.database import db, transaction
from stockroom.events import get_change_feed, INSERT, UPDATE, DELETE
from stockroom.models import PickList, PickListItem, PickListComment, PickListStatus, ActionType
from stockroom.repositories import PickListRepository, ItemRepository
from stockroom.services.activity_service import ActivityService
from stockroom.services.errors import (
    ServiceError, NotFound, InvalidQuantity, InsufficientStock,
    PickListLocked, PickConflict, InvalidInput
)
from stockroom.services.workflow import validate_transition, allowed_targets, progress_summary
from stockroom.utils.filters import paginate

logger = logging.getLogger(__name__)


def _is_whole_number(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class PickListService:
    """Business logic for pick lists"""

    def __init__(self, change_feed=None):
        self.pick_list_repo = PickListRepository()
        self.item_repo = ItemRepository()
        self.activity = ActivityService()
        self.change_feed = change_feed or get_change_feed()

    def _get_or_404(self, pick_list_id: str, lock: bool = False) -> PickList:
        pick_list = self.pick_list_repo.get_by_id(pick_list_id, lock=lock)
        if not pick_list:
            raise NotFound(f"Pick list {pick_list_id} not found", pick_list_id=pick_list_id)
        return pick_list

    def _ensure_editable(self, pick_list: PickList):
        if pick_list.is_complete:
            raise PickListLocked(
                f"Pick list {pick_list.name} is complete and can no longer be changed",
                pick_list_id=pick_list.id
            )

    def _ensure_pickable(self, pick_list: PickList):
        self._ensure_editable(pick_list)
        if pick_list.status == PickListStatus.DRAFT:
            raise PickListLocked(
                f"Pick list {pick_list.name} is still a draft, mark it ready before picking",
                pick_list_id=pick_list.id,
                status=pick_list.status.value
            )

    def _summary(self, pick_list: PickList) -> Dict[str, Any]:
        data = pick_list.to_dict()
        data.update(progress_summary(pick_list.lines))
        return data

    def create_pick_list(self, name: str, notes: Optional[str] = None, assigned_to: Optional[str] = None,
                         actor_id: Optional[str] = None) -> Dict[str, Any]:
        """Create a draft pick list"""
        try:
            name = (name or '').strip()
            if not name:
                raise InvalidInput("Pick list name is required")

            with transaction():
                pick_list = self.pick_list_repo.add(PickList(
                    name=name,
                    notes=notes,
                    assigned_to=assigned_to,
                    status=PickListStatus.DRAFT,
                    created_by=actor_id
                ))
                self.activity.record(
                    ActionType.PICK_LIST_CREATED, actor_id, pick_list_id=pick_list.id,
                    details={'name': pick_list.name}
                )

            logger.info(f"Created pick list {pick_list.id} ({pick_list.name})")
            self.change_feed.notify('pick_lists', INSERT, {'id': pick_list.id})
            return self._summary(pick_list)

        except ServiceError as e:
            logger.warning(f"Pick list creation rejected: {e.message}")
            raise
        except Exception as e:
            logger.error(f"Error creating pick list: {str(e)}")
            raise

    def update_pick_list(self, pick_list_id: str, actor_id: Optional[str] = None, **data) -> Dict[str, Any]:
        """Edit name, notes or assignee; status only changes through transition()"""
        try:
            with transaction():
                pick_list = self._get_or_404(pick_list_id, lock=True)
                self._ensure_editable(pick_list)
                if 'name' in data:
                    data['name'] = (data['name'] or '').strip()
                    if not data['name']:
                        raise InvalidInput("Pick list name is required")
                for key in ('name', 'notes', 'assigned_to'):
                    if key in data:
                        setattr(pick_list, key, data[key])
                self.pick_list_repo.touch(pick_list)
                self.activity.record(
                    ActionType.PICK_LIST_UPDATED, actor_id, pick_list_id=pick_list.id,
                    details={'name': pick_list.name}
                )

            self.change_feed.notify('pick_lists', UPDATE, {'id': pick_list.id})
            return self._summary(pick_list)

        except ServiceError as e:
            logger.warning(f"Pick list update rejected for {pick_list_id}: {e.message}")
            raise
        except Exception as e:
            logger.error(f"Error updating pick list {pick_list_id}: {str(e)}")
            raise

    def list_pick_lists(self, status: str = 'all', search: Optional[str] = None,
                        page: int = 1, per_page: int = 20) -> Dict[str, Any]:
        """Lists filtered by status and name, most recently updated first"""
        if status and status != 'all':
            try:
                PickListStatus(status)
            except ValueError:
                raise InvalidInput(f"Unknown pick list status: {status}", status=status)
        try:
            pick_lists = self.pick_list_repo.search(status=status, query=search)
            result = paginate(pick_lists, page, per_page)
            result['items'] = [self._summary(pick_list) for pick_list in result['items']]
            return result
        except Exception as e:
            logger.error(f"Error listing pick lists: {str(e)}")
            raise

    def get_pick_list_detail(self, pick_list_id: str) -> Dict[str, Any]:
        """List with lines, comments, progress and the statuses it may move to"""
        pick_list = self._get_or_404(pick_list_id)
        lines = self.pick_list_repo.list_lines(pick_list_id)
        data = pick_list.to_dict()
        data.update(progress_summary(lines))
        data['lines'] = [line.to_dict(include_item=True) for line in lines]
        data['comments'] = [comment.to_dict() for comment in self.pick_list_repo.list_comments(pick_list_id)]
        data['allowed_transitions'] = [status.value for status in allowed_targets(pick_list.status)]
        return data

    def add_lines(self, pick_list_id: str, lines: List[Dict[str, Any]],
                  actor_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Append items to a pick list

        Each entry needs item_id and quantity (at least 1); location_hint is
        optional. The unit price is snapshotted from the item, sell price
        first, so later price changes do not rewrite the list.
        """
        try:
            if not lines:
                raise InvalidInput("At least one line is required")
            for entry in lines:
                quantity = entry.get('quantity')
                if not _is_whole_number(quantity) or quantity < 1:
                    raise InvalidQuantity(
                        f"Requested quantity must be at least 1, got {quantity!r}",
                        item_id=entry.get('item_id'), quantity=quantity
                    )

            with transaction():
                pick_list = self._get_or_404(pick_list_id, lock=True)
                self._ensure_editable(pick_list)
                sort_order = self.pick_list_repo.max_sort_order(pick_list_id)
                created = []
                for entry in lines:
                    item = self.item_repo.get_by_id(entry.get('item_id'))
                    if not item:
                        raise NotFound(f"Item {entry.get('item_id')} not found", item_id=entry.get('item_id'))
                    sort_order += 1
                    created.append(self.pick_list_repo.add_line(PickListItem(
                        pick_list_id=pick_list_id,
                        item_id=item.id,
                        quantity_requested=entry['quantity'],
                        quantity_picked=0,
                        location_hint=entry.get('location_hint') or item.location,
                        unit_price=item.sell_price if item.sell_price is not None else item.cost_price,
                        sort_order=sort_order
                    )))
                self.pick_list_repo.touch(pick_list)

            logger.info(f"Added {len(created)} lines to pick list {pick_list_id}")
            for line in created:
                self.change_feed.notify('pick_list_items', INSERT, {'id': line.id, 'pick_list_id': pick_list_id})
            self.change_feed.notify('pick_lists', UPDATE, {'id': pick_list_id})
            return [line.to_dict(include_item=True) for line in created]

        except ServiceError as e:
            logger.warning(f"Adding lines to pick list {pick_list_id} rejected: {e.message}")
            raise
        except Exception as e:
            logger.error(f"Error adding lines to pick list {pick_list_id}: {str(e)}")
            raise

    def remove_line(self, line_id: str) -> bool:
        try:
            with transaction():
                line = self.pick_list_repo.get_line(line_id, lock=True)
                if not line:
                    raise NotFound(f"Pick list line {line_id} not found", line_id=line_id)
                pick_list = self._get_or_404(line.pick_list_id, lock=True)
                self._ensure_editable(pick_list)
                pick_list_id = pick_list.id
                self.pick_list_repo.remove_line(line)
                self.pick_list_repo.touch(pick_list)

            self.change_feed.notify('pick_list_items', DELETE, {'id': line_id, 'pick_list_id': pick_list_id})
            self.change_feed.notify('pick_lists', UPDATE, {'id': pick_list_id})
            return True

        except ServiceError as e:
            logger.warning(f"Removing line {line_id} rejected: {e.message}")
            raise
        except Exception as e:
            logger.error(f"Error removing line {line_id}: {str(e)}")
            raise

    def delete_pick_list(self, pick_list_id: str) -> bool:
        """Delete the list with its lines and comments"""
        try:
            with transaction():
                pick_list = self._get_or_404(pick_list_id, lock=True)
                self.pick_list_repo.delete(pick_list)

            logger.info(f"Deleted pick list {pick_list_id}")
            self.change_feed.notify('pick_lists', DELETE, {'id': pick_list_id})
            return True

        except ServiceError:
            raise
        except Exception as e:
            logger.error(f"Error deleting pick list {pick_list_id}: {str(e)}")
            raise

    def add_comment(self, pick_list_id: str, content: str, actor_id: Optional[str] = None) -> Dict[str, Any]:
        content = (content or '').strip()
        if not content:
            raise InvalidInput("Comment cannot be empty")
        with transaction():
            self._get_or_404(pick_list_id)
            comment = self.pick_list_repo.add_comment(PickListComment(
                pick_list_id=pick_list_id,
                user_id=actor_id,
                content=content
            ))
        self.change_feed.notify('pick_list_comments', INSERT, {'id': comment.id, 'pick_list_id': pick_list_id})
        return comment.to_dict()

    def transition(self, pick_list_id: str, target, actor_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Move a pick list to another status

        The status change and its activity entries commit together. Status
        is never derived from line progress; completing a list with unpicked
        lines is the operator's call.

        Raises:
            InvalidTransition: if the table does not allow current -> target
        """
        try:
            with transaction():
                pick_list = self._get_or_404(pick_list_id, lock=True)
                previous = pick_list.status
                new_status = validate_transition(previous, target)

                pick_list.status = new_status
                self.pick_list_repo.touch(pick_list)
                self.activity.record(
                    ActionType.PICK_LIST_UPDATED, actor_id, pick_list_id=pick_list.id,
                    details={
                        'name': pick_list.name,
                        'previous_status': previous.value,
                        'status': new_status.value
                    }
                )
                if new_status == PickListStatus.COMPLETE:
                    self.activity.record(
                        ActionType.PICK_LIST_COMPLETED, actor_id, pick_list_id=pick_list.id,
                        details={'name': pick_list.name}
                    )

            logger.info(f"Pick list {pick_list_id}: {previous.value} -> {new_status.value}")
            self.change_feed.notify('pick_lists', UPDATE, {'id': pick_list_id})
            return self._summary(pick_list)

        except ServiceError as e:
            logger.warning(f"Transition of pick list {pick_list_id} rejected: {e.message}")
            raise
        except Exception as e:
            logger.error(f"Error transitioning pick list {pick_list_id}: {str(e)}")
            raise

    def pick_line(self, line_id: str, quantity_picked: int, actor_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Set a line's picked quantity and move the stock difference

        Stock goes down by the difference from the previously picked amount
        (up when the amount is lowered). The stock decrement and the line
        update are both conditional UPDATEs in one transaction, so concurrent
        pickers cannot double-apply a delta or push stock below zero.

        Returns:
            {'ok': True, 'line': ..., 'new_item_quantity': ..., 'delta': ...}

        Raises:
            InvalidQuantity: outside 0..quantity_requested or not an integer
            NotFound: line or item missing
            PickListLocked: the list is still a draft or already complete
            InsufficientStock: not enough stock for a positive delta
            PickConflict: the line changed since it was read
        """
        if not _is_whole_number(quantity_picked) or quantity_picked < 0:
            raise InvalidQuantity(
                f"Picked quantity must be a whole number of at least 0, got {quantity_picked!r}",
                line_id=line_id, quantity_picked=quantity_picked
            )
        try:
            with transaction():
                line = self.pick_list_repo.get_line(line_id)
                if not line:
                    raise NotFound(f"Pick list line {line_id} not found", line_id=line_id)
                # List before line, the same order transition() locks in
                pick_list = self._get_or_404(line.pick_list_id, lock=True)
                self._ensure_pickable(pick_list)
                line = self.pick_list_repo.get_line(line_id, lock=True)
                if not line:
                    raise NotFound(f"Pick list line {line_id} not found", line_id=line_id)
                if quantity_picked > line.quantity_requested:
                    raise InvalidQuantity(
                        f"Picked quantity {quantity_picked} exceeds requested {line.quantity_requested}",
                        line_id=line_id,
                        quantity_picked=quantity_picked,
                        quantity_requested=line.quantity_requested
                    )
                item = self.item_repo.get_by_id(line.item_id, include_deleted=True)
                if not item:
                    raise NotFound(f"Item {line.item_id} not found", item_id=line.item_id)

                previous = line.quantity_picked
                delta = quantity_picked - previous
                if delta == 0:
                    return {
                        'ok': True,
                        'line': line.to_dict(),
                        'new_item_quantity': item.quantity,
                        'delta': 0
                    }

                if not self.item_repo.decrement_stock(item.id, delta):
                    if self.item_repo.get_by_id(item.id, include_deleted=True) is None:
                        raise NotFound(f"Item {item.id} not found", item_id=item.id)
                    raise InsufficientStock(
                        f"Only {item.quantity} of {item.name} in stock, {delta} more needed",
                        item_id=item.id, available=item.quantity, needed=delta
                    )
                if not self.pick_list_repo.record_pick(line.id, previous, quantity_picked, actor_id):
                    raise PickConflict(
                        f"Line {line_id} was changed by someone else, reload and try again",
                        line_id=line_id
                    )

                db.session.refresh(item)
                db.session.refresh(line)
                self.pick_list_repo.touch(pick_list)
                self.activity.record(
                    ActionType.ITEM_PICKED, actor_id, item_id=item.id, pick_list_id=pick_list.id,
                    details={
                        'item_name': item.name,
                        'pick_list_name': pick_list.name,
                        'quantity': quantity_picked,
                        'delta': delta,
                        'inventory_remaining': item.quantity
                    }
                )
                result = {
                    'ok': True,
                    'line': line.to_dict(),
                    'new_item_quantity': item.quantity,
                    'delta': delta
                }

            logger.info(f"Picked {quantity_picked} on line {line_id} (delta {delta}), {item.quantity} left")
            self.change_feed.notify('pick_list_items', UPDATE, {'id': line_id, 'pick_list_id': pick_list.id})
            self.change_feed.notify('items', UPDATE, {'id': item.id, 'folder_id': item.folder_id})
            return result

        except ServiceError as e:
            logger.warning(f"Pick on line {line_id} rejected: {e.message}")
            raise
        except Exception as e:
            logger.error(f"Error picking line {line_id}: {str(e)}")
            raise
