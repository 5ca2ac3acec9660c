"""
Table change notifications

Subscribers get a "something changed, re-fetch" signal per table, never a
diff. Services notify only after their transaction has committed.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

INSERT = 'INSERT'
UPDATE = 'UPDATE'
DELETE = 'DELETE'


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    event: str
    row: Dict[str, str]
    occurred_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self):
        return {
            'table': self.table,
            'event': self.event,
            'row': dict(self.row),
            'occurred_at': self.occurred_at.isoformat()
        }


class Subscription:
    """Handle returned by ChangeFeed.on_change"""

    def __init__(self, feed, table, callback, filters):
        self._feed = feed
        self.table = table
        self.callback = callback
        self.filters = dict(filters or {})
        self.active = True

    def matches(self, change: ChangeEvent) -> bool:
        if change.table != self.table:
            return False
        return all(change.row.get(key) == value for key, value in self.filters.items())

    def unsubscribe(self):
        if self.active:
            self._feed._remove(self)
            self.active = False


class ChangeFeed:
    """In-process observer registry with optional cross-process fan-out"""

    def __init__(self, publisher=None):
        self._subscriptions: List[Subscription] = []
        self._lock = threading.Lock()
        self.publisher = publisher

    def on_change(self, table: str, callback: Callable[[ChangeEvent], None],
                  filters: Optional[Dict[str, str]] = None) -> Subscription:
        """
        Register a callback for changes to one table

        Args:
            table: Table name, e.g. 'pick_list_items'
            callback: Called with the ChangeEvent
            filters: Row fields that must match, e.g. {'pick_list_id': id}
        """
        subscription = Subscription(self, table, callback, filters)
        with self._lock:
            self._subscriptions.append(subscription)
        logger.debug(f"Subscribed to {table} changes with filters {subscription.filters}")
        return subscription

    def _remove(self, subscription):
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

    @property
    def subscriber_count(self):
        with self._lock:
            return len(self._subscriptions)

    def notify(self, table: str, event: str, row: Dict[str, str]) -> int:
        """
        Deliver a change to matching subscribers

        Returns:
            Number of subscribers that handled the change without error
        """
        change = ChangeEvent(table=table, event=event, row=row)
        with self._lock:
            targets = [s for s in self._subscriptions if s.matches(change)]

        delivered = 0
        for subscription in targets:
            try:
                subscription.callback(change)
                delivered += 1
            except Exception as e:
                logger.error(f"Change subscriber for {table} failed: {e}")

        if self.publisher is not None:
            self.publisher.publish_change(change)

        return delivered


def watch_pick_list(feed: ChangeFeed, pick_list_id: str, reload: Callable[[], None]) -> Callable[[], None]:
    """
    Reload a pick-list view whenever the list, its lines or its comments change

    Returns:
        A function that removes all three subscriptions
    """
    def _on_change(change):
        reload()

    subscriptions = [
        feed.on_change('pick_lists', _on_change, {'id': pick_list_id}),
        feed.on_change('pick_list_items', _on_change, {'pick_list_id': pick_list_id}),
        feed.on_change('pick_list_comments', _on_change, {'pick_list_id': pick_list_id}),
    ]

    def stop():
        for subscription in subscriptions:
            subscription.unsubscribe()

    return stop
