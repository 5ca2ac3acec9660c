"""
Model Enums
"""

from enum import Enum


class ItemStatus(Enum):
    ACTIVE = "active"
    DELETED = "deleted"


class PickListStatus(Enum):
    DRAFT = "draft"
    READY_TO_PICK = "ready_to_pick"
    IN_PROGRESS = "in_progress"
    PARTIALLY_COMPLETE = "partially_complete"
    COMPLETE = "complete"

    @property
    def label(self):
        return PICK_LIST_STATUS_LABELS[self]


PICK_LIST_STATUS_LABELS = {
    PickListStatus.DRAFT: 'Draft',
    PickListStatus.READY_TO_PICK: 'Ready',
    PickListStatus.IN_PROGRESS: 'In Progress',
    PickListStatus.PARTIALLY_COMPLETE: 'Partial',
    PickListStatus.COMPLETE: 'Complete',
}

# Lists still being worked on, shown on the dashboard
ACTIVE_PICK_LIST_STATUSES = (
    PickListStatus.READY_TO_PICK,
    PickListStatus.IN_PROGRESS,
    PickListStatus.PARTIALLY_COMPLETE,
)


class ActionType(Enum):
    ITEM_CREATED = "item_created"
    ITEM_UPDATED = "item_updated"
    ITEM_DELETED = "item_deleted"
    QUANTITY_ADJUSTED = "quantity_adjusted"
    ITEM_MOVED = "item_moved"
    PICK_LIST_CREATED = "pick_list_created"
    PICK_LIST_UPDATED = "pick_list_updated"
    PICK_LIST_COMPLETED = "pick_list_completed"
    ITEM_PICKED = "item_picked"


ACTION_LABELS = {
    ActionType.ITEM_CREATED: 'Item created',
    ActionType.ITEM_UPDATED: 'Item updated',
    ActionType.ITEM_DELETED: 'Item deleted',
    ActionType.QUANTITY_ADJUSTED: 'Quantity adjusted',
    ActionType.ITEM_MOVED: 'Item moved',
    ActionType.PICK_LIST_CREATED: 'Pick list created',
    ActionType.PICK_LIST_UPDATED: 'Pick list updated',
    ActionType.PICK_LIST_COMPLETED: 'Pick list completed',
    ActionType.ITEM_PICKED: 'Item picked',
}


def action_label(action_type):
    """Human readable label; unknown types fall back to spaced words"""
    try:
        return ACTION_LABELS[ActionType(action_type)]
    except ValueError:
        return action_type.replace('_', ' ')


class ProfileRole(Enum):
    MEMBER = "member"
    ADMIN = "admin"
