"""
Models package - Database models for the stockroom service
"""

# Import database instance
from stockroom.database import db

# Import enums first
from .enums import ItemStatus, PickListStatus, ActionType, ProfileRole

# Import models
from .tag import Tag
from .folder import Folder
from .item import Item, item_tags
from .pick_list import PickList, PickListItem, PickListComment
from .activity_log import ActivityLog
from .profile import Profile

# Export all models and enums
__all__ = [
    'db',
    'ItemStatus',
    'PickListStatus',
    'ActionType',
    'ProfileRole',
    'Tag',
    'Folder',
    'Item',
    'item_tags',
    'PickList',
    'PickListItem',
    'PickListComment',
    'ActivityLog',
    'Profile'
]
