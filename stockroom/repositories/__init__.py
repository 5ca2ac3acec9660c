"""
Repositories package - Data access layer for the stockroom service
"""

# Import interfaces
from .base import (
    ItemRepositoryInterface, FolderRepositoryInterface, TagRepositoryInterface,
    PickListRepositoryInterface, ActivityRepositoryInterface, ProfileRepositoryInterface
)

# Import concrete implementations
from .item_repository import ItemRepository, FolderRepository, TagRepository
from .pick_list_repository import PickListRepository
from .activity_repository import ActivityRepository, ProfileRepository

# Export all interfaces and implementations
__all__ = [
    'ItemRepositoryInterface',
    'FolderRepositoryInterface',
    'TagRepositoryInterface',
    'PickListRepositoryInterface',
    'ActivityRepositoryInterface',
    'ProfileRepositoryInterface',
    'ItemRepository',
    'FolderRepository',
    'TagRepository',
    'PickListRepository',
    'ActivityRepository',
    'ProfileRepository'
]
