"""
Services package - Business logic for the stockroom service
"""

from .errors import (
    ServiceError, InvalidTransition, InvalidQuantity, InsufficientStock, NotFound,
    PickListLocked, PickConflict, DuplicateValue, InvalidInput, AuthError, error_from_payload
)
from .activity_service import ActivityService
from .item_service import ItemService
from .folder_service import FolderService
from .pick_list_service import PickListService
from .dashboard_service import DashboardService
from .auth_service import AuthService

__all__ = [
    'ServiceError',
    'InvalidTransition',
    'InvalidQuantity',
    'InsufficientStock',
    'NotFound',
    'PickListLocked',
    'PickConflict',
    'DuplicateValue',
    'InvalidInput',
    'AuthError',
    'error_from_payload',
    'ActivityService',
    'ItemService',
    'FolderService',
    'PickListService',
    'DashboardService',
    'AuthService'
]
