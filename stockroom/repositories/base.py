"""
Base Repository Interface - Abstract base classes

Write methods stage changes on the session and flush; the calling service
owns the transaction boundary and commits once per unit of work.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from stockroom.models import Item, Folder, Tag, PickList, PickListItem, PickListComment, ActivityLog, Profile


class ItemRepositoryInterface(ABC):
    """Abstract base class for item repository"""

    @abstractmethod
    def get_by_id(self, item_id: str, include_deleted: bool = False, lock: bool = False) -> Optional[Item]:
        pass

    @abstractmethod
    def get_by_barcode(self, code: str) -> Optional[Item]:
        pass

    @abstractmethod
    def sku_exists(self, sku: str) -> bool:
        pass

    @abstractmethod
    def list_active(self, folder_id: Optional[str] = None, scope_to_folder: bool = False) -> List[Item]:
        pass

    @abstractmethod
    def add(self, item: Item) -> Item:
        pass

    @abstractmethod
    def decrement_stock(self, item_id: str, delta: int) -> bool:
        pass

    @abstractmethod
    def adjust_stock(self, item_id: str, adjustment: int) -> bool:
        pass


class FolderRepositoryInterface(ABC):
    """Abstract base class for folder repository"""

    @abstractmethod
    def get_by_id(self, folder_id: str) -> Optional[Folder]:
        pass

    @abstractmethod
    def list_children(self, parent_id: Optional[str]) -> List[Folder]:
        pass

    @abstractmethod
    def descendant_ids(self, folder_id: str) -> List[str]:
        pass

    @abstractmethod
    def add(self, folder: Folder) -> Folder:
        pass


class TagRepositoryInterface(ABC):
    """Abstract base class for tag repository"""

    @abstractmethod
    def list_all(self) -> List[Tag]:
        pass

    @abstractmethod
    def get_many(self, tag_ids: List[str]) -> List[Tag]:
        pass

    @abstractmethod
    def add(self, tag: Tag) -> Tag:
        pass


class PickListRepositoryInterface(ABC):
    """Abstract base class for pick list repository"""

    @abstractmethod
    def get_by_id(self, pick_list_id: str, lock: bool = False) -> Optional[PickList]:
        pass

    @abstractmethod
    def search(self, status: Optional[str] = None, query: Optional[str] = None) -> List[PickList]:
        pass

    @abstractmethod
    def get_line(self, line_id: str, lock: bool = False) -> Optional[PickListItem]:
        pass

    @abstractmethod
    def max_sort_order(self, pick_list_id: str) -> int:
        pass

    @abstractmethod
    def record_pick(self, line_id: str, previous: int, quantity_picked: int, actor_id: Optional[str]) -> bool:
        pass

    @abstractmethod
    def add_comment(self, comment: PickListComment) -> PickListComment:
        pass


class ActivityRepositoryInterface(ABC):
    """Abstract base class for activity log repository"""

    @abstractmethod
    def add(self, entry: ActivityLog) -> ActivityLog:
        pass

    @abstractmethod
    def recent(self, limit: int = 10) -> List[ActivityLog]:
        pass

    @abstractmethod
    def for_item(self, item_id: str, limit: int = 20) -> List[ActivityLog]:
        pass


class ProfileRepositoryInterface(ABC):
    """Abstract base class for profile repository"""

    @abstractmethod
    def get_by_id(self, profile_id: str) -> Optional[Profile]:
        pass

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[Profile]:
        pass

    @abstractmethod
    def add(self, profile: Profile) -> Profile:
        pass
