"""
Item, Folder and Tag Repository Implementations
"""

from typing import List, Optional
from datetime import datetime
from sqlalchemy import case, update
from stockroom.database import db
from stockroom.models import Item, ItemStatus, Folder, Tag
from .base import ItemRepositoryInterface, FolderRepositoryInterface, TagRepositoryInterface


class ItemRepository(ItemRepositoryInterface):
    """Concrete implementation of item repository"""

    def get_by_id(self, item_id: str, include_deleted: bool = False, lock: bool = False) -> Optional[Item]:
        """Get item by ID, active only unless asked otherwise"""
        query = Item.query.filter_by(id=item_id)
        if not include_deleted:
            query = query.filter(Item.status == ItemStatus.ACTIVE)
        if lock:
            query = query.with_for_update().populate_existing()
        return query.first()

    def get_by_barcode(self, code: str) -> Optional[Item]:
        """Exact barcode match first, then SKU"""
        active = Item.query.filter(Item.status == ItemStatus.ACTIVE)
        item = active.filter(Item.barcode == code).first()
        if item is None:
            item = active.filter(Item.sku == code).first()
        return item

    def sku_exists(self, sku: str) -> bool:
        return db.session.query(Item.id).filter(Item.sku == sku).first() is not None

    def list_active(self, folder_id: Optional[str] = None, scope_to_folder: bool = False) -> List[Item]:
        """
        Active items in insertion order

        With scope_to_folder, only items directly in folder_id (root items
        when folder_id is None) are returned.
        """
        query = Item.query.filter(Item.status == ItemStatus.ACTIVE)
        if scope_to_folder:
            if folder_id is None:
                query = query.filter(Item.folder_id.is_(None))
            else:
                query = query.filter(Item.folder_id == folder_id)
        return query.order_by(Item.created_at, Item.id).all()

    def list_in_folders(self, folder_ids: List[str]) -> List[Item]:
        if not folder_ids:
            return []
        return Item.query.filter(
            Item.status == ItemStatus.ACTIVE,
            Item.folder_id.in_(folder_ids)
        ).all()

    def add(self, item: Item) -> Item:
        db.session.add(item)
        db.session.flush()
        return item

    def decrement_stock(self, item_id: str, delta: int) -> bool:
        """
        Apply a signed stock decrement as one conditional UPDATE

        The row only changes when enough stock remains, so concurrent
        decrements can never drive quantity below zero.

        Returns:
            False when the guard rejected the update
        """
        result = db.session.execute(
            update(Item)
            .where(Item.id == item_id, Item.quantity >= delta)
            .values(quantity=Item.quantity - delta, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def adjust_stock(self, item_id: str, adjustment: int) -> bool:
        """
        Add a signed adjustment to stock in one UPDATE, clamped at zero

        Returns:
            False when the item row no longer exists
        """
        adjusted = Item.quantity + adjustment
        result = db.session.execute(
            update(Item)
            .where(Item.id == item_id)
            .values(
                quantity=case((adjusted < 0, 0), else_=adjusted),
                updated_at=datetime.utcnow()
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1


class FolderRepository(FolderRepositoryInterface):
    """Concrete implementation of folder repository"""

    def get_by_id(self, folder_id: str) -> Optional[Folder]:
        return Folder.query.filter_by(id=folder_id).first()

    def list_children(self, parent_id: Optional[str]) -> List[Folder]:
        query = Folder.query
        if parent_id is None:
            query = query.filter(Folder.parent_folder_id.is_(None))
        else:
            query = query.filter(Folder.parent_folder_id == parent_id)
        return query.order_by(Folder.name).all()

    def count_children(self, parent_id: str) -> int:
        return Folder.query.filter(Folder.parent_folder_id == parent_id).count()

    def descendant_ids(self, folder_id: str) -> List[str]:
        """The folder itself plus every folder below it, breadth first"""
        found = [folder_id]
        frontier = [folder_id]
        while frontier:
            rows = db.session.query(Folder.id).filter(Folder.parent_folder_id.in_(frontier)).all()
            frontier = [row.id for row in rows if row.id not in found]
            found.extend(frontier)
        return found

    def sku_exists(self, sku: str) -> bool:
        return db.session.query(Folder.id).filter(Folder.sku == sku).first() is not None

    def add(self, folder: Folder) -> Folder:
        db.session.add(folder)
        db.session.flush()
        return folder


class TagRepository(TagRepositoryInterface):
    """Concrete implementation of tag repository"""

    def list_all(self) -> List[Tag]:
        return Tag.query.order_by(Tag.name).all()

    def get_by_name(self, name: str) -> Optional[Tag]:
        return Tag.query.filter(Tag.name == name).first()

    def get_many(self, tag_ids: List[str]) -> List[Tag]:
        if not tag_ids:
            return []
        return Tag.query.filter(Tag.id.in_(tag_ids)).order_by(Tag.name).all()

    def add(self, tag: Tag) -> Tag:
        db.session.add(tag)
        db.session.flush()
        return tag
