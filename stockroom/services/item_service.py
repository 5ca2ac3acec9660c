"""
Item Service - Business logic for items, tags and manual stock changes
"""

from typing import List, Dict, Any, Optional
from datetime import datetime
import logging
import random

from flask import current_app
from sqlalchemy.exc import IntegrityError

from stockroom.database import db, transaction
from stockroom.events import get_change_feed, INSERT, UPDATE
from stockroom.models import Item, ItemStatus, Tag, ActionType
from stockroom.repositories import ItemRepository, FolderRepository, TagRepository
from stockroom.services.activity_service import ActivityService
from stockroom.services.errors import ServiceError, NotFound, DuplicateValue, InvalidInput
from stockroom.utils.filters import apply_item_view, filter_stock_level, paginate

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    'name', 'description', 'sku', 'barcode', 'quantity', 'min_quantity',
    'cost_price', 'sell_price', 'weight', 'photos', 'folder_id', 'location', 'notes'
)

SKU_ATTEMPTS = 50


def photo_url(key: Optional[str]) -> Optional[str]:
    """Resolve a storage key to its public URL; absolute URLs pass through"""
    if not key:
        return None
    if key.startswith('http'):
        return key
    base = current_app.config['PHOTO_BASE_URL'].rstrip('/')
    return f"{base}/{current_app.config['PHOTO_BUCKET']}/{key.lstrip('/')}"


def generate_sku(exists, prefix: Optional[str] = None) -> str:
    """
    Prefix plus four random digits, retried until ``exists`` says it is free
    """
    prefix = prefix or current_app.config['SKU_PREFIX']
    for _ in range(SKU_ATTEMPTS):
        sku = f"{prefix}{random.randint(0, 9999):04d}"
        if not exists(sku):
            return sku
    raise ServiceError(f"Could not generate a free SKU with prefix {prefix}")


class ItemService:
    """Business logic for item management"""

    def __init__(self, change_feed=None):
        self.item_repo = ItemRepository()
        self.folder_repo = FolderRepository()
        self.tag_repo = TagRepository()
        self.activity = ActivityService()
        self.change_feed = change_feed or get_change_feed()

    def _serialize(self, item: Item) -> Dict[str, Any]:
        data = item.to_dict()
        data['photo_urls'] = [photo_url(key) for key in (item.photos or [])]
        return data

    def _get_or_404(self, item_id: str, lock: bool = False) -> Item:
        item = self.item_repo.get_by_id(item_id, lock=lock)
        if not item:
            raise NotFound(f"Item {item_id} not found", item_id=item_id)
        return item

    def _check_folder(self, folder_id: Optional[str]):
        if folder_id and not self.folder_repo.get_by_id(folder_id):
            raise NotFound(f"Folder {folder_id} not found", folder_id=folder_id)

    def _resolve_tags(self, tag_ids: List[str]) -> List[Tag]:
        tags = self.tag_repo.get_many(tag_ids)
        missing = set(tag_ids) - {tag.id for tag in tags}
        if missing:
            raise NotFound(f"Unknown tags: {', '.join(sorted(missing))}")
        return tags

    def _notify(self, event: str, item: Item):
        self.change_feed.notify('items', event, {'id': item.id, 'folder_id': item.folder_id})

    def create_item(self, actor_id: Optional[str] = None, **data) -> Dict[str, Any]:
        """Create a new item, generating a SKU when none is given"""
        try:
            tag_ids = data.pop('tag_ids', None) or []
            self._check_folder(data.get('folder_id'))
            if not data.get('sku'):
                data['sku'] = generate_sku(self.item_repo.sku_exists)

            with transaction():
                item = Item(
                    status=ItemStatus.ACTIVE,
                    created_by=actor_id,
                    **{key: value for key, value in data.items() if key in EDITABLE_FIELDS}
                )
                item.tags = self._resolve_tags(tag_ids)
                self.item_repo.add(item)
                self.activity.record(
                    ActionType.ITEM_CREATED, actor_id, item_id=item.id,
                    details={'item_name': item.name}
                )

            logger.info(f"Created item {item.id} ({item.sku})")
            self._notify(INSERT, item)
            return self._serialize(item)

        except IntegrityError:
            raise DuplicateValue(f"Item with SKU {data.get('sku')} already exists", sku=data.get('sku'))
        except ServiceError as e:
            logger.warning(f"Item creation rejected: {e.message}")
            raise
        except Exception as e:
            logger.error(f"Error creating item: {str(e)}")
            raise

    def update_item(self, item_id: str, actor_id: Optional[str] = None, **data) -> Dict[str, Any]:
        """Update editable fields; tag_ids replaces the tag set"""
        try:
            item = self._get_or_404(item_id)
            if 'folder_id' in data:
                self._check_folder(data['folder_id'])
            tag_ids = data.pop('tag_ids', None)

            with transaction():
                for key, value in data.items():
                    if key in EDITABLE_FIELDS:
                        setattr(item, key, value)
                if tag_ids is not None:
                    item.tags = self._resolve_tags(tag_ids)
                item.updated_at = datetime.utcnow()
                self.activity.record(
                    ActionType.ITEM_UPDATED, actor_id, item_id=item.id,
                    details={'item_name': item.name}
                )

            self._notify(UPDATE, item)
            return self._serialize(item)

        except IntegrityError:
            raise DuplicateValue(f"Item with SKU {data.get('sku')} already exists", sku=data.get('sku'))
        except ServiceError as e:
            logger.warning(f"Item update rejected for {item_id}: {e.message}")
            raise
        except Exception as e:
            logger.error(f"Error updating item {item_id}: {str(e)}")
            raise

    def delete_item(self, item_id: str, actor_id: Optional[str] = None) -> bool:
        """Soft delete: the row stays for history and existing pick lists"""
        item = self._get_or_404(item_id)
        with transaction():
            item.status = ItemStatus.DELETED
            item.updated_at = datetime.utcnow()
            self.activity.record(
                ActionType.ITEM_DELETED, actor_id, item_id=item.id,
                details={'item_name': item.name}
            )
        logger.info(f"Deleted item {item_id}")
        self._notify(UPDATE, item)
        return True

    def adjust_quantity(self, item_id: str, adjustment: int, reason: Optional[str] = None,
                        actor_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Manual stock adjustment, independent of pick lists

        The result is clamped at zero rather than rejected. The row is locked
        and the arithmetic runs in the UPDATE, never on a stale read.
        """
        if isinstance(adjustment, bool) or not isinstance(adjustment, int):
            raise InvalidInput("Adjustment must be a whole number", adjustment=adjustment)
        try:
            with transaction():
                item = self._get_or_404(item_id, lock=True)
                old_quantity = item.quantity
                if not self.item_repo.adjust_stock(item.id, adjustment):
                    raise NotFound(f"Item {item_id} not found", item_id=item_id)
                db.session.refresh(item)
                new_quantity = item.quantity
                self.activity.record(
                    ActionType.QUANTITY_ADJUSTED, actor_id, item_id=item.id,
                    details={
                        'item_name': item.name,
                        'old_qty': old_quantity,
                        'new_qty': new_quantity,
                        'adjustment': adjustment,
                        'reason': reason
                    }
                )

            logger.info(f"Adjusted item {item_id}: {old_quantity} -> {new_quantity}")
            self._notify(UPDATE, item)
            return self._serialize(item)

        except ServiceError:
            raise
        except Exception as e:
            logger.error(f"Error adjusting quantity for item {item_id}: {str(e)}")
            raise

    def move_item(self, item_id: str, folder_id: Optional[str], actor_id: Optional[str] = None) -> Dict[str, Any]:
        item = self._get_or_404(item_id)
        self._check_folder(folder_id)
        previous = item.folder_id
        with transaction():
            item.folder_id = folder_id
            item.updated_at = datetime.utcnow()
            self.activity.record(
                ActionType.ITEM_MOVED, actor_id, item_id=item.id,
                details={'item_name': item.name, 'from_folder_id': previous, 'to_folder_id': folder_id}
            )
        self._notify(UPDATE, item)
        return self._serialize(item)

    def get_item_detail(self, item_id: str) -> Dict[str, Any]:
        """Item with tags, folder and recent history"""
        item = self._get_or_404(item_id)
        data = self._serialize(item)
        data['folder'] = item.folder.to_dict() if item.folder else None
        data['activity'] = self.activity.for_item(item_id, limit=20)
        return data

    def lookup_code(self, code: str) -> Dict[str, Any]:
        """Scanner lookup by barcode, then SKU"""
        code = (code or '').strip()
        if not code:
            raise InvalidInput("Barcode is required")
        item = self.item_repo.get_by_barcode(code)
        if not item:
            raise NotFound(f"No item found for barcode: {code}", barcode=code)
        return self._serialize(item)

    def list_items(self, search: Optional[str] = None, sort_by: str = 'name', low_stock: bool = False,
                   descending: bool = False, folder_id: Optional[str] = None, scope_to_folder: bool = False,
                   page: int = 1, per_page: int = 20) -> Dict[str, Any]:
        """Searchable, sortable item listing"""
        try:
            items = self.item_repo.list_active(folder_id=folder_id, scope_to_folder=scope_to_folder)
            view = apply_item_view(items, search=search, sort_by=sort_by,
                                   low_stock=low_stock, descending=descending)
            result = paginate(view, page, per_page)
            result['items'] = [self._serialize(item) for item in result['items']]
            return result
        except ValueError as e:
            raise InvalidInput(str(e))
        except Exception as e:
            logger.error(f"Error listing items: {str(e)}")
            raise

    def low_stock_items(self, level: str = 'all') -> List[Dict[str, Any]]:
        try:
            items = filter_stock_level(self.item_repo.list_active(), level)
        except ValueError as e:
            raise InvalidInput(str(e))
        return [self._serialize(item) for item in items]

    def list_tags(self) -> List[Dict[str, Any]]:
        return [tag.to_dict() for tag in self.tag_repo.list_all()]

    def create_tag(self, name: str, colour: Optional[str] = None) -> Dict[str, Any]:
        name = (name or '').strip()
        if not name:
            raise InvalidInput("Tag name is required")
        if self.tag_repo.get_by_name(name):
            raise DuplicateValue(f"Tag {name} already exists", name=name)
        with transaction():
            tag = self.tag_repo.add(Tag(name=name, colour=colour))
        self.change_feed.notify('tags', INSERT, {'id': tag.id})
        return tag.to_dict()
