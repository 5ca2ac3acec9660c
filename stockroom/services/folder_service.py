"""
Folder Service - Folder tree, aggregates and breadcrumbs
"""

from typing import List, Dict, Any, Optional
from datetime import datetime
import logging

from stockroom.database import transaction
from stockroom.events import get_change_feed, INSERT, UPDATE
from stockroom.models import Folder
from stockroom.repositories import FolderRepository, ItemRepository
from stockroom.services.errors import ServiceError, NotFound, DuplicateValue, InvalidInput

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('name', 'icon', 'colour', 'description', 'sku')


class FolderService:
    """Business logic for the folder hierarchy"""

    def __init__(self, change_feed=None):
        self.folder_repo = FolderRepository()
        self.item_repo = ItemRepository()
        self.change_feed = change_feed or get_change_feed()

    def _get_or_404(self, folder_id: str) -> Folder:
        folder = self.folder_repo.get_by_id(folder_id)
        if not folder:
            raise NotFound(f"Folder {folder_id} not found", folder_id=folder_id)
        return folder

    def _aggregates(self, folder: Folder) -> Dict[str, Any]:
        items = self.item_repo.list_in_folders(self.folder_repo.descendant_ids(folder.id))
        return {
            'subfolder_count': self.folder_repo.count_children(folder.id),
            'unit_count': sum(item.quantity for item in items),
            'total_value': round(sum(item.stock_value for item in items), 2)
        }

    def _serialize(self, folder: Folder) -> Dict[str, Any]:
        data = folder.to_dict()
        data.update(self._aggregates(folder))
        return data

    def breadcrumbs(self, folder_id: str) -> List[Dict[str, Any]]:
        """Path from the root down to the folder"""
        path = []
        seen = set()
        folder = self._get_or_404(folder_id)
        while folder is not None and folder.id not in seen:
            seen.add(folder.id)
            path.append({'id': folder.id, 'name': folder.name})
            folder = folder.parent
        return list(reversed(path))

    def list_folders(self, parent_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """Direct children of parent_id, or root folders"""
        try:
            if parent_id:
                self._get_or_404(parent_id)
            return [self._serialize(folder) for folder in self.folder_repo.list_children(parent_id)]
        except ServiceError:
            raise
        except Exception as e:
            logger.error(f"Error listing folders under {parent_id}: {str(e)}")
            raise

    def get_folder(self, folder_id: str) -> Dict[str, Any]:
        folder = self._get_or_404(folder_id)
        data = self._serialize(folder)
        data['breadcrumbs'] = self.breadcrumbs(folder_id)
        data['children'] = [self._serialize(child) for child in self.folder_repo.list_children(folder_id)]
        return data

    def create_folder(self, name: str, parent_folder_id: Optional[str] = None, **data) -> Dict[str, Any]:
        try:
            name = (name or '').strip()
            if not name:
                raise InvalidInput("Folder name is required")
            if parent_folder_id:
                self._get_or_404(parent_folder_id)
            if data.get('sku') and self.folder_repo.sku_exists(data['sku']):
                raise DuplicateValue(f"Folder with SKU {data['sku']} already exists", sku=data['sku'])

            with transaction():
                folder = self.folder_repo.add(Folder(
                    name=name,
                    parent_folder_id=parent_folder_id,
                    **{key: value for key, value in data.items() if key in EDITABLE_FIELDS}
                ))

            logger.info(f"Created folder {folder.id} ({folder.name})")
            self.change_feed.notify('folders', INSERT, {'id': folder.id, 'parent_folder_id': parent_folder_id})
            return self._serialize(folder)

        except ServiceError as e:
            logger.warning(f"Folder creation rejected: {e.message}")
            raise
        except Exception as e:
            logger.error(f"Error creating folder: {str(e)}")
            raise

    def update_folder(self, folder_id: str, **data) -> Dict[str, Any]:
        """Update fields; parent_folder_id re-parents and must not create a cycle"""
        try:
            folder = self._get_or_404(folder_id)
            if 'name' in data:
                data['name'] = (data['name'] or '').strip()
                if not data['name']:
                    raise InvalidInput("Folder name is required")
            if data.get('sku') and data['sku'] != folder.sku and self.folder_repo.sku_exists(data['sku']):
                raise DuplicateValue(f"Folder with SKU {data['sku']} already exists", sku=data['sku'])

            reparent = 'parent_folder_id' in data
            new_parent = data.get('parent_folder_id')
            if reparent and new_parent:
                self._get_or_404(new_parent)
                if new_parent in self.folder_repo.descendant_ids(folder_id):
                    raise InvalidInput(
                        "A folder cannot be moved into itself or one of its subfolders",
                        folder_id=folder_id, parent_folder_id=new_parent
                    )

            with transaction():
                for key, value in data.items():
                    if key in EDITABLE_FIELDS:
                        setattr(folder, key, value)
                if reparent:
                    folder.parent_folder_id = new_parent
                folder.updated_at = datetime.utcnow()

            self.change_feed.notify('folders', UPDATE, {'id': folder.id, 'parent_folder_id': folder.parent_folder_id})
            return self._serialize(folder)

        except ServiceError as e:
            logger.warning(f"Folder update rejected for {folder_id}: {e.message}")
            raise
        except Exception as e:
            logger.error(f"Error updating folder {folder_id}: {str(e)}")
            raise
