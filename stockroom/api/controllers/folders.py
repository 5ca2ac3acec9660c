"""
Folders and Tags Controller
"""

from flask import request
from flask_restx import Namespace, Resource
from marshmallow import ValidationError
import logging

from stockroom.api.middlewares.auth import require_auth
from stockroom.services import FolderService, ItemService, ServiceError
from stockroom.utils.error_handlers import validation_error_body
from stockroom.utils.schemas import FolderRequestSchema, FolderUpdateSchema, TagRequestSchema

logger = logging.getLogger(__name__)

folders_ns = Namespace('folders', description='Folder hierarchy')
tags_ns = Namespace('tags', description='Item tags')

folder_request_schema = FolderRequestSchema()
folder_update_schema = FolderUpdateSchema(partial=True)
tag_request_schema = TagRequestSchema()


@folders_ns.route('')
class FolderList(Resource):
    method_decorators = [require_auth]

    @folders_ns.doc(params={'parent_id': 'List children of this folder; roots when omitted'})
    def get(self):
        """Folders with unit and value totals"""
        try:
            return {'folders': FolderService().list_folders(request.args.get('parent_id'))}, 200
        except ServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.error(f"Error listing folders: {e}")
            return {'error': 'Internal server error'}, 500

    def post(self):
        """Create a folder"""
        try:
            data = folder_request_schema.load(request.get_json(silent=True) or {})
            return FolderService().create_folder(**data), 201
        except ValidationError as e:
            return validation_error_body(e), 400
        except ServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.error(f"Error creating folder: {e}")
            return {'error': 'Internal server error'}, 500


@folders_ns.route('/<string:folder_id>')
class FolderDetail(Resource):
    method_decorators = [require_auth]

    def get(self, folder_id):
        """Folder with breadcrumbs and children"""
        try:
            return FolderService().get_folder(folder_id), 200
        except ServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.error(f"Error getting folder {folder_id}: {e}")
            return {'error': 'Internal server error'}, 500

    def put(self, folder_id):
        """Rename, restyle or re-parent a folder"""
        try:
            data = folder_update_schema.load(request.get_json(silent=True) or {})
            return FolderService().update_folder(folder_id, **data), 200
        except ValidationError as e:
            return validation_error_body(e), 400
        except ServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.error(f"Error updating folder {folder_id}: {e}")
            return {'error': 'Internal server error'}, 500


@tags_ns.route('')
class TagList(Resource):
    method_decorators = [require_auth]

    def get(self):
        try:
            return {'tags': ItemService().list_tags()}, 200
        except Exception as e:
            logger.error(f"Error listing tags: {e}")
            return {'error': 'Internal server error'}, 500

    def post(self):
        try:
            data = tag_request_schema.load(request.get_json(silent=True) or {})
            return ItemService().create_tag(data['name'], data.get('colour')), 201
        except ValidationError as e:
            return validation_error_body(e), 400
        except ServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.error(f"Error creating tag: {e}")
            return {'error': 'Internal server error'}, 500
