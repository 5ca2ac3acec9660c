"""
Items Controller - Item CRUD, scanner lookup and manual stock changes
"""

from flask import request
from flask_restx import Namespace, Resource, fields
from marshmallow import ValidationError
import logging

from stockroom.api.middlewares.auth import require_auth, current_user_id
from stockroom.services import ItemService, ServiceError
from stockroom.utils.error_handlers import validation_error_body
from stockroom.utils.schemas import (
    ItemRequestSchema, ItemUpdateSchema, ItemSearchSchema, StockLevelSchema,
    QuantityAdjustmentSchema, MoveItemSchema
)

logger = logging.getLogger(__name__)

items_ns = Namespace('items', description='Item operations')

item_request_schema = ItemRequestSchema()
item_update_schema = ItemUpdateSchema(partial=True)
item_search_schema = ItemSearchSchema()
stock_level_schema = StockLevelSchema()
adjustment_schema = QuantityAdjustmentSchema()
move_schema = MoveItemSchema()

item_model = items_ns.model('Item', {
    'name': fields.String(required=True, description='Item name'),
    'sku': fields.String(description='Stock keeping unit, generated when omitted'),
    'barcode': fields.String(description='Scannable barcode'),
    'quantity': fields.Integer(description='Units in stock'),
    'min_quantity': fields.Integer(description='Low stock threshold'),
    'cost_price': fields.Float(description='Cost per unit'),
    'sell_price': fields.Float(description='Sell price per unit'),
    'folder_id': fields.String(description='Containing folder'),
    'tag_ids': fields.List(fields.String, description='Tags to assign')
})

adjustment_model = items_ns.model('QuantityAdjustment', {
    'adjustment': fields.Integer(required=True, description='Signed change in units'),
    'reason': fields.String(description='Why the stock changed')
})


@items_ns.route('')
class ItemList(Resource):
    method_decorators = [require_auth]

    @items_ns.doc('list_items')
    def get(self):
        """List active items with search, sort and low stock filter"""
        try:
            params = item_search_schema.load(request.args.to_dict())
            return ItemService().list_items(**params), 200
        except ValidationError as e:
            return validation_error_body(e), 400
        except ServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.error(f"Error listing items: {e}")
            return {'error': 'Internal server error'}, 500

    @items_ns.doc('create_item')
    @items_ns.expect(item_model)
    def post(self):
        """Create an item"""
        try:
            data = item_request_schema.load(request.get_json(silent=True) or {})
            return ItemService().create_item(actor_id=current_user_id(), **data), 201
        except ValidationError as e:
            return validation_error_body(e), 400
        except ServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.error(f"Error creating item: {e}")
            return {'error': 'Internal server error'}, 500


@items_ns.route('/low-stock')
class LowStockItems(Resource):
    method_decorators = [require_auth]

    def get(self):
        """Items at or below their threshold, fewest units first"""
        try:
            params = stock_level_schema.load(request.args.to_dict())
            return {'items': ItemService().low_stock_items(params['level'])}, 200
        except ValidationError as e:
            return validation_error_body(e), 400
        except ServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.error(f"Error listing low stock items: {e}")
            return {'error': 'Internal server error'}, 500


@items_ns.route('/lookup/<string:code>')
class ItemLookup(Resource):
    method_decorators = [require_auth]

    def get(self, code):
        """Find an item by barcode, falling back to SKU"""
        try:
            return ItemService().lookup_code(code), 200
        except ServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.error(f"Error looking up code {code}: {e}")
            return {'error': 'Internal server error'}, 500


@items_ns.route('/<string:item_id>')
class ItemDetail(Resource):
    method_decorators = [require_auth]

    def get(self, item_id):
        """Item with tags, folder and recent activity"""
        try:
            return ItemService().get_item_detail(item_id), 200
        except ServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.error(f"Error getting item {item_id}: {e}")
            return {'error': 'Internal server error'}, 500

    @items_ns.expect(item_model)
    def put(self, item_id):
        """Update item fields"""
        try:
            data = item_update_schema.load(request.get_json(silent=True) or {})
            return ItemService().update_item(item_id, actor_id=current_user_id(), **data), 200
        except ValidationError as e:
            return validation_error_body(e), 400
        except ServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.error(f"Error updating item {item_id}: {e}")
            return {'error': 'Internal server error'}, 500

    def delete(self, item_id):
        """Soft delete an item"""
        try:
            ItemService().delete_item(item_id, actor_id=current_user_id())
            return {'ok': True}, 200
        except ServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.error(f"Error deleting item {item_id}: {e}")
            return {'error': 'Internal server error'}, 500


@items_ns.route('/<string:item_id>/adjust')
class ItemAdjustment(Resource):
    method_decorators = [require_auth]

    @items_ns.expect(adjustment_model)
    def post(self, item_id):
        """Manually adjust stock; the result never drops below zero"""
        try:
            data = adjustment_schema.load(request.get_json(silent=True) or {})
            item = ItemService().adjust_quantity(
                item_id, data['adjustment'], reason=data.get('reason'), actor_id=current_user_id()
            )
            return item, 200
        except ValidationError as e:
            return validation_error_body(e), 400
        except ServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.error(f"Error adjusting item {item_id}: {e}")
            return {'error': 'Internal server error'}, 500


@items_ns.route('/<string:item_id>/move')
class ItemMove(Resource):
    method_decorators = [require_auth]

    def post(self, item_id):
        """Move an item to another folder, or to the root with null"""
        try:
            data = move_schema.load(request.get_json(silent=True) or {})
            return ItemService().move_item(item_id, data['folder_id'], actor_id=current_user_id()), 200
        except ValidationError as e:
            return validation_error_body(e), 400
        except ServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.error(f"Error moving item {item_id}: {e}")
            return {'error': 'Internal server error'}, 500
