"""
Pick Lists Controller - Pick list lifecycle, lines, comments and picking
"""

from flask import request
from flask_restx import Namespace, Resource, fields
from marshmallow import ValidationError
import logging

from stockroom.api.middlewares.auth import require_auth, current_user_id
from stockroom.services import PickListService, ServiceError
from stockroom.utils.error_handlers import validation_error_body
from stockroom.utils.schemas import (
    PickListRequestSchema, PickListUpdateSchema, PickListSearchSchema, AddLinesSchema,
    PickRequestSchema, TransitionRequestSchema, CommentRequestSchema
)

logger = logging.getLogger(__name__)

pick_lists_ns = Namespace('pick-lists', description='Pick list operations')

pick_list_request_schema = PickListRequestSchema()
pick_list_update_schema = PickListUpdateSchema(partial=True)
pick_list_search_schema = PickListSearchSchema()
add_lines_schema = AddLinesSchema()
pick_request_schema = PickRequestSchema()
transition_schema = TransitionRequestSchema()
comment_schema = CommentRequestSchema()

pick_model = pick_lists_ns.model('Pick', {
    'quantity_picked': fields.Integer(required=True, description='Total units picked for the line')
})

transition_model = pick_lists_ns.model('Transition', {
    'status': fields.String(required=True, description='Target status')
})


def _error(e, action):
    logger.error(f"Error {action}: {e}")
    return {'error': 'Internal server error'}, 500


@pick_lists_ns.route('')
class PickListList(Resource):
    method_decorators = [require_auth]

    def get(self):
        """Pick lists filtered by status and name, most recently updated first"""
        try:
            params = pick_list_search_schema.load(request.args.to_dict())
            return PickListService().list_pick_lists(**params), 200
        except ValidationError as e:
            return validation_error_body(e), 400
        except ServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            return _error(e, 'listing pick lists')

    def post(self):
        """Create a draft pick list"""
        try:
            data = pick_list_request_schema.load(request.get_json(silent=True) or {})
            return PickListService().create_pick_list(actor_id=current_user_id(), **data), 201
        except ValidationError as e:
            return validation_error_body(e), 400
        except ServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            return _error(e, 'creating pick list')


@pick_lists_ns.route('/<string:pick_list_id>')
class PickListDetail(Resource):
    method_decorators = [require_auth]

    def get(self, pick_list_id):
        """Pick list with lines, comments, progress and allowed transitions"""
        try:
            return PickListService().get_pick_list_detail(pick_list_id), 200
        except ServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            return _error(e, f'getting pick list {pick_list_id}')

    def put(self, pick_list_id):
        try:
            data = pick_list_update_schema.load(request.get_json(silent=True) or {})
            return PickListService().update_pick_list(pick_list_id, actor_id=current_user_id(), **data), 200
        except ValidationError as e:
            return validation_error_body(e), 400
        except ServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            return _error(e, f'updating pick list {pick_list_id}')

    def delete(self, pick_list_id):
        try:
            PickListService().delete_pick_list(pick_list_id)
            return {'ok': True}, 200
        except ServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            return _error(e, f'deleting pick list {pick_list_id}')


@pick_lists_ns.route('/<string:pick_list_id>/transition')
class PickListTransition(Resource):
    method_decorators = [require_auth]

    @pick_lists_ns.expect(transition_model)
    def post(self, pick_list_id):
        """Move the list to another status"""
        try:
            data = transition_schema.load(request.get_json(silent=True) or {})
            return PickListService().transition(pick_list_id, data['status'], actor_id=current_user_id()), 200
        except ValidationError as e:
            return validation_error_body(e), 400
        except ServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            return _error(e, f'transitioning pick list {pick_list_id}')


@pick_lists_ns.route('/<string:pick_list_id>/lines')
class PickListLines(Resource):
    method_decorators = [require_auth]

    def post(self, pick_list_id):
        """Append items to the list"""
        try:
            data = add_lines_schema.load(request.get_json(silent=True) or {})
            lines = PickListService().add_lines(pick_list_id, data['lines'], actor_id=current_user_id())
            return {'lines': lines}, 201
        except ValidationError as e:
            return validation_error_body(e), 400
        except ServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            return _error(e, f'adding lines to pick list {pick_list_id}')


@pick_lists_ns.route('/<string:pick_list_id>/comments')
class PickListComments(Resource):
    method_decorators = [require_auth]

    def post(self, pick_list_id):
        try:
            data = comment_schema.load(request.get_json(silent=True) or {})
            return PickListService().add_comment(pick_list_id, data['content'], actor_id=current_user_id()), 201
        except ValidationError as e:
            return validation_error_body(e), 400
        except ServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            return _error(e, f'commenting on pick list {pick_list_id}')


@pick_lists_ns.route('/lines/<string:line_id>')
class PickListLine(Resource):
    method_decorators = [require_auth]

    def delete(self, line_id):
        try:
            PickListService().remove_line(line_id)
            return {'ok': True}, 200
        except ServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            return _error(e, f'removing line {line_id}')


@pick_lists_ns.route('/lines/<string:line_id>/pick')
class PickLine(Resource):
    method_decorators = [require_auth]

    @pick_lists_ns.expect(pick_model)
    def post(self, line_id):
        """Set the picked quantity for a line and move the stock difference"""
        try:
            data = pick_request_schema.load(request.get_json(silent=True) or {})
            return PickListService().pick_line(line_id, data['quantity_picked'], actor_id=current_user_id()), 200
        except ValidationError as e:
            return validation_error_body(e), 400
        except ServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            return _error(e, f'picking line {line_id}')
