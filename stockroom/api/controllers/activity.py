"""
Activity and Dashboard Controller
"""

from flask import request
from flask_restx import Namespace, Resource
from marshmallow import ValidationError
import logging

from stockroom.api.middlewares.auth import require_auth
from stockroom.services import ActivityService, DashboardService
from stockroom.utils.error_handlers import validation_error_body
from stockroom.utils.schemas import ActivitySearchSchema

logger = logging.getLogger(__name__)

activity_ns = Namespace('activity', description='Audit trail')
dashboard_ns = Namespace('dashboard', description='Overview')

activity_search_schema = ActivitySearchSchema()


@activity_ns.route('')
class ActivityList(Resource):
    method_decorators = [require_auth]

    @activity_ns.doc(params={'category': 'all, item, pick_list or quantity'})
    def get(self):
        """Most recent activity first"""
        try:
            params = activity_search_schema.load(request.args.to_dict())
            return {'activity': ActivityService().list_activity(**params)}, 200
        except ValidationError as e:
            return validation_error_body(e), 400
        except Exception as e:
            logger.error(f"Error listing activity: {e}")
            return {'error': 'Internal server error'}, 500


@dashboard_ns.route('')
class Dashboard(Resource):
    method_decorators = [require_auth]

    def get(self):
        """Stock totals, active pick lists and recent activity"""
        try:
            return DashboardService().get_dashboard(), 200
        except Exception as e:
            logger.error(f"Error building dashboard: {e}")
            return {'error': 'Internal server error'}, 500
