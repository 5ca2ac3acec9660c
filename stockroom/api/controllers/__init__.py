"""
Controllers package initialization
"""

from flask import Blueprint
from flask_restx import Api

from stockroom.api.controllers.items import items_ns
from stockroom.api.controllers.folders import folders_ns, tags_ns
from stockroom.api.controllers.pick_lists import pick_lists_ns
from stockroom.api.controllers.activity import activity_ns, dashboard_ns
from stockroom.api.controllers.auth import auth_ns
from stockroom.api.controllers.health import health_bp

api_bp = Blueprint('api', __name__)
api = Api(api_bp, version='1.0', title='Stockroom API',
          description='Inventory, folders and pick lists', doc='/docs/')

for namespace in (items_ns, folders_ns, tags_ns, pick_lists_ns, activity_ns, dashboard_ns, auth_ns):
    api.add_namespace(namespace)

__all__ = ['api_bp', 'api', 'health_bp']
