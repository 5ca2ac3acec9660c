"""
Auth Controller - Registration, sign-in, profile and unlock PIN
"""

from flask import request
from flask_restx import Namespace, Resource, fields
from marshmallow import ValidationError
import logging

from stockroom.api.middlewares.auth import require_auth, current_user_id
from stockroom.services import AuthService, ServiceError
from stockroom.utils.error_handlers import validation_error_body
from stockroom.utils.schemas import (
    RegisterRequestSchema, SignInRequestSchema, ProfileUpdateSchema, PinRequestSchema
)

logger = logging.getLogger(__name__)

auth_ns = Namespace('auth', description='Authentication and profile')

register_schema = RegisterRequestSchema()
sign_in_schema = SignInRequestSchema()
profile_update_schema = ProfileUpdateSchema(partial=True)
pin_schema = PinRequestSchema()

credentials_model = auth_ns.model('Credentials', {
    'email': fields.String(required=True),
    'password': fields.String(required=True)
})


@auth_ns.route('/register')
class Register(Resource):

    @auth_ns.expect(credentials_model)
    def post(self):
        try:
            data = register_schema.load(request.get_json(silent=True) or {})
            return AuthService().register(**data), 201
        except ValidationError as e:
            return validation_error_body(e), 400
        except ServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.error(f"Error registering: {e}")
            return {'error': 'Internal server error'}, 500


@auth_ns.route('/sign-in')
class SignIn(Resource):

    @auth_ns.expect(credentials_model)
    def post(self):
        """Exchange email and password for a bearer token"""
        try:
            data = sign_in_schema.load(request.get_json(silent=True) or {})
            return AuthService().sign_in(data['email'], data['password']), 200
        except ValidationError as e:
            return validation_error_body(e), 400
        except ServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.error(f"Error signing in: {e}")
            return {'error': 'Internal server error'}, 500


@auth_ns.route('/profile')
class ProfileResource(Resource):
    method_decorators = [require_auth]

    def get(self):
        try:
            return AuthService().get_profile(current_user_id()), 200
        except ServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.error(f"Error loading profile: {e}")
            return {'error': 'Internal server error'}, 500

    def put(self):
        try:
            data = profile_update_schema.load(request.get_json(silent=True) or {})
            return AuthService().update_profile(current_user_id(), **data), 200
        except ValidationError as e:
            return validation_error_body(e), 400
        except ServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.error(f"Error updating profile: {e}")
            return {'error': 'Internal server error'}, 500


@auth_ns.route('/pin')
class Pin(Resource):
    method_decorators = [require_auth]

    def post(self):
        """Set or replace the unlock PIN"""
        try:
            data = pin_schema.load(request.get_json(silent=True) or {})
            return AuthService().set_pin(current_user_id(), data['pin']), 200
        except ValidationError as e:
            return validation_error_body(e), 400
        except ServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.error(f"Error setting PIN: {e}")
            return {'error': 'Internal server error'}, 500

    def delete(self):
        try:
            return AuthService().clear_pin(current_user_id()), 200
        except ServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.error(f"Error clearing PIN: {e}")
            return {'error': 'Internal server error'}, 500


@auth_ns.route('/pin/verify')
class PinVerify(Resource):
    method_decorators = [require_auth]

    def post(self):
        try:
            data = pin_schema.load(request.get_json(silent=True) or {})
            return {'valid': AuthService().verify_pin(current_user_id(), data['pin'])}, 200
        except ValidationError as e:
            return validation_error_body(e), 400
        except ServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.error(f"Error verifying PIN: {e}")
            return {'error': 'Internal server error'}, 500
