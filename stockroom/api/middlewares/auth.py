"""
JWT Authentication and Authorization Middleware
Provides consistent authentication and role-based access control
"""

from functools import wraps
from flask import request, g
import logging

from stockroom.services.auth_service import decode_token
from stockroom.services.errors import AuthError

logger = logging.getLogger(__name__)


def get_token_from_request():
    """Extract JWT token from Authorization header"""
    auth_header = request.headers.get('Authorization', '')

    if not auth_header:
        return None

    if not auth_header.startswith('Bearer '):
        raise AuthError('Authorization header must start with Bearer')

    parts = auth_header.split(' ')
    if len(parts) != 2:
        raise AuthError('Invalid Authorization header format')

    return parts[1]


def _user_from_payload(payload):
    user_id = payload.get('sub')
    if not user_id:
        raise AuthError('Token missing user identifier')
    return {
        'id': user_id,
        'email': payload.get('email'),
        'roles': payload.get('roles', [])
    }


def require_auth(f):
    """
    Decorator to require valid JWT authentication
    Attaches user info to g.current_user
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            token = get_token_from_request()
            if not token:
                raise AuthError('No authentication token provided')

            g.current_user = _user_from_payload(decode_token(token))
            logger.debug(f'Authentication successful for user: {g.current_user["id"]}')

            return f(*args, **kwargs)

        except AuthError as e:
            logger.warning(f'Authentication failed: {e.message}')
            return e.to_dict(), e.status_code

    return decorated_function


def require_roles(*required_roles):
    """
    Decorator to require specific roles
    Usage: @require_roles('admin')
    """
    def decorator(f):
        @wraps(f)
        @require_auth
        def decorated_function(*args, **kwargs):
            user = g.current_user
            user_roles = user.get('roles', [])

            if not any(role in user_roles for role in required_roles):
                logger.warning(
                    f'Authorization failed: User {user.get("id")} lacks required roles. '
                    f'Required: {required_roles}, Has: {user_roles}'
                )
                return {
                    'error': 'forbidden',
                    'message': f'Required roles: {", ".join(required_roles)}',
                    'status_code': 403
                }, 403

            return f(*args, **kwargs)

        return decorated_function
    return decorator


def get_current_user():
    """
    Get current authenticated user from Flask g object
    Returns None if not authenticated
    """
    return getattr(g, 'current_user', None)


def current_user_id():
    user = get_current_user()
    return user['id'] if user else None
