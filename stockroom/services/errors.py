"""
Domain errors raised by the service layer

Each error carries a stable ``code`` used on the wire so the client
library can rebuild the same exception from an API response.
"""


class ServiceError(Exception):
    """Base class for errors surfaced to API callers"""
    code = 'service_error'
    status_code = 500

    def __init__(self, message, **details):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self):
        data = {
            'error': self.code,
            'message': self.message,
            'status_code': self.status_code
        }
        if self.details:
            data['details'] = self.details
        return data


class InvalidTransition(ServiceError):
    code = 'invalid_transition'
    status_code = 409


class InvalidQuantity(ServiceError):
    code = 'invalid_quantity'
    status_code = 400


class InsufficientStock(ServiceError):
    code = 'insufficient_stock'
    status_code = 409


class NotFound(ServiceError):
    code = 'not_found'
    status_code = 404


class PickListLocked(ServiceError):
    code = 'pick_list_locked'
    status_code = 409


class PickConflict(ServiceError):
    code = 'pick_conflict'
    status_code = 409


class DuplicateValue(ServiceError):
    code = 'duplicate_value'
    status_code = 409


class InvalidInput(ServiceError):
    code = 'invalid_input'
    status_code = 400


class AuthError(ServiceError):
    code = 'unauthorized'
    status_code = 401


ERRORS_BY_CODE = {
    cls.code: cls for cls in (
        ServiceError, InvalidTransition, InvalidQuantity, InsufficientStock,
        NotFound, PickListLocked, PickConflict, DuplicateValue, InvalidInput,
        AuthError
    )
}


def error_from_payload(payload, status_code=None):
    """Rebuild a ServiceError from an API error body"""
    payload = payload or {}
    cls = ERRORS_BY_CODE.get(payload.get('error'), ServiceError)
    error = cls(payload.get('message') or 'Request failed', **(payload.get('details') or {}))
    if cls is ServiceError and status_code:
        error.status_code = status_code
    return error
