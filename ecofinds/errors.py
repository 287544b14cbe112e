import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class APIError(Exception):
    status_code = 500
    message = 'Internal server error'

    def __init__(self, message=None, status_code=None):
        super().__init__(message or self.message)
        if message:
            self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(APIError):
    status_code = 400
    message = 'Invalid request'


class AuthError(APIError):
    status_code = 401
    message = 'Unauthorized'


class PermissionDenied(APIError):
    status_code = 403
    message = 'Not allowed.'


class NotFound(APIError):
    status_code = 404
    message = 'Not found'


class StoreError(APIError):
    """The relational store could not satisfy a read or write."""
    status_code = 500
    message = 'Store unavailable'


class EmptyCartError(ValidationError):
    message = 'Cart is empty'


class CheckoutError(APIError):
    message = 'Checkout failed'


def register_error_handlers(app):
    @app.errorhandler(APIError)
    def handle_api_error(err):
        return jsonify({'error': err.message}), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(err):
        return jsonify({'error': err.description}), err.code

    @app.errorhandler(Exception)
    def handle_unexpected(err):
        logger.exception('Unhandled error: %s', err)
        return jsonify({'error': 'Internal server error'}), 500
