"""
Domain errors raised by the service layer and their JSON rendering.

Every failure is reported synchronously to the caller; nothing here is retried.
"""
import logging

from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class EcoChainError(Exception):
    """Base class for errors surfaced to API callers"""
    status_code = 400
    code = 'error'

    def __init__(self, message=None):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__

    def to_dict(self):
        return {'error': self.message, 'code': self.code}


class Unauthenticated(EcoChainError):
    """Not authenticated"""
    status_code = 401
    code = 'unauthenticated'


class Unauthorized(EcoChainError):
    """Not allowed to act on this record"""
    status_code = 403
    code = 'unauthorized'


class NotFound(EcoChainError):
    """Record not found"""
    status_code = 404
    code = 'not_found'


class InvalidState(EcoChainError):
    """Operation not valid in the current state"""
    status_code = 409
    code = 'invalid_state'


class AlreadyRated(InvalidState):
    """Rating has already been submitted"""
    code = 'already_rated'


class InsufficientBalance(EcoChainError):
    """Insufficient EcoPoints"""
    status_code = 400
    code = 'insufficient_balance'


class ValidationError(EcoChainError):
    """Invalid input"""
    status_code = 400
    code = 'validation_error'


def register_error_handlers(app):
    """Attach JSON error handlers to the Flask app"""
    from ecochain import db

    @app.errorhandler(EcoChainError)
    def handle_domain_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        db.session.rollback()
        logger.exception('Database error while handling request')
        return jsonify({'error': 'Database error', 'code': 'database_error'}), 500

    @app.errorhandler(404)
    def handle_not_found(error):
        return jsonify({'error': 'Resource not found', 'code': 'not_found'}), 404

    @app.errorhandler(429)
    def ratelimit_handler(error):
        return jsonify({
            'error': 'Too many requests. Please try again later.',
            'code': 'rate_limited',
        }), 429
