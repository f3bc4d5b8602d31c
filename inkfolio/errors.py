from flask import jsonify
from werkzeug.exceptions import HTTPException


class ContentError(Exception):
    """Base for errors that carry an HTTP status and a GraphQL error code."""

    status_code = 500
    code = 'INTERNAL'
    default_message = 'Internal server error'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(ContentError):
    status_code = 401
    code = 'UNAUTHORIZED'
    default_message = 'Authentication required'


class InvalidToken(Unauthorized):
    default_message = 'Invalid or expired token'


class Forbidden(ContentError):
    status_code = 403
    code = 'FORBIDDEN'
    default_message = 'Admin privileges required'


class NotFound(ContentError):
    status_code = 404
    code = 'NOT_FOUND'
    default_message = 'Not found'


class ValidationError(ContentError):
    status_code = 400
    code = 'VALIDATION'
    default_message = 'Invalid input'


class HasDependents(ContentError):
    status_code = 400
    code = 'HAS_DEPENDENTS'
    default_message = 'Entity is still referenced'


class UpstreamFailure(ContentError):
    status_code = 500
    code = 'UPSTREAM_FAILURE'
    default_message = 'Upstream service failed'


def register_error_handlers(app):
    @app.errorhandler(ContentError)
    def handle_content_error(error):
        return jsonify({'error': error.message}), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'error': error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        app.logger.exception('Unhandled error: %s', error)
        return jsonify({'error': 'Internal server error'}), 500
