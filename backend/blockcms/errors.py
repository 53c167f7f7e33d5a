from flask import jsonify
from blockcms.domain.exceptions import (
    AccessDenied,
    ContentNotFound,
    EditConflict,
    ValidationFailure,
)


def _error_response(error, status, **extra):
    response = jsonify({
        "error": type(error).__name__,
        "message": str(error),
        **extra
    })
    response.status_code = status
    return response


def register_error_handlers(app):
    @app.errorhandler(AccessDenied)
    def handle_access_denied(error):
        return _error_response(error, 403)

    @app.errorhandler(ContentNotFound)
    def handle_content_not_found(error):
        return _error_response(error, 404)

    @app.errorhandler(EditConflict)
    def handle_edit_conflict(error):
        return _error_response(error, 409)

    @app.errorhandler(ValidationFailure)
    def handle_validation_failure(error):
        return _error_response(error, 400, errors=error.errors)
