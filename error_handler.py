"""
Error handling for the Ministry Tracker API.
Every error leaves the app as a JSON envelope; unexpected errors are logged
with their traceback and recorded as failed activity.
"""

import json
import logging
import traceback

from flask import jsonify, request
from flask_login import current_user
from flask_wtf.csrf import CSRFError
from werkzeug.exceptions import HTTPException

from extensions import db

logger = logging.getLogger(__name__)

SENSITIVE_FIELDS = ['password', 'password_hash', 'csrf_token', 'secret']


class ValidationError(Exception):
    """Raised when a request payload is missing or has invalid fields."""

    status_code = 400

    def __init__(self, message, field=None):
        super().__init__(message)
        self.message = message
        self.field = field


def error_response(message, status_code, **extra):
    payload = {'success': False, 'message': message}
    payload.update(extra)
    return jsonify(payload), status_code


def get_request_data():
    """Safely extract request data for error records."""
    try:
        data = {}
        if request.form:
            for key, value in request.form.items():
                if key.lower() not in SENSITIVE_FIELDS:
                    data[f'form_{key}'] = str(value)[:500]  # Limit length
        if request.is_json:
            json_data = request.get_json(silent=True)
            if isinstance(json_data, dict):
                filtered_json = {k: v for k, v in json_data.items() if k.lower() not in SENSITIVE_FIELDS}
                data['json_data'] = str(filtered_json)[:1000]
        if request.args:
            data['query_params'] = {k: v for k, v in request.args.items() if k.lower() not in SENSITIVE_FIELDS}
        return json.dumps(data) if data else None
    except Exception:
        return None


def record_server_error(error):
    """Log an unexpected error and keep an audit record of it."""
    from services.activity_log import log_activity

    error_traceback = traceback.format_exc()
    logger.error(f"Server Error on {request.method} {request.path}: {error}")
    logger.error(f"Traceback: {error_traceback}")

    user_id = current_user.id if current_user.is_authenticated else None
    log_activity(
        user_id=user_id,
        action='server_error',
        details={'path': request.path, 'method': request.method, 'request_data': get_request_data()},
        success=False,
        error_message=f"{type(error).__name__}: {error}"
    )


def register_error_handlers(app):
    """Attach JSON error handlers to the app."""

    @app.errorhandler(ValidationError)
    def handle_validation_error(error):
        extra = {'field': error.field} if error.field else {}
        return error_response(error.message, error.status_code, **extra)

    @app.errorhandler(CSRFError)
    def handle_csrf_error(error):
        return error_response('CSRF token missing or invalid. Please try again.', 400)

    @app.errorhandler(401)
    def unauthorized_error(error):
        return error_response('Unauthorized', 401)

    @app.errorhandler(403)
    def forbidden_error(error):
        return error_response(error.description or "You don't have permission to access this resource.", 403)

    @app.errorhandler(404)
    def not_found_error(error):
        return error_response(error.description or 'Not found', 404)

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return error_response(error.description or error.name, error.code)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        db.session.rollback()
        record_server_error(error)
        return error_response('An unexpected error occurred. Please try again later.', 500)
