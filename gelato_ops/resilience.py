"""Global resilience and error-handler registration.

Synopsis:
Registers teardown and error handlers for database rollback safety, JSON
maintenance responses, and CSRF failure handling.

Glossary:
- Resilience handler: Global request teardown/error behavior for known failures.
- CSRF failure: Cross-site request forgery token/session validation error.
"""

from __future__ import annotations

import logging

from flask import jsonify, request
from flask_wtf.csrf import CSRFError
from sqlalchemy.exc import DBAPIError, OperationalError
from werkzeug.exceptions import HTTPException

from .extensions import db
from .services.errors import ServiceError

logger = logging.getLogger(__name__)


def register_resilience_handlers(app) -> None:
    """Install global DB rollback plus JSON error handlers."""

    @app.teardown_request
    def _rollback_on_error(exc):
        if exc is not None:
            db.session.rollback()

    @app.errorhandler(OperationalError)
    @app.errorhandler(DBAPIError)
    def _db_error_handler(error):
        db.session.rollback()
        logger.error("Database unavailable while serving %s: %s", request.path, error)
        return jsonify({"error": "Service temporarily unavailable"}), 503

    @app.errorhandler(ServiceError)
    def _service_error_handler(error: ServiceError):
        db.session.rollback()
        return jsonify({"error": error.message}), error.status_code

    @app.errorhandler(CSRFError)
    def _csrf_error_handler(err: CSRFError):
        details = {
            "path": request.path,
            "endpoint": request.endpoint,
            "remote_addr": request.headers.get("X-Forwarded-For", request.remote_addr),
            "reason": err.description,
        }
        app.logger.warning("CSRF validation failed: %s", details)
        return jsonify({"error": "csrf_validation_failed", "reason": err.description}), 400

    @app.errorhandler(HTTPException)
    def _http_error_handler(error: HTTPException):
        return jsonify({"error": error.description or error.name}), error.code

    @app.errorhandler(Exception)
    def _unhandled_error_handler(error: Exception):
        db.session.rollback()
        logger.exception("Unhandled error while serving %s %s", request.method, request.path)
        return jsonify({"error": "Internal server error"}), 500
