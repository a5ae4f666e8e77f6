"""Error handlers for the application.

Framework-level failures (unknown route, wrong method, oversized payload,
crash) use the same error envelope as the creation pipeline.
"""
from __future__ import annotations

import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

from idshield.core.envelopes import ErrorMessage, Envelope, ERROR_STATUS

logger = logging.getLogger(__name__)


def _error_response(app, code: str, status: int):
    catalog = app.extensions.get("idshield.catalog")
    message = ErrorMessage(code=code)
    if catalog is not None:
        catalog.enrich(message)
    return jsonify(Envelope(status=ERROR_STATUS, messages=[message]).to_dict()), status


def register_error_handlers(app):
    """Register error handlers with the Flask app."""

    @app.errorhandler(404)
    def not_found(error):
        return _error_response(app, "not_found", 404)

    @app.errorhandler(405)
    def method_not_allowed(error):
        return _error_response(app, "method_not_allowed", 405)

    @app.errorhandler(413)
    def request_too_large(error):
        """Handle payload too large errors (MAX_CONTENT_LENGTH)."""
        return _error_response(app, "payload_too_large", 413)

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 Internal Server Error."""
        logger.error(f"Internal error: {error}", exc_info=True)
        return _error_response(app, "internal_error", 500)

    @app.errorhandler(Exception)
    def handle_exception(error):
        """Handle uncaught exceptions."""
        # Pass through HTTP errors
        if isinstance(error, HTTPException):
            return error

        logger.error(f"Unhandled exception: {error}", exc_info=True)
        return _error_response(app, "internal_error", 500)
