"""Global Flask error handlers for consistent JSON error responses.

Failures that never reach the chat router (unknown routes, wrong methods,
unexpected exceptions) answer in the same failure shape as a chat call:
    { "reply": "", "error": "...", "errorType": "...", "suggestion": "..." }

Usage:
    from chat_gateway.middleware.error_handlers import register_error_handlers
    register_error_handlers(app)
"""
from __future__ import annotations

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

import structlog

from chat_gateway.models.responses import ChatResponse
from chat_gateway.services.error_normalizer import DEFAULT_ERROR_MESSAGE, normalize_error, safe_text
from chat_gateway.utils.exceptions import ChatGatewayError, ErrorKind

logger = structlog.get_logger(__name__)

_HTTP_ERROR_KINDS = {
    400: ErrorKind.VALIDATION_ERROR,
    401: ErrorKind.AUTHENTICATION_ERROR,
    403: ErrorKind.AUTHENTICATION_ERROR,
    415: ErrorKind.VALIDATION_ERROR,
}


def error_json(error: ChatGatewayError):
    """Create the JSON failure response for a normalized error.

    Returns:
        Tuple of (response, status_code).
    """
    response = ChatResponse.from_error(error)
    return jsonify(response.to_dict()), response.status_code


def register_error_handlers(app: Flask) -> None:
    """Register global error handlers on the Flask app.

    Args:
        app: Flask application instance.
    """

    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        """Werkzeug errors (404, 405, 413, ...) in the chat failure shape."""
        code = e.code or 500
        kind = _HTTP_ERROR_KINDS.get(code, ErrorKind.API_ERROR if code < 500 else ErrorKind.UNKNOWN_ERROR)
        return error_json(ChatGatewayError(
            message=e.name,
            status_code=code,
            error_type=kind,
            suggestion=e.description,
        ))

    @app.errorhandler(Exception)
    def handle_unexpected_error(e: Exception):
        """Last resort handler for unhandled exceptions."""
        logger.error(
            "unexpected_error",
            error=safe_text(e),
            error_type=type(e).__name__,
            exc_info=True,
        )
        return error_json(normalize_error(e, DEFAULT_ERROR_MESSAGE))
