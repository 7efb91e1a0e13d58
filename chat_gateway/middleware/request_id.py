"""Request ID middleware for log correlation.

Every request gets an X-Request-ID (the client's, when it sends one, else a
fresh UUID). The id is bound into the structlog context so adapter and
normalizer logs for one chat call can be correlated, and echoed back in
the response headers.
"""
from __future__ import annotations

import time
import uuid

import structlog
from flask import Flask, g, request

REQUEST_ID_HEADER = "X-Request-ID"


def init_request_id_middleware(app: Flask) -> None:
    """Register before/after hooks for request ID tracing.

    Args:
        app: Flask application instance.
    """
    logger = structlog.get_logger(__name__)

    @app.before_request
    def bind_request_context() -> None:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        g.request_id = request_id
        g.request_started = time.monotonic()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.path,
        )

    @app.after_request
    def tag_response(response):
        response.headers[REQUEST_ID_HEADER] = g.get("request_id", "unknown")

        started = g.get("request_started")
        logger.info(
            "request_completed",
            status=response.status_code,
            duration_ms=round((time.monotonic() - started) * 1000) if started else None,
        )
        return response
