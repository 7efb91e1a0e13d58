"""Health check endpoint.

Exposes GET /health reporting, for each provider adapter, whether it can
accept requests (credential configured). No provider is contacted.

Response format:
    {
        "status": "healthy" | "degraded" | "unavailable",
        "version": "1.0.0",
        "providers": {
            "openai":   {"configured": true,  "model": "gpt-3.5-turbo"},
            "gemini":   {"configured": false, "model": "gemini-2.0-flash-001"},
            "deepseek": {"configured": true,  "model": "deepseek-chat"}
        }
    }
"""
from __future__ import annotations

from flask import Blueprint, current_app, jsonify

health_bp = Blueprint("health", __name__)

APP_VERSION = "1.0.0"


@health_bp.route("/health", methods=["GET"])
def health_check():
    """Application health check endpoint.

    Returns:
        200 if at least one provider is usable.
        503 if none is.
    """
    router = current_app.config["CHAT_ROUTER"]
    providers = {
        name: {"configured": adapter.is_configured, "model": adapter.model}
        for name, adapter in router.providers.items()
    }

    configured = [p["configured"] for p in providers.values()]
    if configured and all(configured):
        status = "healthy"
    elif any(configured):
        status = "degraded"
    else:
        status = "unavailable"

    response = {
        "status": status,
        "version": APP_VERSION,
        "providers": providers,
    }
    return jsonify(response), 200 if any(configured) else 503
