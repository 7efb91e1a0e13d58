"""Chat blueprint, the gateway's public endpoint.

Routes:
    POST /api/ai-chat             → Route by the body's ``model``
    POST /api/ai-chat/<provider>  → Route to a pinned provider
"""
from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from chat_gateway.models.responses import ChatResponse

chat_bp = Blueprint("chat", __name__, url_prefix="/api/ai-chat")


def _respond(response: ChatResponse):
    return jsonify(response.to_dict()), response.status_code


@chat_bp.route("", methods=["POST"])
def chat():
    """Forward a conversation to the provider selected by ``model``.

    Request JSON:
        {
            "model": "deepseek",
            "messages": [{"role": "user", "content": "Hi"}],
            "stream": false,              // optional
            "parameters": {"temperature": 0.2}   // optional
        }

    Response JSON (200):
        { "reply": "Hello!" }

    Response JSON (error, status from the normalized error):
        {
            "reply": "",
            "error": "Invalid request format",
            "errorType": "VALIDATION_ERROR",
            "suggestion": "Please check your message format and try again.",
            "details": [...]
        }
    """
    router = current_app.config["CHAT_ROUTER"]
    return _respond(router.route(request.get_data()))


@chat_bp.route("/<provider>", methods=["POST"])
def chat_with_provider(provider: str):
    """Same contract as ``POST /api/ai-chat`` with the provider pinned by path."""
    router = current_app.config["CHAT_ROUTER"]
    return _respond(router.route(request.get_data(), provider=provider))
