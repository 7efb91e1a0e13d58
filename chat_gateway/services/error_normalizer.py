"""Error normalizer: maps any exception into the gateway's error taxonomy.

``normalize_error`` is total: it produces a ChatGatewayError for every input
and never raises. Recognized shapes, checked in order:

1. ChatGatewayError: already normalized, returned unchanged
2. UpstreamStatusError: provider HTTP status, mapped via API_ERROR_MESSAGES
3. Network failure: httpx transport errors or connectivity wording
4. Anything else: UNKNOWN_ERROR with the caller's default message

Usage:
    from chat_gateway.services.error_normalizer import build_error_response

    response = build_error_response(exc, "Failed to get response from OpenAI")
"""
from __future__ import annotations

from typing import Any, NamedTuple

import httpx
import structlog

from chat_gateway.models.responses import ChatResponse
from chat_gateway.utils.exceptions import (
    ChatGatewayError,
    ErrorKind,
    UpstreamStatusError,
)

logger = structlog.get_logger(__name__)

DEFAULT_ERROR_MESSAGE = "An unexpected error occurred"
DEFAULT_SUGGESTION = "Please try again later or contact support if the issue persists."

_NETWORK_SIGNALS = ("network", "connect")


class ErrorInfo(NamedTuple):
    message: str
    type: ErrorKind
    suggestion: str


# 429 stays API_ERROR (not RATE_LIMIT_ERROR) for client compatibility.
API_ERROR_MESSAGES: dict[int, ErrorInfo] = {
    429: ErrorInfo(
        "The selected AI model is currently at capacity.",
        ErrorKind.API_ERROR,
        "Please try again later or select a different model.",
    ),
    401: ErrorInfo(
        "API key is invalid or not configured.",
        ErrorKind.AUTHENTICATION_ERROR,
        "Please check your API key in the settings.",
    ),
    403: ErrorInfo(
        "Access to the AI model is forbidden.",
        ErrorKind.AUTHENTICATION_ERROR,
        "Please verify your API key and permissions.",
    ),
    500: ErrorInfo(
        "The AI service is experiencing issues.",
        ErrorKind.API_ERROR,
        DEFAULT_SUGGESTION,
    ),
    503: ErrorInfo(
        "The AI service is temporarily unavailable.",
        ErrorKind.API_ERROR,
        "Please try again in a few minutes.",
    ),
    400: ErrorInfo(
        "Invalid request format.",
        ErrorKind.VALIDATION_ERROR,
        "Please check your input and try again.",
    ),
}

NETWORK_ERROR_INFO = ErrorInfo(
    "Unable to connect to the AI service.",
    ErrorKind.NETWORK_ERROR,
    "Please check your internet connection and try again.",
)

TIMEOUT_ERROR_INFO = ErrorInfo(
    "The AI service did not respond in time.",
    ErrorKind.NETWORK_ERROR,
    "Please try again in a few moments.",
)

# Kinds whose status is fixed regardless of the upstream status
_FIXED_STATUS = {
    ErrorKind.VALIDATION_ERROR: 400,
    ErrorKind.CONFIGURATION_ERROR: 500,
}


def safe_text(error: object) -> str:
    """``str(error)``, or ``""`` when the object's ``__str__`` raises."""
    try:
        return str(error)
    except Exception:
        return ""


def _describe(error: object) -> dict[str, Any]:
    """JSON-safe diagnostics for an arbitrary thrown value."""
    return {"exception": type(error).__name__, "message": safe_text(error)}


def _from_upstream_status(error: UpstreamStatusError) -> ChatGatewayError:
    status = error.status_code
    info = API_ERROR_MESSAGES.get(status)
    if info is None:
        info = ErrorInfo(
            f"API Error ({status}): {error.upstream_message or str(error)}",
            ErrorKind.API_ERROR,
            "Please try again later.",
        )
    return ChatGatewayError(
        message=info.message,
        status_code=_FIXED_STATUS.get(info.type, status),
        error_type=info.type,
        details=error.payload,
        suggestion=info.suggestion,
    )


def _is_network_failure(error: BaseException) -> bool:
    if isinstance(error, httpx.TransportError):
        return True
    text = safe_text(error).lower()
    return any(signal in text for signal in _NETWORK_SIGNALS)


def normalize_error(
    error: object,
    default_message: str = DEFAULT_ERROR_MESSAGE,
) -> ChatGatewayError:
    """Classify an arbitrary thrown value into a ChatGatewayError.

    Args:
        error: Any exception (or other value) caught at a boundary.
        default_message: Message used when the error is unrecognized.

    Returns:
        A normalized ChatGatewayError. Never raises.
    """
    if isinstance(error, ChatGatewayError):
        return error

    if isinstance(error, UpstreamStatusError):
        return _from_upstream_status(error)

    if isinstance(error, BaseException) and _is_network_failure(error):
        info = TIMEOUT_ERROR_INFO if isinstance(error, httpx.TimeoutException) else NETWORK_ERROR_INFO
        return ChatGatewayError(
            message=info.message,
            status_code=503,
            error_type=info.type,
            details=_describe(error),
            suggestion=info.suggestion,
        )

    return ChatGatewayError(
        message=default_message,
        status_code=500,
        error_type=ErrorKind.UNKNOWN_ERROR,
        details=_describe(error) if error is not None else None,
        suggestion=DEFAULT_SUGGESTION,
    )


def build_error_response(
    error: object,
    default_message: str = DEFAULT_ERROR_MESSAGE,
) -> ChatResponse:
    """Normalize ``error`` and wrap it in the failure ChatResponse shape."""
    normalized = normalize_error(error, default_message)
    logger.warning(
        "chat_error_normalized",
        error_type=normalized.error_type.value,
        status_code=normalized.status_code,
        source=type(error).__name__,
    )
    return ChatResponse.from_error(normalized)
