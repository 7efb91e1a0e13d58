"""Error taxonomy and exception hierarchy for the chat gateway.

Every failure surfaced to a client is described by exactly one ErrorKind
and an HTTP status code. Application errors inherit from ChatGatewayError,
which already carries the normalized shape consumed by the error
normalizer and the global Flask error handlers.

Hierarchy:
    ChatGatewayError (base, already normalized)
    ├── ProviderConfigurationError  — provider credential missing
    ├── RequestValidationError      — inbound payload failed validation
    └── UnsupportedModelError       — no adapter for the requested model
    UpstreamStatusError             — provider answered with HTTP >= 400
"""
from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Closed set of normalized failure categories."""

    API_ERROR = "API_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    UNSUPPORTED_MODEL = "UNSUPPORTED_MODEL"
    RATE_LIMIT_ERROR = "RATE_LIMIT_ERROR"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


# Status used when an error is constructed from its kind alone
CANONICAL_STATUS: dict[ErrorKind, int] = {
    ErrorKind.API_ERROR: 502,
    ErrorKind.VALIDATION_ERROR: 400,
    ErrorKind.CONFIGURATION_ERROR: 500,
    ErrorKind.UNSUPPORTED_MODEL: 400,
    ErrorKind.RATE_LIMIT_ERROR: 429,
    ErrorKind.AUTHENTICATION_ERROR: 401,
    ErrorKind.NETWORK_ERROR: 503,
    ErrorKind.UNKNOWN_ERROR: 500,
}


class ChatGatewayError(Exception):
    """Base exception for the gateway, already in normalized form.

    Args:
        message: Stable, user-facing message.
        status_code: HTTP status for the outer response. Defaults to the
            canonical status of ``error_type``.
        error_type: The ErrorKind describing the failure.
        details: Optional JSON-serializable diagnostics payload.
        suggestion: Optional actionable hint for the user.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_type: ErrorKind = ErrorKind.UNKNOWN_ERROR,
        details: Any = None,
        suggestion: str | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.status_code = status_code if status_code is not None else CANONICAL_STATUS[error_type]
        self.details = details
        self.suggestion = suggestion
        super().__init__(self.message)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"status_code={self.status_code}, error_type={self.error_type.value})"
        )


# ── Configuration ─────────────────────────────────────────────────────

class ProviderConfigurationError(ChatGatewayError):
    """Raised when a provider's API key is not configured."""

    def __init__(self, provider_name: str) -> None:
        self.provider_name = provider_name
        super().__init__(
            message=f"{provider_name} API key is not configured",
            status_code=500,
            error_type=ErrorKind.CONFIGURATION_ERROR,
            suggestion=f"Please configure your {provider_name} API key in the environment variables.",
        )


# ── Request Errors ───────────────────────────────────────────────────

class RequestValidationError(ChatGatewayError):
    """Raised when the inbound chat payload fails schema validation."""

    def __init__(self, violations: list[dict[str, Any]]) -> None:
        self.violations = violations
        super().__init__(
            message="Invalid request format",
            status_code=400,
            error_type=ErrorKind.VALIDATION_ERROR,
            details=violations,
            suggestion="Please check your message format and try again.",
        )


class UnsupportedModelError(ChatGatewayError):
    """Raised when no provider adapter is registered for a model."""

    def __init__(self, model: Any, supported: list[str] | None = None) -> None:
        self.model = model
        suggestion = None
        if supported:
            suggestion = f"Please select one of the supported models: {', '.join(supported)}."
        super().__init__(
            message="Unsupported model",
            status_code=400,
            error_type=ErrorKind.UNSUPPORTED_MODEL,
            details={"model": model if isinstance(model, str) else repr(model)},
            suggestion=suggestion,
        )


# ── Upstream Errors ──────────────────────────────────────────────────

class UpstreamStatusError(Exception):
    """Raised by provider adapters when a provider answers with HTTP >= 400.

    Not normalized: the error normalizer maps it through the status table.

    Args:
        provider_name: Human-readable provider name.
        status_code: HTTP status returned by the provider.
        payload: Parsed JSON error body, or raw text when not JSON.
    """

    def __init__(self, provider_name: str, status_code: int, payload: Any = None) -> None:
        self.provider_name = provider_name
        self.status_code = status_code
        self.payload = payload
        super().__init__(f"{provider_name} returned HTTP {status_code}")

    @property
    def upstream_message(self) -> str | None:
        """Error message supplied by the provider, when it sent one."""
        payload = self.payload
        # Gemini wraps errors in a one-element list when streaming
        if isinstance(payload, list) and payload:
            payload = payload[0]
        if isinstance(payload, dict):
            error = payload.get("error")
            if isinstance(error, dict) and isinstance(error.get("message"), str):
                return error["message"]
            if isinstance(error, str):
                return error
        return None
