"""Pydantic models for API response serialization."""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from chat_gateway.utils.exceptions import ChatGatewayError, ErrorKind


class TokenUsage(BaseModel):
    """Token counts reported by a provider."""
    model_config = ConfigDict(populate_by_name=True)

    prompt_tokens: int = Field(default=0, alias="promptTokens")
    completion_tokens: int = Field(default=0, alias="completionTokens")
    total_tokens: int = Field(default=0, alias="totalTokens")


class ChatResponse(BaseModel):
    """Unified response returned by every adapter and by the router.

    ``reply`` is always present (empty on failure) so callers never branch
    on field absence. On success ``error`` is None; on failure ``error``,
    ``error_type`` and usually ``suggestion`` are set.

    ``status_code`` is the HTTP status for the outer response and is not
    part of the JSON body.
    """
    model_config = ConfigDict(populate_by_name=True)

    reply: str = ""
    usage: Optional[TokenUsage] = None
    metadata: Optional[dict[str, Any]] = None
    error: Optional[str] = None
    error_type: Optional[ErrorKind] = Field(default=None, alias="errorType")
    suggestion: Optional[str] = None
    details: Any = None
    status_code: int = Field(default=200, exclude=True)

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @classmethod
    def success(
        cls,
        reply: str,
        usage: TokenUsage | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> ChatResponse:
        return cls(reply=reply or "", usage=usage, metadata=metadata or None)

    @classmethod
    def from_error(cls, error: ChatGatewayError) -> ChatResponse:
        """Build the failure shape from a normalized error."""
        return cls(
            reply="",
            error=error.message,
            error_type=error.error_type,
            suggestion=error.suggestion,
            details=error.details,
            status_code=error.status_code,
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON body with wire field names, omitting unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
