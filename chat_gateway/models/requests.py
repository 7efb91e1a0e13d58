"""Pydantic models and validation for inbound chat requests."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictStr,
    ValidationError,
)

MessageRole = Literal["user", "assistant", "system"]
ModelName = Literal["openai", "gemini", "deepseek"]

SUPPORTED_MODELS: tuple[str, ...] = ("openai", "gemini", "deepseek")


class FunctionCall(BaseModel):
    """Function call attached to an assistant message."""
    model_config = ConfigDict(frozen=True)

    name: StrictStr
    arguments: StrictStr


class Message(BaseModel):
    """A single conversation turn.

    Attributes:
        role: Who produced the message.
        content: Message text, already trimmed (may be empty).
        name: Optional participant name.
        function_call: Optional function call; accepted as ``function_call``
            or ``functionCall`` on input.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    role: MessageRole
    content: StrictStr = ""
    name: Optional[StrictStr] = None
    function_call: Optional[FunctionCall] = Field(
        default=None,
        validation_alias=AliasChoices("function_call", "functionCall"),
    )


class ChatRequest(BaseModel):
    """Validated chat completion request.

    Unknown top-level keys are ignored.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    model: ModelName
    messages: list[Message] = Field(..., description="Conversation in turn order")
    stream: StrictBool = False
    parameters: dict[str, Any] = Field(default_factory=dict, description="Provider overrides")


@dataclass(frozen=True)
class ValidationFailure:
    """Every violated field of a rejected payload.

    Each violation is ``{"field": "messages.0.role", "message": ..., "type": ...}``.
    """
    violations: list[dict[str, Any]] = field(default_factory=list)


def _format_violations(exc: ValidationError) -> list[dict[str, Any]]:
    violations = []
    for err in exc.errors(include_url=False):
        violations.append({
            "field": ".".join(str(part) for part in err.get("loc", ())) or "body",
            "message": err.get("msg", "Invalid value"),
            "type": err.get("type", "value_error"),
        })
    return violations


def validate_chat_request(payload: Any) -> ChatRequest | ValidationFailure:
    """Validate a (normalized) payload into a ChatRequest.

    Pure function of its input: passing an already-validated ChatRequest
    or its ``model_dump()`` yields an equal ChatRequest.

    Args:
        payload: Parsed request body, typically a dict.

    Returns:
        The ChatRequest, or a ValidationFailure listing all violations.
    """
    if isinstance(payload, ChatRequest):
        payload = payload.model_dump()
    try:
        return ChatRequest.model_validate(payload)
    except ValidationError as e:
        return ValidationFailure(violations=_format_violations(e))
