"""Inbound payload normalization applied before schema validation.

Provides:
- normalize_content(): Trim message content and default it to empty text.
- normalize_payload(): Apply content normalization to every message of a
  raw chat payload, leaving everything else for validation to judge.
"""
from __future__ import annotations

from typing import Any


def normalize_content(content: Any) -> Any:
    """Trim message content, defaulting absent content to ``""``.

    Numbers are coerced to text. Other non-text values are returned
    unchanged so that validation reports them.

    Examples:
        >>> normalize_content("  Hi ")
        'Hi'
        >>> normalize_content(None)
        ''
        >>> normalize_content(42)
        '42'
    """
    if content is None:
        return ""
    if isinstance(content, str):
        return content.strip()
    if isinstance(content, (int, float)) and not isinstance(content, bool):
        return str(content).strip()
    return content


def normalize_payload(payload: Any) -> Any:
    """Return a copy of ``payload`` with every message's content normalized.

    Message order and all other message keys (``name``, ``function_call``)
    are preserved. Payloads that are not a mapping, or whose ``messages``
    is not a list, are returned as-is.

    Args:
        payload: Parsed JSON request body.

    Returns:
        Normalized payload, ready for ``validate_chat_request``.
    """
    if not isinstance(payload, dict):
        return payload

    messages = payload.get("messages")
    if not isinstance(messages, list):
        return payload

    cleaned = []
    for message in messages:
        if isinstance(message, dict):
            message = {**message, "content": normalize_content(message.get("content"))}
        cleaned.append(message)

    return {**payload, "messages": cleaned}
