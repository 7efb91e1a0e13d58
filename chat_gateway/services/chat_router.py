"""Chat router: single entry point from raw payload to ChatResponse.

Handles the per-request pipeline:
1. Parse the raw body (when bytes/text) and trim message content
2. Validate the payload into a ChatRequest (fail fast, no I/O)
3. Dispatch to the provider adapter registered for the requested model
4. Relay the adapter's already-normalized response unchanged

The router is stateless. Anything that escapes steps 1–3 is normalized
once here, so no exception crosses this boundary.
"""
from __future__ import annotations

import json
from typing import Any, Mapping

import structlog

from chat_gateway.models.requests import ValidationFailure, validate_chat_request
from chat_gateway.models.responses import ChatResponse
from chat_gateway.providers.base import BaseProvider
from chat_gateway.services.error_normalizer import build_error_response
from chat_gateway.utils.exceptions import RequestValidationError, UnsupportedModelError
from chat_gateway.utils.sanitizer import normalize_payload

logger = structlog.get_logger(__name__)


class ChatRouter:
    """Validates chat payloads and dispatches them to provider adapters.

    Args:
        providers: Adapter per model name (``openai``, ``gemini``, ``deepseek``).
    """

    def __init__(self, providers: Mapping[str, BaseProvider]) -> None:
        self._providers = dict(providers)

    @property
    def providers(self) -> dict[str, BaseProvider]:
        return self._providers

    def route(self, raw_payload: Any, provider: str | None = None) -> ChatResponse:
        """Process one chat request.

        Args:
            raw_payload: Request body as bytes/str JSON, or an already
                parsed mapping.
            provider: Pin dispatch to this adapter instead of the body's
                ``model`` (the body is still fully validated).

        Returns:
            The adapter's ChatResponse, or a normalized failure response.
        """
        try:
            if provider is not None and provider not in self._providers:
                raise UnsupportedModelError(provider, sorted(self._providers))

            payload = raw_payload
            if isinstance(payload, (bytes, bytearray, str)):
                payload = json.loads(payload)
            payload = normalize_payload(payload)

            result = validate_chat_request(payload)
            if isinstance(result, ValidationFailure):
                logger.info(
                    "chat_validation_failed",
                    violations=len(result.violations),
                    fields=[v["field"] for v in result.violations],
                )
                raise RequestValidationError(result.violations)

            target = provider or result.model
            adapter = self._providers.get(target)
            if adapter is None:
                raise UnsupportedModelError(target, sorted(self._providers))

            logger.info(
                "chat_dispatch",
                model=target,
                messages_count=len(result.messages),
                stream=result.stream,
            )
            return adapter.complete(result)
        except Exception as e:
            return build_error_response(e)
