"""DeepSeek chat completions adapter.

DeepSeek is always called single-shot; a requested ``stream`` is ignored.
"""
from __future__ import annotations

from typing import Any

import structlog

from chat_gateway.models.requests import ChatRequest
from chat_gateway.models.responses import ChatResponse
from chat_gateway.providers.base import NUMBER, BaseProvider

logger = structlog.get_logger(__name__)

DEFAULT_PARAMETERS: dict[str, Any] = {
    "temperature": 0.7,
    "max_tokens": 1000,
}


class DeepSeekProvider(BaseProvider):
    """Adapter for the DeepSeek chat completions API."""

    name = "deepseek"
    display_name = "DeepSeek"
    allowed_parameters = {
        "temperature": NUMBER,
        "max_tokens": (int,),
        "top_p": NUMBER,
        "presence_penalty": NUMBER,
        "frequency_penalty": NUMBER,
        "stop": (str, list),
    }

    def __init__(
        self,
        api_key: str | None,
        base_url: str = "https://api.deepseek.com",
        model: str = "deepseek-chat",
        **kwargs: Any,
    ) -> None:
        super().__init__(api_key, base_url, model, **kwargs)

    def build_payload(self, request: ChatRequest) -> dict[str, Any]:
        """Shape a ChatRequest into the DeepSeek request body."""
        payload: dict[str, Any] = {
            "model": self._model,
            "messages": [{"role": m.role, "content": m.content} for m in request.messages],
        }
        payload.update(self.merge_parameters(DEFAULT_PARAMETERS, request.parameters))
        return payload

    def _complete(self, request: ChatRequest) -> ChatResponse:
        if request.stream:
            logger.debug("stream_not_supported", provider=self.name)

        data = self._post_json("/chat/completions", self.build_payload(request))
        choices = data.get("choices") or [{}]
        reply = ((choices[0] or {}).get("message") or {}).get("content") or ""
        return ChatResponse.success(reply)
