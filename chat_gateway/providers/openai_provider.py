"""OpenAI chat completions adapter.

Sends the conversation to ``POST /chat/completions`` either as a single-shot
call or as a server-sent-events stream whose deltas are concatenated into
one reply.
"""
from __future__ import annotations

from typing import Any

from chat_gateway.models.requests import ChatRequest, Message
from chat_gateway.models.responses import ChatResponse, TokenUsage
from chat_gateway.providers.base import NUMBER, BaseProvider

DEFAULT_PARAMETERS: dict[str, Any] = {
    "temperature": 0.7,
    "max_tokens": 1000,
    "top_p": 1,
    "presence_penalty": 0,
    "frequency_penalty": 0,
}


class OpenAIProvider(BaseProvider):
    """Adapter for the OpenAI chat completions API."""

    name = "openai"
    display_name = "OpenAI"
    allowed_parameters = {
        "temperature": NUMBER,
        "max_tokens": (int,),
        "top_p": NUMBER,
        "presence_penalty": NUMBER,
        "frequency_penalty": NUMBER,
        "stop": (str, list),
        "seed": (int,),
        "user": (str,),
        "logit_bias": (dict,),
    }

    def __init__(
        self,
        api_key: str | None,
        base_url: str = "https://api.openai.com/v1",
        model: str = "gpt-3.5-turbo",
        organization: str | None = None,
        **kwargs: Any,
    ) -> None:
        self._organization = organization
        super().__init__(api_key, base_url, model, **kwargs)

    def _default_headers(self) -> dict[str, str]:
        headers = super()._default_headers()
        if self._organization:
            headers["OpenAI-Organization"] = self._organization
        return headers

    def build_payload(self, request: ChatRequest) -> dict[str, Any]:
        """Shape a ChatRequest into the OpenAI request body."""
        payload: dict[str, Any] = {
            "model": self._model,
            "messages": [_to_openai_message(m) for m in request.messages],
        }
        payload.update(self.merge_parameters(DEFAULT_PARAMETERS, request.parameters))
        payload["stream"] = request.stream
        return payload

    def _complete(self, request: ChatRequest) -> ChatResponse:
        payload = self.build_payload(request)
        if request.stream:
            return self._complete_streaming(payload)

        data = self._post_json("/chat/completions", payload)
        choices = data.get("choices") or [{}]
        choice = choices[0] or {}
        reply = (choice.get("message") or {}).get("content") or ""

        usage = None
        raw_usage = data.get("usage")
        # compatible servers may send null counts
        if isinstance(raw_usage, dict) and raw_usage:
            usage = TokenUsage(
                prompt_tokens=raw_usage.get("prompt_tokens") or 0,
                completion_tokens=raw_usage.get("completion_tokens") or 0,
                total_tokens=raw_usage.get("total_tokens") or 0,
            )

        metadata = {}
        if choice.get("finish_reason"):
            metadata["finish_reason"] = choice["finish_reason"]
        return ChatResponse.success(reply, usage=usage, metadata=metadata)

    def _complete_streaming(self, payload: dict[str, Any]) -> ChatResponse:
        parts: list[str] = []
        for event in self._stream_events("/chat/completions", payload):
            choices = event.get("choices") or [{}]
            delta = (choices[0] or {}).get("delta") or {}
            content = delta.get("content")
            if content:
                parts.append(content)
        return ChatResponse.success("".join(parts))


def _to_openai_message(message: Message) -> dict[str, Any]:
    item: dict[str, Any] = {"role": message.role, "content": message.content}
    if message.name is not None:
        item["name"] = message.name
    if message.function_call is not None:
        item["function_call"] = message.function_call.model_dump()
    return item
