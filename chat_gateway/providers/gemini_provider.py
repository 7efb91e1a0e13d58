"""Gemini generateContent adapter.

Translates the conversation into Gemini ``contents`` (assistant turns become
the ``model`` role, everything else is ``user``) and calls either
``:generateContent`` or ``:streamGenerateContent?alt=sse``. Both paths end
in the same aggregated reply.
"""
from __future__ import annotations

from typing import Any

from chat_gateway.models.requests import ChatRequest, Message
from chat_gateway.models.responses import ChatResponse
from chat_gateway.providers.base import NUMBER, BaseProvider


class GeminiProvider(BaseProvider):
    """Adapter for the Gemini generative language API."""

    name = "gemini"
    display_name = "Gemini"
    # Placed under generationConfig, only when supplied
    allowed_parameters = {
        "temperature": NUMBER,
        "topP": NUMBER,
        "topK": (int,),
        "maxOutputTokens": (int,),
        "stopSequences": (list,),
        "candidateCount": (int,),
    }

    def __init__(
        self,
        api_key: str | None,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        model: str = "gemini-2.0-flash-001",
        **kwargs: Any,
    ) -> None:
        super().__init__(api_key, base_url, model, **kwargs)

    def _default_headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if self._api_key:
            headers["x-goog-api-key"] = self._api_key
        return headers

    def build_payload(self, request: ChatRequest) -> dict[str, Any]:
        """Shape a ChatRequest into the Gemini request body."""
        payload: dict[str, Any] = {
            "contents": [_to_gemini_content(m) for m in request.messages],
        }
        generation_config = self.merge_parameters({}, request.parameters)
        if generation_config:
            payload["generationConfig"] = generation_config
        return payload

    def _complete(self, request: ChatRequest) -> ChatResponse:
        payload = self.build_payload(request)

        if request.stream:
            parts = []
            for chunk in self._stream_events(
                f"/models/{self._model}:streamGenerateContent",
                payload,
                params={"alt": "sse"},
            ):
                text = _first_candidate_text(chunk)
                if text:
                    parts.append(text)
            return ChatResponse.success("".join(parts))

        data = self._post_json(f"/models/{self._model}:generateContent", payload)
        return ChatResponse.success(_first_candidate_text(data))


def _to_gemini_content(message: Message) -> dict[str, Any]:
    return {
        "role": "model" if message.role == "assistant" else "user",
        "parts": [{"text": message.content}],
    }


def _first_candidate_text(data: dict[str, Any]) -> str:
    """Concatenated text parts of the first candidate, or ``""``."""
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    content = (candidates[0] or {}).get("content") or {}
    return "".join(part.get("text") or "" for part in content.get("parts") or [])
