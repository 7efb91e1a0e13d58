"""Abstract base provider adapter with credential checks, parameter merging,
structured logging, and error normalization.

All provider adapters (OpenAI, Gemini, DeepSeek) inherit from this class.
The public ``complete()`` never raises: every failure is converted into the
unified failure ChatResponse.

Features:
- Persistent connection pooling via httpx.Client
- Bounded outbound timeout (expiry is normalized as NETWORK_ERROR)
- Credential precondition checked before any network I/O
- Typed defaults merged with a validated ``parameters`` overlay
- Server-sent-events streaming helpers folded into one reply
- Structured logging for every request/response
"""
from __future__ import annotations

import json
import time
from abc import ABC, abstractmethod
from typing import Any, Iterator, Mapping

import httpx
import structlog

from chat_gateway.models.requests import ChatRequest
from chat_gateway.models.responses import ChatResponse
from chat_gateway.services.error_normalizer import build_error_response, safe_text
from chat_gateway.utils.exceptions import ProviderConfigurationError, UpstreamStatusError

logger = structlog.get_logger(__name__)

NUMBER = (int, float)


def _matches(value: Any, expected: tuple[type, ...]) -> bool:
    # bool is an int subclass but never a valid numeric override
    if isinstance(value, bool):
        return bool in expected
    return isinstance(value, expected)


def _stream_error(event: Any) -> Any:
    """The ``error`` member of an SSE event, or None for a normal chunk."""
    # Gemini wraps errors in a one-element list
    if isinstance(event, list) and event:
        event = event[0]
    if isinstance(event, dict):
        return event.get("error")
    return None


def _stream_error_status(error: Any) -> int:
    code = error.get("code") if isinstance(error, dict) else None
    if isinstance(code, int) and not isinstance(code, bool) and code >= 400:
        return code
    return 502


class BaseProvider(ABC):
    """Abstract base class for chat completion provider adapters.

    Subclasses set ``name`` (the model identifier routed to them),
    ``display_name``, ``allowed_parameters``, and implement ``_complete``.

    Args:
        api_key: Provider credential, or None when not configured.
        base_url: The provider's API base URL (no trailing slash).
        model: Upstream model identifier.
        timeout: Outbound request timeout in seconds.
        strict_parameters: Drop undeclared or mistyped parameter overrides.
        require_api_key: Whether a missing key is a configuration error.
        transport: Optional httpx transport (used by tests).
    """

    name: str = ""
    display_name: str = ""
    # Override key -> accepted value types
    allowed_parameters: Mapping[str, tuple[type, ...]] = {}

    def __init__(
        self,
        api_key: str | None,
        base_url: str,
        model: str,
        timeout: int = 60,
        strict_parameters: bool = True,
        require_api_key: bool = True,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._strict_parameters = strict_parameters
        self._require_api_key = require_api_key

        self._client = httpx.Client(
            base_url=self._base_url,
            timeout=httpx.Timeout(timeout, connect=10),
            headers=self._default_headers(),
            transport=transport,
        )

    def close(self) -> None:
        """Close the underlying HTTP client and release connections."""
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    @property
    def model(self) -> str:
        return self._model

    @property
    def is_configured(self) -> bool:
        """Whether requests can be sent (credential present or optional)."""
        return bool(self._api_key) or not self._require_api_key

    # ── Public API ────────────────────────────────────────────────────

    def complete(self, request: ChatRequest) -> ChatResponse:
        """Run one chat completion against the provider.

        Args:
            request: A validated ChatRequest.

        Returns:
            ChatResponse: success with the aggregated reply, or the
            normalized failure shape. Never raises.
        """
        try:
            if not self.is_configured:
                raise ProviderConfigurationError(self.display_name)

            logger.info(
                "provider_request",
                provider=self.name,
                model=self._model,
                messages_count=len(request.messages),
                stream=request.stream,
            )

            start = time.monotonic()
            response = self._complete(request)
            duration_ms = round((time.monotonic() - start) * 1000)

            logger.info(
                "provider_response",
                provider=self.name,
                reply_length=len(response.reply),
                has_usage=response.usage is not None,
                duration_ms=duration_ms,
            )
            return response

        except Exception as e:
            logger.error(
                "provider_error",
                provider=self.name,
                error=safe_text(e),
                error_type=type(e).__name__,
            )
            return build_error_response(e, f"Failed to get response from {self.display_name}")

    # ── Hooks ─────────────────────────────────────────────────────────

    @abstractmethod
    def _complete(self, request: ChatRequest) -> ChatResponse:
        """Provider-specific request shaping, call, and extraction.

        May raise; ``complete()`` normalizes whatever escapes.
        """
        ...

    def _default_headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    # ── Request helpers ───────────────────────────────────────────────

    def merge_parameters(
        self,
        defaults: Mapping[str, Any],
        overrides: Mapping[str, Any] | None,
    ) -> dict[str, Any]:
        """Merge provider defaults with request overrides (later wins).

        In strict mode, only keys declared in ``allowed_parameters`` whose
        values have an accepted type are kept; the rest are dropped and
        logged.

        Args:
            defaults: Provider defaults.
            overrides: The request's ``parameters`` mapping.

        Returns:
            A new dict of merged parameters.
        """
        merged = dict(defaults)
        if not overrides:
            return merged

        if not self._strict_parameters:
            merged.update(overrides)
            return merged

        dropped = []
        for key, value in overrides.items():
            expected = self.allowed_parameters.get(key)
            if expected is None or not _matches(value, expected):
                dropped.append(key)
                continue
            merged[key] = value

        if dropped:
            logger.warning("parameters_dropped", provider=self.name, keys=sorted(dropped))
        return merged

    def _post_json(self, path: str, payload: dict[str, Any], params: dict[str, str] | None = None) -> Any:
        """POST a JSON body and return the parsed JSON response.

        Raises:
            UpstreamStatusError: When the provider answers with HTTP >= 400.
        """
        response = self._client.post(path, json=payload, params=params)
        self._raise_for_status(response)
        return response.json()

    def _stream_events(
        self, path: str, payload: dict[str, Any], params: dict[str, str] | None = None
    ) -> Iterator[dict[str, Any]]:
        """POST a JSON body and yield each server-sent event's JSON data.

        Events are yielded in arrival order; ``[DONE]`` ends the stream and
        lines that are not ``data:`` fields are skipped.

        Raises:
            UpstreamStatusError: When the provider answers with HTTP >= 400,
                or sends an error event after the stream has started.
        """
        with self._client.stream("POST", path, json=payload, params=params) as response:
            if response.status_code >= 400:
                response.read()
                self._raise_for_status(response)
            for line in response.iter_lines():
                line = line.strip()
                if not line.startswith("data:"):
                    continue
                data = line[len("data:"):].strip()
                if not data:
                    continue
                if data == "[DONE]":
                    break
                event = json.loads(data)
                error = _stream_error(event)
                if error is not None:
                    raise UpstreamStatusError(self.display_name, _stream_error_status(error), event)
                yield event

    def _raise_for_status(self, response: httpx.Response) -> None:
        if response.status_code < 400:
            return
        try:
            payload: Any = response.json()
        except ValueError:
            payload = response.text[:1000]
        raise UpstreamStatusError(self.display_name, response.status_code, payload)
