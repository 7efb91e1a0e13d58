"""Unit tests for the DeepSeek adapter."""
from unittest.mock import patch

import httpx
import pytest

from chat_gateway.models.requests import ChatRequest
from chat_gateway.providers.deepseek_provider import DeepSeekProvider
from chat_gateway.utils.exceptions import ErrorKind
from helpers import RecordingTransport, mock_httpx_response, request_json


@pytest.fixture
def deepseek():
    provider = DeepSeekProvider(api_key="sk-deep")
    yield provider
    provider.close()


def _request(**overrides):
    data = {"model": "deepseek", "messages": [{"role": "user", "content": "Hi"}]}
    data.update(overrides)
    return ChatRequest.model_validate(data)


def _reply(text):
    return {"choices": [{"message": {"role": "assistant", "content": text}}]}


class TestComplete:
    """Tests for DeepSeekProvider.complete."""

    def test_request_body(self):
        transport = RecordingTransport(lambda request: httpx.Response(200, json=_reply("Hello!")))
        provider = DeepSeekProvider(api_key="sk-deep", transport=transport)

        response = provider.complete(_request())
        provider.close()

        request = transport.requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://api.deepseek.com/chat/completions"
        assert request.headers["Authorization"] == "Bearer sk-deep"
        assert request_json(request) == {
            "model": "deepseek-chat",
            "messages": [{"role": "user", "content": "Hi"}],
            "temperature": 0.7,
            "max_tokens": 1000,
        }
        assert response.reply == "Hello!"

    def test_stream_flag_ignored(self):
        transport = RecordingTransport(lambda request: httpx.Response(200, json=_reply("single")))
        provider = DeepSeekProvider(api_key="sk-deep", transport=transport)

        response = provider.complete(_request(stream=True))
        provider.close()

        assert "stream" not in request_json(transport.requests[0])
        assert response.reply == "single"

    def test_parameters_override_defaults(self, deepseek):
        payload = deepseek.build_payload(_request(parameters={"temperature": 1.2, "top_p": 0.9, "n": 3}))

        assert payload["temperature"] == 1.2
        assert payload["max_tokens"] == 1000
        assert payload["top_p"] == 0.9
        assert "n" not in payload

    def test_empty_choices_is_empty_reply(self, deepseek):
        with patch.object(deepseek._client, "post", return_value=mock_httpx_response({"choices": []})):
            response = deepseek.complete(_request())

        assert response.reply == ""
        assert response.error is None

    def test_missing_key_makes_no_call(self):
        transport = RecordingTransport(lambda request: httpx.Response(200, json=_reply("x")))
        provider = DeepSeekProvider(api_key=None, transport=transport)

        response = provider.complete(_request())
        provider.close()

        assert response.error_type is ErrorKind.CONFIGURATION_ERROR
        assert response.error == "DeepSeek API key is not configured"
        assert transport.requests == []

    def test_keyless_when_key_optional(self):
        transport = RecordingTransport(lambda request: httpx.Response(200, json=_reply("free")))
        provider = DeepSeekProvider(api_key=None, require_api_key=False, transport=transport)

        response = provider.complete(_request())
        provider.close()

        assert response.reply == "free"
        assert "Authorization" not in transport.requests[0].headers

    def test_upstream_500(self, deepseek):
        with patch.object(deepseek._client, "post", return_value=mock_httpx_response({"error": "oops"}, 500)):
            response = deepseek.complete(_request())

        assert response.error_type is ErrorKind.API_ERROR
        assert response.status_code == 500
        assert response.error == "The AI service is experiencing issues."

    def test_non_json_error_body(self, deepseek):
        resp = mock_httpx_response(None, status_code=502)
        resp.json.side_effect = ValueError("not json")
        resp.text = "<html>Bad Gateway</html>"
        with patch.object(deepseek._client, "post", return_value=resp):
            response = deepseek.complete(_request())

        assert response.error_type is ErrorKind.API_ERROR
        assert response.status_code == 502
        assert response.details == "<html>Bad Gateway</html>"
