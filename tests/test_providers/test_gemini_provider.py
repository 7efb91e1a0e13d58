"""Unit tests for the Gemini adapter."""
from unittest.mock import patch

import httpx
import pytest

from chat_gateway.models.requests import ChatRequest
from chat_gateway.providers.gemini_provider import GeminiProvider
from chat_gateway.utils.exceptions import ErrorKind
from helpers import RecordingTransport, mock_httpx_response, request_json, sse_body


@pytest.fixture
def gemini():
    provider = GeminiProvider(api_key="test-gemini-key")
    yield provider
    provider.close()


def _request(**overrides):
    data = {"model": "gemini", "messages": [{"role": "user", "content": "Hi"}]}
    data.update(overrides)
    return ChatRequest.model_validate(data)


def _candidate(*texts):
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": t} for t in texts]}}]}


class TestBuildPayload:

    def test_roles_translated(self, gemini):
        payload = gemini.build_payload(_request(messages=[
            {"role": "system", "content": "Rules"},
            {"role": "user", "content": "Q"},
            {"role": "assistant", "content": "A"},
        ]))

        assert payload == {
            "contents": [
                {"role": "user", "parts": [{"text": "Rules"}]},
                {"role": "user", "parts": [{"text": "Q"}]},
                {"role": "model", "parts": [{"text": "A"}]},
            ],
        }

    def test_generation_config_only_when_supplied(self, gemini):
        payload = gemini.build_payload(_request(parameters={
            "temperature": 0.3,
            "maxOutputTokens": 256,
            "max_tokens": 10,
        }))

        assert payload["generationConfig"] == {"temperature": 0.3, "maxOutputTokens": 256}

    def test_api_key_header(self, gemini):
        assert gemini._client.headers["x-goog-api-key"] == "test-gemini-key"
        assert "Authorization" not in gemini._client.headers


class TestComplete:
    """Tests for GeminiProvider.complete."""

    def test_single_shot_reply(self, gemini):
        with patch.object(gemini._client, "post", return_value=mock_httpx_response(_candidate("Hi!"))) as post:
            response = gemini.complete(_request())

        assert response.reply == "Hi!"
        assert response.error is None
        assert post.call_args.args[0] == "/models/gemini-2.0-flash-001:generateContent"

    def test_assistant_role_sent_as_model_and_no_candidates_is_success(self):
        transport = RecordingTransport(lambda request: httpx.Response(200, json={"promptFeedback": {}}))
        provider = GeminiProvider(api_key="k", transport=transport)

        response = provider.complete(_request(messages=[{"role": "assistant", "content": "prior"}]))
        provider.close()

        sent = request_json(transport.requests[0])
        assert sent["contents"][0]["role"] == "model"
        assert response.reply == ""
        assert response.error is None
        assert response.status_code == 200
        assert response.to_dict() == {"reply": ""}

    def test_multiple_parts_joined(self, gemini):
        with patch.object(gemini._client, "post", return_value=mock_httpx_response(_candidate("a", "b"))):
            response = gemini.complete(_request())

        assert response.reply == "ab"

    def test_streaming_concatenates_chunks(self):
        transport = RecordingTransport(lambda request: httpx.Response(
            200,
            headers={"Content-Type": "text/event-stream"},
            content=sse_body(_candidate("Hel"), {"candidates": []}, _candidate("lo"), done=False),
        ))
        provider = GeminiProvider(api_key="k", transport=transport)

        response = provider.complete(_request(stream=True))
        provider.close()

        request = transport.requests[0]
        assert response.reply == "Hello"
        assert request.url.path.endswith("/models/gemini-2.0-flash-001:streamGenerateContent")
        assert request.url.params["alt"] == "sse"

    def test_error_event_in_stream(self):
        transport = RecordingTransport(lambda request: httpx.Response(
            200,
            headers={"Content-Type": "text/event-stream"},
            content=sse_body(
                _candidate("Hel"),
                [{"error": {"code": 503, "message": "overloaded", "status": "UNAVAILABLE"}}],
                done=False,
            ),
        ))
        provider = GeminiProvider(api_key="k", transport=transport)

        response = provider.complete(_request(stream=True))
        provider.close()

        assert response.reply == ""
        assert response.status_code == 503
        assert response.error_type is ErrorKind.API_ERROR
        assert response.error == "The AI service is temporarily unavailable."

    def test_missing_key_makes_no_call(self):
        transport = RecordingTransport(lambda request: httpx.Response(200, json=_candidate("x")))
        provider = GeminiProvider(api_key=None, transport=transport)

        response = provider.complete(_request())
        provider.close()

        assert response.error_type is ErrorKind.CONFIGURATION_ERROR
        assert response.error == "Gemini API key is not configured"
        assert response.status_code == 500
        assert transport.requests == []

    def test_upstream_403(self, gemini):
        body = {"error": {"code": 403, "message": "Permission denied", "status": "PERMISSION_DENIED"}}
        with patch.object(gemini._client, "post", return_value=mock_httpx_response(body, status_code=403)):
            response = gemini.complete(_request())

        assert response.error_type is ErrorKind.AUTHENTICATION_ERROR
        assert response.status_code == 403
        assert response.error == "Access to the AI model is forbidden."

    def test_upstream_400_is_validation_error(self, gemini):
        body = {"error": {"code": 400, "message": "Invalid argument"}}
        with patch.object(gemini._client, "post", return_value=mock_httpx_response(body, status_code=400)):
            response = gemini.complete(_request())

        assert response.error_type is ErrorKind.VALIDATION_ERROR
        assert response.status_code == 400

    def test_connection_failure(self, gemini):
        with patch.object(gemini._client, "post", side_effect=httpx.ConnectError("Connection refused")):
            response = gemini.complete(_request())

        assert response.error_type is ErrorKind.NETWORK_ERROR
        assert response.status_code == 503
