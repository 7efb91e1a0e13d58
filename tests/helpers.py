"""Test helpers shared across the suite (fake settings and HTTP responses)."""
import json
from unittest.mock import MagicMock

import httpx

from chat_gateway.config import Settings


def make_settings(**overrides):
    """Build Settings without reading the environment's .env file."""
    values = {
        "OPENAI_API_KEY": "sk-test-openai",
        "GEMINI_API_KEY": "test-gemini-key",
        "DEEPSEEK_API_KEY": "sk-test-deepseek",
        "LOG_LEVEL": "WARNING",
        "LOG_FORMAT": "console",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def mock_httpx_response(data, status_code=200):
    """Create a mock httpx.Response."""
    resp = MagicMock(spec=httpx.Response)
    resp.status_code = status_code
    resp.json.return_value = data
    resp.text = json.dumps(data)
    return resp


def sse_body(*events, done=True):
    """Encode JSON events as a server-sent-events body."""
    lines = [f"data: {json.dumps(event)}\n\n" for event in events]
    if done:
        lines.append("data: [DONE]\n\n")
    return "".join(lines).encode()


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, handler):
        self.requests = []

        def _record(request):
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


def request_json(request):
    """Decoded JSON body of a recorded httpx.Request."""
    return json.loads(request.content)
