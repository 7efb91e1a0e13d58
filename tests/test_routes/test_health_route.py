"""Tests for GET /health."""
from chat_gateway import create_app
from helpers import make_settings


def _client(**overrides):
    app = create_app(make_settings(**overrides))
    app.config["TESTING"] = True
    return app.test_client()


def test_all_configured(client):
    resp = client.get("/health")

    body = resp.get_json()
    assert resp.status_code == 200
    assert body["status"] == "healthy"
    assert set(body["providers"]) == {"openai", "gemini", "deepseek"}
    assert body["providers"]["deepseek"] == {"configured": True, "model": "deepseek-chat"}


def test_degraded_when_some_missing():
    resp = _client(GEMINI_API_KEY="").get("/health")

    body = resp.get_json()
    assert resp.status_code == 200
    assert body["status"] == "degraded"
    assert body["providers"]["gemini"]["configured"] is False


def test_unavailable_when_none_configured():
    resp = _client(OPENAI_API_KEY="", GEMINI_API_KEY="", DEEPSEEK_API_KEY="").get("/health")

    assert resp.status_code == 503
    assert resp.get_json()["status"] == "unavailable"


def test_keyless_deepseek_counts_as_configured():
    resp = _client(
        OPENAI_API_KEY="",
        GEMINI_API_KEY="",
        DEEPSEEK_API_KEY="",
        DEEPSEEK_REQUIRE_API_KEY=False,
    ).get("/health")

    assert resp.status_code == 200
    assert resp.get_json()["providers"]["deepseek"]["configured"] is True
