"""Tests for the Settings model."""
import pytest
from pydantic import ValidationError

from helpers import make_settings


class TestSettings:

    def test_defaults(self):
        settings = make_settings()

        assert settings.OPENAI_MODEL == "gpt-3.5-turbo"
        assert settings.GEMINI_MODEL == "gemini-2.0-flash-001"
        assert settings.DEEPSEEK_MODEL == "deepseek-chat"
        assert settings.HTTP_TIMEOUT == 60
        assert settings.STRICT_PROVIDER_PARAMETERS is True
        assert settings.DEEPSEEK_REQUIRE_API_KEY is True

    @pytest.mark.parametrize("value", ["", "   ", "your-api-key-here"])
    def test_blank_or_placeholder_key_is_unset(self, value):
        assert make_settings(OPENAI_API_KEY=value).OPENAI_API_KEY is None

    def test_key_is_stripped(self):
        assert make_settings(GEMINI_API_KEY="  abc  ").GEMINI_API_KEY == "abc"

    def test_provider_keys(self):
        keys = make_settings(DEEPSEEK_API_KEY="").provider_keys()
        assert keys == {"openai": "sk-test-openai", "gemini": "test-gemini-key", "deepseek": None}

    def test_trailing_slash_removed(self):
        assert make_settings(OPENAI_BASE_URL="https://proxy.local/v1/").OPENAI_BASE_URL == "https://proxy.local/v1"

    def test_log_level_normalized(self):
        assert make_settings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            make_settings(LOG_LEVEL="chatty")

    def test_invalid_log_format(self):
        with pytest.raises(ValidationError):
            make_settings(LOG_FORMAT="xml")

    def test_timeout_bounds(self):
        with pytest.raises(ValidationError):
            make_settings(HTTP_TIMEOUT=0)
