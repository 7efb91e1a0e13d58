"""Shared pytest fixtures for the gateway test suite.

Provides reusable fixtures for:
- Settings with every provider configured (no .env file read)
- Flask app and test client built from those settings
"""
import pytest

from chat_gateway import create_app
from helpers import make_settings


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def app(settings):
    """Create a Flask application instance for testing."""
    app = create_app(settings)
    app.config["TESTING"] = True
    yield app
    for provider in app.config["CHAT_ROUTER"].providers.values():
        provider.close()


@pytest.fixture
def client(app):
    """Create a Flask test client."""
    return app.test_client()
