"""Chat Completion Gateway (Flask application package).

The `create_app()` factory wires configuration, logging, middleware, the
provider adapters and the chat router, then registers the blueprints.
"""
from __future__ import annotations

import structlog
from flask import Flask
from flask_cors import CORS

from chat_gateway.config import get_settings, Settings
from chat_gateway.utils.logger import setup_logging
from chat_gateway.middleware.request_id import init_request_id_middleware
from chat_gateway.middleware.error_handlers import register_error_handlers


def create_app(settings: Settings | None = None) -> Flask:
    """Application factory pattern.

    Creates and configures the Flask application with:
    - Pydantic-based configuration loading
    - Structured logging (structlog)
    - Request ID middleware
    - Global error handlers
    - CORS configuration
    - Provider adapters and chat router
    - Startup credential report
    - Blueprint registration (health, chat)

    Args:
        settings: Explicit settings (tests); defaults to the cached
            environment settings.

    Returns:
        Configured Flask application instance.
    """
    settings = settings or get_settings()

    # ── Logging (must be first so all subsequent logs are formatted) ──
    setup_logging(log_level=settings.LOG_LEVEL, log_format=settings.LOG_FORMAT)
    logger = structlog.get_logger(__name__)

    # ── Flask app ─────────────────────────────────────────────────────
    app = Flask(__name__)
    app.config["FLASK_DEBUG"] = settings.FLASK_DEBUG
    app.config["SETTINGS"] = settings

    # ── Middleware ─────────────────────────────────────────────────────
    init_request_id_middleware(app)
    register_error_handlers(app)

    # ── CORS ──────────────────────────────────────────────────────────
    origins = [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()] or "*"
    CORS(app, resources={
        r"/api/ai-chat": {"origins": origins},
        r"/api/ai-chat/*": {"origins": origins},
        r"/health": {"origins": "*"},
    })

    # ── Services ──────────────────────────────────────────────────────
    _init_services(app, settings)

    # ── Startup validation ────────────────────────────────────────────
    _validate_startup(settings, logger)

    # ── Blueprints ────────────────────────────────────────────────────
    from chat_gateway.routes.health import health_bp
    from chat_gateway.routes.chat import chat_bp
    app.register_blueprint(health_bp)
    app.register_blueprint(chat_bp)

    logger.info(
        "app_started",
        env=settings.FLASK_ENV,
        log_level=settings.LOG_LEVEL,
        strict_parameters=settings.STRICT_PROVIDER_PARAMETERS,
    )

    return app


def _init_services(app: Flask, settings: Settings) -> None:
    """Build the provider adapters and the chat router.

    The router is stored on `app.config` for access via `current_app`.

    Args:
        app: Flask application instance.
        settings: Application settings.
    """
    from chat_gateway.providers.openai_provider import OpenAIProvider
    from chat_gateway.providers.gemini_provider import GeminiProvider
    from chat_gateway.providers.deepseek_provider import DeepSeekProvider
    from chat_gateway.services.chat_router import ChatRouter

    common = {
        "timeout": settings.HTTP_TIMEOUT,
        "strict_parameters": settings.STRICT_PROVIDER_PARAMETERS,
    }

    openai = OpenAIProvider(
        api_key=settings.OPENAI_API_KEY,
        base_url=settings.OPENAI_BASE_URL,
        model=settings.OPENAI_MODEL,
        organization=settings.OPENAI_ORG_ID,
        **common,
    )
    gemini = GeminiProvider(
        api_key=settings.GEMINI_API_KEY,
        base_url=settings.GEMINI_BASE_URL,
        model=settings.GEMINI_MODEL,
        **common,
    )
    deepseek = DeepSeekProvider(
        api_key=settings.DEEPSEEK_API_KEY,
        base_url=settings.DEEPSEEK_BASE_URL,
        model=settings.DEEPSEEK_MODEL,
        require_api_key=settings.DEEPSEEK_REQUIRE_API_KEY,
        **common,
    )

    app.config["CHAT_ROUTER"] = ChatRouter({
        openai.name: openai,
        gemini.name: gemini,
        deepseek.name: deepseek,
    })


def _validate_startup(settings: Settings, logger) -> None:
    """Report providers that will answer with CONFIGURATION_ERROR.

    Args:
        settings: Application settings instance.
        logger: Structlog logger instance.
    """
    missing = [name for name, key in settings.provider_keys().items() if not key]
    if "deepseek" in missing and not settings.DEEPSEEK_REQUIRE_API_KEY:
        missing.remove("deepseek")

    for name in missing:
        logger.warning("provider_not_configured", provider=name)

    logger.info("startup_validation", configured_providers=3 - len(missing))
