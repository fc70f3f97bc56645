"""
DevMind Backend — FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes configuration, middleware registration, route mounting,
       and provider lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn devmind.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────┐ ┌──────┐ ┌────────┐   │
    │  │  Req ID  │→│  Logging    │→│ GZip │→│  CORS  │   │
    │  └──────────┘ └─────────────┘ └──────┘ └────────┘   │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌────────────────┐ ┌───────────┐  │
    │  │ POST /api/ai │ │ /api/providers │ │ GET health│  │
    │  └──────────────┘ └────────────────┘ └───────────┘  │
    │                                                     │
    │  app.state:                                         │
    │    settings · registry · assistance (one each)      │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration (log, don't exit, when no key is set)
    3. Build the provider registry from configured credentials
       (skipped when a registry was injected, e.g. by tests)
    4. Create the AssistanceService on top of it
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from devmind import __version__
from devmind.config import Settings, settings
from devmind.exceptions import (
    AssistanceTimeoutError,
    DevMindError,
    NoActiveProvider,
    ProviderCallFailed,
    ProviderNotRegistered,
    ValidationError,
)
from devmind.middleware.logging import RequestLoggingMiddleware
from devmind.middleware.request_id import RequestIDMiddleware, request_id_var
from devmind.providers.factory import build_registry
from devmind.providers.registry import ProviderRegistry
from devmind.routes import ai, health, providers
from devmind.services.assistance import AssistanceService

logger = logging.getLogger(__name__)

# SDK and HTTP client loggers are chatty at INFO; vendor request logs can
# include request metadata we do not want in ours
_NOISY_LOGGERS = ("uvicorn.access", "httpcore", "httpx", "openai", "anthropic", "google_genai")


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str) -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup (before any other initialization).
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _install_registry(app: FastAPI, registry: ProviderRegistry) -> None:
    app.state.registry = registry
    app.state.assistance = AssistanceService(registry)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging → config check → registry → facade.
    Shutdown: nothing to release; vendor clients close with the process.
    """
    app_settings: Settings = app.state.settings
    setup_logging(app_settings.log_level)
    logger.info("=" * 60)
    logger.info("DevMind AI backend starting up...")

    try:
        app_settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: health and provider settings still work, and a key
        # can be added at runtime through PUT /api/providers/{vendor_id}
        logger.error("Configuration error: %s", str(e))

    if app.state.registry is None:
        _install_registry(app, build_registry(app_settings))

    logger.info("Server ready at http://%s:%d", app_settings.backend_host, app_settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("DevMind AI backend shutting down...")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error(status_code: int, error: str, message: str, details: Optional[dict] = None,
           headers: Optional[dict] = None) -> JSONResponse:
    content = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and response bodies.

    Handler hierarchy:
        ValidationError / RequestValidationError → 400
        ProviderNotRegistered                    → 404
        NoActiveProvider                         → 503
        ProviderCallFailed                       → 503 (cause logged, never returned)
        AssistanceTimeoutError                   → 504
        DevMindError (base)                      → 500
        Exception (fallback)                     → 500
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error(400, "validation_error", exc.message, exc.context)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
            for err in exc.errors()
        ]
        return _error(400, "validation_error", "Invalid request format", {"errors": errors})

    @app.exception_handler(ProviderNotRegistered)
    async def handle_not_registered(request: Request, exc: ProviderNotRegistered):
        return _error(404, "provider_not_registered", exc.message, {"vendor_id": exc.vendor_id})

    @app.exception_handler(NoActiveProvider)
    async def handle_no_active_provider(request: Request, exc: NoActiveProvider):
        logger.warning("[%s] No active provider", request_id_var.get(""))
        return _error(503, "no_active_provider", exc.message)

    @app.exception_handler(ProviderCallFailed)
    async def handle_provider_failure(request: Request, exc: ProviderCallFailed):
        # Full cause server-side only: vendor error bodies are not for users
        logger.error(
            "[%s] Provider %s failed: %r",
            request_id_var.get(""),
            exc.vendor_id,
            exc.cause,
        )
        return _error(503, "provider_error", exc.message, {"vendor_id": exc.vendor_id})

    @app.exception_handler(AssistanceTimeoutError)
    async def handle_timeout(request: Request, exc: AssistanceTimeoutError):
        logger.warning("[%s] %s", request_id_var.get(""), exc.message)
        return _error(504, "timeout", exc.message)

    @app.exception_handler(DevMindError)
    async def handle_app_error(request: Request, exc: DevMindError):
        logger.error("[%s] Application error: %s | Context: %s",
                     request_id_var.get(""), exc.message, exc.context)
        return _error(500, "server_error", "An internal error occurred. Please try again later.")

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
        return _error(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    registry: Optional[ProviderRegistry] = None,
    app_settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        registry:     pre-built registry (tests); when None the lifespan
                      builds one from configured credentials
        app_settings: settings override (tests); defaults to the module singleton
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title="DevMind AI API",
        description=(
            "AI assistance for DevMind notes: text improvement, summaries, tags, titles "
            "and code help, served by OpenAI, Google Gemini or Anthropic Claude."
        ),
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.registry = None
    app.state.assistance = None
    if registry is not None:
        _install_registry(app, registry)

    # Middleware executes in REVERSE order of addition
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(ai.router)
    app.include_router(providers.router)
    app.include_router(health.router)

    return app


app = create_app()
