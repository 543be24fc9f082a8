"""
FastAPI Application Setup.

Application factory for the Launchpad REST API.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from launchpad.api.middleware.cors import add_cors_middleware
from launchpad.api.middleware.logging import RequestLoggingMiddleware
from launchpad.api.routes import apps, chat, health, icons, settings
from launchpad.api.schemas.exceptions import APIException
from launchpad.config import LauncherConfig, get_config
from launchpad.core.exceptions import (
    ConfigurationError,
    ConflictError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from launchpad.llm.client import ChatClient
from launchpad.presentation.adapter import client_field
from launchpad.registry.seed import load_seed_file, seed_registry
from launchpad.registry.service import RegistryService
from launchpad.registry.storage import AppStore
from launchpad.version import __version__

logger = logging.getLogger(__name__)


def _error_body(error_type: str, message: str, detail: str | None = None, **extra) -> dict:
    return {"error": {"type": error_type, "message": message, "detail": detail, **extra}}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Initialize the store (and apply the seed file) on startup.

    The seed only populates an empty registry.
    """
    config: LauncherConfig = app.state.config
    registry: RegistryService = app.state.registry

    logger.info("Launchpad API starting up...")
    logger.info(f"Version: {__version__}")

    registry.store.initialize()
    logger.info(f"Registry storage initialized at {registry.store.db_path}")

    if config.seed_file:
        try:
            seeded = seed_registry(registry, load_seed_file(config.seed_file))
        except (ConfigurationError, ValidationError) as e:
            logger.error(f"Seed file not applied: {e}")
        else:
            if seeded:
                logger.info(f"Seeded {seeded} applications from {config.seed_file}")

    if not config.require_admin:
        logger.warning("Admin guard DISABLED (LP_REQUIRE_ADMIN=false)")

    yield

    logger.info("Launchpad API shutting down...")
    chat_client = getattr(app.state, "chat_client", None)
    if chat_client is not None:
        chat_client.close()
    registry.store.close()


def create_app(
    config: LauncherConfig | None = None,
    *,
    registry: RegistryService | None = None,
    chat_client: ChatClient | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Configuration (defaults to the LP_* environment)
        registry: Registry service (defaults to a store at config.db_path)
        chat_client: Chat client (built lazily from config if omitted)

    Returns:
        Configured FastAPI application instance
    """
    config = config or get_config()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(
        title="Launchpad API",
        description="Ordered application registry for the corporate launcher",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.registry = registry or RegistryService(AppStore(config.db_path))
    app.state.chat_client = chat_client

    app.add_middleware(RequestLoggingMiddleware)
    add_cors_middleware(app, config.cors_origins)

    app.include_router(health.router, prefix="/health", tags=["Health"])
    app.include_router(apps.router, prefix="/api/apps", tags=["Apps"])
    app.include_router(settings.router, prefix="/api/settings", tags=["Settings"])
    app.include_router(icons.router, prefix="/api/icons", tags=["Icons"])
    app.include_router(chat.router, prefix="/api/chat", tags=["Chat"])

    @app.exception_handler(APIException)
    async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
        """Handle API-layer exceptions (auth, bad requests)."""
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.error_type, exc.message, exc.detail),
        )

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        """Domain validation failures, reported with client field names."""
        fields = {}
        if exc.field:
            fields[client_field(exc.field)] = exc.validation_errors or [exc.message]
        extra = {k: v for k, v in exc.details.items() if k in ("missing", "unknown", "duplicates")}
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", exc.message, None, fields=fields, **extra),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Malformed bodies are 400, not FastAPI's default 422."""
        fields: dict[str, list[str]] = {}
        for err in exc.errors():
            loc = [str(p) for p in err.get("loc", ()) if p != "body"]
            fields.setdefault(".".join(loc) or "body", []).append(err.get("msg", "invalid"))
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", "Request validation failed", None, fields=fields),
        )

    @app.exception_handler(ConflictError)
    async def conflict_handler(request: Request, exc: ConflictError) -> JSONResponse:
        return JSONResponse(status_code=409, content=_error_body("conflict", exc.message))

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content=_error_body("not_found", exc.message))

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
        """Log the cause; the response carries no internal detail."""
        logger.error(f"Storage failure during {request.method} {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=_error_body("storage_error", "Storage unavailable"),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(f"Unhandled exception: {exc}")
        return JSONResponse(
            status_code=500,
            content=_error_body("internal_error", "An unexpected error occurred"),
        )

    @app.get("/", tags=["Root"])
    async def root() -> dict[str, object]:
        """Root endpoint with API information."""
        return {
            "name": "Launchpad API",
            "version": __version__,
            "status": "operational",
            "docs": "/docs",
            "health": "/health",
        }

    return app
