"""FastAPI application entry point and lifecycle management."""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from subscription_registry.logging_config import configure_logging, get_logger
from subscription_registry.middleware import ContextMiddleware, RequestLoggingMiddleware

__version__ = "0.1.0"

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager.

    Handles startup and shutdown events.
    """
    logger.info("registry_starting", version=__version__)

    try:
        from subscription_registry.config import get_config

        config = get_config()
        logger.info(
            "config_loaded",
            config_path=str(config.config_path),
            clock=config.clock_mode,
            expiry_window=config.expiry_window,
        )
        logger.info("registry_started", status="ready")
        yield
    finally:
        logger.info("registry_stopped")


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    log_level = os.getenv("LOG_LEVEL", "INFO")
    json_format = os.getenv("LOG_FORMAT", "json").lower() == "json"

    from subscription_registry.services.time_controller import TimeController, get_clock

    clock = get_clock()
    configure_logging(
        log_level=log_level,
        json_format=json_format,
        virtual_clock=clock if isinstance(clock, TimeController) else None,
    )

    app = FastAPI(
        title="Subscription Registry",
        description="In-memory subscription registry with subscriber and owner authorization",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Allow all origins for local development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    include_request_details = os.getenv("LOG_REQUEST_DETAILS", "true").lower() == "true"
    app.add_middleware(RequestLoggingMiddleware, include_request_details=include_request_details)
    app.add_middleware(ContextMiddleware)

    from subscription_registry.api.control import router as control_router
    from subscription_registry.api.registry import router as registry_router

    app.include_router(registry_router)
    app.include_router(control_router)

    @app.get("/")
    async def root() -> dict[str, str]:
        """Service banner."""
        logger.debug("root_endpoint_called")
        return {
            "service": "subscription-registry",
            "status": "running",
            "version": __version__,
        }

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Detailed health check."""
        from subscription_registry.config import get_config
        from subscription_registry.repositories.subscription_store import get_subscription_store

        config = get_config()
        store = get_subscription_store()

        return {
            "status": "healthy",
            "clock": config.clock_mode,
            "store": f"in-memory ({store.count()} subscriptions)",
        }

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc: Exception) -> JSONResponse:
        """Handle uncaught exceptions."""
        logger.error(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred",
            },
        )

    logger.info("app_created", endpoints=len(app.routes))
    return app


app = create_app()
