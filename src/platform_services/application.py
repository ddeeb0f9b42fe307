"""
FastAPI application factory.

Creates a FastAPI application that owns a ServiceRegistry for its whole
lifetime. Host applications add their own routers on top.
"""

from fastapi import FastAPI

from platform_services import __version__
from platform_services.config import get_settings
from platform_services.core.logging import intercept_standard_logging, logger
from platform_services.exception_handlers import register_exception_handlers
from platform_services.lifespan import lifespan
from platform_services.routes import register_routes
from platform_services.services.registry import AdapterCatalog


def create_app(adapter_catalog: AdapterCatalog | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        adapter_catalog: Adapter builders per domain and platform, used by
                        the lifespan to build the registry

    Returns:
        Configured FastAPI application instance
    """
    settings = get_settings()

    # Route uvicorn, httpx and fastapi logs through loguru
    intercept_standard_logging()

    app = FastAPI(
        title=settings.project_name,
        description="Multi-backend service composition layer",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.adapter_catalog = adapter_catalog

    # Register exception handlers (RFC 7807 Problem Details)
    register_exception_handlers(app)

    # Register routes
    register_routes(app)

    logger.info(f"FastAPI application created (v{__version__})")

    return app
