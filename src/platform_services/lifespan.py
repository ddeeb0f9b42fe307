"""
Application lifecycle management.

Builds the ServiceRegistry on startup and closes it on shutdown.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from platform_services.config import get_settings
from platform_services.services.registry import ServiceRegistry


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    On startup the registry is created from settings and the app's adapter
    catalog (``app.state.adapter_catalog``) and stored as
    ``app.state.service_registry``. Bundles for ``ENABLED_PLATFORMS`` are
    resolved right away so their adapters start initializing.

    Args:
        app: FastAPI application instance
    """
    settings = get_settings()
    catalog = getattr(app.state, "adapter_catalog", None)

    logger.info(f"Starting {settings.project_name}...")

    registry = ServiceRegistry.from_settings(settings, catalog)
    app.state.service_registry = registry

    for platform in settings.get_enabled_platforms():
        registry.get_services(platform)

    yield

    logger.info(f"Shutting down {settings.project_name}...")

    await registry.aclose()
    app.state.service_registry = None
