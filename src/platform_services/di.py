"""
Dependency injection for FastAPI host applications.

The ServiceRegistry is built once by the application lifespan and stored on
``app.state``; these providers hand it (or a resolved bundle) to endpoints
through FastAPI's Depends with typing.Annotated.
"""

from typing import Annotated

from fastapi import Depends, Request

from platform_services.config import Settings, get_settings
from platform_services.domain.exceptions import NotInitializedError
from platform_services.domain.models import Platform
from platform_services.services.registry import ServiceBundle, ServiceRegistry

# ============================================================================
# Settings Dependencies
# ============================================================================

SettingsDep = Annotated[Settings, Depends(get_settings)]
"""Injected Settings instance (cached via lru_cache)."""


# ============================================================================
# Registry Dependencies
# ============================================================================


def get_service_registry(request: Request) -> ServiceRegistry:
    """
    Get the application's service registry.

    Args:
        request: Current request (injected)

    Returns:
        The registry created at startup

    Raises:
        NotInitializedError: If the application lifespan has not run
    """
    registry = getattr(request.app.state, "service_registry", None)
    if registry is None:
        raise NotInitializedError("Service registry is not available")
    return registry


ServiceRegistryDep = Annotated[ServiceRegistry, Depends(get_service_registry)]
"""Injected ServiceRegistry instance."""


# ============================================================================
# Bundle Dependencies
# ============================================================================


async def get_platform_services(
    platform: Platform,
    registry: ServiceRegistryDep,
) -> ServiceBundle:
    """
    Resolve the service bundle for the platform named in the request.

    Args:
        platform: Platform path or query parameter
        registry: Service registry (injected)

    Returns:
        ServiceBundle for the platform

    Example:
        ```python
        @router.get("/{platform}/categories")
        async def list_categories(services: PlatformServicesDep):
            return await services.category.list_entities()
        ```
    """
    return registry.get_services(platform)


PlatformServicesDep = Annotated[ServiceBundle, Depends(get_platform_services)]
"""Injected ServiceBundle for the requested platform."""
