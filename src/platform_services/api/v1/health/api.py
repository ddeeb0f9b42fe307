"""
Health check endpoints.

Reports the initialization state of every cached adapter.
"""

from fastapi import APIRouter

from platform_services import __version__
from platform_services.api.v1.health.models import (
    DomainServiceStatus,
    HealthResponse,
    PlatformHealthResponse,
)
from platform_services.di import PlatformServicesDep, ServiceRegistryDep
from platform_services.domain.models import Domain
from platform_services.infrastructure.handle import AdapterState

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(registry: ServiceRegistryDep) -> HealthResponse:
    """
    Health check endpoint.

    Returns:
        Service status, version and adapter states. Status is "degraded"
        when any cached adapter failed to initialize.
    """
    adapters: dict[str, dict[str, str]] = {}
    degraded = False

    for domain, factory in registry.factories.items():
        states = factory.handle_states()
        adapters[domain.value] = {
            platform.value: state.value for platform, state in states.items()
        }
        degraded = degraded or AdapterState.FAILED in states.values()

    return HealthResponse(
        status="degraded" if degraded else "ok",
        version=__version__,
        message="Some adapters failed to initialize" if degraded else "Service is healthy",
        adapters=adapters,
    )


@router.get("/health/platforms/{platform}", response_model=PlatformHealthResponse)
async def platform_health_check(services: PlatformServicesDep) -> PlatformHealthResponse:
    """
    Resolve and describe the service bundle for one platform.

    Returns:
        The service chosen for each domain and whether it is initialized
    """
    statuses = {
        domain.value: DomainServiceStatus(
            service=repr(services.get(domain)),
            initialized=services.get(domain).is_initialized(),
        )
        for domain in Domain
    }

    platform = services.platform
    return PlatformHealthResponse(
        platform=platform.value if hasattr(platform, "value") else str(platform),
        services=statuses,
    )
