"""Application services."""

from platform_services.services.registry import ServiceBundle, ServiceRegistry

__all__ = ["ServiceBundle", "ServiceRegistry"]
