"""Domain service contracts."""

from platform_services.domain.services.platform_adapter import PlatformAdapter

__all__ = ["PlatformAdapter"]
