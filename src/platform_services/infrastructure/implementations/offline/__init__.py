"""In-memory offline implementation used as the default adapter."""

from platform_services.infrastructure.implementations.offline.adapter import (
    OfflineAdapter,
)

__all__ = ["OfflineAdapter"]
