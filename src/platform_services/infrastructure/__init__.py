"""
Infrastructure layer for adapter resolution and composition.

This module provides:
- Adapter handles with explicit initialization state
- Per-domain factories caching one adapter per platform
- Composite services fanning out over several adapters
- The in-memory offline adapter
"""

from platform_services.infrastructure.composite import CompositeService
from platform_services.infrastructure.factory import ServiceFactory
from platform_services.infrastructure.handle import AdapterHandle, AdapterState

__all__ = ["AdapterHandle", "AdapterState", "CompositeService", "ServiceFactory"]
