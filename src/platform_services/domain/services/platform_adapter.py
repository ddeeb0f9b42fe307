"""
Abstract base class for platform adapters.

This module defines the contract every backend adapter (Shopify,
WooCommerce, the offline store, composites) must follow for one domain.
"""

from abc import ABC, abstractmethod
from typing import Any

from loguru import logger

from platform_services.domain.exceptions import (
    ConfigurationError,
    UnsupportedOperationError,
)
from platform_services.domain.models import (
    Capability,
    ConfigRequirements,
    Entity,
    ListResult,
    Platform,
    PlatformDescriptor,
    QueryOptions,
)


class PlatformAdapter(ABC):
    """
    Base class for per-platform domain adapters.

    Subclasses implement listing and lookup, declare which mutating
    operations they support through ``capabilities`` and override the
    matching methods. The default mutating methods raise
    UnsupportedOperationError.
    """

    platform: Platform = Platform.CUSTOM
    capabilities: Capability = Capability.NONE

    def __init__(self) -> None:
        self._initialized = False

    def get_config_requirements(self) -> ConfigRequirements:
        """
        Configuration keys this adapter needs.

        Returns:
            Required and optional field names
        """
        return ConfigRequirements()

    def descriptor(self) -> PlatformDescriptor:
        """Platform key bound to this adapter's configuration requirements."""
        return PlatformDescriptor(self.platform, self.get_config_requirements())

    async def initialize(self, config: dict[str, Any]) -> bool:
        """
        Validates configuration and prepares the adapter.

        Missing required keys are logged and reported as ``False``; they
        never raise.

        Args:
            config: Platform configuration mapping

        Returns:
            True if the adapter is ready for use
        """
        missing = self.descriptor().validate(config)
        if missing:
            error = ConfigurationError(self.platform.value, missing)
            logger.error(error.detail)
            self._initialized = False
            return False

        self._initialized = bool(await self.connect(config))
        return self._initialized

    async def connect(self, config: dict[str, Any]) -> bool:
        """
        Platform-specific setup run after validation.

        Args:
            config: Validated configuration mapping

        Returns:
            True on success
        """
        return True

    def is_initialized(self) -> bool:
        return self._initialized

    def supports(self, capability: Capability) -> bool:
        """Check whether every flag in ``capability`` is declared."""
        return (self.capabilities & capability) == capability

    @abstractmethod
    async def list_entities(self, options: QueryOptions | None = None) -> ListResult:
        """
        List entities from the platform.

        Args:
            options: Paging and filtering options

        Returns:
            Items and pagination info
        """
        pass

    @abstractmethod
    async def get_by_id(self, entity_id: str) -> Entity | None:
        """
        Retrieve one entity.

        Args:
            entity_id: Platform-native id

        Returns:
            The entity if found, None otherwise
        """
        pass

    async def create(self, entity: Entity) -> Entity:
        """
        Create an entity.

        Raises:
            UnsupportedOperationError: Unless the adapter declares CREATE
        """
        raise UnsupportedOperationError("create")

    async def update(self, entity_id: str, patch: Entity) -> Entity:
        """
        Update an entity.

        Raises:
            UnsupportedOperationError: Unless the adapter declares UPDATE
        """
        raise UnsupportedOperationError("update")

    async def delete(self, entity_id: str) -> bool:
        """
        Delete an entity.

        Returns:
            True if the entity was deleted, False if not found

        Raises:
            UnsupportedOperationError: Unless the adapter declares DELETE
        """
        raise UnsupportedOperationError("delete")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(platform={self.platform.value})"
