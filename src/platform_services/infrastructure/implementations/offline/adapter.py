"""
In-memory offline adapter implementation.

Stores entities in a process-local dictionary keyed by id:
    {id}: {"id": id, ...attributes}

Used as the designated fallback whenever no platform is selected, so
callers always receive a working service.
"""

import uuid
from collections.abc import Iterable
from typing import Any

from loguru import logger

from platform_services.domain.exceptions import EntityNotFoundError
from platform_services.domain.models import (
    ID_KEY,
    Capability,
    Entity,
    ListResult,
    Pagination,
    Platform,
    QueryOptions,
)
from platform_services.domain.services.platform_adapter import PlatformAdapter


class OfflineAdapter(PlatformAdapter):
    """
    Dictionary-backed adapter for offline use.

    Always initialized and supports every capability.
    """

    platform = Platform.OFFLINE
    capabilities = Capability.ALL

    def __init__(self, entities: Iterable[Entity] | None = None):
        """
        Initialize offline adapter.

        Args:
            entities: Optional seed entities; each needs an ``id``
        """
        super().__init__()
        self._entities: dict[str, Entity] = {}
        for entity in entities or ():
            self._entities[str(entity[ID_KEY])] = dict(entity)

        self._initialized = True

        logger.debug(f"Initialized OfflineAdapter with {len(self._entities)} entities")

    async def connect(self, config: dict[str, Any]) -> bool:
        """Nothing to connect to."""
        return True

    def _matches(self, entity: Entity, options: QueryOptions) -> bool:
        if options.ids is not None and entity.get(ID_KEY) not in options.ids:
            return False

        for key, expected in options.filters.items():
            if entity.get(key) != expected:
                return False

        if options.search:
            needle = options.search.lower()
            haystack = " ".join(
                str(value) for value in entity.values() if isinstance(value, str)
            )
            if needle not in haystack.lower():
                return False

        return True

    async def list_entities(self, options: QueryOptions | None = None) -> ListResult:
        """List stored entities with filtering and pagination."""
        options = options or QueryOptions()

        matching = [
            dict(entity)
            for entity in self._entities.values()
            if self._matches(entity, options)
        ]

        start = max(options.page - 1, 0) * options.per_page
        page_items = matching[start : start + options.per_page]

        return ListResult(
            items=page_items,
            pagination=Pagination.for_total(len(matching), options.page, options.per_page),
        )

    async def get_by_id(self, entity_id: str) -> Entity | None:
        """Get a stored entity."""
        entity = self._entities.get(entity_id)
        return dict(entity) if entity is not None else None

    async def create(self, entity: Entity) -> Entity:
        """
        Store a new entity.

        An id is generated when the entity has none.
        """
        entity_id = str(entity.get(ID_KEY) or uuid.uuid4().hex)
        stored = {**entity, ID_KEY: entity_id}
        self._entities[entity_id] = stored

        logger.info(f"Created offline entity: {entity_id}")

        return dict(stored)

    async def update(self, entity_id: str, patch: Entity) -> Entity:
        """
        Merge ``patch`` into a stored entity.

        Raises:
            EntityNotFoundError: If the entity does not exist
        """
        if entity_id not in self._entities:
            raise EntityNotFoundError(entity_id)

        updated = {**self._entities[entity_id], **patch, ID_KEY: entity_id}
        self._entities[entity_id] = updated

        logger.info(f"Updated offline entity: {entity_id}")

        return dict(updated)

    async def delete(self, entity_id: str) -> bool:
        """Delete a stored entity."""
        if self._entities.pop(entity_id, None) is None:
            return False

        logger.info(f"Deleted offline entity: {entity_id}")

        return True
