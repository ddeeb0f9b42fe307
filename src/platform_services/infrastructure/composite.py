"""
Composite service over several platform adapters.

A composite implements the same adapter contract as a single backend:
- Reads fan out to every initialized adapter and are merged in adapter
  order; a failing adapter contributes nothing
- Returned ids are namespaced as ``p<index>_<id>`` so later calls can be
  routed back to the adapter that owns them
- Writes go to exactly one adapter and propagate its failures

The adapter list is fixed at construction; composite ids are only
meaningful for the composite that produced them.
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from functools import reduce
from typing import Any, TypeVar

from loguru import logger

from platform_services.core.platform_context import platform_context
from platform_services.domain.composite_id import (
    decode_composite_id,
    encode_composite_id,
)
from platform_services.domain.exceptions import (
    EntityNotFoundError,
    NotInitializedError,
    PlatformOperationError,
    PlatformServiceError,
    UnsupportedOperationError,
)
from platform_services.domain.models import (
    ID_KEY,
    NESTED_KEYS,
    ORIGINAL_ID_KEY,
    PARENT_ID_KEY,
    PLATFORM_INDEX_KEY,
    Capability,
    Domain,
    Entity,
    ListResult,
    Pagination,
    Platform,
    QueryOptions,
)
from platform_services.domain.services.platform_adapter import PlatformAdapter
from platform_services.infrastructure.handle import AdapterHandle

T = TypeVar("T")


def stamp_entity(
    entity: Entity,
    index: int,
    *,
    original_id: str | None = None,
    composite_id: str | None = None,
) -> Entity:
    """
    Namespace an entity returned by the adapter at ``index``.

    Rewrites ``id``, ``parentId`` and nested children, and records the
    backend id under ``_originalId`` and the index under ``_platform``.

    Args:
        entity: Entity as returned by the adapter
        index: Adapter position in the composite
        original_id: Backend id, defaults to the entity's ``id``
        composite_id: Id to expose, defaults to the encoded backend id

    Returns:
        A new stamped entity; the input is not modified
    """
    if original_id is None:
        original_id = str(entity.get(ID_KEY))

    stamped = dict(entity)
    stamped[ID_KEY] = composite_id or encode_composite_id(index, original_id)
    stamped[ORIGINAL_ID_KEY] = original_id
    stamped[PLATFORM_INDEX_KEY] = index

    parent_id = entity.get(PARENT_ID_KEY)
    if parent_id:
        stamped[PARENT_ID_KEY] = encode_composite_id(index, str(parent_id))

    for key in NESTED_KEYS:
        children = entity.get(key)
        if isinstance(children, list):
            stamped[key] = [
                stamp_entity(child, index) if isinstance(child, dict) else child
                for child in children
            ]

    return stamped


def unstamp_entity(entity: Entity, index: int) -> Entity:
    """
    Strip composite stamps before sending an entity to the adapter at ``index``.

    ``parentId`` is translated back to the backend id when it belongs to
    the same adapter.
    """
    payload = {
        key: value
        for key, value in entity.items()
        if key not in (ORIGINAL_ID_KEY, PLATFORM_INDEX_KEY)
    }

    parent_id = payload.get(PARENT_ID_KEY)
    if isinstance(parent_id, str):
        decoded = decode_composite_id(parent_id)
        if decoded is not None and decoded[0] == index:
            payload[PARENT_ID_KEY] = decoded[1]

    return payload


class CompositeService(PlatformAdapter):
    """
    Presents several adapters as one domain service.

    Usable as soon as constructed: every public call first makes sure each
    wrapped adapter has had its initialization attempted, then works with
    the adapters that report ``is_initialized()``.
    """

    def __init__(
        self,
        adapters: Sequence[PlatformAdapter | AdapterHandle],
        *,
        domain: Domain | None = None,
        timeout: float | None = None,
    ):
        """
        Initialize composite service.

        Args:
            adapters: Adapters or factory handles, in id-namespace order
            domain: Domain served, used in log messages
            timeout: Per-adapter deadline in seconds; a timed-out call is
                treated like a failed one
        """
        super().__init__()
        self._handles: tuple[AdapterHandle, ...] = tuple(
            AdapterHandle.wrap(adapter) for adapter in adapters
        )
        self.domain = domain
        self.timeout = timeout

        if not self._handles:
            logger.warning(f"{self._name} created with no adapters")

    @property
    def _name(self) -> str:
        if self.domain is None:
            return "CompositeService"
        return f"Composite {self.domain.value} service"

    @property
    def handles(self) -> tuple[AdapterHandle, ...]:
        return self._handles

    @property
    def adapters(self) -> tuple[PlatformAdapter, ...]:
        return tuple(handle.instance for handle in self._handles)

    @property
    def platforms(self) -> tuple[Platform, ...]:
        return tuple(handle.platform for handle in self._handles)

    @property
    def capabilities(self) -> Capability:  # type: ignore[override]
        """Union of the wrapped adapters' capabilities."""
        return reduce(
            lambda acc, adapter: acc | adapter.capabilities,
            self.adapters,
            Capability.NONE,
        )

    def is_initialized(self) -> bool:
        """True when at least one wrapped adapter is initialized."""
        return any(adapter.is_initialized() for adapter in self.adapters)

    async def initialize(self, config: dict[str, Any] | None = None) -> bool:
        """
        Attempt initialization of every wrapped adapter.

        Each adapter uses the configuration held by its handle; ``config``
        is accepted for contract compatibility only.

        Returns:
            True if at least one adapter is initialized
        """
        await self._ensure_initialized()
        return self.is_initialized()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _ensure_initialized(self) -> None:
        pending = [
            handle.wait_ready(self.timeout)
            for handle in self._handles
            if not handle.attempted and not handle.instance.is_initialized()
        ]
        if pending:
            await asyncio.gather(*pending)

    def _usable(self) -> list[tuple[int, PlatformAdapter]]:
        return [
            (index, adapter)
            for index, adapter in enumerate(self.adapters)
            if adapter.is_initialized()
        ]

    def _label(self, index: int) -> str:
        return f"p{index}:{self._handles[index].platform.value}"

    async def _invoke(self, index: int, call: Callable[[], Awaitable[T]]) -> T:
        token = platform_context.set(self._label(index))
        try:
            if self.timeout is None:
                return await call()
            return await asyncio.wait_for(call(), self.timeout)
        finally:
            platform_context.reset(token)

    async def _read(
        self, index: int, operation: str, call: Callable[[], Awaitable[T]]
    ) -> T | None:
        """Run a read on one adapter; failures are logged and become None."""
        try:
            return await self._invoke(index, call)
        except asyncio.TimeoutError:
            logger.error(
                f"{self._name}: {operation} timed out on platform {index} "
                f"after {self.timeout}s"
            )
        except Exception as e:
            logger.error(f"{self._name}: {operation} failed on platform {index}: {e}")
        return None

    async def _write(
        self, index: int, operation: str, call: Callable[[], Awaitable[T]]
    ) -> T:
        """Run a write on its owning adapter; failures propagate with the index."""
        try:
            return await self._invoke(index, call)
        except UnsupportedOperationError as e:
            raise UnsupportedOperationError(operation, platform_index=index) from e
        except PlatformServiceError as e:
            if e.platform_index is None:
                e.platform_index = index
            raise
        except Exception as e:
            logger.error(f"{self._name}: {operation} failed on platform {index}: {e}")
            raise PlatformOperationError(operation, platform_index=index, cause=e) from e

    async def _locate(self, entity_id: str) -> tuple[int, Entity] | None:
        """Ask each initialized adapter in order; first hit wins."""
        for index, adapter in self._usable():
            entity = await self._read(
                index, "get_by_id", lambda adapter=adapter: adapter.get_by_id(entity_id)
            )
            if entity is not None:
                return index, entity
        return None

    async def _resolve_owner(self, entity_id: str, operation: str) -> tuple[int, str]:
        """
        Find the adapter that owns ``entity_id``.

        Returns:
            Adapter index and backend id

        Raises:
            NotInitializedError: If no adapter, or the owner, is initialized
            EntityNotFoundError: If no adapter owns a non-composite id
        """
        if not self._usable():
            raise NotInitializedError(
                f"{self._name}: {operation} needs an initialized platform"
            )

        decoded = decode_composite_id(entity_id, len(self._handles))
        if decoded is not None:
            index, original_id = decoded
            if not self._handles[index].instance.is_initialized():
                raise NotInitializedError(
                    f"{self._name}: platform {index} is not initialized",
                    platform_index=index,
                )
            return index, original_id

        found = await self._locate(entity_id)
        if found is None:
            raise EntityNotFoundError(entity_id)
        return found[0], entity_id

    # ------------------------------------------------------------------
    # Domain operations
    # ------------------------------------------------------------------

    async def list_entities(self, options: QueryOptions | None = None) -> ListResult:
        """
        List entities from every initialized adapter.

        Items are concatenated in adapter order and stamped. Totals are
        summed; page and page size come from ``options``.
        """
        options = options or QueryOptions()
        await self._ensure_initialized()

        usable = self._usable()
        if not usable:
            logger.warning(f"{self._name}: no initialized platform to list from")
            return ListResult.empty(options)

        results = await asyncio.gather(
            *(
                self._read(
                    index,
                    "list_entities",
                    lambda adapter=adapter: adapter.list_entities(options),
                )
                for index, adapter in usable
            )
        )

        items: list[Entity] = []
        total_items = 0
        for (index, _), result in zip(usable, results):
            if result is None:
                continue
            items.extend(stamp_entity(entity, index) for entity in result.items)
            total_items += max(result.pagination.total_items, len(result.items))

        return ListResult(
            items=items,
            pagination=Pagination.for_total(total_items, options.page, options.per_page),
        )

    async def get_by_id(self, entity_id: str) -> Entity | None:
        """
        Get an entity by composite or backend id.

        Composite ids go straight to their adapter. Anything else is looked
        up on each initialized adapter in order.
        """
        await self._ensure_initialized()

        decoded = decode_composite_id(entity_id, len(self._handles))
        if decoded is not None:
            index, original_id = decoded
            adapter = self._handles[index].instance
            if not adapter.is_initialized():
                logger.warning(f"{self._name}: platform {index} is not initialized")
                return None

            entity = await self._read(
                index, "get_by_id", lambda: adapter.get_by_id(original_id)
            )
            if entity is None:
                return None
            return stamp_entity(
                entity, index, original_id=original_id, composite_id=entity_id
            )

        found = await self._locate(entity_id)
        if found is None:
            return None

        index, entity = found
        return stamp_entity(entity, index)

    async def create(self, entity: Entity) -> Entity:
        """
        Create on the first initialized adapter that supports creation.

        Raises:
            NotInitializedError: If no adapter is initialized
            UnsupportedOperationError: If no initialized adapter supports create
            PlatformOperationError: If the chosen adapter fails
        """
        await self._ensure_initialized()

        usable = self._usable()
        if not usable:
            raise NotInitializedError(f"{self._name}: create needs an initialized platform")

        for index, adapter in usable:
            if not adapter.supports(Capability.CREATE):
                continue

            payload = unstamp_entity(entity, index)
            created = await self._write(index, "create", lambda: adapter.create(payload))
            return stamp_entity(created, index)

        raise UnsupportedOperationError("create")

    async def update(self, entity_id: str, patch: Entity) -> Entity:
        """
        Update an entity on the adapter that owns it.

        Raises:
            NotInitializedError: If the owner is not initialized
            EntityNotFoundError: If no adapter owns the id
            UnsupportedOperationError: If the owner does not support update
            PlatformOperationError: If the owner fails
        """
        await self._ensure_initialized()

        index, original_id = await self._resolve_owner(entity_id, "update")
        adapter = self._handles[index].instance
        if not adapter.supports(Capability.UPDATE):
            raise UnsupportedOperationError("update", platform_index=index)

        payload = unstamp_entity(patch, index)
        payload.pop(ID_KEY, None)
        updated = await self._write(
            index, "update", lambda: adapter.update(original_id, payload)
        )
        return stamp_entity(
            updated,
            index,
            original_id=original_id,
            composite_id=encode_composite_id(index, original_id),
        )

    async def delete(self, entity_id: str) -> bool:
        """
        Delete an entity from the adapter that owns it.

        Raises:
            NotInitializedError: If the owner is not initialized
            EntityNotFoundError: If no adapter owns the id
            UnsupportedOperationError: If the owner does not support delete
            PlatformOperationError: If the owner fails
        """
        await self._ensure_initialized()

        index, original_id = await self._resolve_owner(entity_id, "delete")
        adapter = self._handles[index].instance
        if not adapter.supports(Capability.DELETE):
            raise UnsupportedOperationError("delete", platform_index=index)

        return bool(
            await self._write(index, "delete", lambda: adapter.delete(original_id))
        )

    def __repr__(self) -> str:
        platforms = ", ".join(platform.value for platform in self.platforms)
        return f"CompositeService([{platforms}])"
