"""Global pytest configuration and fixtures for all tests."""

import asyncio
import os

import pytest
from loguru import logger

from platform_services.core.platform_context import platform_context
from platform_services.domain.models import (
    Capability,
    ConfigRequirements,
    Entity,
    ListResult,
    Pagination,
    Platform,
    QueryOptions,
)
from platform_services.domain.services.platform_adapter import PlatformAdapter


@pytest.fixture(scope="session", autouse=True)
def set_test_env_vars():
    """
    Set environment variables for testing.

    Keeps platform credentials and startup warm-up empty so tests only see
    the adapters they build themselves.
    """
    original_env = {}

    test_env_vars = {
        "ENABLED_PLATFORMS": "",
        "ADAPTER_TIMEOUT_SECONDS": "5",
        "LOG_LEVEL": "DEBUG",
    }

    for key, value in test_env_vars.items():
        original_env[key] = os.environ.get(key)
        os.environ[key] = value

    yield

    for key, original_value in original_env.items():
        if original_value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = original_value


class FakeAdapter(PlatformAdapter):
    """
    Scriptable adapter for tests.

    Serves a fixed item set and records every call. ``fail`` makes every
    operation raise, ``delay`` slows listing down.
    """

    def __init__(
        self,
        items: list[Entity] | None = None,
        *,
        platform: Platform = Platform.CUSTOM,
        capabilities: Capability = Capability.NONE,
        fail: bool = False,
        required: tuple[str, ...] = (),
        initialized: bool = True,
        connect_error: Exception | None = None,
        delay: float = 0.0,
    ):
        super().__init__()
        self.platform = platform
        self.capabilities = capabilities
        self.items: dict[str, Entity] = {str(item["id"]): dict(item) for item in items or []}
        self.fail = fail
        self.required = required
        self.connect_error = connect_error
        self.delay = delay
        self._initialized = initialized

        self.calls: list[tuple] = []
        self.initialize_calls = 0
        self.seen_platform_labels: list[str | None] = []

    def get_config_requirements(self) -> ConfigRequirements:
        return ConfigRequirements(required=self.required)

    async def initialize(self, config):
        self.initialize_calls += 1
        return await super().initialize(config)

    async def connect(self, config):
        if self.connect_error is not None:
            raise self.connect_error
        return True

    def _check(self, operation: str, *args) -> None:
        self.calls.append((operation, *args))
        self.seen_platform_labels.append(platform_context.get())
        if self.fail:
            raise RuntimeError(f"{self.platform.value} backend unavailable")

    async def list_entities(self, options: QueryOptions | None = None) -> ListResult:
        if self.delay:
            await asyncio.sleep(self.delay)
        self._check("list_entities", options)
        items = [dict(item) for item in self.items.values()]
        return ListResult(items=items, pagination=Pagination.for_total(len(items), 1, 10))

    async def get_by_id(self, entity_id: str) -> Entity | None:
        self._check("get_by_id", entity_id)
        item = self.items.get(entity_id)
        return dict(item) if item is not None else None

    async def create(self, entity: Entity) -> Entity:
        if not self.supports(Capability.CREATE):
            return await super().create(entity)
        self._check("create", entity)
        entity_id = str(entity.get("id") or f"new-{len(self.items) + 1}")
        self.items[entity_id] = {**entity, "id": entity_id}
        return dict(self.items[entity_id])

    async def update(self, entity_id: str, patch: Entity) -> Entity:
        if not self.supports(Capability.UPDATE):
            return await super().update(entity_id, patch)
        self._check("update", entity_id, patch)
        self.items[entity_id] = {**self.items.get(entity_id, {}), **patch, "id": entity_id}
        return dict(self.items[entity_id])

    async def delete(self, entity_id: str) -> bool:
        if not self.supports(Capability.DELETE):
            return await super().delete(entity_id)
        self._check("delete", entity_id)
        return self.items.pop(entity_id, None) is not None


@pytest.fixture
def make_adapter():
    """Return a constructor for FakeAdapter instances."""

    def _make(items: list[Entity] | None = None, **kwargs) -> FakeAdapter:
        return FakeAdapter(items, **kwargs)

    return _make


@pytest.fixture
def log_messages():
    """Capture loguru messages emitted during a test."""
    messages: list[str] = []
    handler_id = logger.add(messages.append, level="DEBUG", format="{level}|{message}")
    yield messages
    logger.remove(handler_id)
