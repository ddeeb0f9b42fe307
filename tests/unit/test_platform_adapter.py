"""
Unit tests for the PlatformAdapter contract.
"""

from unittest.mock import patch

import pytest

from platform_services.domain.exceptions import UnsupportedOperationError
from platform_services.domain.models import (
    Capability,
    ConfigRequirements,
    Platform,
    PlatformDescriptor,
)


@pytest.mark.asyncio
async def test_initialize_with_complete_config(make_adapter):
    """Test an adapter with every required key initializes."""
    adapter = make_adapter(initialized=False, required=("store_url", "access_token"))

    result = await adapter.initialize(
        {"store_url": "https://shop.example", "access_token": "shpat_1"}
    )

    assert result is True
    assert adapter.is_initialized() is True


@pytest.mark.asyncio
async def test_initialize_with_missing_config_returns_false(make_adapter, log_messages):
    """Test missing required keys are logged, not raised."""
    adapter = make_adapter(initialized=False, required=("store_url", "access_token"))

    result = await adapter.initialize({"store_url": "https://shop.example"})

    assert result is False
    assert adapter.is_initialized() is False
    assert any(
        message.startswith("ERROR|") and "access_token" in message
        for message in log_messages
    )


@pytest.mark.asyncio
async def test_initialize_with_empty_value_returns_false(make_adapter):
    """Test an empty string does not satisfy a required key."""
    adapter = make_adapter(initialized=False, required=("access_token",))

    assert await adapter.initialize({"access_token": ""}) is False


@pytest.mark.asyncio
async def test_default_mutations_are_unsupported(make_adapter):
    """Test adapters without capabilities refuse writes."""
    adapter = make_adapter([{"id": "1"}], capabilities=Capability.NONE)

    with pytest.raises(UnsupportedOperationError):
        await adapter.create({"name": "new"})
    with pytest.raises(UnsupportedOperationError):
        await adapter.update("1", {"name": "renamed"})
    with pytest.raises(UnsupportedOperationError):
        await adapter.delete("1")


def test_supports_requires_every_flag(make_adapter):
    """Test supports() checks each requested capability."""
    adapter = make_adapter(capabilities=Capability.CREATE | Capability.UPDATE)

    assert adapter.supports(Capability.CREATE)
    assert adapter.supports(Capability.CREATE | Capability.UPDATE)
    assert not adapter.supports(Capability.DELETE)
    assert not adapter.supports(Capability.ALL)


def test_default_config_requirements_are_empty(make_adapter):
    """Test the base requirements ask for nothing."""
    from platform_services.domain.services.platform_adapter import PlatformAdapter

    adapter = make_adapter()

    assert PlatformAdapter.get_config_requirements(adapter) == ConfigRequirements()


def test_descriptor_binds_platform_and_requirements(make_adapter):
    """Test the descriptor pairs the platform key with its config requirements."""
    adapter = make_adapter(platform=Platform.SHOPIFY, required=("store_url", "access_token"))

    descriptor = adapter.descriptor()

    assert descriptor == PlatformDescriptor(
        Platform.SHOPIFY, ConfigRequirements(required=("store_url", "access_token"))
    )
    assert descriptor.validate({"store_url": "https://shop.example"}) == ["access_token"]


@pytest.mark.asyncio
async def test_initialize_validates_through_descriptor(make_adapter):
    """Test initialize() rejects config the descriptor reports as incomplete."""
    adapter = make_adapter(initialized=False)
    strict = PlatformDescriptor(Platform.WIX, ConfigRequirements(required=("api_key",)))

    with patch.object(adapter, "descriptor", return_value=strict) as mock_descriptor:
        result = await adapter.initialize({})

    assert result is False
    assert adapter.is_initialized() is False
    mock_descriptor.assert_called_once_with()
