"""
Unit tests for application lifecycle.
"""

from unittest.mock import MagicMock, patch

import pytest

from platform_services.config import Settings
from platform_services.domain.models import Domain, Platform
from platform_services.lifespan import lifespan
from platform_services.services import ServiceRegistry


@pytest.mark.asyncio
async def test_lifespan_creates_and_clears_registry():
    """Test the registry exists only while the application runs."""
    # Arrange
    mock_app = MagicMock()
    mock_app.state.adapter_catalog = None

    # Act
    async with lifespan(mock_app):
        registry = mock_app.state.service_registry

        # Assert - registry available during the application's lifetime
        assert isinstance(registry, ServiceRegistry)

    assert mock_app.state.service_registry is None


@pytest.mark.asyncio
async def test_lifespan_warms_enabled_platforms(make_adapter):
    """Test bundles for enabled platforms are resolved on startup."""
    mock_app = MagicMock()
    mock_app.state.adapter_catalog = {
        Domain.CATEGORY: {
            Platform.SHOPIFY: lambda: make_adapter(
                platform=Platform.SHOPIFY, initialized=False
            )
        }
    }
    settings = Settings(_env_file=None, enabled_platforms="shopify")

    with patch("platform_services.lifespan.get_settings", return_value=settings):
        async with lifespan(mock_app):
            registry = mock_app.state.service_registry

            assert registry.cached_selections() == [Platform.SHOPIFY]
            handle = registry.get_factory(Domain.CATEGORY).get_handle(Platform.SHOPIFY)
            assert await handle.wait_ready() is True


@pytest.mark.asyncio
async def test_lifespan_logs_startup_and_shutdown():
    """Test lifespan logs both phases."""
    mock_app = MagicMock()
    mock_app.state.adapter_catalog = None

    with patch("platform_services.lifespan.logger") as mock_logger:
        async with lifespan(mock_app):
            pass

        assert mock_logger.info.call_count == 2
