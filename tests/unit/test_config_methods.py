"""
Unit tests for Settings helper methods.
"""

from unittest.mock import patch

from platform_services.config import PLATFORM_CONFIG_FIELDS, Settings, get_settings
from platform_services.domain.models import Platform


def test_get_settings_is_cached():
    """Test get_settings returns the same instance."""
    assert get_settings() is get_settings()


def test_adapter_timeout_disabled_when_not_positive():
    """Test zero or negative timeouts disable the per-adapter deadline."""
    assert Settings(_env_file=None, adapter_timeout_seconds=0).get_adapter_timeout() is None
    assert Settings(_env_file=None, adapter_timeout_seconds=-1).get_adapter_timeout() is None
    assert Settings(_env_file=None, adapter_timeout_seconds=7.5).get_adapter_timeout() == 7.5


def test_enabled_platforms_parsing():
    """Test comma-separated platforms are parsed and unknown keys skipped."""
    settings = Settings(_env_file=None, enabled_platforms=" Shopify, woocommerce ,nope,,")

    assert settings.get_enabled_platforms() == [Platform.SHOPIFY, Platform.WOOCOMMERCE]


def test_enabled_platforms_empty():
    """Test no platforms are enabled by default."""
    assert Settings(_env_file=None, enabled_platforms="").get_enabled_platforms() == []


def test_platform_config_skips_empty_values():
    """Test only configured credentials are passed to adapters."""
    settings = Settings(
        _env_file=None,
        woocommerce_url="https://store.example",
        woocommerce_key="ck_123",
        woocommerce_secret="",
    )

    assert settings.get_platform_config(Platform.WOOCOMMERCE) == {
        "store_url": "https://store.example",
        "api_key": "ck_123",
    }


def test_platform_config_for_offline_is_empty():
    """Test the offline platform needs no configuration."""
    assert Settings(_env_file=None).get_platform_config(Platform.OFFLINE) == {}


def test_platform_config_fields_point_at_settings():
    """Test every mapped settings attribute exists."""
    for fields in PLATFORM_CONFIG_FIELDS.values():
        for attribute in fields.values():
            assert attribute in Settings.model_fields


def test_settings_read_environment():
    """Test environment variables populate settings."""
    with patch.dict(
        "os.environ",
        {"SHOPIFY_STORE_URL": "https://env.myshopify.com", "ADAPTER_TIMEOUT_SECONDS": "3"},
    ):
        settings = Settings(_env_file=None)

    assert settings.shopify_store_url == "https://env.myshopify.com"
    assert settings.get_adapter_timeout() == 3.0
