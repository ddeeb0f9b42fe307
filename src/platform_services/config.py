"""
Application configuration and environment variables.

This module unifies configuration using pydantic-settings.
Variables can come from:
1. .env file
2. System environment variables (have priority)
3. Default values

Naming convention:
- In Python code: snake_case (shopify_store_url)
- In .env or ENV vars: UPPER_CASE (SHOPIFY_STORE_URL)
- Pydantic automatically converts between both
"""

from functools import lru_cache
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from platform_services.domain.models import Platform

# Adapter config key -> Settings attribute, per platform
PLATFORM_CONFIG_FIELDS: dict[Platform, dict[str, str]] = {
    Platform.SHOPIFY: {
        "store_url": "shopify_store_url",
        "access_token": "shopify_access_token",
        "api_version": "shopify_api_version",
    },
    Platform.WOOCOMMERCE: {
        "store_url": "woocommerce_url",
        "api_key": "woocommerce_key",
        "api_secret": "woocommerce_secret",
    },
    Platform.BIGCOMMERCE: {
        "store_hash": "bigcommerce_store_hash",
        "access_token": "bigcommerce_access_token",
        "client_id": "bigcommerce_client_id",
    },
    Platform.MAGENTO: {
        "store_url": "magento_url",
        "access_token": "magento_access_token",
    },
    Platform.SYLIUS: {
        "store_url": "sylius_url",
        "access_token": "sylius_access_token",
    },
    Platform.WIX: {
        "site_id": "wix_site_id",
        "api_key": "wix_api_key",
    },
    Platform.PRESTASHOP: {
        "store_url": "prestashop_url",
        "api_key": "prestashop_api_key",
    },
    Platform.SQUARESPACE: {
        "api_key": "squarespace_api_key",
    },
    Platform.CUSTOM: {
        "base_url": "custom_api_url",
        "api_key": "custom_api_key",
    },
}


class Settings(BaseSettings):
    """
    Unified application configuration.

    All variables can be defined in:
    - .env file: VARIABLE_NAME=value
    - Environment variables: export VARIABLE_NAME=value

    Example:
        # In .env or as environment variable:
        LOG_LEVEL=INFO
        ENABLED_PLATFORMS=shopify,woocommerce
        SHOPIFY_STORE_URL=https://example.myshopify.com
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,  # Allows using uppercase or lowercase
        extra="ignore",  # Ignores extra variables in .env
    )

    # ============================================================================
    # PROJECT SETTINGS
    # ============================================================================
    project_name: str = Field(
        default="Platform Services", description="Project name"
    )
    project_version: str = Field(default="1.0.0", description="Project version")

    # ============================================================================
    # LOGGING SETTINGS
    # ============================================================================
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_format: str = Field(
        default="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | platform={extra[platform]} | {name}:{function}:{line} - {message}",  # noqa: E501
        description="Log format",
    )
    log_serialize: bool = Field(
        default=False, description="Emit logs as JSON records"
    )
    logger_enqueue: bool = Field(
        default=False, description="Enqueue logs using multiprocessing"
    )

    # ============================================================================
    # COMPOSITION SETTINGS
    # ============================================================================
    adapter_timeout_seconds: float = Field(
        default=30.0,
        description="Per-adapter deadline for composite calls (0 disables)",
    )
    enabled_platforms: str = Field(
        default="",
        description="Platforms resolved at startup (comma-separated)",
    )

    # ============================================================================
    # PLATFORM CREDENTIALS
    # ============================================================================

    # Shopify
    shopify_store_url: str = Field(default="", description="Shopify store URL")
    shopify_access_token: str = Field(
        default="", description="Shopify Admin API access token"
    )
    shopify_api_version: str = Field(
        default="2024-01", description="Shopify Admin API version"
    )

    # WooCommerce
    woocommerce_url: str = Field(default="", description="WooCommerce store URL")
    woocommerce_key: str = Field(default="", description="WooCommerce consumer key")
    woocommerce_secret: str = Field(
        default="", description="WooCommerce consumer secret"
    )

    # BigCommerce
    bigcommerce_store_hash: str = Field(
        default="", description="BigCommerce store hash"
    )
    bigcommerce_access_token: str = Field(
        default="", description="BigCommerce access token"
    )
    bigcommerce_client_id: str = Field(
        default="", description="BigCommerce client ID"
    )

    # Magento
    magento_url: str = Field(default="", description="Magento store URL")
    magento_access_token: str = Field(
        default="", description="Magento integration access token"
    )

    # Sylius
    sylius_url: str = Field(default="", description="Sylius store URL")
    sylius_access_token: str = Field(default="", description="Sylius API token")

    # Wix
    wix_site_id: str = Field(default="", description="Wix site ID")
    wix_api_key: str = Field(default="", description="Wix API key")

    # PrestaShop
    prestashop_url: str = Field(default="", description="PrestaShop store URL")
    prestashop_api_key: str = Field(
        default="", description="PrestaShop webservice key"
    )

    # Squarespace
    squarespace_api_key: str = Field(default="", description="Squarespace API key")

    # Custom backend
    custom_api_url: str = Field(default="", description="Custom backend base URL")
    custom_api_key: str = Field(default="", description="Custom backend API key")

    # ============================================================================
    # HELPER METHODS
    # ============================================================================

    def get_adapter_timeout(self) -> float | None:
        """
        Get the per-adapter deadline for composite calls.

        Returns:
            float | None: Seconds, or None when disabled.
        """
        if self.adapter_timeout_seconds <= 0:
            return None
        return self.adapter_timeout_seconds

    def get_enabled_platforms(self) -> list[Platform]:
        """
        Get platforms to resolve at startup.

        Returns:
            list[Platform]: Known platforms in declaration order. Unknown keys are skipped.
        """
        known = {platform.value for platform in Platform}
        return [
            Platform(key)
            for key in (item.strip().lower() for item in self.enabled_platforms.split(","))
            if key in known
        ]

    def get_platform_config(self, platform: Platform) -> dict[str, Any]:
        """
        Get adapter configuration for a platform.

        Args:
            platform: Platform to build config for

        Returns:
            dict[str, Any]: Adapter config keys with non-empty values only.
        """
        fields = PLATFORM_CONFIG_FIELDS.get(platform, {})
        config: dict[str, Any] = {}
        for key, attribute in fields.items():
            value = getattr(self, attribute, "")
            if value:
                config[key] = value
        return config


# ============================================================================
# SINGLETON PATTERN - Global settings instance
# ============================================================================


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings (LRU cached).

    This function is cached, so the .env file is only read once.
    To refresh the configuration, clear the cache:
        get_settings.cache_clear()

    Returns:
        Settings: Application configuration instance.
    """
    return Settings()


# Create global instance for use outside FastAPI
settings = get_settings()
