"""
Per-domain service factory.

Selects, builds and caches adapter instances by platform:
- no platform: the offline adapter
- one platform: the cached adapter, or a new one whose initialization
  starts in the background
- several platforms: a composite over the per-platform adapters

Usage:
    from platform_services.infrastructure import ServiceFactory
    from platform_services.config import get_settings

    factory = ServiceFactory.from_settings(
        Domain.CATEGORY,
        get_settings(),
        builders={Platform.SHOPIFY: ShopifyCategoryAdapter},
    )

    categories = factory.get_service(Platform.SHOPIFY)
    everything = factory.get_service([Platform.SHOPIFY, Platform.WOOCOMMERCE])
"""

from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from loguru import logger

from platform_services.domain.models import Domain, Platform
from platform_services.domain.services.platform_adapter import PlatformAdapter
from platform_services.infrastructure.composite import CompositeService
from platform_services.infrastructure.handle import AdapterHandle, AdapterState
from platform_services.infrastructure.implementations.offline import OfflineAdapter

if TYPE_CHECKING:
    from platform_services.config import Settings

AdapterBuilder = Callable[[], PlatformAdapter]
ConfigProvider = Callable[[Platform], dict[str, Any]]
PlatformSelection = Platform | str | Sequence[Platform | str] | None


def _no_config(platform: Platform) -> dict[str, Any]:
    return {}


class ServiceFactory:
    """
    Single source of adapter instances for one domain.

    Caches one handle per platform for the factory's lifetime; only
    ``configure_service`` replaces a handle.
    """

    def __init__(
        self,
        domain: Domain,
        builders: Mapping[Platform, AdapterBuilder] | None = None,
        *,
        config_provider: ConfigProvider | None = None,
        offline_adapter: PlatformAdapter | None = None,
        adapter_timeout: float | None = None,
    ):
        """
        Initialize service factory.

        Args:
            domain: Domain this factory serves
            builders: Zero-argument callables creating an adapter per platform.
                     The offline adapter is registered for Platform.OFFLINE
                     unless overridden.
            config_provider: Returns the initialization config for a platform
            offline_adapter: Adapter returned when no platform is selected
            adapter_timeout: Per-adapter deadline for composites, in seconds
        """
        self.domain = domain
        self._builders: dict[Platform, AdapterBuilder] = dict(builders or {})
        self._builders.setdefault(Platform.OFFLINE, OfflineAdapter)
        self._config_provider = config_provider or _no_config
        self._offline = offline_adapter or OfflineAdapter()
        self.adapter_timeout = adapter_timeout

        self._handles: dict[Platform, AdapterHandle] = {}
        self._composites: dict[tuple[Platform, ...], CompositeService] = {}

        logger.info(
            f"Initialized {domain.value} ServiceFactory with platforms: "
            f"{[platform.value for platform in self._builders]}"
        )

    @classmethod
    def from_settings(
        cls,
        domain: Domain,
        settings: "Settings",
        builders: Mapping[Platform, AdapterBuilder] | None = None,
    ) -> "ServiceFactory":
        """
        Create factory from Settings object.

        Args:
            domain: Domain this factory serves
            settings: Application settings from config.py
            builders: Adapter builders per platform

        Returns:
            ServiceFactory reading platform config and timeouts from settings
        """
        return cls(
            domain,
            builders,
            config_provider=settings.get_platform_config,
            adapter_timeout=settings.get_adapter_timeout(),
        )

    # ------------------------------------------------------------------
    # Registration and inspection
    # ------------------------------------------------------------------

    def register_adapter(self, platform: Platform, builder: AdapterBuilder) -> None:
        """
        Register or replace the builder for a platform.

        Already cached adapters are kept until ``configure_service``. Cached
        composites are discarded so a platform that had no builder is picked
        up by the next composite request.
        """
        self._builders[platform] = builder
        self._composites.clear()
        logger.info(f"Registered {self.domain.value} adapter for {platform.value}")

    def registered_platforms(self) -> list[Platform]:
        return list(self._builders)

    def get_offline_service(self) -> PlatformAdapter:
        return self._offline

    def get_handle(self, platform: Platform) -> AdapterHandle | None:
        """
        Get the cached handle for a platform.

        Await ``handle.wait_ready()`` to wait for initialization instead of
        racing it.
        """
        return self._handles.get(platform)

    def handle_states(self) -> dict[Platform, AdapterState]:
        return {platform: handle.state for platform, handle in self._handles.items()}

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def _coerce(self, platform: Platform | str) -> Platform | None:
        if isinstance(platform, Platform):
            return platform
        try:
            return Platform(str(platform).lower())
        except ValueError:
            logger.warning(f"Unknown platform: {platform}")
            return None

    def _build_handle(
        self, platform: Platform, config: dict[str, Any] | None = None
    ) -> AdapterHandle | None:
        """Construct an adapter and start its initialization; never raises."""
        builder = self._builders.get(platform)
        if builder is None:
            logger.warning(
                f"No {self.domain.value} adapter registered for {platform.value}"
            )
            return None

        try:
            if config is None:
                config = self._config_provider(platform)
            instance = builder()
        except Exception as e:
            logger.error(
                f"Failed to create {platform.value} {self.domain.value} adapter: {e}"
            )
            return None

        handle = AdapterHandle(platform, instance, config)
        handle.start()

        logger.info(f"Created {platform.value} {self.domain.value} adapter")
        return handle

    def _get_or_create_handle(self, platform: Platform) -> AdapterHandle | None:
        handle = self._handles.get(platform)
        if handle is not None:
            return handle

        handle = self._build_handle(platform)
        if handle is not None:
            self._handles[platform] = handle
        return handle

    def _get_composite(self, platforms: Sequence[Platform | str]) -> CompositeService:
        selected: list[Platform] = []
        for item in platforms:
            platform = self._coerce(item)
            if platform is not None and platform not in selected:
                selected.append(platform)

        key = tuple(selected)
        cached = self._composites.get(key)
        if cached is not None:
            return cached

        handles: list[AdapterHandle] = []
        for platform in selected:
            handle = self._get_or_create_handle(platform)
            if handle is not None:
                handles.append(handle)

        if not handles:
            logger.warning(
                f"No usable {self.domain.value} adapters for {list(platforms)}, "
                "using offline adapter"
            )
            handles.append(AdapterHandle.wrap(self._offline))

        composite = CompositeService(
            handles, domain=self.domain, timeout=self.adapter_timeout
        )
        self._composites[key] = composite
        return composite

    def get_service(self, platforms: PlatformSelection = None) -> PlatformAdapter:
        """
        Get the adapter for a platform selection.

        Args:
            platforms: None, one platform, or a sequence of platforms

        Returns:
            The offline adapter, the platform's cached adapter (initialized
            or not), or a composite in the given platform order
        """
        if platforms is None:
            return self._offline

        if isinstance(platforms, (Platform, str)):
            platform = self._coerce(platforms)
            handle = self._get_or_create_handle(platform) if platform else None
            if handle is None:
                logger.warning(
                    f"Using offline {self.domain.value} adapter for {platforms}"
                )
                return self._offline
            return handle.instance

        return self._get_composite(platforms)

    def configure_service(
        self, platform: Platform, config: dict[str, Any]
    ) -> PlatformAdapter:
        """
        Replace a platform's adapter with one built from ``config``.

        The previous handle is dropped, not mutated, so work already running
        on it finishes undisturbed. Cached composites are discarded because
        they reference the old adapter.

        Returns:
            The new adapter, or the offline adapter if it cannot be built
        """
        previous = self._handles.pop(platform, None)
        if previous is not None:
            logger.info(f"Replacing {platform.value} {self.domain.value} adapter")

        self._composites.clear()

        handle = self._build_handle(platform, dict(config))
        if handle is None:
            return self._offline

        self._handles[platform] = handle
        return handle.instance

    async def aclose(self) -> None:
        """Cancel initializations still pending."""
        for handle in self._handles.values():
            handle.cancel()
        logger.debug(f"Closed {self.domain.value} ServiceFactory")
