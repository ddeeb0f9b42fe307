"""
Service registry.

Composition root that resolves every domain service for a platform
selection. Application code depends on the registry instead of on the
individual domain factories:

    registry = ServiceRegistry.from_settings(get_settings(), catalog)
    services = registry.get_services(Platform.SHOPIFY)
    categories = await services.category.list_entities()
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from loguru import logger

from platform_services.domain.models import Domain, Platform
from platform_services.domain.services.platform_adapter import PlatformAdapter
from platform_services.infrastructure.factory import AdapterBuilder, ServiceFactory

if TYPE_CHECKING:
    from platform_services.config import Settings

AdapterCatalog = Mapping[Domain, Mapping[Platform, AdapterBuilder]]
Selection = Platform | Sequence[Platform]
SelectionKey = Platform | tuple[Platform, ...]

# Domains with a distinct adapter per platform
PER_PLATFORM_DOMAINS: tuple[Domain, ...] = (
    Domain.CATEGORY,
    Domain.PRODUCT,
    Domain.ORDER,
    Domain.INVENTORY,
    Domain.REFUND,
)

# Domains served by one shared service whatever the platform
SHARED_DOMAINS: tuple[Domain, ...] = (Domain.SEARCH, Domain.BASKET, Domain.TOKEN)


@dataclass(frozen=True)
class ServiceBundle:
    """
    Every domain service resolved for one platform selection.

    Attributes:
        platform: The selection the bundle was resolved for
        category: Category listing
        product: Product catalog
        order: Order creation and retrieval
        inventory: Inventory queries and updates
        search: Product search (shared)
        refund: Refund processing
        basket: Basket and checkout (shared)
        token: Token management (shared)
    """

    platform: SelectionKey
    category: PlatformAdapter
    product: PlatformAdapter
    order: PlatformAdapter
    inventory: PlatformAdapter
    search: PlatformAdapter
    refund: PlatformAdapter
    basket: PlatformAdapter
    token: PlatformAdapter

    def get(self, domain: Domain) -> PlatformAdapter:
        return getattr(self, domain.value)


def _selection_key(selection: Selection) -> SelectionKey:
    if isinstance(selection, Platform):
        return selection
    if isinstance(selection, str):
        return Platform(selection.lower())
    return tuple(
        item if isinstance(item, Platform) else Platform(str(item).lower())
        for item in selection
    )


def _selection_platforms(key: SelectionKey) -> tuple[Platform, ...]:
    return (key,) if isinstance(key, Platform) else key


class ServiceRegistry:
    """
    Resolves and caches one ServiceBundle per platform selection.

    Bundles are replaced wholesale on invalidation. Invalidating the
    registry does not touch the factories; use ``reconfigure_platform`` when
    backend configuration changes.
    """

    def __init__(
        self,
        factories: Mapping[Domain, ServiceFactory],
        shared_services: Mapping[Domain, PlatformAdapter] | None = None,
    ):
        """
        Initialize service registry.

        Args:
            factories: One factory per domain. Missing domains get a factory
                      with only the offline adapter.
            shared_services: Services used for shared domains instead of the
                            factory's offline adapter
        """
        self._factories: dict[Domain, ServiceFactory] = dict(factories)
        for domain in Domain:
            if domain not in self._factories:
                self._factories[domain] = ServiceFactory(domain)

        self._shared: dict[Domain, PlatformAdapter] = dict(shared_services or {})
        self._bundles: dict[SelectionKey, ServiceBundle] = {}

        logger.info("Initialized ServiceRegistry")

    @classmethod
    def from_settings(
        cls,
        settings: "Settings",
        catalog: AdapterCatalog | None = None,
        shared_services: Mapping[Domain, PlatformAdapter] | None = None,
    ) -> "ServiceRegistry":
        """
        Create registry with one settings-driven factory per domain.

        Args:
            settings: Application settings from config.py
            catalog: Adapter builders per domain and platform
            shared_services: Services for shared domains

        Returns:
            ServiceRegistry over freshly built factories
        """
        catalog = catalog or {}
        factories = {
            domain: ServiceFactory.from_settings(domain, settings, catalog.get(domain))
            for domain in Domain
        }
        return cls(factories, shared_services)

    @property
    def factories(self) -> Mapping[Domain, ServiceFactory]:
        return self._factories

    def get_factory(self, domain: Domain) -> ServiceFactory:
        return self._factories[domain]

    def _resolve(self, domain: Domain, key: SelectionKey) -> PlatformAdapter:
        factory = self._factories[domain]
        if domain in SHARED_DOMAINS:
            return self._shared.get(domain) or factory.get_service()
        if isinstance(key, Platform):
            return factory.get_service(key)
        return factory.get_service(list(key))

    def get_services(self, platform: Selection) -> ServiceBundle:
        """
        Resolve every domain service for a platform selection.

        Results are cached; calling twice with the same selection returns the
        same bundle.

        Args:
            platform: A platform, or a sequence of platforms for composites.
                     String keys are accepted case-insensitively.

        Returns:
            ServiceBundle for the selection

        Raises:
            ValueError: If the selection names an unknown platform key. Unlike
                ServiceFactory.get_service, the registry does not fall back to
                the offline adapter, so a typo never yields a bundle cached
                under a misleading key.
        """
        key = _selection_key(platform)
        cached = self._bundles.get(key)
        if cached is not None:
            return cached

        logger.info(f"Resolving services for platform: {key}")

        services = {domain.value: self._resolve(domain, key) for domain in Domain}
        bundle = ServiceBundle(platform=key, **services)

        self._bundles[key] = bundle
        return bundle

    def cached_selections(self) -> list[SelectionKey]:
        return list(self._bundles)

    # ------------------------------------------------------------------
    # Invalidation
    # ------------------------------------------------------------------

    def invalidate(self, platform: Selection) -> None:
        """Drop the cached bundle for a selection."""
        key = _selection_key(platform)
        self._bundles.pop(key, None)
        logger.info(f"Invalidated cached services for platform: {key}")

    def invalidate_all(self) -> None:
        """Drop every cached bundle."""
        self._bundles.clear()
        logger.info("Invalidated all cached platform services")

    def reconfigure_platform(self, platform: Platform, config: dict[str, Any]) -> None:
        """
        Apply new configuration for a platform at both cache layers.

        Rebuilds the platform's adapter in every per-platform factory and
        drops every bundle whose selection includes the platform.
        """
        for domain in PER_PLATFORM_DOMAINS:
            self._factories[domain].configure_service(platform, config)

        stale = [key for key in self._bundles if platform in _selection_platforms(key)]
        for key in stale:
            del self._bundles[key]

        logger.info(
            f"Reconfigured {platform.value}; invalidated {len(stale)} cached bundle(s)"
        )

    # ------------------------------------------------------------------
    # Convenience accessors
    # ------------------------------------------------------------------

    def get_category_service(self, platform: Selection) -> PlatformAdapter:
        return self.get_services(platform).category

    def get_product_service(self, platform: Selection) -> PlatformAdapter:
        return self.get_services(platform).product

    def get_order_service(self, platform: Selection) -> PlatformAdapter:
        return self.get_services(platform).order

    def get_inventory_service(self, platform: Selection) -> PlatformAdapter:
        return self.get_services(platform).inventory

    def get_refund_service(self, platform: Selection) -> PlatformAdapter:
        return self.get_services(platform).refund

    def get_search_service(self, platform: Selection) -> PlatformAdapter:
        return self.get_services(platform).search

    def get_basket_service(self, platform: Selection) -> PlatformAdapter:
        return self.get_services(platform).basket

    def get_token_service(self, platform: Selection) -> PlatformAdapter:
        return self.get_services(platform).token

    async def aclose(self) -> None:
        """Close every factory."""
        for factory in self._factories.values():
            await factory.aclose()
        logger.info("Closed ServiceRegistry")
