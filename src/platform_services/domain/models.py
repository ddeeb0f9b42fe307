"""
Core value types shared by adapters, factories and composites.

Entities are plain dictionaries: every domain has its own attribute set
(categories carry ``name`` and ``parentId``, orders carry ``lineItems`` and
``total``) and the composition layer only ever touches ``id``, ``parentId``
and the stamp keys defined here.
"""

import math
from dataclasses import dataclass, field
from enum import Enum, Flag, auto
from typing import Any

Entity = dict[str, Any]
"""Canonical domain record. Always has a string ``id``."""

ID_KEY = "id"
PARENT_ID_KEY = "parentId"
ORIGINAL_ID_KEY = "_originalId"
PLATFORM_INDEX_KEY = "_platform"
NESTED_KEYS: tuple[str, ...] = ("subcategories",)


class Platform(str, Enum):
    """Backend platforms an adapter can be registered for."""

    SHOPIFY = "shopify"
    WOOCOMMERCE = "woocommerce"
    BIGCOMMERCE = "bigcommerce"
    MAGENTO = "magento"
    SYLIUS = "sylius"
    WIX = "wix"
    PRESTASHOP = "prestashop"
    SQUARESPACE = "squarespace"
    CUSTOM = "custom"
    OFFLINE = "offline"


class Domain(str, Enum):
    """Service domains resolved by the registry."""

    CATEGORY = "category"
    PRODUCT = "product"
    ORDER = "order"
    INVENTORY = "inventory"
    SEARCH = "search"
    REFUND = "refund"
    BASKET = "basket"
    TOKEN = "token"


class Capability(Flag):
    """Optional mutating operations an adapter may support."""

    NONE = 0
    CREATE = auto()
    UPDATE = auto()
    DELETE = auto()
    ALL = CREATE | UPDATE | DELETE


@dataclass(frozen=True)
class ConfigRequirements:
    """
    Configuration field names an adapter needs.

    Attributes:
        required: Keys that must be present and non-empty
        optional: Keys the adapter reads when present
    """

    required: tuple[str, ...] = ()
    optional: tuple[str, ...] = ()

    def missing_fields(self, config: dict[str, Any]) -> list[str]:
        """Return the required keys absent or empty in ``config``."""
        return [key for key in self.required if config.get(key) in (None, "")]


@dataclass(frozen=True)
class PlatformDescriptor:
    """A platform key bound to its configuration requirements."""

    platform: Platform
    requirements: ConfigRequirements = field(default_factory=ConfigRequirements)

    def validate(self, config: dict[str, Any]) -> list[str]:
        return self.requirements.missing_fields(config)


@dataclass
class QueryOptions:
    """
    Listing options passed through to every adapter.

    Attributes:
        page: 1-based page number
        per_page: Page size
        search: Free-text filter
        filters: Attribute equality filters
        ids: Restrict results to these ids
    """

    page: int = 1
    per_page: int = 10
    search: str | None = None
    filters: dict[str, Any] = field(default_factory=dict)
    ids: list[str] | None = None


@dataclass
class Pagination:
    current_page: int = 1
    per_page: int = 10
    total_items: int = 0
    total_pages: int = 0

    @classmethod
    def for_total(cls, total_items: int, page: int, per_page: int) -> "Pagination":
        """Build pagination info for ``total_items`` at the given page."""
        total_pages = math.ceil(total_items / per_page) if per_page > 0 else 0
        return cls(
            current_page=page,
            per_page=per_page,
            total_items=total_items,
            total_pages=total_pages,
        )


@dataclass
class ListResult:
    """Items returned by a listing call plus pagination info."""

    items: list[Entity] = field(default_factory=list)
    pagination: Pagination = field(default_factory=Pagination)

    @classmethod
    def empty(cls, options: QueryOptions | None = None) -> "ListResult":
        options = options or QueryOptions()
        return cls(
            items=[],
            pagination=Pagination.for_total(0, options.page, options.per_page),
        )
