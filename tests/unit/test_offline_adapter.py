"""
Unit tests for the in-memory offline adapter.
"""

import pytest

from platform_services.domain.exceptions import EntityNotFoundError
from platform_services.domain.models import Capability, Platform, QueryOptions
from platform_services.infrastructure.composite import CompositeService
from platform_services.infrastructure.implementations.offline import OfflineAdapter


@pytest.fixture
def adapter():
    """Create offline adapter with a few categories."""
    return OfflineAdapter(
        [
            {"id": "1", "name": "Shirts", "parentId": None},
            {"id": "2", "name": "Shoes", "parentId": None},
            {"id": "3", "name": "Running Shoes", "parentId": "2"},
        ]
    )


def test_offline_adapter_is_always_ready(adapter):
    """Test the fallback needs no configuration."""
    assert adapter.is_initialized() is True
    assert adapter.platform is Platform.OFFLINE
    assert adapter.supports(Capability.ALL)


@pytest.mark.asyncio
async def test_initialize_with_empty_config(adapter):
    """Test initialize succeeds without any keys."""
    assert await adapter.initialize({}) is True


@pytest.mark.asyncio
async def test_list_all(adapter):
    """Test listing returns every entity with pagination."""
    result = await adapter.list_entities()

    assert [item["id"] for item in result.items] == ["1", "2", "3"]
    assert result.pagination.total_items == 3
    assert result.pagination.total_pages == 1


@pytest.mark.asyncio
async def test_list_paginates(adapter):
    """Test only the requested page is returned."""
    result = await adapter.list_entities(QueryOptions(page=2, per_page=2))

    assert [item["id"] for item in result.items] == ["3"]
    assert result.pagination.current_page == 2
    assert result.pagination.total_items == 3
    assert result.pagination.total_pages == 2


@pytest.mark.asyncio
async def test_list_search_is_case_insensitive(adapter):
    """Test free-text search over string attributes."""
    result = await adapter.list_entities(QueryOptions(search="shoes"))

    assert [item["id"] for item in result.items] == ["2", "3"]


@pytest.mark.asyncio
async def test_list_filters_and_ids(adapter):
    """Test attribute filters and id restrictions."""
    by_parent = await adapter.list_entities(QueryOptions(filters={"parentId": "2"}))
    by_ids = await adapter.list_entities(QueryOptions(ids=["1", "3"]))

    assert [item["id"] for item in by_parent.items] == ["3"]
    assert [item["id"] for item in by_ids.items] == ["1", "3"]


@pytest.mark.asyncio
async def test_get_by_id_returns_copy(adapter):
    """Test callers cannot mutate stored entities."""
    entity = await adapter.get_by_id("1")
    entity["name"] = "Changed"

    assert (await adapter.get_by_id("1"))["name"] == "Shirts"
    assert await adapter.get_by_id("missing") is None


@pytest.mark.asyncio
async def test_create_generates_id():
    """Test an id is generated when none is given."""
    adapter = OfflineAdapter()

    created = await adapter.create({"name": "Hats"})

    assert created["id"]
    assert await adapter.get_by_id(created["id"]) == created


@pytest.mark.asyncio
async def test_create_keeps_given_id():
    """Test a provided id is used as is."""
    adapter = OfflineAdapter()

    created = await adapter.create({"id": "hats", "name": "Hats"})

    assert created == {"id": "hats", "name": "Hats"}


@pytest.mark.asyncio
async def test_update_merges_patch(adapter):
    """Test update keeps untouched attributes and the id."""
    updated = await adapter.update("3", {"name": "Trail Shoes", "id": "ignored"})

    assert updated == {"id": "3", "name": "Trail Shoes", "parentId": "2"}


@pytest.mark.asyncio
async def test_update_missing_raises_not_found(adapter):
    """Test updating an unknown entity raises EntityNotFoundError."""
    with pytest.raises(EntityNotFoundError) as exc_info:
        await adapter.update("missing", {"name": "x"})

    assert exc_info.value.status_code == 404
    assert exc_info.value.entity_id == "missing"


@pytest.mark.asyncio
async def test_update_missing_through_composite_keeps_not_found(adapter):
    """Test a composite reports the offline miss as not found with its index."""
    composite = CompositeService([adapter])

    with pytest.raises(EntityNotFoundError) as exc_info:
        await composite.update("p0_missing", {"name": "x"})

    assert exc_info.value.platform_index == 0


@pytest.mark.asyncio
async def test_delete(adapter):
    """Test delete reports whether an entity was removed."""
    assert await adapter.delete("1") is True
    assert await adapter.delete("1") is False
    assert await adapter.get_by_id("1") is None
