"""Tests for health check endpoints."""

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from platform_services import __version__
from platform_services.application import create_app
from platform_services.domain.models import Domain, Platform


@pytest.fixture
def catalog(make_adapter):
    """Category adapters: Shopify is configured, WooCommerce is not."""
    return {
        Domain.CATEGORY: {
            Platform.SHOPIFY: lambda: make_adapter(
                platform=Platform.SHOPIFY, initialized=False
            ),
            Platform.WOOCOMMERCE: lambda: make_adapter(
                platform=Platform.WOOCOMMERCE,
                initialized=False,
                required=("api_key",),
            ),
        }
    }


@pytest.fixture
def client(catalog):
    """Create test client with the application lifespan running."""
    app = create_app(catalog)
    with TestClient(app) as test_client:
        yield test_client


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == __version__
    assert "message" in data
    assert data["adapters"]["category"] == {}


def test_platform_health_check(client):
    """Test resolving a platform bundle through the API."""
    response = client.get("/health/platforms/shopify")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["platform"] == "shopify"
    assert set(data["services"]) == {domain.value for domain in Domain}
    assert data["services"]["search"]["service"] == "OfflineAdapter(platform=offline)"
    assert data["services"]["search"]["initialized"] is True


def test_health_reports_failed_adapter(client):
    """Test an adapter that failed to initialize degrades health."""
    client.get("/health/platforms/woocommerce")

    response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "degraded"
    assert data["adapters"]["category"] == {"woocommerce": "failed"}


def test_unknown_platform_is_rejected(client):
    """Test an unknown platform key is a validation problem."""
    response = client.get("/health/platforms/not-a-platform")

    assert response.status_code == 422
    data = response.json()
    assert data["title"] == "Validation Error"
    assert data["errors"][0]["loc"] == ["path", "platform"]


def test_health_without_lifespan_is_unavailable(catalog):
    """Test requests before startup get a 503 problem."""
    client = TestClient(create_app(catalog))

    response = client.get("/health")

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.json()["title"] == "Service not initialized"
