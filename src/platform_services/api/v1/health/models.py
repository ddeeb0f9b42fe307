"""Health check response models."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default="ok", description="Service status")
    version: str = Field(..., description="Backend version")
    message: str | None = Field(None, description="Optional status message")
    adapters: dict[str, dict[str, str]] = Field(
        default_factory=dict,
        description="Adapter state per domain and platform",
    )


class DomainServiceStatus(BaseModel):
    """Resolved service for one domain."""

    service: str = Field(..., description="Adapter or composite description")
    initialized: bool = Field(..., description="Whether a backend is initialized")


class PlatformHealthResponse(BaseModel):
    """Health of the service bundle resolved for one platform."""

    platform: str = Field(..., description="Platform key")
    services: dict[str, DomainServiceStatus] = Field(
        ..., description="Resolved service per domain"
    )
