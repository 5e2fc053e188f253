"""Health check schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class ServiceStatus(BaseModel):
    """Status of a dependency (database, LLM provider, identity provider)."""

    status: Literal["healthy", "unhealthy"]
    message: str
    details: dict = Field(default_factory=dict)


class HealthResponse(BaseModel):
    """Health check response. `degraded` when any dependency is unhealthy."""

    status: Literal["ok", "degraded"]
    version: str
    services: dict[str, ServiceStatus]
    timestamp: str
