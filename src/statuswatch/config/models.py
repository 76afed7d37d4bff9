"""Pydantic models for statuswatch configuration and the service catalog."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from statuswatch.status.models import NormalizedStatus, ServiceCategory, WireFormat, service_key


class ServiceEntry(BaseModel):
    """A monitored service as listed in the catalog."""

    model_config = ConfigDict(frozen=True)

    name: str
    category: ServiceCategory
    url: str
    icon: str = ""  # opaque identifier, resolved by the presentation layer
    status: NormalizedStatus | None = None
    status_api_url: str | None = None
    status_api_type: WireFormat | None = None

    @field_validator("status")
    @classmethod
    def _no_fetch_failed_override(cls, value: NormalizedStatus | None) -> NormalizedStatus | None:
        if value is NormalizedStatus.FETCH_FAILED:
            raise ValueError("fetch_failed cannot be used as a static status override")
        return value

    @property
    def key(self) -> str:
        return service_key(self.name, self.category)


class FetchConfig(BaseModel):
    """Timeout and retry budget for status endpoint requests."""

    timeout: float = Field(default=30.0, gt=0)
    retries: int = Field(default=1, ge=0)


class ApiConfig(BaseModel):
    """Published snapshot settings."""

    cache_ttl: float = Field(default=60.0, ge=0)


class StatusWatchConfig(BaseModel):
    """Root configuration model for .statuswatch.yaml."""

    services: list[ServiceEntry] = Field(default_factory=list)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
