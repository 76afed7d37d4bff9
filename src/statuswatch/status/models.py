"""Data models for normalized service status and aggregation results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


class NormalizedStatus(str, Enum):
    """Canonical status values shared by every vendor format."""

    OPERATIONAL = "operational"
    DEGRADED = "degraded"
    OUTAGE = "outage"
    MAINTENANCE = "maintenance"
    FETCH_FAILED = "fetch_failed"  # only ever assigned by the aggregator


class WireFormat(str, Enum):
    """Tag selecting how an endpoint's response body is decoded and parsed."""

    STATUSPAGE = "statuspage"
    ATLASSIAN_SUMMARY = "atlassian_summary"
    INSTATUS = "instatus"
    GOOGLE = "google"
    RSS = "rss"
    HEROKU = "heroku"
    STATUSIO = "statusio"
    SLACK = "slack"

    @property
    def is_text(self) -> bool:
        return self is WireFormat.RSS


class ServiceCategory(str, Enum):
    AI = "AI"
    CLOUD = "Cloud"
    DEVELOPER_TOOLS = "Developer Tools"
    CDN_DNS = "CDN & DNS"
    CI_CD = "CI/CD"
    COMMUNICATION = "Communication"
    DATABASES = "Databases"
    EMAIL = "Email"
    ANALYTICS = "Analytics"


def service_key(name: str, category: ServiceCategory | str) -> str:
    """Build the catalog-wide identity key for a service."""
    value = category.value if isinstance(category, ServiceCategory) else category
    return f"{name}|{value}"


@dataclass(frozen=True)
class EndpointResolution:
    """Status endpoint and wire format resolved for one service."""

    url: str
    format: WireFormat


@dataclass(frozen=True)
class AggregateResult:
    """Immutable snapshot of one aggregation cycle."""

    statuses: Mapping[str, NormalizedStatus]
    generated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        object.__setattr__(self, "statuses", MappingProxyType(dict(self.statuses)))

    def get(self, key: str) -> NormalizedStatus:
        """Status for *key*; unknown keys read as fetch_failed."""
        return self.statuses.get(key, NormalizedStatus.FETCH_FAILED)

    def summary(self) -> dict[str, int]:
        counts = {status.value: 0 for status in NormalizedStatus}
        for status in self.statuses.values():
            counts[status.value] += 1
        return counts

    def to_dict(self) -> dict[str, Any]:
        return {
            "services": {key: status.value for key, status in self.statuses.items()},
            "lastUpdated": self.generated_at.isoformat(),
        }
