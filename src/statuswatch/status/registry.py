"""Service registry: the loaded catalog plus status aggregation over it."""

from __future__ import annotations

import asyncio
from typing import Dict, List, Optional

from statuswatch.config.models import ServiceEntry, StatusWatchConfig
from statuswatch.status.aggregator import aggregate
from statuswatch.status.fetcher import default_policy
from statuswatch.status.models import AggregateResult, EndpointResolution, ServiceCategory
from statuswatch.status.resolver import resolve_endpoint


class ServiceRegistry:
    """Read-only view of the catalog with status collection support."""

    def __init__(self, config: StatusWatchConfig) -> None:
        self._config = config
        self._services: Dict[str, ServiceEntry] = {entry.key: entry for entry in config.services}

    @property
    def service_keys(self) -> List[str]:
        return list(self._services.keys())

    def get_entry(self, key: str) -> Optional[ServiceEntry]:
        return self._services.get(key)

    def resolve(self, key: str) -> Optional[EndpointResolution]:
        entry = self._services.get(key)
        if entry is None:
            return None
        return resolve_endpoint(entry)

    def filter(
        self,
        search: str = "",
        category: ServiceCategory | None = None,
    ) -> List[ServiceEntry]:
        """Entries whose name contains *search* (case-insensitive), optionally in *category*."""
        needle = search.strip().lower()
        return [
            entry
            for entry in self._services.values()
            if (not needle or needle in entry.name.lower())
            and (category is None or entry.category is category)
        ]

    async def collect(self) -> AggregateResult:
        policy = default_policy(timeout=self._config.fetch.timeout, retries=self._config.fetch.retries)
        return await aggregate(self._services.values(), policy=policy)

    def collect_sync(self) -> AggregateResult:
        return asyncio.run(self.collect())
