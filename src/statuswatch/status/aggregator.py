"""Concurrent status aggregation across a service catalog."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import Dict, List

import httpx

from statuswatch.config.models import ServiceEntry
from statuswatch.status.fetcher import default_policy, fetch_status
from statuswatch.status.models import AggregateResult, EndpointResolution, NormalizedStatus
from statuswatch.status.resolver import ResolutionError, resolve_endpoint
from statuswatch.status.retry import RetryPolicy

logger = logging.getLogger(__name__)


def group_by_endpoint(
    services: Iterable[ServiceEntry],
) -> tuple[Dict[str, EndpointResolution], Dict[str, List[str]], List[str]]:
    """Resolve every service and group service keys by endpoint url.

    Returns ``(endpoints, keys_by_url, unresolved_keys)``. The first service
    seen for a url decides the format used for it.
    """
    endpoints: Dict[str, EndpointResolution] = {}
    keys_by_url: Dict[str, List[str]] = {}
    unresolved: List[str] = []
    for entry in services:
        try:
            resolution = resolve_endpoint(entry)
        except ResolutionError as exc:
            logger.error("%s", exc)
            unresolved.append(entry.key)
            continue
        endpoints.setdefault(resolution.url, resolution)
        keys_by_url.setdefault(resolution.url, []).append(entry.key)
    return endpoints, keys_by_url, unresolved


async def aggregate(
    services: Iterable[ServiceEntry],
    *,
    policy: RetryPolicy | None = None,
    client: httpx.AsyncClient | None = None,
) -> AggregateResult:
    """Fetch every distinct endpoint concurrently and map statuses onto service keys.

    A failed or unparseable endpoint marks only its own services as
    ``fetch_failed``; all fetches settle before the result is built.
    """
    services = list(services)
    policy = policy or default_policy()
    endpoints, keys_by_url, unresolved = group_by_endpoint(services)
    urls = list(endpoints)

    async def _run(http: httpx.AsyncClient) -> list[object]:
        return await asyncio.gather(
            *(fetch_status(url, endpoints[url].format, policy=policy, client=http) for url in urls),
            return_exceptions=True,
        )

    if client is None:
        async with httpx.AsyncClient(timeout=policy.timeout, follow_redirects=True) as own_client:
            outcomes = await _run(own_client)
    else:
        outcomes = await _run(client)

    by_url: Dict[str, NormalizedStatus] = {}
    for url, outcome in zip(urls, outcomes):
        if isinstance(outcome, NormalizedStatus):
            by_url[url] = outcome
        elif isinstance(outcome, BaseException):
            logger.error("Status fetch for %s raised %r", url, outcome)

    statuses: Dict[str, NormalizedStatus] = {}
    for url, keys in keys_by_url.items():
        status = by_url.get(url, NormalizedStatus.FETCH_FAILED)
        for key in keys:
            statuses[key] = status
    for key in unresolved:
        statuses[key] = NormalizedStatus.FETCH_FAILED

    # Preserve catalog order in the published mapping.
    ordered = {entry.key: statuses[entry.key] for entry in services}
    logger.info(
        "Aggregated %d services over %d endpoints (%d failed)",
        len(ordered),
        len(urls),
        len(urls) - len(by_url),
    )
    return AggregateResult(statuses=ordered)
