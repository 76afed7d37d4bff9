"""Resolve each catalog entry to the status endpoint and wire format to query."""

from __future__ import annotations

from collections.abc import Iterable

from statuswatch.config.models import ServiceEntry
from statuswatch.status.models import EndpointResolution, WireFormat

# Formats whose endpoint cannot be derived from the public page URL.
EXPLICIT_URL_FORMATS = frozenset(
    {
        WireFormat.GOOGLE,
        WireFormat.RSS,
        WireFormat.HEROKU,
        WireFormat.STATUSIO,
        WireFormat.SLACK,
    }
)


class ResolutionError(ValueError):
    """A catalog entry cannot be mapped to a status endpoint."""


def _base_url(url: str) -> str:
    # Exactly one trailing slash is stripped.
    return url[:-1] if url.endswith("/") else url


def resolve_endpoint(entry: ServiceEntry) -> EndpointResolution:
    """Return the (url, format) pair to query for *entry*. Performs no I/O."""
    fmt = entry.status_api_type
    if entry.status_api_url:
        return EndpointResolution(entry.status_api_url, fmt or WireFormat.STATUSPAGE)

    base = _base_url(entry.url)
    if fmt is WireFormat.INSTATUS:
        return EndpointResolution(f"{base}/summary.json", fmt)
    if fmt is WireFormat.ATLASSIAN_SUMMARY:
        return EndpointResolution(f"{base}/api/v2/summary.json", fmt)
    if fmt in EXPLICIT_URL_FORMATS:
        raise ResolutionError(
            f"Service '{entry.key}': format '{fmt.value}' requires status_api_url"
        )
    return EndpointResolution(f"{base}/api/v2/status.json", WireFormat.STATUSPAGE)


def validate_catalog(services: Iterable[ServiceEntry]) -> list[str]:
    """Check a catalog for resolution errors, duplicate keys and format conflicts.

    Returns a list of human-readable error strings; empty means valid.
    """
    errors: list[str] = []
    seen_keys: set[str] = set()
    formats_by_url: dict[str, WireFormat] = {}
    for entry in services:
        if entry.key in seen_keys:
            errors.append(f"Duplicate service key '{entry.key}'")
        seen_keys.add(entry.key)

        try:
            resolution = resolve_endpoint(entry)
        except ResolutionError as exc:
            errors.append(str(exc))
            continue

        known = formats_by_url.setdefault(resolution.url, resolution.format)
        if known is not resolution.format:
            errors.append(
                f"Service '{entry.key}': endpoint {resolution.url} is shared with "
                f"format '{known.value}' but declares '{resolution.format.value}'"
            )
    return errors
