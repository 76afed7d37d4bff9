"""Fetch a status endpoint and normalize its response."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from statuswatch import __version__
from statuswatch.status.models import NormalizedStatus, WireFormat
from statuswatch.status.parsers import parse_body
from statuswatch.status.retry import Attempt, RetryPolicy

logger = logging.getLogger(__name__)

FETCH_TIMEOUT = 30.0
FETCH_RETRIES = 1

_JSON_ACCEPT = "application/json"
_XML_ACCEPT = "application/xml, text/xml, */*"


def _retry_transport_failure(attempt: Attempt[Any]) -> bool:
    if not attempt.ok:
        return True
    response = attempt.value
    return isinstance(response, httpx.Response) and not response.is_success


def default_policy(timeout: float = FETCH_TIMEOUT, retries: int = FETCH_RETRIES) -> RetryPolicy:
    """Policy for status endpoints: retry transport errors, timeouts and non-2xx."""
    return RetryPolicy(
        max_attempts=retries + 1,
        timeout=timeout,
        retry_on=(httpx.HTTPError,),
        should_retry=_retry_transport_failure,
    )


def request_headers(fmt: WireFormat) -> dict[str, str]:
    return {
        "Accept": _XML_ACCEPT if fmt.is_text else _JSON_ACCEPT,
        "User-Agent": f"statuswatch/{__version__}",
    }


def decode_body(response: httpx.Response, fmt: WireFormat) -> Any:
    """Return the response text for text formats, parsed JSON otherwise.

    Raises ``ValueError`` when a JSON body cannot be decoded.
    """
    if fmt.is_text:
        return response.text
    return response.json()


async def fetch_status(
    url: str,
    fmt: WireFormat = WireFormat.STATUSPAGE,
    *,
    policy: RetryPolicy | None = None,
    client: httpx.AsyncClient | None = None,
) -> NormalizedStatus | None:
    """Fetch *url* and parse it as *fmt*.

    Returns ``None`` when every attempt fails or the body cannot be parsed.
    Transport errors never propagate.
    """
    policy = policy or default_policy()
    headers = request_headers(fmt)

    if client is None:
        async with httpx.AsyncClient(timeout=policy.timeout, follow_redirects=True) as own_client:
            return await _fetch(own_client, url, fmt, headers, policy)
    return await _fetch(client, url, fmt, headers, policy)


async def _fetch(
    client: httpx.AsyncClient,
    url: str,
    fmt: WireFormat,
    headers: dict[str, str],
    policy: RetryPolicy,
) -> NormalizedStatus | None:
    try:
        attempt = await policy.run(lambda: client.get(url, headers=headers), label=f"GET {url}")
    except httpx.InvalidURL as exc:
        logger.warning("Status endpoint %r is not a valid URL: %s", url, exc)
        return None
    response = attempt.value
    if not attempt.ok or response is None:
        logger.warning(
            "Status fetch for %s gave up after %d attempt(s): %s (last attempt %.1fms)",
            url,
            attempt.number,
            attempt.describe(),
            attempt.duration_ms,
        )
        return None
    if not response.is_success:
        logger.warning(
            "Status fetch for %s gave up after %d attempt(s): HTTP %d",
            url,
            attempt.number,
            response.status_code,
        )
        return None

    try:
        body = decode_body(response, fmt)
    except ValueError:
        logger.warning("Could not decode %s response from %s", fmt.value, url)
        return None

    status = parse_body(body, fmt)
    if status is None:
        logger.warning("Unexpected %s payload shape from %s", fmt.value, url)
    return status
