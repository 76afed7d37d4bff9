"""Vendor status payload parsers.

Each parser takes a decoded response body (parsed JSON, or raw text for RSS)
and returns a :class:`NormalizedStatus`, or ``None`` when the body does not
have the shape its vendor format promises. Parsers never raise on malformed
input and never return ``NormalizedStatus.FETCH_FAILED``.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any, Optional

from statuswatch.status.models import NormalizedStatus, WireFormat

Parser = Callable[[Any], Optional[NormalizedStatus]]

_STATUSPAGE_INDICATORS = {
    "none": NormalizedStatus.OPERATIONAL,
    "minor": NormalizedStatus.DEGRADED,
    "major": NormalizedStatus.OUTAGE,
    "critical": NormalizedStatus.OUTAGE,
    "maintenance": NormalizedStatus.MAINTENANCE,
}

_INSTATUS_STATES = {
    "UP": NormalizedStatus.OPERATIONAL,
    "HASISSUES": NormalizedStatus.DEGRADED,
    "UNDERMAINTENANCE": NormalizedStatus.MAINTENANCE,
}

_STATUSIO_STATES = {
    "Operational": NormalizedStatus.OPERATIONAL,
    "Degraded Performance": NormalizedStatus.DEGRADED,
    "Partial Service Disruption": NormalizedStatus.DEGRADED,
    "Service Disruption": NormalizedStatus.OUTAGE,
    "Security Event": NormalizedStatus.OUTAGE,
    "Maintenance": NormalizedStatus.MAINTENANCE,
}

_GOOGLE_OUTAGE_IMPACTS = frozenset({"SERVICE_OUTAGE", "OUTAGE"})

_RSS_ITEM = re.compile(r"<item>.*?</item>", re.DOTALL)
_RSS_TITLE = re.compile(r"<title>(.*?)</title>")
_RSS_DESCRIPTION = re.compile(r"<description>(.*?)</description>")

# Items mentioning any of these are historical or informational.
RSS_SKIP_KEYWORDS = ("resolved", "operating normally", "informational", "completed")
RSS_KEYWORDS: tuple[tuple[NormalizedStatus, tuple[str, ...]], ...] = (
    (NormalizedStatus.OUTAGE, ("outage", "error", "failure")),
    (NormalizedStatus.DEGRADED, ("degraded", "issue", "warning", "latency", "slow")),
    (NormalizedStatus.MAINTENANCE, ("maintenance",)),
)


def parse_statuspage(body: Any) -> NormalizedStatus | None:
    """Statuspage.io ``{"status": {"indicator": ...}}``."""
    if not isinstance(body, dict):
        return None
    status = body.get("status")
    if not isinstance(status, dict):
        return None
    indicator = status.get("indicator")
    if not isinstance(indicator, str):
        return None
    return _STATUSPAGE_INDICATORS.get(indicator.lower(), NormalizedStatus.OPERATIONAL)


def parse_atlassian_summary(body: Any) -> NormalizedStatus | None:
    """Atlassian summary.json carries the same ``status.indicator`` as status.json."""
    return parse_statuspage(body)


def parse_instatus(body: Any) -> NormalizedStatus | None:
    """Instatus ``{"page": {"status": "UP" | "HASISSUES" | "UNDERMAINTENANCE"}}``."""
    if not isinstance(body, dict):
        return None
    page = body.get("page")
    if not isinstance(page, dict):
        return None
    state = page.get("status")
    if not isinstance(state, str):
        return None
    return _INSTATUS_STATES.get(state.upper(), NormalizedStatus.OPERATIONAL)


def parse_google_incidents(body: Any) -> NormalizedStatus | None:
    """Google Cloud / Firebase incidents.json: a list of incident objects.

    The first incident whose most recent update is not ``AVAILABLE`` decides
    the status through its ``status_impact``.
    """
    if not isinstance(body, list):
        return None
    for incident in body:
        if not isinstance(incident, dict):
            continue
        update = incident.get("most_recent_update")
        state = update.get("status") if isinstance(update, dict) else None
        if state and state != "AVAILABLE":
            if incident.get("status_impact") in _GOOGLE_OUTAGE_IMPACTS:
                return NormalizedStatus.OUTAGE
            # SERVICE_DISRUPTION, SERVICE_INFORMATION and unknown impacts
            return NormalizedStatus.DEGRADED
    return NormalizedStatus.OPERATIONAL


def _rss_item_text(item: str) -> str:
    title = _RSS_TITLE.search(item)
    description = _RSS_DESCRIPTION.search(item)
    return ((title.group(1) if title else "") + (description.group(1) if description else "")).lower()


def parse_rss(body: Any) -> NormalizedStatus | None:
    """Keyword scan over RSS ``<item>`` blocks (AWS, Azure, Docker feeds).

    Items are read in document order. Items mentioning a resolution or an
    informational notice are skipped; the first remaining item containing a
    severity keyword decides the status.
    """
    if not isinstance(body, str):
        return None
    for item in _RSS_ITEM.findall(body):
        content = _rss_item_text(item)
        if any(word in content for word in RSS_SKIP_KEYWORDS):
            continue
        for status, keywords in RSS_KEYWORDS:
            if any(word in content for word in keywords):
                return status
    return NormalizedStatus.OPERATIONAL


def parse_heroku(body: Any) -> NormalizedStatus | None:
    """Heroku ``{"status": [{"system", "status"}], "incidents": [...]}``."""
    if not isinstance(body, dict):
        return None
    incidents = body.get("incidents")
    systems = body.get("status")
    if not isinstance(incidents, list) and not isinstance(systems, list):
        return None
    if isinstance(incidents, list) and incidents:
        return NormalizedStatus.OUTAGE

    colors: list[Any] = []
    if isinstance(systems, list):
        colors = [entry.get("status") for entry in systems if isinstance(entry, dict)]
    if "red" in colors:
        return NormalizedStatus.OUTAGE
    if "yellow" in colors or "blue" in colors:
        return NormalizedStatus.DEGRADED
    return NormalizedStatus.OPERATIONAL


def parse_statusio(body: Any) -> NormalizedStatus | None:
    """Status.io ``{"result": {"status_overall": {"status": ...}}}`` (GitLab)."""
    if not isinstance(body, dict):
        return None
    result = body.get("result")
    overall = result.get("status_overall") if isinstance(result, dict) else None
    state = overall.get("status") if isinstance(overall, dict) else None
    if not state or not isinstance(state, str):
        return None
    return _STATUSIO_STATES.get(state, NormalizedStatus.OPERATIONAL)


def parse_slack(body: Any) -> NormalizedStatus | None:
    """Slack ``{"status": "ok", "active_incidents": [...]}``."""
    if not isinstance(body, dict):
        return None
    incidents = body.get("active_incidents")
    if incidents is None:
        incidents = []
    if not isinstance(incidents, list):
        return None
    if incidents:
        return NormalizedStatus.OUTAGE
    state = body.get("status")
    if not isinstance(state, str):
        return None
    if state == "ok":
        return NormalizedStatus.OPERATIONAL
    return NormalizedStatus.DEGRADED


PARSERS: dict[WireFormat, Parser] = {
    WireFormat.STATUSPAGE: parse_statuspage,
    WireFormat.ATLASSIAN_SUMMARY: parse_atlassian_summary,
    WireFormat.INSTATUS: parse_instatus,
    WireFormat.GOOGLE: parse_google_incidents,
    WireFormat.RSS: parse_rss,
    WireFormat.HEROKU: parse_heroku,
    WireFormat.STATUSIO: parse_statusio,
    WireFormat.SLACK: parse_slack,
}

_unhandled = set(WireFormat) - set(PARSERS)
if _unhandled:
    raise RuntimeError(f"No parser registered for: {sorted(f.value for f in _unhandled)}")


def parse_body(body: Any, fmt: WireFormat) -> NormalizedStatus | None:
    """Dispatch *body* to the parser registered for *fmt*."""
    return PARSERS[fmt](body)
