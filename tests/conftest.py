"""Shared fixtures for statuswatch tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import pytest
import yaml

from statuswatch.config.models import StatusWatchConfig


SAMPLE_CONFIG: Dict[str, Any] = {
    "fetch": {"timeout": 5.0, "retries": 1},
    "api": {"cache_ttl": 60.0},
    "services": [
        {
            "name": "GitHub",
            "category": "Developer Tools",
            "url": "https://www.githubstatus.com/",
            "icon": "code",
        },
        {
            "name": "GitHub Actions",
            "category": "CI/CD",
            "url": "https://www.githubstatus.com/",
            "icon": "workflow",
        },
        {
            "name": "Railway",
            "category": "Cloud",
            "url": "https://railway.instatus.com/",
            "icon": "cloud",
            "status_api_type": "instatus",
        },
        {
            "name": "Slack",
            "category": "Communication",
            "url": "https://status.slack.com/",
            "icon": "message-circle",
            "status_api_url": "https://slack-status.com/api/v2.0.0/current",
            "status_api_type": "slack",
        },
    ],
}


@pytest.fixture()
def sample_config() -> StatusWatchConfig:
    """Return a parsed StatusWatchConfig from sample data."""
    return StatusWatchConfig(**SAMPLE_CONFIG)


@pytest.fixture()
def sample_config_dict() -> Dict[str, Any]:
    """Return raw sample config dict."""
    return dict(SAMPLE_CONFIG)


@pytest.fixture()
def config_file(tmp_path: Path) -> Path:
    """Write sample config to a temp .statuswatch.yaml and return the path."""
    path = tmp_path / ".statuswatch.yaml"
    with path.open("w") as fh:
        yaml.dump(SAMPLE_CONFIG, fh)
    return path
