"""Tests for config models and YAML loader."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from statuswatch.config.loader import (
    _interpolate_env,
    _interpolate_recursive,
    find_config_file,
    load_catalog,
    load_config,
    load_default_config,
)
from statuswatch.config.models import FetchConfig, ServiceEntry, StatusWatchConfig
from statuswatch.status.models import NormalizedStatus, ServiceCategory, WireFormat

# ─── Model tests ───


class TestServiceEntry:
    def test_minimal(self):
        entry = ServiceEntry(name="GitHub", category="Developer Tools", url="https://www.githubstatus.com/")
        assert entry.category is ServiceCategory.DEVELOPER_TOOLS
        assert entry.icon == ""
        assert entry.status is None
        assert entry.status_api_url is None
        assert entry.status_api_type is None

    def test_key_combines_name_and_category(self):
        entry = ServiceEntry(name="GitHub Actions", category="CI/CD", url="https://www.githubstatus.com/")
        assert entry.key == "GitHub Actions|CI/CD"

    def test_full(self):
        entry = ServiceEntry(
            name="Slack",
            category="Communication",
            url="https://status.slack.com/",
            icon="message-circle",
            status="degraded",
            status_api_url="https://slack-status.com/api/v2.0.0/current",
            status_api_type="slack",
        )
        assert entry.status is NormalizedStatus.DEGRADED
        assert entry.status_api_type is WireFormat.SLACK

    def test_unknown_category_rejected(self):
        with pytest.raises(ValidationError):
            ServiceEntry(name="X", category="Games", url="https://x")

    def test_unknown_format_rejected(self):
        with pytest.raises(ValidationError):
            ServiceEntry(name="X", category="AI", url="https://x", status_api_type="atom")

    def test_fetch_failed_override_rejected(self):
        with pytest.raises(ValidationError):
            ServiceEntry(name="X", category="AI", url="https://x", status="fetch_failed")

    def test_frozen(self):
        entry = ServiceEntry(name="X", category="AI", url="https://x")
        with pytest.raises(ValidationError):
            entry.name = "Y"


class TestFetchConfig:
    def test_defaults(self):
        cfg = FetchConfig()
        assert cfg.timeout == 30.0
        assert cfg.retries == 1

    def test_negative_retries_rejected(self):
        with pytest.raises(ValidationError):
            FetchConfig(retries=-1)


class TestStatusWatchConfig:
    def test_defaults(self):
        cfg = StatusWatchConfig()
        assert cfg.services == []
        assert cfg.api.cache_ttl == 60.0

    def test_from_dict(self, sample_config_dict):
        cfg = StatusWatchConfig(**sample_config_dict)
        assert [s.name for s in cfg.services] == ["GitHub", "GitHub Actions", "Railway", "Slack"]
        assert cfg.fetch.timeout == 5.0


# ─── Loader tests ───


class TestEnvInterpolation:
    def test_simple_var(self):
        with patch.dict(os.environ, {"MY_URL": "http://example.com"}):
            assert _interpolate_env("${MY_URL}") == "http://example.com"

    def test_var_with_default(self):
        os.environ.pop("MISSING_VAR", None)
        assert _interpolate_env("${MISSING_VAR:-fallback}") == "fallback"

    def test_unset_var_preserved(self):
        os.environ.pop("UNSET_12345", None)
        assert _interpolate_env("${UNSET_12345}") == "${UNSET_12345}"

    def test_recursive(self):
        with patch.dict(os.environ, {"HOST": "status.example.com"}):
            data = {"services": [{"url": "https://${HOST}/"}], "n": 3}
            result = _interpolate_recursive(data)
            assert result["services"][0]["url"] == "https://status.example.com/"
            assert result["n"] == 3


class TestFindConfigFile:
    def test_finds_in_parent(self, tmp_path: Path):
        config = tmp_path / ".statuswatch.yaml"
        config.touch()
        child = tmp_path / "sub" / "deep"
        child.mkdir(parents=True)
        assert find_config_file(child) == config

    def test_returns_none_when_missing(self, tmp_path: Path):
        assert find_config_file(tmp_path) is None


class TestLoadConfig:
    def test_loads_valid_config(self, config_file: Path):
        cfg = load_config(path=config_file)
        assert len(cfg.services) == 4
        assert cfg.services[3].status_api_type is WireFormat.SLACK

    def test_raises_on_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError, match="Could not find"):
            load_config(path=tmp_path / "nonexistent.yaml")

    def test_raises_on_invalid_config(self, tmp_path: Path):
        bad = tmp_path / ".statuswatch.yaml"
        bad.write_text("services:\n  - name: X\n    category: Nope\n    url: https://x\n")
        with pytest.raises(ValueError, match="Invalid configuration"):
            load_config(path=bad)

    def test_env_interpolation_in_file(self, tmp_path: Path):
        config = tmp_path / ".statuswatch.yaml"
        config.write_text(
            "services:\n  - name: Svc\n    category: AI\n    url: ${TEST_SVC_URL:-https://default.example}\n"
        )
        os.environ.pop("TEST_SVC_URL", None)
        cfg = load_config(path=config)
        assert cfg.services[0].url == "https://default.example"


class TestDefaultCatalog:
    def test_bundled_catalog_loads(self):
        cfg = load_default_config()
        keys = [s.key for s in cfg.services]
        assert "GitHub|Developer Tools" in keys
        assert "AWS|Cloud" in keys
        assert len(keys) == len(set(keys))

    def test_load_catalog_falls_back_to_bundled(self, tmp_path: Path):
        with patch("statuswatch.config.loader.find_config_file", return_value=None):
            cfg = load_catalog()
        assert len(cfg.services) == len(load_default_config().services)

    def test_load_catalog_prefers_explicit_path(self, config_file: Path):
        cfg = load_catalog(path=config_file)
        assert len(cfg.services) == 4
