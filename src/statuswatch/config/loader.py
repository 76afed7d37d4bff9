"""YAML config loader with environment variable interpolation."""

from __future__ import annotations

import os
import re
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from statuswatch.config.models import StatusWatchConfig

CONFIG_FILENAME = ".statuswatch.yaml"
DEFAULT_CATALOG = "catalog.yaml"

_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


def _interpolate_env(value: str) -> str:
    """Replace ${VAR} and ${VAR:-default} patterns with environment values."""

    def _replace(match: re.Match[str]) -> str:
        expr = match.group(1)
        if ":-" in expr:
            var_name, default = expr.split(":-", 1)
            return os.environ.get(var_name.strip(), default)
        return os.environ.get(expr.strip(), match.group(0))

    return _ENV_VAR_PATTERN.sub(_replace, value)


def _interpolate_recursive(data: Any) -> Any:
    """Walk a nested data structure and interpolate env vars in strings."""
    if isinstance(data, str):
        return _interpolate_env(data)
    if isinstance(data, dict):
        return {k: _interpolate_recursive(v) for k, v in data.items()}
    if isinstance(data, list):
        return [_interpolate_recursive(item) for item in data]
    return data


def _parse(text: str, source: str) -> StatusWatchConfig:
    raw = yaml.safe_load(text) or {}
    data = _interpolate_recursive(raw)
    try:
        return StatusWatchConfig(**data)
    except (TypeError, ValidationError) as exc:
        raise ValueError(f"Invalid configuration in {source}: {exc}") from exc


def find_config_file(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default cwd) looking for .statuswatch.yaml."""
    current = (start or Path.cwd()).resolve()
    for ancestor in [current, *current.parents]:
        candidate = ancestor / CONFIG_FILENAME
        if candidate.exists():
            return candidate
    return None


def load_config(path: Path | None = None) -> StatusWatchConfig:
    """Load and validate .statuswatch.yaml, applying env-var interpolation."""
    config_path = path or find_config_file()
    if not config_path or not config_path.exists():
        raise FileNotFoundError(
            f"Could not find {CONFIG_FILENAME}. Create one or specify a path."
        )
    return _parse(config_path.read_text(encoding="utf-8"), str(config_path))


def load_default_config() -> StatusWatchConfig:
    """Load the catalog bundled with the package."""
    text = resources.files("statuswatch").joinpath(DEFAULT_CATALOG).read_text(encoding="utf-8")
    return _parse(text, f"bundled {DEFAULT_CATALOG}")


def load_catalog(path: Path | None = None) -> StatusWatchConfig:
    """Load *path* or a discovered config file, else the bundled catalog."""
    if path is not None:
        return load_config(path)
    found = find_config_file()
    if found is None:
        return load_default_config()
    return load_config(found)
