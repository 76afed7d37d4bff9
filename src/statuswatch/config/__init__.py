"""statuswatch configuration system."""

from statuswatch.config.loader import find_config_file, load_catalog, load_config, load_default_config
from statuswatch.config.models import ApiConfig, FetchConfig, ServiceEntry, StatusWatchConfig

__all__ = [
    "ApiConfig",
    "FetchConfig",
    "ServiceEntry",
    "StatusWatchConfig",
    "find_config_file",
    "load_catalog",
    "load_config",
    "load_default_config",
]
