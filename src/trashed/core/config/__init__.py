"""
Configuration models, loading and runtime sources.

File configuration merges defaults < user < project < env vars; at capture
time the in-cluster ConfigMap is consulted first through a ConfigSource.
"""

from .env import get_project_env_paths, get_user_env_path, load_env_layers, read_env_file
from .loader import (
    clear_cache,
    config_source_for,
    get_project_config_path,
    get_user_config_path,
    get_xdg_config_home,
    get_xdg_data_home,
    load_config,
    resolve_storage,
    settings_source,
)
from .models import ConfigMapRef, NamingStrategy, RetentionSettings, StorageConfig, TrashedConfig
from .source import (
    DEFAULT_KINDS,
    KINDS_KEY,
    ChainedConfigSource,
    ConfigMapConfigSource,
    ConfigSource,
    MappingConfigSource,
    parse_kind_list,
    watched_kind_names,
)

__all__ = [
    # Models
    "ConfigMapRef",
    "NamingStrategy",
    "RetentionSettings",
    "StorageConfig",
    "TrashedConfig",
    # Sources
    "DEFAULT_KINDS",
    "KINDS_KEY",
    "ChainedConfigSource",
    "ConfigMapConfigSource",
    "ConfigSource",
    "MappingConfigSource",
    "parse_kind_list",
    "watched_kind_names",
    # Loader functions
    "clear_cache",
    "config_source_for",
    "get_project_config_path",
    "get_user_config_path",
    "get_xdg_config_home",
    "get_xdg_data_home",
    "load_config",
    "get_project_env_paths",
    "get_user_env_path",
    "load_env_layers",
    "read_env_file",
    "resolve_storage",
    "settings_source",
]
