"""
Configuration loading with multi-layer merging.

Implements the configuration precedence chain:
    defaults < user config < project config < env vars

The in-cluster ConfigMap sits on top of the merged file configuration at
capture time (see ``config_source_for``).
"""

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from trashed.core.cluster.backend import ObjectStore

from .env import load_env_layers
from .models import StorageConfig, TrashedConfig
from .source import ChainedConfigSource, ConfigMapConfigSource, ConfigSource, MappingConfigSource

logger = logging.getLogger(__name__)

# Global cache to avoid reloading config multiple times per process
_config_cache: TrashedConfig | None = None


def get_xdg_config_home() -> Path:
    """
    Get XDG config home directory.

    Returns:
        Path to config directory (defaults to ~/.config)
    """
    if xdg_home := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_home)
    return Path.home() / ".config"


def get_xdg_data_home() -> Path:
    """Get XDG data home directory (defaults to ~/.local/share)."""
    if xdg_home := os.environ.get("XDG_DATA_HOME"):
        return Path(xdg_home)
    return Path.home() / ".local" / "share"


def get_user_config_path() -> Path:
    """
    Get path to user configuration file.

    Returns:
        Path to ~/.config/trashed/config.json (or XDG equivalent)
    """
    return get_xdg_config_home() / "trashed" / "config.json"


def get_project_config_path(cwd: Path | None = None) -> Path:
    """
    Get path to project configuration file.

    Args:
        cwd: Working directory to search from (defaults to current directory)

    Returns:
        Path to .trashed.json in the working directory
    """
    if cwd is None:
        cwd = Path.cwd()
    return cwd / ".trashed.json"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in `override` take precedence over values in `base`. Nested dicts
    are merged, not replaced.

    Example:
        >>> base = {"a": 1, "b": {"x": 10, "y": 20}}
        >>> override = {"b": {"y": 30, "z": 40}, "c": 3}
        >>> deep_merge(base, override)
        {'a': 1, 'b': {'x': 10, 'y': 30, 'z': 40}, 'c': 3}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Load a JSON file, returning None if it doesn't exist or is invalid.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON as dict, or None if file doesn't exist or can't be parsed
    """
    if not path.exists():
        return None

    try:
        with path.open() as f:
            data = json.load(f)
            if isinstance(data, dict):
                return data
            return None
    except (json.JSONDecodeError, OSError) as e:
        # Config system should be resilient
        logger.warning("Failed to parse config at %s: %s", path, e)
        return None


def _env_int(environ: Mapping[str, str], name: str) -> int | None:
    raw = environ.get(name)
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid %s value '%s', ignoring", name, raw)
        return None
    if value < 0:
        logger.warning("%s must be >= 0, got %d, ignoring", name, value)
        return None
    return value


def apply_env_overrides(
    config_dict: dict[str, Any],
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Supported env vars:
        TRASHED_KINDS - overrides kinds_to_observe (';'-separated)
        TRASHED_MINUTES_TO_KEEP - overrides retention.minutes_to_keep
        TRASHED_HOURS_TO_KEEP - overrides retention.hours_to_keep
        TRASHED_NAMESPACE - overrides namespace
        TRASHED_NAMING - overrides naming
        TRASHED_DATA_DIR - base directory for records, cluster and logs

    Args:
        config_dict: Configuration dictionary to override
        environ: TRASHED_* settings to apply (defaults to the process environment)

    Returns:
        Configuration dictionary with env var overrides applied
    """
    if environ is None:
        environ = os.environ
    result = config_dict.copy()

    if kinds := environ.get("TRASHED_KINDS"):
        result["kinds_to_observe"] = kinds

    minutes = _env_int(environ, "TRASHED_MINUTES_TO_KEEP")
    hours = _env_int(environ, "TRASHED_HOURS_TO_KEEP")
    if minutes is not None or hours is not None:
        retention = dict(result.get("retention") or {})
        if minutes is not None:
            retention["minutes_to_keep"] = minutes
        if hours is not None:
            retention["hours_to_keep"] = hours
        result["retention"] = retention

    if namespace := environ.get("TRASHED_NAMESPACE"):
        result["namespace"] = namespace

    if naming := environ.get("TRASHED_NAMING"):
        result["naming"] = naming.lower()

    if data_dir := environ.get("TRASHED_DATA_DIR"):
        storage = dict(result.get("storage") or {})
        base = Path(data_dir)
        storage.setdefault("records_dir", str(base / "records"))
        storage.setdefault("cluster_dir", str(base / "cluster"))
        storage.setdefault("log_dir", str(base / "logs"))
        result["storage"] = storage

    return result


def get_default_config() -> dict[str, Any]:
    """
    Get hardcoded default configuration.

    Returns:
        Dictionary with default configuration values
    """
    return {
        "kinds_to_observe": ["Deployment", "Secret", "ConfigMap"],
        "retention": {"minutes_to_keep": 60, "hours_to_keep": 0},
    }


def load_config(project_dir: Path | None = None, use_cache: bool = True) -> TrashedConfig:
    """
    Load configuration with multi-layer merging.

    Configuration precedence (highest to lowest):
        1. Environment variables (TRASHED_*), then .env files
        2. Project config (.trashed.json)
        3. User config (~/.config/trashed/config.json)
        4. Hardcoded defaults

    Args:
        project_dir: Directory to load .trashed.json from (defaults to cwd)
        use_cache: If True, return cached config from previous load

    Returns:
        Validated TrashedConfig instance

    Raises:
        ValidationError: If the merged config fails Pydantic validation
    """
    global _config_cache

    if use_cache and _config_cache is not None:
        return _config_cache

    merged = get_default_config()

    if user_config := load_json_file(get_user_config_path()):
        merged = deep_merge(merged, user_config)

    if project_config := load_json_file(get_project_config_path(project_dir)):
        merged = deep_merge(merged, project_config)

    merged = apply_env_overrides(merged, load_env_layers(project_dir))

    config = TrashedConfig(**merged)
    _config_cache = config

    return config


def clear_cache() -> None:
    """
    Clear the cached configuration.

    Useful for testing or when config files change during execution.
    """
    global _config_cache
    _config_cache = None


def resolve_storage(config: TrashedConfig) -> StorageConfig:
    """
    Fill in unset storage directories with their XDG defaults.

    Returns:
        StorageConfig with every directory set
    """
    base = get_xdg_data_home() / "trashed"
    storage = config.storage
    return StorageConfig(
        records_dir=storage.records_dir or base / "records",
        cluster_dir=storage.cluster_dir or base / "cluster",
        log_dir=storage.log_dir or base / "logs",
    )


def settings_source(config: TrashedConfig) -> MappingConfigSource:
    """Expose file configuration through the key/value ConfigSource interface."""
    return MappingConfigSource(
        {
            "kindsTobserve": config.kinds_to_observe,
            "minutesToKeep": config.retention.minutes_to_keep,
            "hoursToKeep": config.retention.hours_to_keep,
        }
    )


def config_source_for(config: TrashedConfig, object_store: ObjectStore) -> ConfigSource:
    """
    Build the runtime configuration source.

    The cluster ConfigMap wins over file configuration, key by key.
    """
    return ChainedConfigSource(
        [
            ConfigMapConfigSource(
                object_store,
                name=config.config_map.name,
                namespace=config.config_map.namespace,
            ),
            settings_source(config),
        ]
    )
