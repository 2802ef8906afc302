"""
Key/value configuration sources.

The capture path reads its settings through ``ConfigSource.read_config(key)``
every time it runs, so operators can change the watched kinds or retention
without restarting anything. Recognised keys:

    kindsTobserve   ";"- or whitespace-separated kind names
    minutesToKeep   integer minutes
    hoursToKeep     integer hours
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Protocol, runtime_checkable

from trashed.core.cluster.backend import ObjectStore
from trashed.core.errors import ConfigInvalidError, StoreError

logger = logging.getLogger(__name__)

KINDS_KEY = "kindsTobserve"
DEFAULT_KINDS = ("Deployment", "Secret", "ConfigMap")

CONFIG_MAP_NAME = "trashedresources-config"
CONFIG_MAP_NAMESPACE = "system"


@runtime_checkable
class ConfigSource(Protocol):
    """Protocol for key/value configuration sources."""

    def read_config(self, key: str) -> str | None:
        """
        Read a configuration value.

        Args:
            key: Configuration key

        Returns:
            The value, or None when the key is absent
        """
        ...


class MappingConfigSource:
    """Configuration source backed by an in-memory mapping."""

    def __init__(self, values: Mapping[str, object] | None = None):
        self._values = dict(values or {})

    def read_config(self, key: str) -> str | None:
        value = self._values.get(key)
        if value is None:
            return None
        if isinstance(value, (list, tuple)):
            return ";".join(str(v) for v in value)
        return str(value)


class ConfigMapConfigSource:
    """
    Configuration source backed by a ConfigMap in the object store.

    The ConfigMap is fetched on every read; a missing or unreadable ConfigMap
    behaves as if every key were absent.
    """

    def __init__(
        self,
        object_store: ObjectStore,
        name: str = CONFIG_MAP_NAME,
        namespace: str = CONFIG_MAP_NAMESPACE,
    ):
        self.object_store = object_store
        self.name = name
        self.namespace = namespace

    def read_config(self, key: str) -> str | None:
        try:
            config_map = self.object_store.get("ConfigMap", self.name, self.namespace)
        except (StoreError, ConfigInvalidError) as e:
            logger.debug("Unable to read ConfigMap %s/%s: %s", self.namespace, self.name, e)
            return None
        data = config_map.get("data")
        if not isinstance(data, dict):
            return None
        value = data.get(key)
        return None if value is None else str(value)


class ChainedConfigSource:
    """Try each source in order and return the first value found."""

    def __init__(self, sources: Iterable[ConfigSource]):
        self.sources = list(sources)

    def read_config(self, key: str) -> str | None:
        for source in self.sources:
            value = source.read_config(key)
            if value is not None:
                return value
        return None


def parse_kind_list(raw: str) -> list[str]:
    """
    Split a kind list on ``;`` and whitespace.

    Example:
        >>> parse_kind_list("Deployment; Secret ;ConfigMap")
        ['Deployment', 'Secret', 'ConfigMap']
    """
    return raw.replace(";", " ").split()


def watched_kind_names(source: ConfigSource) -> list[str]:
    """
    Read the configured kind names, falling back to the defaults when the key
    is absent.
    """
    raw = source.read_config(KINDS_KEY)
    if raw is None:
        logger.debug("No %s configured, using defaults: %s", KINDS_KEY, ";".join(DEFAULT_KINDS))
        return list(DEFAULT_KINDS)
    return parse_kind_list(raw)
