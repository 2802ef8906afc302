"""
Kind registry.

Maps short resource-kind names (case-insensitive) to their API group and
version. The table is fixed at construction time and passed explicitly to the
components that need it.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GroupVersion:
    """API group and version of a resource kind."""

    group: str
    version: str

    @property
    def api_version(self) -> str:
        """Render as an apiVersion string (``apps/v1`` or ``v1`` for core)."""
        if self.group:
            return f"{self.group}/{self.version}"
        return self.version


@dataclass(frozen=True)
class WatchedKind:
    """A kind name resolved against the registry."""

    kind: str
    group: str
    version: str

    @property
    def api_version(self) -> str:
        return GroupVersion(self.group, self.version).api_version


# CamelCase kind -> group/version
KNOWN_KINDS: dict[str, GroupVersion] = {
    "Deployment": GroupVersion("apps", "v1"),
    "Secret": GroupVersion("", "v1"),
    "ConfigMap": GroupVersion("", "v1"),
    "StatefulSet": GroupVersion("apps", "v1"),
    "DaemonSet": GroupVersion("apps", "v1"),
    "Ingress": GroupVersion("networking.k8s.io", "v1"),
    "CronJob": GroupVersion("batch", "v1"),
    "Job": GroupVersion("batch", "v1"),
    "Service": GroupVersion("", "v1"),
}


class KindRegistry:
    """
    Read-only lookup table of supported kinds.

    Example:
        >>> registry = KindRegistry()
        >>> registry.resolve("deployment")
        GroupVersion(group='apps', version='v1')
        >>> registry.resolve("Pod") is None
        True
    """

    def __init__(self, kinds: Mapping[str, GroupVersion] | None = None):
        table = kinds if kinds is not None else KNOWN_KINDS
        self._canonical = MappingProxyType({k.lower(): k for k in table})
        self._kinds = MappingProxyType({k.lower(): gv for k, gv in table.items()})

    def resolve(self, kind: str) -> GroupVersion | None:
        """
        Look up a kind by name, ignoring letter case.

        Args:
            kind: Kind name (e.g. "deployment", "ConfigMap")

        Returns:
            GroupVersion, or None if the kind is not in the table
        """
        return self._kinds.get(kind.strip().lower())

    def canonical_kind(self, kind: str) -> str | None:
        """Return the CamelCase spelling of a known kind, or None."""
        return self._canonical.get(kind.strip().lower())

    def kinds(self) -> list[str]:
        """List all known kinds in CamelCase."""
        return list(self._canonical.values())

    def items(self) -> list[tuple[str, GroupVersion]]:
        """List (kind, GroupVersion) pairs in table order."""
        return [(self._canonical[key], gv) for key, gv in self._kinds.items()]

    def __contains__(self, kind: object) -> bool:
        return isinstance(kind, str) and self.resolve(kind) is not None


def resolve_watch_set(kind_names: Iterable[str], registry: KindRegistry) -> list[WatchedKind]:
    """
    Resolve configured kind names into watched kinds.

    Unmapped names are logged and skipped, not treated as errors. Duplicates
    (in any letter case) collapse to a single entry.

    Args:
        kind_names: Kind names from configuration
        registry: Registry to resolve against

    Returns:
        Watched kinds in configuration order
    """
    watched: list[WatchedKind] = []
    seen: set[str] = set()
    for raw in kind_names:
        name = raw.strip()
        if not name:
            continue
        gv = registry.resolve(name)
        if gv is None:
            logger.info(
                "Kind not explicitly mapped; ignoring: %s (mapped kinds: %s)",
                name,
                ", ".join(registry.kinds()),
            )
            continue
        canonical = registry.canonical_kind(name) or name
        if canonical in seen:
            continue
        seen.add(canonical)
        watched.append(WatchedKind(kind=canonical, group=gv.group, version=gv.version))
    return watched


DEFAULT_REGISTRY = KindRegistry()
