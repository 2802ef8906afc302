"""
Kind registry.

Static mapping from short kind names to API group/version identities.
"""

from trashed.core.kinds.registry import (
    DEFAULT_REGISTRY,
    KNOWN_KINDS,
    GroupVersion,
    KindRegistry,
    WatchedKind,
    resolve_watch_set,
)

__all__ = [
    "DEFAULT_REGISTRY",
    "KNOWN_KINDS",
    "GroupVersion",
    "KindRegistry",
    "WatchedKind",
    "resolve_watch_set",
]
