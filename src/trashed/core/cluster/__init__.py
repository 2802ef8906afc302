"""
Cluster object access.

Defines the ObjectStore protocol used by the capture and restore engines,
helpers for working with unstructured object mappings, watch event types, and
a file-backed store implementation.
"""

from trashed.core.cluster.backend import (
    ObjectRef,
    ObjectStore,
    object_kind,
    object_metadata,
    object_name,
    object_namespace,
    split_api_version,
)
from trashed.core.cluster.events import EventType, WatchEvent
from trashed.core.cluster.files import FileObjectStore

__all__ = [
    "EventType",
    "FileObjectStore",
    "ObjectRef",
    "ObjectStore",
    "WatchEvent",
    "object_kind",
    "object_metadata",
    "object_name",
    "object_namespace",
    "split_api_version",
]
