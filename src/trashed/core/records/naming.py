"""
Record name generation.

Record names follow ``trashed-{action}-{kind}-{name}-{suffix}``. The suffix
is either a stable hash of the deletion (so a redelivered event collides with
the record it already produced) or a random string.
"""

import hashlib
import secrets
from collections.abc import Mapping
from enum import Enum
from typing import Any

from trashed.core.cluster.backend import object_metadata

# Kubernetes generate-name alphabet (no vowels, no ambiguous characters)
SUFFIX_CHARS = "bcdfghjklmnpqrstvwxz2456789"
RANDOM_SUFFIX_LENGTH = 5
HASH_SUFFIX_LENGTH = 10

# DNS subdomain name limit
MAX_NAME_LENGTH = 253


class CaptureAction(str, Enum):
    """Lifecycle action a record was captured for."""

    DELETE = "delete"


def record_name_prefix(action: CaptureAction, kind: str, name: str) -> str:
    """
    Build the generate-name prefix for a record.

    Example:
        >>> record_name_prefix(CaptureAction.DELETE, "ConfigMap", "app-cfg")
        'trashed-delete-configmap-app-cfg-'
    """
    prefix = f"trashed-{action.value}-{kind.lower()}-{name}-"
    limit = MAX_NAME_LENGTH - max(RANDOM_SUFFIX_LENGTH, HASH_SUFFIX_LENGTH)
    if len(prefix) > limit:
        prefix = prefix[: limit - 1].rstrip("-.") + "-"
    return prefix


def random_suffix(length: int = RANDOM_SUFFIX_LENGTH) -> str:
    """Generate a random generate-name style suffix."""
    return "".join(secrets.choice(SUFFIX_CHARS) for _ in range(length))


def deletion_marker(obj: Mapping[str, Any]) -> str | None:
    """
    Find a value that is stable across redeliveries of one deletion.

    Uses ``metadata.deletionTimestamp`` and falls back to the object's uid
    and resourceVersion. Returns None if the object carries none of them.
    """
    metadata = object_metadata(obj)
    deletion_timestamp = metadata.get("deletionTimestamp")
    if deletion_timestamp:
        return f"deleted:{deletion_timestamp}"
    uid = metadata.get("uid")
    resource_version = metadata.get("resourceVersion")
    if uid or resource_version:
        return f"version:{uid or ''}:{resource_version or ''}"
    return None


def deterministic_suffix(kind: str, namespace: str, name: str, marker: str) -> str:
    """
    Hash a deletion's identity into a short lowercase hex suffix.

    The same (kind, namespace, name, marker) always yields the same suffix.
    """
    digest = hashlib.sha256(
        "\x00".join([kind.lower(), namespace, name, marker]).encode("utf-8")
    ).hexdigest()
    return digest[:HASH_SUFFIX_LENGTH]
