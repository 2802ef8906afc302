"""
Manifest sanitization.

Turns a live object into a durable, replayable YAML manifest and back:

- ``sanitize`` serializes the object to a generic JSON tree, fills in ``kind``
  and ``apiVersion`` when the tree lacks them, drops ``metadata.managedFields``
  and renders YAML.
- ``decode_manifest`` parses a stored manifest back into an object mapping.

A failed sanitization never yields a partial manifest.
"""

import json
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

import yaml

from trashed.core.errors import CorruptManifestError, SanitizationFailedError
from trashed.core.kinds.registry import DEFAULT_REGISTRY, KindRegistry
from trashed.utils.timestamps import format_rfc3339

# Server-generated bookkeeping that is meaningless for replay
STRIPPED_METADATA_FIELDS = ("managedFields",)


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return format_rfc3339(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not serializable")


def _to_plain(obj: Any) -> Any:
    """Convert supported object shapes into JSON-compatible structures."""
    if isinstance(obj, Mapping):
        return dict(obj)
    # pydantic models
    if hasattr(obj, "model_dump"):
        return obj.model_dump(by_alias=True, exclude_none=True)
    # kubernetes client models and similar
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    return obj


def to_tree(obj: Any) -> dict[str, Any]:
    """
    Serialize an object into a generic key/value tree.

    Args:
        obj: Mapping, pydantic model, or object exposing ``to_dict()``

    Returns:
        JSON-compatible dictionary

    Raises:
        SanitizationFailedError: If the object cannot be serialized
    """
    try:
        encoded = json.dumps(_to_plain(obj), default=_json_default)
        tree = json.loads(encoded)
    except (TypeError, ValueError) as e:
        raise SanitizationFailedError(f"Error serializing object to JSON: {e}") from e
    if not isinstance(tree, dict):
        raise SanitizationFailedError(
            f"Error deserializing object JSON: expected a mapping, got {type(tree).__name__}"
        )
    return tree


def resolve_api_version(
    kind: str | None,
    api_version: str | None,
    registry: KindRegistry = DEFAULT_REGISTRY,
) -> str | None:
    """
    Work out the apiVersion for an object.

    Prefers the self-reported value and falls back to a registry lookup on
    the kind name.
    """
    if api_version:
        return api_version
    if kind:
        gv = registry.resolve(kind)
        if gv is not None:
            return gv.api_version
    return None


def sanitize(
    obj: Any,
    kind: str | None = None,
    api_version: str | None = None,
    registry: KindRegistry = DEFAULT_REGISTRY,
) -> str:
    """
    Convert a live object into a durable manifest.

    Args:
        obj: The object to capture
        kind: Self-reported kind, used when the object has no ``kind`` field
        api_version: Self-reported apiVersion, used when the object has none
        registry: Registry used to infer apiVersion from the kind

    Returns:
        YAML manifest text

    Raises:
        SanitizationFailedError: If serialization fails at either step
    """
    tree = to_tree(obj)

    reported_kind = kind or (tree.get("kind") if isinstance(tree.get("kind"), str) else None)
    if "kind" not in tree and reported_kind:
        tree["kind"] = reported_kind
    if "apiVersion" not in tree:
        resolved = resolve_api_version(reported_kind, api_version, registry)
        if resolved:
            tree["apiVersion"] = resolved

    metadata = tree.get("metadata")
    if isinstance(metadata, dict):
        for key in STRIPPED_METADATA_FIELDS:
            metadata.pop(key, None)

    try:
        return yaml.safe_dump(tree, sort_keys=False, default_flow_style=False)
    except yaml.YAMLError as e:
        raise SanitizationFailedError(f"Error serializing object to YAML: {e}") from e


def decode_manifest(text: str) -> dict[str, Any]:
    """
    Decode a stored manifest into an object mapping.

    Accepts YAML or JSON. The result must carry a ``kind`` and a
    ``metadata.name``.

    Args:
        text: Manifest text

    Returns:
        Object mapping

    Raises:
        CorruptManifestError: If the text cannot be decoded into an object
    """
    if not text or not text.strip():
        raise CorruptManifestError("Manifest is empty")
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise CorruptManifestError(f"Failed to decode resource data: {e}") from e

    if not isinstance(data, dict):
        raise CorruptManifestError("Failed to decode resource data: not a mapping")
    if not isinstance(data.get("kind"), str) or not data["kind"]:
        raise CorruptManifestError("Failed to decode resource data: missing kind")
    metadata = data.get("metadata")
    if not isinstance(metadata, dict) or not metadata.get("name"):
        raise CorruptManifestError("Failed to decode resource data: missing metadata.name")
    return data
