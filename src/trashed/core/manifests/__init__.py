"""Manifest sanitization and decoding."""

from trashed.core.manifests.sanitizer import (
    STRIPPED_METADATA_FIELDS,
    decode_manifest,
    resolve_api_version,
    sanitize,
    to_tree,
)

__all__ = [
    "STRIPPED_METADATA_FIELDS",
    "decode_manifest",
    "resolve_api_version",
    "sanitize",
    "to_tree",
]
