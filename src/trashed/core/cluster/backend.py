"""
Object store protocol and object helpers.

Live cluster objects are handled as plain mappings (the unstructured form of
a manifest: ``apiVersion``, ``kind``, ``metadata``, ``spec``/``data``...).
The ObjectStore protocol is the seam to whatever actually holds them.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from trashed.core.errors import InvalidNameError

# RFC 1123 label (namespaces) and subdomain (object names)
_LABEL = r"[a-z0-9]([-a-z0-9]*[a-z0-9])?"
NAMESPACE_RE = re.compile(_LABEL)
NAME_RE = re.compile(rf"{_LABEL}(\.{_LABEL})*")
KIND_RE = re.compile(r"[A-Za-z][A-Za-z0-9]*")

MAX_NAME_LENGTH = 253
MAX_NAMESPACE_LENGTH = 63


@dataclass(frozen=True)
class ObjectRef:
    """Identity of a live object: kind, name and namespace."""

    kind: str
    name: str
    namespace: str = ""

    @classmethod
    def from_object(cls, obj: Mapping[str, Any]) -> "ObjectRef":
        """Build a reference from an object's kind and metadata."""
        return cls(
            kind=object_kind(obj),
            name=object_name(obj),
            namespace=object_namespace(obj),
        )

    def __str__(self) -> str:
        if self.namespace:
            return f"{self.kind} {self.namespace}/{self.name}"
        return f"{self.kind} {self.name}"


def object_metadata(obj: Mapping[str, Any]) -> dict[str, Any]:
    """Return the metadata mapping of an object (empty if missing)."""
    metadata = obj.get("metadata")
    if isinstance(metadata, dict):
        return metadata
    return {}


def object_kind(obj: Mapping[str, Any]) -> str:
    kind = obj.get("kind")
    return kind if isinstance(kind, str) else ""


def object_name(obj: Mapping[str, Any]) -> str:
    name = object_metadata(obj).get("name")
    return name if isinstance(name, str) else ""


def object_namespace(obj: Mapping[str, Any]) -> str:
    namespace = object_metadata(obj).get("namespace")
    return namespace if isinstance(namespace, str) else ""


def validate_name(name: str) -> str:
    """
    Check that ``name`` is an RFC 1123 subdomain.

    Store paths are built from names, so anything else (wildcards, slashes,
    "..") is refused before it reaches the filesystem.

    Raises:
        InvalidNameError: If the name is not valid
    """
    if len(name) > MAX_NAME_LENGTH or not NAME_RE.fullmatch(name):
        raise InvalidNameError("name", name)
    return name


def validate_namespace(namespace: str) -> str:
    """Check that ``namespace`` is empty (cluster scope) or an RFC 1123 label."""
    if namespace and (
        len(namespace) > MAX_NAMESPACE_LENGTH or not NAMESPACE_RE.fullmatch(namespace)
    ):
        raise InvalidNameError("namespace", namespace)
    return namespace


def validate_kind(kind: str) -> str:
    if not KIND_RE.fullmatch(kind):
        raise InvalidNameError("kind", kind)
    return kind


def split_api_version(api_version: str) -> tuple[str, str]:
    """
    Split an apiVersion string into (group, version).

    Example:
        >>> split_api_version("apps/v1")
        ('apps', 'v1')
        >>> split_api_version("v1")
        ('', 'v1')
    """
    if "/" in api_version:
        group, version = api_version.split("/", 1)
        return group, version
    return "", api_version


@runtime_checkable
class ObjectStore(Protocol):
    """
    Protocol for live object stores.

    Implementations raise NotFoundError, AlreadyExistsError or StoreError
    from trashed.core.errors.
    """

    def get(self, kind: str, name: str, namespace: str = "") -> dict[str, Any]:
        """
        Fetch a single object.

        Raises:
            NotFoundError: If the object does not exist
        """
        ...

    def list(self, kind: str, namespace: str | None = None) -> list[dict[str, Any]]:
        """
        List objects of a kind, optionally restricted to one namespace.

        Args:
            kind: Kind to list
            namespace: Namespace to list, or None for all namespaces
        """
        ...

    def create(self, obj: Mapping[str, Any]) -> dict[str, Any]:
        """
        Create an object and return it as stored.

        Raises:
            AlreadyExistsError: If an object with the same kind/name/namespace exists
        """
        ...

    def delete(self, kind: str, name: str, namespace: str = "") -> None:
        """
        Delete an object.

        Raises:
            NotFoundError: If the object does not exist
        """
        ...
