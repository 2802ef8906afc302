"""
File-backed object store.

Keeps live objects as YAML manifests in a directory tree:

    {root}/{namespace}/{kind}/{name}.yaml     namespaced objects
    {root}/_cluster/{kind}/{name}.yaml        cluster-scoped objects

Names, namespaces and kinds are validated before any path is built. Kind
directories are lowercased. Creation uses exclusive file creation so two
racing creates of the same object cannot both succeed.
"""

import copy
import logging
import uuid
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from trashed.core.cluster.backend import (
    ObjectRef,
    object_kind,
    object_name,
    validate_kind,
    validate_name,
    validate_namespace,
)
from trashed.core.errors import AlreadyExistsError, NotFoundError, StoreError
from trashed.utils.timestamps import format_rfc3339, utc_now

logger = logging.getLogger(__name__)

CLUSTER_SCOPE_DIR = "_cluster"


class FileObjectStore:
    """
    Object store backed by manifest files on disk.

    Example:
        store = FileObjectStore(Path("cluster"))
        store.create({"apiVersion": "v1", "kind": "ConfigMap",
                      "metadata": {"name": "app-cfg", "namespace": "ns1"}})
        cm = store.get("ConfigMap", "app-cfg", "ns1")
        store.delete("ConfigMap", "app-cfg", "ns1")
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def _object_path(self, kind: str, name: str, namespace: str) -> Path:
        validate_kind(kind)
        validate_name(name)
        scope = validate_namespace(namespace) or CLUSTER_SCOPE_DIR
        return self.root / scope / kind.lower() / f"{name}.yaml"

    def _read(self, path: Path) -> dict[str, Any]:
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise StoreError(f"Failed to read {path}: {e}") from e
        if not isinstance(data, dict):
            raise StoreError(f"Malformed object manifest: {path}")
        return data

    def get(self, kind: str, name: str, namespace: str = "") -> dict[str, Any]:
        path = self._object_path(kind, name, namespace)
        if not path.exists():
            raise NotFoundError(kind, name, namespace)
        return self._read(path)

    def list(self, kind: str, namespace: str | None = None) -> list[dict[str, Any]]:
        validate_kind(kind)
        if namespace is not None:
            validate_namespace(namespace)
        if not self.root.exists():
            return []

        if namespace is None:
            pattern = f"*/{kind.lower()}/*.yaml"
        else:
            pattern = f"{namespace or CLUSTER_SCOPE_DIR}/{kind.lower()}/*.yaml"

        objects: list[dict[str, Any]] = []
        for path in sorted(self.root.glob(pattern)):
            try:
                objects.append(self._read(path))
            except StoreError as e:
                # Skip malformed files but continue processing
                logger.warning("Skipping unreadable object file: %s", e)
        return objects

    def create(self, obj: Mapping[str, Any]) -> dict[str, Any]:
        kind = object_kind(obj)
        name = object_name(obj)
        if not kind or not name:
            raise StoreError("Object must have a kind and metadata.name")

        ref = ObjectRef.from_object(obj)
        stored = copy.deepcopy(dict(obj))
        metadata = stored.setdefault("metadata", {})
        metadata["uid"] = str(uuid.uuid4())
        metadata["resourceVersion"] = "1"
        metadata.setdefault("creationTimestamp", format_rfc3339(utc_now()))

        path = self._object_path(ref.kind, ref.name, ref.namespace)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "x", encoding="utf-8") as f:
                yaml.safe_dump(stored, f, sort_keys=False)
        except FileExistsError as e:
            raise AlreadyExistsError(ref.kind, ref.name, ref.namespace) from e
        except OSError as e:
            raise StoreError(f"Failed to create {ref}: {e}") from e

        logger.debug("Created %s", ref)
        return stored

    def delete(self, kind: str, name: str, namespace: str = "") -> None:
        path = self._object_path(kind, name, namespace)
        try:
            path.unlink()
        except FileNotFoundError as e:
            raise NotFoundError(kind, name, namespace) from e
        except OSError as e:
            raise StoreError(f"Failed to delete {kind} {name}: {e}") from e
        logger.debug("Deleted %s", ObjectRef(kind, name, namespace))
