"""
Retention store: storage layer for retained records.

Records live one per file, grouped by namespace:

    {records_dir}/{namespace}/{name}.yaml
    {records_dir}/_cluster/{name}.yaml      (cluster-scoped originals)

Each file has YAML frontmatter (identity, creation timestamp, keepUntil) and
the sanitized manifest as its body. Uses python-frontmatter for parsing.
"""

import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Protocol, runtime_checkable

import frontmatter

from trashed.core.cluster.backend import validate_name, validate_namespace
from trashed.core.errors import AlreadyExistsError, NotFoundError, StoreError
from trashed.core.records.models import RECORD_KIND, RetainedRecord
from trashed.core.records.naming import random_suffix
from trashed.utils.timestamps import utc_now

logger = logging.getLogger(__name__)

CLUSTER_SCOPE_DIR = "_cluster"
RECORD_SUFFIX = ".yaml"


@runtime_checkable
class RetentionStore(Protocol):
    """
    Protocol for retained record storage.

    The store assigns ``created_at`` (and a name, for generate-name records)
    on create. Records are never updated in place.
    """

    def get(self, name: str, namespace: str = "") -> RetainedRecord:
        """
        Fetch a record.

        Raises:
            NotFoundError: If no such record exists
        """
        ...

    def list(self, namespace: str | None = None, name: str | None = None) -> list[RetainedRecord]:
        """
        List records.

        Args:
            namespace: Restrict to one namespace, or None for all namespaces
            name: Restrict to records with exactly this name

        Raises:
            StoreError: If the records cannot be listed at all
        """
        ...

    def create(self, record: RetainedRecord) -> RetainedRecord:
        """
        Persist a new record and return it as stored.

        Raises:
            AlreadyExistsError: If a record with the same name/namespace exists
        """
        ...

    def delete(self, name: str, namespace: str = "") -> None:
        """
        Delete a record.

        Raises:
            NotFoundError: If no such record exists
        """
        ...


class FileRetentionStore:
    """
    Retention store backed by frontmatter files.

    Example:
        store = FileRetentionStore(Path("~/.local/share/trashed/records"))
        saved = store.create(RetainedRecord(generate_name="trashed-delete-secret-db-",
                                            namespace="ns1", manifest=manifest))
        records = store.list(namespace="ns1")
        store.delete(saved.name, "ns1")
    """

    def __init__(
        self,
        records_dir: Path,
        clock: Callable[[], datetime] = utc_now,
        max_name_attempts: int = 10,
    ):
        """
        Initialize store with a records directory.

        Args:
            records_dir: Directory containing record files
            clock: Source of creation timestamps
            max_name_attempts: Retries when a generated name collides
        """
        self.records_dir = Path(records_dir)
        self.clock = clock
        self.max_name_attempts = max_name_attempts

    def get_records_dir(self) -> Path:
        return self.records_dir

    def record_path(self, name: str, namespace: str = "") -> Path:
        """
        Path of a record file.

        Raises:
            InvalidNameError: If the name or namespace is not a valid identifier
        """
        validate_name(name)
        scope = validate_namespace(namespace) or CLUSTER_SCOPE_DIR
        return self.records_dir / scope / f"{name}{RECORD_SUFFIX}"

    def get(self, name: str, namespace: str = "") -> RetainedRecord:
        path = self.record_path(name, namespace)
        if not path.exists():
            raise NotFoundError(RECORD_KIND, name, namespace)
        try:
            return self._read_record_file(path)
        except (OSError, ValueError) as e:
            raise StoreError(f"Failed to read {RECORD_KIND} {name}: {e}") from e

    def list(self, namespace: str | None = None, name: str | None = None) -> list[RetainedRecord]:
        if namespace is not None:
            validate_namespace(namespace)
        if name is not None:
            validate_name(name)
        if not self.records_dir.exists():
            return []

        scope = "*" if namespace is None else (namespace or CLUSTER_SCOPE_DIR)
        stem = name if name is not None else "*"
        try:
            paths = sorted(self.records_dir.glob(f"{scope}/{stem}{RECORD_SUFFIX}"))
        except OSError as e:
            raise StoreError(f"Failed to list {RECORD_KIND}s: {e}") from e

        records: list[RetainedRecord] = []
        for path in paths:
            try:
                records.append(self._read_record_file(path))
            except Exception as e:
                # Skip malformed files but continue processing
                logger.warning("Failed to parse %s: %s", path, e)
                continue

        # Newest first; records without a timestamp sort last
        records.sort(
            key=lambda r: r.created_at.timestamp() if r.created_at else float("-inf"),
            reverse=True,
        )
        return records

    def create(self, record: RetainedRecord) -> RetainedRecord:
        if record.name:
            return self._write_new(record, record.name)

        if not record.generate_name:
            raise StoreError(f"{RECORD_KIND} needs a name or generate_name")

        for _ in range(self.max_name_attempts):
            candidate = f"{record.generate_name}{random_suffix()}"
            try:
                return self._write_new(record, candidate)
            except AlreadyExistsError:
                continue

        raise StoreError(
            f"Failed to generate unique {RECORD_KIND} name after {self.max_name_attempts} attempts"
        )

    def delete(self, name: str, namespace: str = "") -> None:
        path = self.record_path(name, namespace)
        try:
            path.unlink()
        except FileNotFoundError as e:
            raise NotFoundError(RECORD_KIND, name, namespace) from e
        except OSError as e:
            raise StoreError(f"Failed to delete {RECORD_KIND} {name}: {e}") from e

    def _write_new(self, record: RetainedRecord, name: str) -> RetainedRecord:
        stored = record.model_copy(
            update={
                "name": name,
                "generate_name": None,
                # creationTimestamp has second precision
                "created_at": self.clock().replace(microsecond=0),
                "manifest": record.manifest.strip() + "\n",
            }
        )
        post = frontmatter.Post(stored.manifest.strip())
        post.metadata = stored.to_frontmatter_dict()

        path = self.record_path(name, stored.namespace)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "x", encoding="utf-8") as f:
                f.write(frontmatter.dumps(post))
                f.write("\n")
        except FileExistsError as e:
            raise AlreadyExistsError(RECORD_KIND, name, stored.namespace) from e
        except OSError as e:
            raise StoreError(f"Failed to create {RECORD_KIND} {name}: {e}") from e

        return stored

    def _read_record_file(self, path: Path) -> RetainedRecord:
        """
        Read and parse a record file.

        Raises:
            ValueError: If file is malformed or missing required fields
        """
        post = frontmatter.load(path)
        # frontmatter strips the body; manifests always end with a newline
        manifest = post.content + "\n" if post.content else post.content
        return RetainedRecord.from_frontmatter_dict(post.metadata, manifest)
