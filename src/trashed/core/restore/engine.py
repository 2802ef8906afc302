"""
Restore engine.

Re-creates a deleted object from its retained record, then removes the
record. A restore moves through these states:

    PENDING -> DECODED -> CREATED -> RECORD_DELETED

Every failure before CREATED raises and leaves the record in place. A failure
to delete the record after the object was created is reported as a warning on
an otherwise successful result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from trashed.core.cluster.backend import ObjectRef, ObjectStore
from trashed.core.errors import TrashedError
from trashed.core.manifests.sanitizer import decode_manifest
from trashed.core.records.models import RECORD_KIND
from trashed.core.records.store import RetentionStore

if TYPE_CHECKING:
    from trashed.utils.logging import TrashLogger

logger = logging.getLogger(__name__)

# Server-assigned identity of the deleted incarnation; a new object gets new ones
STRIPPED_ON_RESTORE = ("uid", "resourceVersion")


class RestoreState(str, Enum):
    """How far a restore got."""

    PENDING = "pending"
    DECODED = "decoded"
    CREATED = "created"
    RECORD_DELETED = "record_deleted"


@dataclass
class RestoreResult:
    """Result of a restore operation."""

    restored: ObjectRef
    record_name: str
    namespace: str = ""
    state: RestoreState = RestoreState.PENDING
    warning: str | None = None

    @property
    def record_deleted(self) -> bool:
        return self.state == RestoreState.RECORD_DELETED


def prepare_for_restore(obj: dict[str, Any]) -> dict[str, Any]:
    """
    Strip the fields a new incarnation of the object must not carry.

    Only ``metadata.uid`` and ``metadata.resourceVersion`` are removed;
    generation, creationTimestamp, ownerReferences and managedFields are
    submitted as decoded.

    Args:
        obj: Decoded manifest (modified in place)

    Returns:
        The same mapping, for chaining
    """
    metadata = obj.get("metadata")
    if isinstance(metadata, dict):
        for field_name in STRIPPED_ON_RESTORE:
            metadata.pop(field_name, None)
    return obj


class RestoreEngine:
    """
    Restores deleted objects from retained records.

    Example:
        >>> engine = RestoreEngine(records, objects)
        >>> result = engine.restore("trashed-delete-deployment-myapp-x7k2p", "ns1")
        >>> str(result.restored)
        'Deployment ns1/myapp'
    """

    def __init__(
        self,
        records: RetentionStore,
        objects: ObjectStore,
        event_log: TrashLogger | None = None,
    ):
        self.records = records
        self.objects = objects
        self.event_log = event_log

    def restore(self, name: str, namespace: str = "") -> RestoreResult:
        """
        Restore the object held by a record and delete the record.

        Args:
            name: Record name
            namespace: Record namespace (empty for cluster-scoped originals)

        Returns:
            RestoreResult; ``warning`` is set if the record could not be
            deleted after the object was re-created

        Raises:
            NotFoundError: If the record does not exist
            CorruptManifestError: If the stored manifest cannot be decoded
            AlreadyExistsError: If the object already exists in the cluster
            StoreError: If reading the record or creating the object fails
        """
        state = RestoreState.PENDING
        try:
            record = self.records.get(name, namespace)
            obj = prepare_for_restore(decode_manifest(record.manifest))
            target = ObjectRef.from_object(obj)
            state = RestoreState.DECODED
            logger.debug("Decoded %s from %s %s", target, RECORD_KIND, name)

            self.objects.create(obj)
            state = RestoreState.CREATED
        except TrashedError as e:
            logger.error(
                "Failed to restore from %s %s (state %s): %s", RECORD_KIND, name, state.value, e
            )
            if self.event_log is not None:
                self.event_log.log_restore_failed(name, namespace, str(e), state.value)
            raise

        logger.info("Restored %s", target)
        result = RestoreResult(
            restored=target, record_name=name, namespace=namespace, state=state
        )

        try:
            self.records.delete(name, namespace)
            result.state = RestoreState.RECORD_DELETED
        except TrashedError as e:
            result.warning = (
                f"Failed to delete {RECORD_KIND} {name}: {e}. "
                "You should manually delete it."
            )
            logger.warning(result.warning)

        if self.event_log is not None:
            self.event_log.log_record_restored(record, target, result.warning)
        return result
