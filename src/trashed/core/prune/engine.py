"""
Prune engine for retained records.

Selects records by exact name and/or age and deletes them one by one:

- ``name`` restricts the candidates to records with exactly that name
- ``older_than`` makes a candidate eligible when created_at < now - older_than
- with ``name`` but no ``older_than`` every candidate is eligible (ignore age)
- with neither, the call is rejected before anything is listed

A failed delete is logged and counted; it never stops the remaining deletes.
Only a failure to list the candidates aborts the prune.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from trashed.core.errors import PruneSelectorRequiredError, StoreError
from trashed.core.records.models import RetainedRecord
from trashed.core.records.store import RetentionStore
from trashed.core.retention.calculator import now_is_after_or_equal
from trashed.utils.timestamps import ensure_utc, utc_now

if TYPE_CHECKING:
    from trashed.utils.logging import TrashLogger

logger = logging.getLogger(__name__)


@dataclass
class PruneResult:
    """Result of a prune operation."""

    # "namespace/name" of each deleted record
    deleted: list[str] = field(default_factory=list)

    # "namespace/name" of records that matched but failed to delete
    failed: list[str] = field(default_factory=list)

    # Number of records listed before the age check
    candidates: int = 0

    # Records created before this instant were eligible (age-based prunes)
    cutoff: datetime | None = None

    @property
    def deleted_count(self) -> int:
        return len(self.deleted)

    def summary(self) -> str:
        """Generate a human-readable summary of the prune."""
        parts = [f"Total deleted: {self.deleted_count}"]
        if self.failed:
            parts.append(f"Failed to delete {len(self.failed)} record(s)")
        return ", ".join(parts)


def _record_key(record: RetainedRecord) -> str:
    return f"{record.namespace}/{record.name}" if record.namespace else record.name


class PruneEngine:
    """
    Deletes retained records by age, name, or expiry.

    Example:
        >>> engine = PruneEngine(store)
        >>> result = engine.prune(namespace="ns1", older_than=timedelta(days=1))
        >>> result.summary()
        'Total deleted: 1'
    """

    def __init__(
        self,
        store: RetentionStore,
        clock: Callable[[], datetime] = utc_now,
        event_log: TrashLogger | None = None,
    ):
        self.store = store
        self.clock = clock
        self.event_log = event_log

    def prune(
        self,
        namespace: str | None = None,
        older_than: timedelta | None = None,
        name: str | None = None,
    ) -> PruneResult:
        """
        Delete records matching an age threshold and/or an exact name.

        Args:
            namespace: Namespace to prune, or None for all namespaces
            older_than: Minimum record age; None ignores age
            name: Exact record name to match

        Returns:
            PruneResult with deleted and failed records

        Raises:
            PruneSelectorRequiredError: If neither older_than nor name is given
            InvalidNameError: If the namespace or name is not a valid identifier
            StoreError: If the candidates cannot be listed
        """
        if older_than is None and not name:
            raise PruneSelectorRequiredError()

        candidates = self._list(namespace, name or None)
        result = PruneResult(candidates=len(candidates))

        if older_than is not None:
            result.cutoff = ensure_utc(self.clock()) - older_than
            logger.info(
                "Searching for TrashedResources created before %s (older-than %s)",
                result.cutoff.isoformat(),
                older_than,
            )
        if name:
            logger.info("Searching for TrashedResources named as %s", name)

        for record in candidates:
            if name and record.name != name:
                continue
            if result.cutoff is not None and not self._created_before(record, result.cutoff):
                continue
            self._delete(record, result)

        logger.info(result.summary())
        return result

    def prune_expired(self, namespace: str | None = None) -> PruneResult:
        """
        Delete records whose keepUntil deadline has been reached.

        Records without a deadline, or with one that cannot be parsed, are
        eligible immediately.

        Args:
            namespace: Namespace to prune, or None for all namespaces

        Returns:
            PruneResult with deleted and failed records

        Raises:
            StoreError: If the records cannot be listed
        """
        candidates = self._list(namespace, None)
        result = PruneResult(candidates=len(candidates))
        now = self.clock()

        for record in candidates:
            if now_is_after_or_equal(record.keep_until, now):
                self._delete(record, result)

        logger.info(result.summary())
        return result

    def _list(self, namespace: str | None, name: str | None) -> list[RetainedRecord]:
        try:
            return self.store.list(namespace=namespace, name=name)
        except StoreError as e:
            logger.error("Failed to list TrashedResources: %s", e)
            raise

    @staticmethod
    def _created_before(record: RetainedRecord, cutoff: datetime) -> bool:
        if record.created_at is None:
            return False
        return ensure_utc(record.created_at) < cutoff

    def _delete(self, record: RetainedRecord, result: PruneResult) -> None:
        key = _record_key(record)
        logger.info(
            "Deleting %s (Created at: %s)",
            key,
            record.created_at.isoformat() if record.created_at else "unknown",
        )
        try:
            self.store.delete(record.name, record.namespace)
        except StoreError as e:
            logger.error("ERROR deleting %s: %s", key, e)
            result.failed.append(key)
            if self.event_log is not None:
                self.event_log.log_prune_failed(record, str(e))
            return

        result.deleted.append(key)
        if self.event_log is not None:
            self.event_log.log_record_pruned(record)
