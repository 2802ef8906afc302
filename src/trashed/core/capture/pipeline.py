"""
Capture pipeline.

Turns one observed deletion into exactly one retained record:

1. Skip objects without a resolvable kind
2. Sanitize the object into a manifest (abort on failure)
3. Compute the retention deadline from the configuration in effect now
4. Name the record and place it in the original object's namespace
5. Persist it through the retention store

No step raises for a per-event failure; every outcome is reported in the
returned CaptureResult and logged.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from trashed.core.cluster.backend import ObjectRef
from trashed.core.config.models import NamingStrategy
from trashed.core.config.source import ConfigSource
from trashed.core.errors import (
    AlreadyExistsError,
    InvalidNameError,
    SanitizationFailedError,
    StoreError,
)
from trashed.core.kinds.registry import DEFAULT_REGISTRY, KindRegistry
from trashed.core.manifests.sanitizer import sanitize, to_tree
from trashed.core.records.models import RetainedRecord
from trashed.core.records.naming import (
    CaptureAction,
    deletion_marker,
    deterministic_suffix,
    record_name_prefix,
)
from trashed.core.records.store import RetentionStore
from trashed.core.retention.calculator import render_deadline, retention_from_source
from trashed.utils.timestamps import utc_now

if TYPE_CHECKING:
    from trashed.utils.logging import TrashLogger

logger = logging.getLogger(__name__)


class CaptureOutcome(str, Enum):
    """How a capture attempt ended."""

    CAPTURED = "captured"
    SKIPPED = "skipped"
    DUPLICATE = "duplicate"
    FAILED = "failed"


@dataclass
class CaptureResult:
    """Result of a single capture attempt."""

    outcome: CaptureOutcome
    source: ObjectRef | None = None
    record: RetainedRecord | None = None
    reason: str | None = None

    @property
    def captured(self) -> bool:
        return self.outcome == CaptureOutcome.CAPTURED


class CapturePipeline:
    """
    Creates retained records for deleted objects.

    Example:
        >>> pipeline = CapturePipeline(store, config_source)
        >>> result = pipeline.capture(deleted_configmap)
        >>> result.record.keep_until
        '2026-01-16T15:32:00Z'
    """

    def __init__(
        self,
        store: RetentionStore,
        config_source: ConfigSource,
        registry: KindRegistry = DEFAULT_REGISTRY,
        naming: NamingStrategy = NamingStrategy.DETERMINISTIC,
        clock: Callable[[], datetime] = utc_now,
        event_log: TrashLogger | None = None,
    ):
        """
        Initialize the pipeline.

        Args:
            store: Where records are persisted
            config_source: Retention settings, read on every capture
            registry: Kind registry for apiVersion inference
            naming: Record name suffix strategy
            clock: Source of "now" for deadlines
            event_log: Optional JSONL lifecycle event log
        """
        self.store = store
        self.config_source = config_source
        self.registry = registry
        self.naming = naming
        self.clock = clock
        self.event_log = event_log

    def capture(
        self,
        obj: Any,
        kind: str | None = None,
        api_version: str | None = None,
    ) -> CaptureResult:
        """
        Capture one deleted object.

        Args:
            obj: The deleted object (mapping or serializable model)
            kind: Kind reported by the watch, used when the object lacks one
            api_version: apiVersion reported by the watch

        Returns:
            CaptureResult describing what happened
        """
        try:
            tree = to_tree(obj)
        except SanitizationFailedError as e:
            return self._failed(None, str(e))

        resolved_kind = tree.get("kind") if isinstance(tree.get("kind"), str) else None
        resolved_kind = resolved_kind or kind
        if not resolved_kind:
            logger.info("Ignoring deletion of object without a kind")
            return self._skipped(None, "object has no kind")

        tree.setdefault("kind", resolved_kind)
        source = ObjectRef.from_object(tree)
        if not source.name:
            return self._skipped(source, "object has no metadata.name")

        try:
            manifest = sanitize(tree, kind=resolved_kind, api_version=api_version, registry=self.registry)
        except SanitizationFailedError as e:
            return self._failed(source, str(e))

        now = self.clock()
        keep_until = render_deadline(retention_from_source(self.config_source), now)

        record = self._build_record(tree, source, manifest, keep_until)
        try:
            saved = self.store.create(record)
        except InvalidNameError as e:
            return self._failed(source, str(e))
        except AlreadyExistsError:
            logger.info("Deletion of %s already captured as %s", source, record.name)
            return CaptureResult(
                outcome=CaptureOutcome.DUPLICATE,
                source=source,
                record=record,
                reason="record already exists",
            )
        except StoreError as e:
            return self._failed(source, f"Error on create TrashedResource: {e}")

        logger.info(
            "Success on create TrashedResource: name=%s namespace=%s keepUntil=%s",
            saved.name,
            saved.namespace,
            saved.keep_until,
        )
        if self.event_log is not None:
            self.event_log.log_record_captured(saved, source)
        return CaptureResult(outcome=CaptureOutcome.CAPTURED, source=source, record=saved)

    def _build_record(
        self,
        tree: dict[str, Any],
        source: ObjectRef,
        manifest: str,
        keep_until: str,
    ) -> RetainedRecord:
        prefix = record_name_prefix(CaptureAction.DELETE, source.kind, source.name)
        marker = deletion_marker(tree) if self.naming == NamingStrategy.DETERMINISTIC else None

        if marker is None:
            if self.naming == NamingStrategy.DETERMINISTIC:
                logger.debug("No deletion marker on %s, using a random record name", source)
            return RetainedRecord(
                generate_name=prefix,
                namespace=source.namespace,
                manifest=manifest,
                keep_until=keep_until,
            )

        suffix = deterministic_suffix(source.kind, source.namespace, source.name, marker)
        return RetainedRecord(
            name=f"{prefix}{suffix}",
            namespace=source.namespace,
            manifest=manifest,
            keep_until=keep_until,
        )

    def _skipped(self, source: ObjectRef | None, reason: str) -> CaptureResult:
        if self.event_log is not None:
            self.event_log.log_capture_skipped(source, reason)
        return CaptureResult(outcome=CaptureOutcome.SKIPPED, source=source, reason=reason)

    def _failed(self, source: ObjectRef | None, reason: str) -> CaptureResult:
        logger.error("Capture of %s failed: %s", source or "object", reason)
        if self.event_log is not None:
            self.event_log.log_capture_failed(source, reason)
        return CaptureResult(outcome=CaptureOutcome.FAILED, source=source, reason=reason)
