"""
Trash service: one object wiring every collaborator of the lifecycle.

Any interface (CLI, tests, an in-cluster watcher) builds a TrashService and
calls its typed methods instead of assembling stores and engines itself.

Usage:
    >>> from trashed.core.services.trash import TrashService
    >>> service = TrashService.from_config(load_config())
    >>> service.delete_object("ConfigMap", "app-cfg", "ns1")
    >>> records = service.list_records(namespace="ns1")
    >>> service.restore(records[0].name, "ns1")
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any

from trashed.core.capture.controller import CaptureController
from trashed.core.capture.pipeline import CapturePipeline, CaptureResult
from trashed.core.cluster.backend import ObjectStore
from trashed.core.cluster.events import EventType, WatchEvent
from trashed.core.cluster.files import FileObjectStore
from trashed.core.config.loader import config_source_for, resolve_storage
from trashed.core.config.models import NamingStrategy, TrashedConfig
from trashed.core.config.source import ConfigSource
from trashed.core.kinds.registry import DEFAULT_REGISTRY, KindRegistry, WatchedKind
from trashed.core.prune.engine import PruneEngine, PruneResult
from trashed.core.records.models import RetainedRecord
from trashed.core.records.store import FileRetentionStore, RetentionStore
from trashed.core.restore.engine import RestoreEngine, RestoreResult
from trashed.utils.logging import TrashLogger
from trashed.utils.timestamps import utc_now

logger = logging.getLogger(__name__)


class TrashService:
    """
    Facade over capture, prune and restore.

    Every collaborator is injected; ``from_config`` builds the file-backed
    defaults.
    """

    def __init__(
        self,
        records: RetentionStore,
        objects: ObjectStore,
        config_source: ConfigSource,
        registry: KindRegistry = DEFAULT_REGISTRY,
        naming: NamingStrategy = NamingStrategy.DETERMINISTIC,
        clock: Callable[[], datetime] = utc_now,
        event_log: TrashLogger | None = None,
    ) -> None:
        self.records = records
        self.objects = objects
        self.config_source = config_source
        self.registry = registry
        self.event_log = event_log

        self.pipeline = CapturePipeline(
            records,
            config_source,
            registry=registry,
            naming=naming,
            clock=clock,
            event_log=event_log,
        )
        self.controller = CaptureController(self.pipeline, config_source, registry)
        self.pruner = PruneEngine(records, clock=clock, event_log=event_log)
        self.restorer = RestoreEngine(records, objects, event_log=event_log)

    @classmethod
    def from_config(
        cls,
        config: TrashedConfig,
        clock: Callable[[], datetime] = utc_now,
    ) -> TrashService:
        """
        Build a service backed by the file stores named in the configuration.

        Args:
            config: Loaded configuration
            clock: Source of "now" for records, deadlines and prune cutoffs

        Returns:
            TrashService ready to use
        """
        storage = resolve_storage(config)
        assert storage.records_dir is not None
        assert storage.cluster_dir is not None

        objects = FileObjectStore(storage.cluster_dir)
        records = FileRetentionStore(storage.records_dir, clock=clock)
        event_log = TrashLogger.init(storage.log_dir) if config.event_log else None

        logger.debug(
            "Using records_dir=%s cluster_dir=%s", storage.records_dir, storage.cluster_dir
        )
        return cls(
            records=records,
            objects=objects,
            config_source=config_source_for(config, objects),
            naming=config.naming,
            clock=clock,
            event_log=event_log,
        )

    # ------------------------------------------------------------------
    # Capture
    # ------------------------------------------------------------------

    def watch_set(self) -> list[WatchedKind]:
        return self.controller.watch_set()

    def capture(self, obj: Any) -> CaptureResult | None:
        """
        Capture an object as if a deletion event for it had been observed.

        Returns:
            CaptureResult, or None if the object's kind is not watched
        """
        return self.controller.handle(WatchEvent(EventType.DELETED, obj))

    def delete_object(self, kind: str, name: str, namespace: str = "") -> CaptureResult | None:
        """
        Delete a live object and dispatch its deletion to the capture controller.

        Args:
            kind: Object kind
            name: Object name
            namespace: Object namespace (empty for cluster-scoped objects)

        Returns:
            CaptureResult, or None if the kind is not watched

        Raises:
            NotFoundError: If the object does not exist
            StoreError: If the object cannot be read or deleted
        """
        obj = self.objects.get(kind, name, namespace)
        self.objects.delete(kind, name, namespace)
        return self.controller.handle(WatchEvent(EventType.DELETED, obj, kind=kind))

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def list_records(self, namespace: str | None = None) -> list[RetainedRecord]:
        return self.records.list(namespace=namespace)

    def get_record(self, name: str, namespace: str = "") -> RetainedRecord:
        return self.records.get(name, namespace)

    def restore(self, name: str, namespace: str = "") -> RestoreResult:
        return self.restorer.restore(name, namespace)

    def prune(
        self,
        namespace: str | None = None,
        older_than: timedelta | None = None,
        name: str | None = None,
    ) -> PruneResult:
        return self.pruner.prune(namespace=namespace, older_than=older_than, name=name)

    def prune_expired(self, namespace: str | None = None) -> PruneResult:
        return self.pruner.prune_expired(namespace=namespace)
