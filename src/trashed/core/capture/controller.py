"""
Capture controller.

Receives watch events from whatever delivers them and hands deletions of
watched kinds to the capture pipeline. The watch set is re-read from the
configuration source on every event.
"""

import logging
from collections.abc import Iterable

from trashed.core.capture.pipeline import CaptureOutcome, CapturePipeline, CaptureResult
from trashed.core.cluster.backend import object_kind, split_api_version
from trashed.core.cluster.events import EventType, WatchEvent
from trashed.core.config.source import ConfigSource, watched_kind_names
from trashed.core.kinds.registry import DEFAULT_REGISTRY, KindRegistry, WatchedKind, resolve_watch_set

logger = logging.getLogger(__name__)


class CaptureController:
    """
    Filters watch events and captures deletions of watched kinds.

    Example:
        controller = CaptureController(pipeline, config_source)
        result = controller.handle(WatchEvent(EventType.DELETED, obj, kind="ConfigMap"))
    """

    def __init__(
        self,
        pipeline: CapturePipeline,
        config_source: ConfigSource,
        registry: KindRegistry = DEFAULT_REGISTRY,
    ):
        self.pipeline = pipeline
        self.config_source = config_source
        self.registry = registry

    def watch_set(self) -> list[WatchedKind]:
        """Resolve the currently configured kinds against the registry."""
        return resolve_watch_set(watched_kind_names(self.config_source), self.registry)

    def handle(self, event: WatchEvent) -> CaptureResult | None:
        """
        Handle one watch event.

        Args:
            event: The event to handle

        Returns:
            CaptureResult for deletions of watched kinds, None for events
            that are ignored (creates, updates, unwatched kinds)
        """
        if event.type != EventType.DELETED:
            return None

        kind = object_kind(event.object) or event.kind
        if not kind:
            logger.info("Ignoring deletion event without a kind")
            return CaptureResult(outcome=CaptureOutcome.SKIPPED, reason="object has no kind")

        watched = self._match(kind, event.api_version or event.object.get("apiVersion"))
        if watched is None:
            logger.debug("Ignoring deletion of unwatched kind %s", kind)
            return None

        return self.pipeline.capture(
            event.object,
            kind=watched.kind,
            api_version=event.api_version or watched.api_version,
        )

    def handle_all(self, events: Iterable[WatchEvent]) -> list[CaptureResult]:
        """Handle a batch of events and collect the capture results."""
        results: list[CaptureResult] = []
        for event in events:
            result = self.handle(event)
            if result is not None:
                results.append(result)
        return results

    def _match(self, kind: str, api_version: object) -> WatchedKind | None:
        group = None
        if isinstance(api_version, str) and api_version:
            group, _ = split_api_version(api_version)

        for watched in self.watch_set():
            if watched.kind.lower() != kind.lower():
                continue
            # Same kind name in a different API group is a different resource
            if group is not None and group != watched.group:
                continue
            return watched
        return None
