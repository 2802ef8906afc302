"""
Structured JSONL event log for trashed.

Provides a TrashLogger class that writes one JSON line per record lifecycle
event (captured, skipped, pruned, restored, failures). Events are written to
~/.local/share/trashed/logs/events.jsonl by default.

Each log line is valid JSON with the format:
{
  "timestamp": "2026-01-15T12:34:56.789Z",
  "event_type": "record_captured",
  "data": { ... event-specific data ... }
}
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from trashed.core.cluster.backend import ObjectRef
    from trashed.core.records.models import RetainedRecord

DEFAULT_LOG_FILENAME = "events.jsonl"


class EventType(str, Enum):
    """Types of events that can be logged."""

    RECORD_CAPTURED = "record_captured"
    CAPTURE_SKIPPED = "capture_skipped"
    CAPTURE_FAILED = "capture_failed"
    RECORD_PRUNED = "record_pruned"
    PRUNE_FAILED = "prune_failed"
    RECORD_RESTORED = "record_restored"
    RESTORE_FAILED = "restore_failed"


class LogEntry(BaseModel):
    """A single structured log entry in JSONL format."""

    model_config = ConfigDict(use_enum_values=True)

    timestamp: datetime = Field(..., description="When the event occurred (ISO 8601 format)")
    event_type: EventType = Field(..., description="Type of event")
    data: dict[str, Any] = Field(default_factory=dict, description="Event-specific data")


def _source_data(source: ObjectRef | None) -> dict[str, Any]:
    if source is None:
        return {}
    data: dict[str, Any] = {"kind": source.kind, "name": source.name}
    if source.namespace:
        data["namespace"] = source.namespace
    return data


def _record_data(record: RetainedRecord) -> dict[str, Any]:
    data: dict[str, Any] = {"record": record.name}
    if record.namespace:
        data["namespace"] = record.namespace
    return data


class TrashLogger:
    """
    Structured JSONL logger for record lifecycle events.

    Each line is valid JSON that can be queried with jq.

    Example:
        event_log = TrashLogger.init()
        event_log.log_record_captured(record, ObjectRef("ConfigMap", "app-cfg", "ns1"))
        event_log.log_record_pruned(record)
    """

    def __init__(self, log_file: Path):
        """
        Initialize logger with a log file path.

        Args:
            log_file: Path to the JSONL log file (will be created if needed)
        """
        self.log_file = Path(log_file)
        self._ensure_log_dir()

    def _ensure_log_dir(self) -> None:
        """Create log directory if it doesn't exist."""
        self.log_file.parent.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def init(log_dir: Path | None = None) -> TrashLogger:
        """
        Initialize an event logger.

        Logs are written to {log_dir}/events.jsonl, where log_dir defaults to
        $XDG_DATA_HOME/trashed/logs.

        Args:
            log_dir: Directory for the log file (optional)

        Returns:
            TrashLogger instance ready to log events
        """
        if log_dir is None:
            xdg_data_home = os.environ.get("XDG_DATA_HOME")
            if not xdg_data_home:
                xdg_data_home = os.path.expanduser("~/.local/share")
            log_dir = Path(xdg_data_home) / "trashed" / "logs"

        return TrashLogger(Path(log_dir) / DEFAULT_LOG_FILENAME)

    def log_event(self, event_type: EventType, data: dict[str, Any] | None = None) -> None:
        """
        Write a log event to the JSONL file.

        Write failures are reported on stdout and never raised, so the event
        log cannot block a capture, prune or restore.

        Args:
            event_type: Type of event (from EventType enum)
            data: Event-specific data (optional, defaults to {})
        """
        if data is None:
            data = {}

        try:
            entry = LogEntry(timestamp=datetime.now(timezone.utc), event_type=event_type, data=data)
            log_line = entry.model_dump_json(exclude_none=True) + "\n"

            with open(self.log_file, "a", encoding="utf-8") as f:
                f.write(log_line)

        except OSError as e:
            print(f"Warning: Failed to write to log file {self.log_file}: {e}", flush=True)

    def log_record_captured(self, record: RetainedRecord, source: ObjectRef) -> None:
        """
        Log a newly created record.

        Args:
            record: The persisted record
            source: Identity of the deleted object
        """
        data = _record_data(record)
        data["source"] = _source_data(source)
        if record.keep_until:
            data["keep_until"] = record.keep_until
        self.log_event(EventType.RECORD_CAPTURED, data)

    def log_capture_skipped(self, source: ObjectRef | None, reason: str) -> None:
        self.log_event(EventType.CAPTURE_SKIPPED, {"source": _source_data(source), "reason": reason})

    def log_capture_failed(self, source: ObjectRef | None, reason: str) -> None:
        self.log_event(EventType.CAPTURE_FAILED, {"source": _source_data(source), "reason": reason})

    def log_record_pruned(self, record: RetainedRecord) -> None:
        data = _record_data(record)
        if record.created_at is not None:
            data["created_at"] = record.created_at.isoformat()
        self.log_event(EventType.RECORD_PRUNED, data)

    def log_prune_failed(self, record: RetainedRecord, reason: str) -> None:
        data = _record_data(record)
        data["reason"] = reason
        self.log_event(EventType.PRUNE_FAILED, data)

    def log_record_restored(
        self,
        record: RetainedRecord,
        restored: ObjectRef,
        warning: str | None = None,
    ) -> None:
        """
        Log a restore.

        Args:
            record: The record the object was restored from
            restored: Identity of the re-created object
            warning: Set when the record could not be deleted afterwards
        """
        data = _record_data(record)
        data["restored"] = _source_data(restored)
        if warning:
            data["warning"] = warning
        self.log_event(EventType.RECORD_RESTORED, data)

    def log_restore_failed(
        self, name: str, namespace: str, reason: str, state: str | None = None
    ) -> None:
        data: dict[str, Any] = {"record": name, "reason": reason}
        if state:
            data["state"] = state
        if namespace:
            data["namespace"] = namespace
        self.log_event(EventType.RESTORE_FAILED, data)

    def get_log_file(self) -> Path:
        """Get the path to the log file."""
        return self.log_file
