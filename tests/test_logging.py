"""
Unit tests for the structured JSONL event log.

Tests the TrashLogger class to ensure it writes valid JSONL, creates log
directories, and handles write errors gracefully.
"""

import json
from datetime import datetime, timezone
from pathlib import Path

from trashed.core.cluster.backend import ObjectRef
from trashed.core.records.models import RetainedRecord
from trashed.utils import EventType, TrashLogger


def read_entries(log_file: Path) -> list[dict]:
    return [json.loads(line) for line in log_file.read_text().splitlines()]


def make_record() -> RetainedRecord:
    return RetainedRecord(
        name="trashed-delete-secret-db-x7k2p",
        namespace="ns1",
        created_at=datetime(2026, 1, 16, 14, 32, tzinfo=timezone.utc),
        manifest="kind: Secret\nmetadata:\n  name: db\n",
        keep_until="2026-01-16T15:32:00Z",
    )


class TestTrashLoggerInit:
    """Test TrashLogger initialization."""

    def test_init_creates_directory(self, tmp_path):
        """Logger creates parent directories if they don't exist."""
        logger = TrashLogger(tmp_path / "a" / "b" / "events.jsonl")

        assert logger.get_log_file().parent.exists()

    def test_init_with_log_dir(self, tmp_path):
        logger = TrashLogger.init(tmp_path / "logs")

        assert logger.log_file == tmp_path / "logs" / "events.jsonl"

    def test_init_uses_xdg_data_home(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

        logger = TrashLogger.init()

        assert logger.log_file == tmp_path / "data" / "trashed" / "logs" / "events.jsonl"


class TestTrashLoggerEvents:
    """Test event methods."""

    def test_log_event_writes_json_line(self, tmp_path):
        log_file = tmp_path / "events.jsonl"
        TrashLogger(log_file).log_event(EventType.CAPTURE_SKIPPED, {"reason": "no kind"})

        [entry] = read_entries(log_file)
        assert entry["event_type"] == "capture_skipped"
        assert entry["data"] == {"reason": "no kind"}
        assert "timestamp" in entry

    def test_events_append(self, tmp_path):
        logger = TrashLogger(tmp_path / "events.jsonl")
        record = make_record()

        logger.log_record_captured(record, ObjectRef("Secret", "db", "ns1"))
        logger.log_record_pruned(record)
        logger.log_record_restored(record, ObjectRef("Secret", "db", "ns1"), "could not delete")

        entries = read_entries(logger.log_file)
        assert [e["event_type"] for e in entries] == [
            "record_captured",
            "record_pruned",
            "record_restored",
        ]
        assert entries[0]["data"] == {
            "record": "trashed-delete-secret-db-x7k2p",
            "namespace": "ns1",
            "source": {"kind": "Secret", "name": "db", "namespace": "ns1"},
            "keep_until": "2026-01-16T15:32:00Z",
        }
        assert entries[1]["data"]["created_at"] == "2026-01-16T14:32:00+00:00"
        assert entries[2]["data"]["warning"] == "could not delete"

    def test_failure_events(self, tmp_path):
        logger = TrashLogger(tmp_path / "events.jsonl")

        logger.log_capture_failed(None, "sanitize failed")
        logger.log_prune_failed(make_record(), "timeout")
        logger.log_restore_failed("r1", "", "not found")
        logger.log_restore_failed("r2", "ns1", "exists", "decoded")

        entries = read_entries(logger.log_file)
        assert entries[0]["data"] == {"source": {}, "reason": "sanitize failed"}
        assert entries[1]["data"]["reason"] == "timeout"
        assert entries[2]["data"] == {"record": "r1", "reason": "not found"}
        assert entries[3]["data"] == {"record": "r2", "reason": "exists", "state": "decoded", "namespace": "ns1"}

    def test_write_errors_do_not_raise(self, tmp_path, capsys):
        """A log file that cannot be written only prints a warning."""
        log_file = tmp_path / "events.jsonl"
        log_file.mkdir()

        TrashLogger(log_file).log_event(EventType.RECORD_PRUNED, {})

        assert "Failed to write to log file" in capsys.readouterr().out
