"""
Unit tests for the retained record model and the file retention store.
"""

import re
from datetime import timedelta
from pathlib import Path

import frontmatter
import pytest

from trashed.core.errors import AlreadyExistsError, InvalidNameError, NotFoundError, StoreError
from trashed.core.records.models import RECORD_API_VERSION, RECORD_KIND, RetainedRecord
from trashed.core.records.naming import (
    CaptureAction,
    deletion_marker,
    deterministic_suffix,
    random_suffix,
    record_name_prefix,
)
from trashed.core.records.store import FileRetentionStore

MANIFEST = "apiVersion: v1\nkind: ConfigMap\nmetadata:\n  name: app-cfg\n  namespace: ns1\n"


def make_record(**overrides) -> RetainedRecord:
    values = {
        "name": "trashed-delete-configmap-app-cfg-abc12",
        "namespace": "ns1",
        "manifest": MANIFEST,
        "keep_until": "2026-01-16T15:32:00Z",
    }
    values.update(overrides)
    return RetainedRecord(**values)


class TestRetainedRecord:
    """Test the RetainedRecord model."""

    def test_manifest_required(self):
        with pytest.raises(ValueError):
            RetainedRecord(name="x", manifest="")

    def test_created_at_parsed_from_string(self):
        record = make_record(created_at="2026-01-16T14:32:00Z")

        assert record.created_at is not None
        assert record.created_at.isoformat() == "2026-01-16T14:32:00+00:00"

    def test_empty_keep_until_means_absent(self):
        assert make_record(keep_until="").keep_until is None

    def test_source_ref(self):
        ref = make_record().source_ref()

        assert ref is not None
        assert (ref.kind, ref.name, ref.namespace) == ("ConfigMap", "app-cfg", "ns1")

    def test_frontmatter_round_trip(self):
        record = make_record(created_at="2026-01-16T14:32:00Z")

        data = record.to_frontmatter_dict()
        assert data["apiVersion"] == RECORD_API_VERSION
        assert data["kind"] == RECORD_KIND
        assert data["spec"] == {"keepUntil": "2026-01-16T15:32:00Z"}

        assert RetainedRecord.from_frontmatter_dict(data, MANIFEST) == record

    def test_from_frontmatter_rejects_other_kinds(self):
        with pytest.raises(ValueError, match="Not a TrashedResource"):
            RetainedRecord.from_frontmatter_dict({"kind": "ConfigMap", "metadata": {"name": "x"}}, MANIFEST)


class TestNaming:
    """Test record naming helpers."""

    def test_prefix(self):
        assert record_name_prefix(CaptureAction.DELETE, "ConfigMap", "app-cfg") == (
            "trashed-delete-configmap-app-cfg-"
        )

    def test_long_prefix_is_truncated(self):
        prefix = record_name_prefix(CaptureAction.DELETE, "Deployment", "x" * 300)

        assert len(prefix) + 10 <= 253
        assert prefix.endswith("-")

    def test_random_suffix_alphabet(self):
        assert re.fullmatch(r"[bcdfghjklmnpqrstvwxz2456789]{5}", random_suffix())

    def test_deletion_marker_prefers_deletion_timestamp(self, configmap):
        configmap["metadata"]["deletionTimestamp"] = "2026-01-16T14:31:59Z"

        assert deletion_marker(configmap) == "deleted:2026-01-16T14:31:59Z"

    def test_deletion_marker_falls_back_to_version(self, configmap):
        assert deletion_marker(configmap) == (
            "version:7b1e6a52-4c8e-4f0a-9d1e-3f0c2a9b8e11:4711"
        )

    def test_deletion_marker_absent(self):
        assert deletion_marker({"metadata": {"name": "x"}}) is None

    def test_deterministic_suffix_is_stable(self):
        first = deterministic_suffix("ConfigMap", "ns1", "app-cfg", "version:u:1")

        assert first == deterministic_suffix("configmap", "ns1", "app-cfg", "version:u:1")
        assert re.fullmatch(r"[0-9a-f]{10}", first)
        assert first != deterministic_suffix("ConfigMap", "ns1", "app-cfg", "version:u:2")
        assert first != deterministic_suffix("ConfigMap", "ns2", "app-cfg", "version:u:1")


class TestFileRetentionStoreCreate:
    """Test record creation."""

    def test_create_sets_created_at(self, records_store, clock):
        saved = records_store.create(make_record())

        assert saved.created_at == clock.now
        assert saved.generate_name is None

    def test_create_writes_frontmatter_file(self, records_store: FileRetentionStore):
        saved = records_store.create(make_record())

        path = records_store.record_path(saved.name, "ns1")
        post = frontmatter.load(path)
        assert post.metadata["kind"] == RECORD_KIND
        assert post.metadata["metadata"]["name"] == saved.name
        assert post.metadata["metadata"]["creationTimestamp"] == "2026-01-16T14:32:00Z"
        assert post.metadata["spec"]["keepUntil"] == "2026-01-16T15:32:00Z"
        assert "kind: ConfigMap" in post.content

    def test_create_duplicate_name_fails(self, records_store):
        records_store.create(make_record())

        with pytest.raises(AlreadyExistsError):
            records_store.create(make_record())

    def test_same_name_in_other_namespace_is_fine(self, records_store):
        records_store.create(make_record())
        records_store.create(make_record(namespace="ns2"))

        assert len(records_store.list()) == 2

    def test_generate_name(self, records_store):
        saved = records_store.create(
            make_record(name="", generate_name="trashed-delete-configmap-app-cfg-")
        )

        assert re.fullmatch(r"trashed-delete-configmap-app-cfg-[bcdfghjklmnpqrstvwxz2456789]{5}", saved.name)
        assert records_store.get(saved.name, "ns1") == saved

    def test_generate_name_retries_on_collision(self, records_store, monkeypatch):
        suffixes = iter(["aaaaa", "aaaaa", "bbbbb"])
        monkeypatch.setattr("trashed.core.records.store.random_suffix", lambda: next(suffixes))

        first = records_store.create(make_record(name="", generate_name="p-"))
        second = records_store.create(make_record(name="", generate_name="p-"))

        assert (first.name, second.name) == ("p-aaaaa", "p-bbbbb")

    def test_generate_name_gives_up(self, tmp_path, monkeypatch):
        store = FileRetentionStore(tmp_path / "records", max_name_attempts=3)
        monkeypatch.setattr("trashed.core.records.store.random_suffix", lambda: "zzzzz")
        store.create(make_record(name="", generate_name="p-"))

        with pytest.raises(StoreError, match="unique"):
            store.create(make_record(name="", generate_name="p-"))

    def test_name_or_generate_name_required(self, records_store):
        with pytest.raises(StoreError):
            records_store.create(make_record(name=""))

    def test_cluster_scoped_record(self, records_store):
        saved = records_store.create(make_record(namespace=""))

        assert records_store.record_path(saved.name).parent.name == "_cluster"
        assert records_store.get(saved.name).namespace == ""


class TestFileRetentionStoreRead:
    """Test get, list and delete."""

    def test_get_missing(self, records_store):
        with pytest.raises(NotFoundError):
            records_store.get("nope", "ns1")

    def test_get_malformed_file(self, records_store):
        path = records_store.record_path("broken", "ns1")
        path.parent.mkdir(parents=True)
        path.write_text("---\nkind: Other\n---\nbody\n")

        with pytest.raises(StoreError):
            records_store.get("broken", "ns1")

    def test_list_missing_directory(self, tmp_path: Path):
        assert FileRetentionStore(tmp_path / "nothing").list() == []

    def test_list_filters(self, records_store):
        records_store.create(make_record(name="a"))
        records_store.create(make_record(name="b"))
        records_store.create(make_record(name="a", namespace="ns2"))

        assert {r.name for r in records_store.list(namespace="ns1")} == {"a", "b"}
        assert [(r.name, r.namespace) for r in records_store.list(namespace="ns2")] == [("a", "ns2")]
        assert {r.namespace for r in records_store.list(name="a")} == {"ns1", "ns2"}
        assert records_store.list(namespace="ns3") == []

    def test_list_newest_first(self, records_store, clock):
        records_store.create(make_record(name="old"))
        clock.advance(timedelta(minutes=5))
        records_store.create(make_record(name="new"))

        assert [r.name for r in records_store.list()] == ["new", "old"]

    def test_list_skips_malformed_files(self, records_store, caplog):
        records_store.create(make_record(name="good"))
        (records_store.records_dir / "ns1" / "bad.yaml").write_text("---\n: [\n---\n")

        records = records_store.list()

        assert [r.name for r in records] == ["good"]
        assert "bad.yaml" in caplog.text

    def test_delete(self, records_store):
        records_store.create(make_record())

        records_store.delete("trashed-delete-configmap-app-cfg-abc12", "ns1")

        assert records_store.list() == []

    def test_delete_missing(self, records_store):
        with pytest.raises(NotFoundError):
            records_store.delete("nope", "ns1")

    @pytest.mark.parametrize("name", ["*", "a?", "[ab]", "../ns2/a", "A"])
    def test_list_rejects_patterns_in_name(self, records_store, name):
        records_store.create(make_record(name="a"))

        with pytest.raises(InvalidNameError):
            records_store.list(name=name)

    def test_list_rejects_patterns_in_namespace(self, records_store):
        with pytest.raises(InvalidNameError):
            records_store.list(namespace="ns*")

    def test_paths_stay_inside_the_records_dir(self, records_store):
        records_store.create(make_record(name="a", namespace="ns2"))

        with pytest.raises(InvalidNameError):
            records_store.get("../ns2/a", "ns1")
        with pytest.raises(InvalidNameError):
            records_store.delete("a", "../ns2")

        assert records_store.get("a", "ns2").name == "a"

    def test_invalid_name_error_is_not_a_store_error(self):
        error = InvalidNameError("name", "*")

        assert isinstance(error, ValueError)
        assert not isinstance(error, StoreError)
