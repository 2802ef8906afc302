"""
Tests for the capture, delete, kinds and version CLI commands.

Records land in TRASHED_DATA_DIR/records and live objects are read from
TRASHED_DATA_DIR/cluster (see the isolated_env fixture).
"""

import json
from pathlib import Path

import yaml
from typer.testing import CliRunner

from trashed import __version__
from trashed.cli import app
from trashed.core.cluster.files import FileObjectStore
from trashed.core.records.store import FileRetentionStore

runner = CliRunner()


def write_manifests(path: Path, *docs: dict) -> Path:
    path.write_text(yaml.safe_dump_all(docs))
    return path


class TestCaptureCommand:
    """Test `trashed capture -f`."""

    def test_capture_from_file(self, isolated_env: dict, configmap: dict) -> None:
        manifest = write_manifests(isolated_env["project_dir"] / "cm.yaml", configmap)

        result = runner.invoke(app, ["capture", "-f", str(manifest)])

        assert result.exit_code == 0
        assert "Captured" in result.output
        records = FileRetentionStore(isolated_env["records_dir"]).list(namespace="ns1")
        assert len(records) == 1
        assert records[0].name.startswith("trashed-delete-configmap-app-cfg-")

    def test_capture_from_stdin(self, isolated_env: dict, deployment: dict) -> None:
        result = runner.invoke(app, ["capture", "-f", "-"], input=yaml.safe_dump(deployment))

        assert result.exit_code == 0
        [record] = FileRetentionStore(isolated_env["records_dir"]).list()
        assert record.source_ref().kind == "Deployment"

    def test_list_documents_are_flattened(self, isolated_env: dict, configmap: dict, deployment: dict) -> None:
        manifest = write_manifests(
            isolated_env["project_dir"] / "list.yaml",
            {"apiVersion": "v1", "kind": "List", "items": [configmap, deployment]},
        )

        result = runner.invoke(app, ["capture", "-f", str(manifest)])

        assert result.exit_code == 0
        assert len(FileRetentionStore(isolated_env["records_dir"]).list()) == 2

    def test_redelivered_manifest_is_not_duplicated(self, isolated_env: dict, configmap: dict) -> None:
        manifest = write_manifests(isolated_env["project_dir"] / "cm.yaml", configmap)

        runner.invoke(app, ["capture", "-f", str(manifest)])
        result = runner.invoke(app, ["capture", "-f", str(manifest)])

        assert result.exit_code == 0
        assert "Already captured" in result.output
        assert len(FileRetentionStore(isolated_env["records_dir"]).list()) == 1

    def test_unwatched_kind_is_ignored(self, isolated_env: dict) -> None:
        pod = {"apiVersion": "v1", "kind": "Pod", "metadata": {"name": "p", "namespace": "ns1"}}
        manifest = write_manifests(isolated_env["project_dir"] / "pod.yaml", pod)

        result = runner.invoke(app, ["capture", "-f", str(manifest)])

        assert result.exit_code == 0
        assert "not watched" in result.output
        assert FileRetentionStore(isolated_env["records_dir"]).list() == []

    def test_kinds_from_environment(self, isolated_env: dict, monkeypatch, configmap: dict) -> None:
        monkeypatch.setenv("TRASHED_KINDS", "Secret")
        manifest = write_manifests(isolated_env["project_dir"] / "cm.yaml", configmap)

        runner.invoke(app, ["capture", "-f", str(manifest)])

        assert FileRetentionStore(isolated_env["records_dir"]).list() == []

    def test_missing_file(self, isolated_env: dict) -> None:
        result = runner.invoke(app, ["capture", "-f", "nope.yaml"])

        assert result.exit_code == 2
        assert "Cannot read manifests" in result.output

    def test_empty_input(self, isolated_env: dict) -> None:
        result = runner.invoke(app, ["capture", "-f", "-"], input="")

        assert result.exit_code == 0
        assert "No manifests found" in result.output


class TestDeleteCommand:
    """Test `trashed delete KIND NAME`."""

    def test_delete_captures_object(self, isolated_env: dict, configmap: dict) -> None:
        objects = FileObjectStore(isolated_env["cluster_dir"])
        objects.create(configmap)

        result = runner.invoke(app, ["delete", "configmap", "app-cfg", "-n", "ns1"])

        assert result.exit_code == 0
        assert "configmap/app-cfg deleted" in result.output
        assert objects.list("ConfigMap") == []
        [record] = FileRetentionStore(isolated_env["records_dir"]).list(namespace="ns1")
        assert yaml.safe_load(record.manifest)["data"] == {"LOG_LEVEL": "debug"}

    def test_delete_missing_object(self, isolated_env: dict) -> None:
        result = runner.invoke(app, ["delete", "configmap", "ghost", "-n", "ns1"])

        assert result.exit_code == 2
        assert "Cannot delete configmap/ghost" in result.output

    def test_delete_then_restore(self, isolated_env: dict, deployment: dict) -> None:
        objects = FileObjectStore(isolated_env["cluster_dir"])
        objects.create(deployment)
        runner.invoke(app, ["delete", "deployment", "myapp", "-n", "ns1"])
        [record] = FileRetentionStore(isolated_env["records_dir"]).list(namespace="ns1")

        result = runner.invoke(app, ["restore", record.name, "-n", "ns1"])

        assert result.exit_code == 0
        assert objects.get("Deployment", "myapp", "ns1")["spec"]["replicas"] == 2


class TestKindsCommand:
    def test_lists_supported_kinds(self, isolated_env: dict) -> None:
        result = runner.invoke(app, ["kinds"])

        assert result.exit_code == 0
        assert "Deployment" in result.output
        assert "ConfigMap" in result.output


class TestVersionCommand:
    def test_version(self) -> None:
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert f"trashed version {__version__}" in result.output


class TestEventLog:
    def test_capture_is_logged(self, isolated_env: dict, configmap: dict) -> None:
        manifest = write_manifests(isolated_env["project_dir"] / "cm.yaml", configmap)

        runner.invoke(app, ["capture", "-f", str(manifest)])

        log_file = isolated_env["log_dir"] / "events.jsonl"
        entries = [json.loads(line) for line in log_file.read_text().splitlines()]
        assert [e["event_type"] for e in entries] == ["record_captured"]
