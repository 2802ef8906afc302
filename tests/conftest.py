"""
Pytest configuration and shared fixtures.

Provides fixtures for temp stores, a controllable clock, sample objects and an
isolated CLI environment used across the test suite.
"""

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest

from trashed.core.cluster.files import FileObjectStore
from trashed.core.config.loader import clear_cache
from trashed.core.config.source import MappingConfigSource
from trashed.core.records.store import FileRetentionStore

FIXED_NOW = datetime(2026, 1, 16, 14, 32, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta

    def set(self, now: datetime) -> None:
        self.now = now


# ==============================================================================
# Global Fixtures
# ==============================================================================


@pytest.fixture(autouse=True)
def reset_config_cache():
    """Make sure no test sees configuration cached by another."""
    clear_cache()
    yield
    clear_cache()


# ==============================================================================
# Store Fixtures
# ==============================================================================


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def records_store(tmp_path: Path, clock: FakeClock) -> FileRetentionStore:
    """Provide a retention store in a temporary directory."""
    return FileRetentionStore(tmp_path / "records", clock=clock)


@pytest.fixture
def object_store(tmp_path: Path) -> FileObjectStore:
    """Provide an object store in a temporary directory."""
    return FileObjectStore(tmp_path / "cluster")


@pytest.fixture
def config_source() -> MappingConfigSource:
    """Provide an empty config source (all defaults)."""
    return MappingConfigSource()


# ==============================================================================
# Sample Data Fixtures
# ==============================================================================


@pytest.fixture
def configmap() -> dict[str, Any]:
    """A ConfigMap as delivered by a deletion watch event."""
    return {
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": {
            "name": "app-cfg",
            "namespace": "ns1",
            "uid": "7b1e6a52-4c8e-4f0a-9d1e-3f0c2a9b8e11",
            "resourceVersion": "4711",
            "creationTimestamp": "2026-01-10T08:00:00Z",
            "managedFields": [{"manager": "kubectl", "operation": "Apply"}],
        },
        "data": {"LOG_LEVEL": "debug"},
    }


@pytest.fixture
def deployment() -> dict[str, Any]:
    """A Deployment as delivered by a deletion watch event."""
    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {
            "name": "myapp",
            "namespace": "ns1",
            "uid": "0f4c3b1a-2222-4a4a-8b8b-123456789abc",
            "resourceVersion": "981",
            "generation": 3,
            "creationTimestamp": "2026-01-01T00:00:00Z",
            "labels": {"app": "myapp"},
        },
        "spec": {
            "replicas": 2,
            "selector": {"matchLabels": {"app": "myapp"}},
            "template": {
                "metadata": {"labels": {"app": "myapp"}},
                "spec": {"containers": [{"name": "web", "image": "nginx:1.27"}]},
            },
        },
    }


# ==============================================================================
# CLI Environment Fixtures
# ==============================================================================


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> dict[str, Path]:
    """
    Isolate config files, env files and data directories for CLI tests.

    Creates:
    - project/ as the working directory
    - config/ as XDG_CONFIG_HOME
    - data/ as TRASHED_DATA_DIR (records/, cluster/, logs/)
    """
    project_dir = tmp_path / "project"
    project_dir.mkdir()
    monkeypatch.chdir(project_dir)

    config_home = tmp_path / "config"
    config_home.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))

    data_dir = tmp_path / "data"
    monkeypatch.setenv("TRASHED_DATA_DIR", str(data_dir))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))

    for var in (
        "TRASHED_KINDS",
        "TRASHED_MINUTES_TO_KEEP",
        "TRASHED_HOURS_TO_KEEP",
        "TRASHED_NAMESPACE",
        "TRASHED_NAMING",
    ):
        monkeypatch.delenv(var, raising=False)

    return {
        "project_dir": project_dir,
        "config_home": config_home,
        "data_dir": data_dir,
        "records_dir": data_dir / "records",
        "cluster_dir": data_dir / "cluster",
        "log_dir": data_dir / "logs",
    }
