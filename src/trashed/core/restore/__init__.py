"""Restore engine: re-create deleted objects from retained records."""

from trashed.core.restore.engine import (
    STRIPPED_ON_RESTORE,
    RestoreEngine,
    RestoreResult,
    RestoreState,
    prepare_for_restore,
)

__all__ = [
    "STRIPPED_ON_RESTORE",
    "RestoreEngine",
    "RestoreResult",
    "RestoreState",
    "prepare_for_restore",
]
