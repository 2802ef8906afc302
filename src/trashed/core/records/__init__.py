"""
Retained records.

Provides the RetainedRecord model, record naming, and the storage layer that
holds captured deletions until they are restored or pruned.
"""

from trashed.core.records.models import RECORD_API_VERSION, RECORD_KIND, RetainedRecord
from trashed.core.records.naming import (
    CaptureAction,
    deletion_marker,
    deterministic_suffix,
    random_suffix,
    record_name_prefix,
)
from trashed.core.records.store import FileRetentionStore, RetentionStore

__all__ = [
    "RECORD_API_VERSION",
    "RECORD_KIND",
    "CaptureAction",
    "FileRetentionStore",
    "RetainedRecord",
    "RetentionStore",
    "deletion_marker",
    "deterministic_suffix",
    "random_suffix",
    "record_name_prefix",
]
