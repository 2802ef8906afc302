"""Utility modules for trashed."""

from .logging import EventType, LogEntry, TrashLogger
from .timestamps import ensure_utc, format_rfc3339, parse_rfc3339, utc_now

__all__ = [
    "ensure_utc",
    "format_rfc3339",
    "parse_rfc3339",
    "utc_now",
    "EventType",
    "LogEntry",
    "TrashLogger",
]
