"""Retention deadline calculation and deadline checks."""

from trashed.core.retention.calculator import (
    DEFAULT_HOURS_TO_KEEP,
    DEFAULT_MINUTES_TO_KEEP,
    RetentionConfig,
    compute_deadline,
    now_is_after_or_equal,
    render_deadline,
    retention_from_source,
    time_remaining,
)

__all__ = [
    "DEFAULT_HOURS_TO_KEEP",
    "DEFAULT_MINUTES_TO_KEEP",
    "RetentionConfig",
    "compute_deadline",
    "now_is_after_or_equal",
    "render_deadline",
    "retention_from_source",
    "time_remaining",
]
