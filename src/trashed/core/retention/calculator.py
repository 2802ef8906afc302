"""
Retention deadline calculation.

A record's ``keep_until`` deadline is decided once, at capture time:

    deadline = now + hours_to_keep hours + minutes_to_keep minutes

Configuration problems never block a capture; unreadable values fall back to
the defaults (60 minutes, 0 hours).
"""

import logging
from datetime import datetime, timedelta

from pydantic import BaseModel, Field

from trashed.core.config.source import ConfigSource
from trashed.utils.timestamps import ensure_utc, format_rfc3339, parse_rfc3339

logger = logging.getLogger(__name__)

DEFAULT_MINUTES_TO_KEEP = 60
DEFAULT_HOURS_TO_KEEP = 0

MINUTES_KEY = "minutesToKeep"
HOURS_KEY = "hoursToKeep"


class RetentionConfig(BaseModel):
    """Retention parameters in effect for one capture."""

    minutes_to_keep: int = Field(
        default=DEFAULT_MINUTES_TO_KEEP,
        ge=0,
        description="Minutes to keep a captured record",
    )
    hours_to_keep: int = Field(
        default=DEFAULT_HOURS_TO_KEEP,
        ge=0,
        description="Hours to keep a captured record (added to minutes)",
    )

    @property
    def duration(self) -> timedelta:
        return timedelta(hours=self.hours_to_keep, minutes=self.minutes_to_keep)


def compute_deadline(config: RetentionConfig, now: datetime) -> datetime:
    """
    Compute the expiration deadline for a record captured at ``now``.

    Monotonic in both parameters: keeping longer never yields an earlier
    deadline.
    """
    return ensure_utc(now) + config.duration


def render_deadline(config: RetentionConfig, now: datetime) -> str:
    """Compute the deadline and render it as an RFC3339 string."""
    return format_rfc3339(compute_deadline(config, now))


def _read_non_negative_int(source: ConfigSource, key: str, default: int) -> int:
    raw = source.read_config(key)
    if raw is None:
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        logger.error("Invalid value for %s in config, using default %d: %r", key, default, raw)
        return default
    if value < 0:
        logger.error("Negative value for %s in config, using default %d: %r", key, default, raw)
        return default
    return value


def retention_from_source(source: ConfigSource) -> RetentionConfig:
    """
    Read retention parameters from a configuration source.

    Missing, unparseable or negative values are replaced by defaults and
    logged.

    Args:
        source: Key/value configuration source

    Returns:
        RetentionConfig to apply to the current capture
    """
    return RetentionConfig(
        minutes_to_keep=_read_non_negative_int(source, MINUTES_KEY, DEFAULT_MINUTES_TO_KEEP),
        hours_to_keep=_read_non_negative_int(source, HOURS_KEY, DEFAULT_HOURS_TO_KEEP),
    )


def _parse_deadline(deadline: str | None) -> datetime | None:
    if not deadline:
        return None
    try:
        return parse_rfc3339(deadline)
    except ValueError:
        logger.warning("Unparseable keepUntil value, treating as expired: %r", deadline)
        return None


def now_is_after_or_equal(deadline: str | None, now: datetime) -> bool:
    """
    Check whether a deadline has been reached.

    An absent or unparseable deadline counts as already reached.
    """
    parsed = _parse_deadline(deadline)
    if parsed is None:
        return True
    return ensure_utc(now) >= parsed


def time_remaining(deadline: str | None, now: datetime) -> timedelta:
    """
    Time left until a deadline (negative once passed, zero if absent).
    """
    parsed = _parse_deadline(deadline)
    if parsed is None:
        return timedelta(0)
    return parsed - ensure_utc(now)
