"""
Timestamp helpers.

All persisted timestamps are RFC3339 strings in UTC with second precision
(e.g. ``2026-01-16T14:32:00Z``) so they can be re-parsed by the prune age
checks and read by humans inspecting records directly.
"""

from datetime import datetime, timezone

RFC3339_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_rfc3339(dt: datetime) -> str:
    """
    Render a datetime as an RFC3339 string in UTC.

    Naive datetimes are treated as UTC.

    Args:
        dt: Datetime to render

    Returns:
        String like ``2026-01-16T14:32:00Z``
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime(RFC3339_FORMAT)


def parse_rfc3339(value: str) -> datetime:
    """
    Parse an RFC3339 timestamp into an aware UTC datetime.

    Accepts the ``Z`` suffix and explicit offsets. Naive values are treated
    as UTC.

    Args:
        value: Timestamp text

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        ValueError: If the text is not a valid timestamp
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Return dt as an aware UTC datetime (naive values are assumed UTC)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
