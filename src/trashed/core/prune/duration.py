"""
Duration parsing for prune age thresholds.

Accepts Go-style durations (``90s``, ``10m``, ``1h30m``, ``1.5h``, ``0``)
plus a day suffix: ``Nd`` means ``N*24h`` (``1d``, ``1.5d``).
"""

import re
from datetime import timedelta

from trashed.core.errors import ConfigInvalidError

_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")
_DAYS = re.compile(r"^(\d+(?:\.\d*)?|\.\d+)d$")


def _parse_go_duration(text: str) -> timedelta | None:
    if text == "0":
        return timedelta(0)

    position = 0
    total = 0.0
    while position < len(text):
        match = _COMPONENT.match(text, position)
        if match is None:
            return None
        total += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        position = match.end()

    if position == 0:
        return None
    return timedelta(seconds=total)


def parse_duration(value: str) -> timedelta:
    """
    Parse a duration string.

    Args:
        value: Duration text (e.g. "14m", "11h", "24h", "1d")

    Returns:
        Parsed duration

    Raises:
        ConfigInvalidError: If the text is not a valid, non-negative duration

    Example:
        >>> parse_duration("1h30m")
        datetime.timedelta(seconds=5400)
        >>> parse_duration("2d")
        datetime.timedelta(days=2)
    """
    text = value.strip()
    if text.startswith("-"):
        raise ConfigInvalidError(f"invalid time format (duration must not be negative): {value}")
    text = text.lstrip("+")

    parsed = _parse_go_duration(text)
    if parsed is not None:
        return parsed

    days = _DAYS.match(text)
    if days is not None:
        return timedelta(hours=float(days.group(1)) * 24)

    raise ConfigInvalidError(f"invalid time format (use 10m, 5h, 24h or 1d): {value}")
