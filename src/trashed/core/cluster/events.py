"""Watch event types delivered to the capture controller."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EventType(str, Enum):
    """Kind of change observed on a watched object."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


@dataclass
class WatchEvent:
    """
    A single change notification.

    ``kind`` and ``api_version`` carry the type metadata the watch was set up
    with; the object itself may lack them (typed clients often strip them).
    """

    type: EventType
    object: dict[str, Any] = field(default_factory=dict)
    kind: str | None = None
    api_version: str | None = None
