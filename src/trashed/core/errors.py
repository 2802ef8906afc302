"""
Error taxonomy for the trash lifecycle.

Skips (unmapped kinds, kindless events, empty watch sets) are not errors and
never raise. Everything else derives from TrashedError so callers can catch
the whole family at the CLI boundary.
"""


class TrashedError(Exception):
    """Base class for trash lifecycle errors."""

    pass


class StoreError(TrashedError):
    """A create/get/list/delete call against a store failed."""

    pass


class NotFoundError(StoreError):
    """The requested object or record does not exist."""

    def __init__(self, kind: str, name: str, namespace: str = ""):
        self.kind = kind
        self.name = name
        self.namespace = namespace
        location = f"{namespace}/{name}" if namespace else name
        super().__init__(f"{kind} {location} not found")


class AlreadyExistsError(StoreError):
    """An object or record with the same identity already exists."""

    def __init__(self, kind: str, name: str, namespace: str = ""):
        self.kind = kind
        self.name = name
        self.namespace = namespace
        location = f"{namespace}/{name}" if namespace else name
        super().__init__(f"{kind} {location} already exists")


class SanitizationFailedError(TrashedError):
    """A live object could not be turned into a durable manifest."""

    pass


class CorruptManifestError(TrashedError):
    """A stored manifest could not be decoded back into an object."""

    pass


class ConfigInvalidError(TrashedError, ValueError):
    """A configuration value or user supplied duration is malformed."""

    pass


class InvalidNameError(ConfigInvalidError):
    """A name, namespace or kind is not a valid object identifier."""

    def __init__(self, what: str, value: str):
        self.what = what
        self.value = value
        super().__init__(f"invalid {what} {value!r}: must be a lowercase RFC 1123 name")


class PruneSelectorRequiredError(ConfigInvalidError):
    """Prune was called without an age threshold or a record name."""

    def __init__(self) -> None:
        super().__init__("flag --older-than or --name is required")


__all__ = [
    "AlreadyExistsError",
    "ConfigInvalidError",
    "CorruptManifestError",
    "InvalidNameError",
    "NotFoundError",
    "PruneSelectorRequiredError",
    "SanitizationFailedError",
    "StoreError",
    "TrashedError",
]
