"""
Retained record data model.

A RetainedRecord (wire kind ``TrashedResource``) holds the sanitized manifest
of a deleted resource together with its retention deadline. Records are
stored as files whose YAML frontmatter carries identity and timestamps and
whose body is the manifest itself.
"""

from datetime import datetime
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from trashed.core.cluster.backend import ObjectRef
from trashed.utils.timestamps import ensure_utc, format_rfc3339, parse_rfc3339

RECORD_API_VERSION = "trashed.dev/v1alpha1"
RECORD_KIND = "TrashedResource"


class RetainedRecord(BaseModel):
    """
    A captured deletion.

    ``created_at`` is assigned by the store when the record is created.
    ``keep_until`` is an RFC3339 string computed at capture time; an absent
    value means the record has no explicit deadline.

    Example:
        >>> record = RetainedRecord(
        ...     name="trashed-delete-configmap-app-cfg-1a2b3c4d5e",
        ...     namespace="ns1",
        ...     manifest="apiVersion: v1\\nkind: ConfigMap\\n",
        ...     keep_until="2026-01-16T15:32:00Z",
        ... )
        >>> record.namespace
        'ns1'
    """

    name: str = Field(default="", description="Record name (empty until generated)")
    namespace: str = Field(default="", description="Namespace of the original resource")
    generate_name: str | None = Field(
        default=None,
        description="Prefix the store completes with a random suffix when name is empty",
    )
    created_at: datetime | None = Field(
        default=None,
        description="Creation timestamp, set by the store",
    )
    manifest: str = Field(..., min_length=1, description="Sanitized manifest (YAML)")
    keep_until: str | None = Field(
        default=None,
        description="Retention deadline (RFC3339)",
    )

    model_config = ConfigDict(
        populate_by_name=True,
    )

    @field_validator("created_at", mode="before")
    @classmethod
    def parse_created_at(cls, v: Any) -> Any:
        """Accept RFC3339 strings and normalise to aware UTC datetimes."""
        if isinstance(v, str):
            return parse_rfc3339(v)
        if isinstance(v, datetime):
            return ensure_utc(v)
        return v

    @field_validator("keep_until", mode="before")
    @classmethod
    def render_keep_until(cls, v: Any) -> Any:
        """Store deadlines as RFC3339 text even when given a datetime."""
        if isinstance(v, datetime):
            return format_rfc3339(v)
        if v == "":
            return None
        return v

    def source_ref(self) -> ObjectRef | None:
        """
        Identity of the resource this record was captured from.

        Returns:
            ObjectRef parsed from the manifest, or None if it cannot be read
        """
        try:
            data = yaml.safe_load(self.manifest)
        except yaml.YAMLError:
            return None
        if not isinstance(data, dict):
            return None
        return ObjectRef.from_object(data)

    def to_frontmatter_dict(self) -> dict[str, Any]:
        """
        Convert record identity and timestamps to a frontmatter dictionary.

        Returns:
            Dictionary suitable for YAML frontmatter representation
        """
        metadata: dict[str, Any] = {"name": self.name}
        if self.namespace:
            metadata["namespace"] = self.namespace
        if self.created_at is not None:
            metadata["creationTimestamp"] = format_rfc3339(self.created_at)

        spec: dict[str, Any] = {}
        if self.keep_until:
            spec["keepUntil"] = self.keep_until

        return {
            "apiVersion": RECORD_API_VERSION,
            "kind": RECORD_KIND,
            "metadata": metadata,
            "spec": spec,
        }

    @classmethod
    def from_frontmatter_dict(cls, data: dict[str, Any], manifest: str) -> "RetainedRecord":
        """
        Create a RetainedRecord from frontmatter and body.

        Args:
            data: Dictionary parsed from YAML frontmatter
            manifest: Body of the record file

        Returns:
            RetainedRecord instance

        Raises:
            ValueError: If required fields are missing or invalid
        """
        if data.get("kind") != RECORD_KIND:
            raise ValueError(f"Not a {RECORD_KIND} record: kind={data.get('kind')!r}")

        metadata = data.get("metadata")
        if not isinstance(metadata, dict):
            raise ValueError("'metadata' section is required")

        name = metadata.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError("'metadata.name' must be a non-empty string")

        namespace = metadata.get("namespace") or ""
        if not isinstance(namespace, str):
            raise ValueError(f"'metadata.namespace' must be a string, got {type(namespace)}")

        created = metadata.get("creationTimestamp")
        if created is not None and not isinstance(created, (str, datetime)):
            raise ValueError(f"Invalid 'creationTimestamp' type: {type(created)}")

        spec = data.get("spec") or {}
        keep_until = spec.get("keepUntil") if isinstance(spec, dict) else None
        if isinstance(keep_until, datetime):
            keep_until = format_rfc3339(keep_until)

        return cls(
            name=name,
            namespace=namespace,
            created_at=created,
            manifest=manifest,
            keep_until=keep_until,
        )
