"""
Configuration data models for trashed.

These models define the structure of .trashed.json and
~/.config/trashed/config.json files, with validation via Pydantic.
"""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NamingStrategy(str, Enum):
    """How retained record names get their unique suffix."""

    DETERMINISTIC = "deterministic"
    RANDOM = "random"


class RetentionSettings(BaseModel):
    """
    Default retention for captured records.

    A ConfigMap in the cluster may override these per capture.
    """
    minutes_to_keep: int = Field(
        default=60,
        ge=0,
        description="Minutes to keep a captured record"
    )
    hours_to_keep: int = Field(
        default=0,
        ge=0,
        description="Hours to keep a captured record"
    )


class StorageConfig(BaseModel):
    """
    Where records and live objects are kept on disk.

    Unset directories default to $XDG_DATA_HOME/trashed/{records,cluster}.
    """
    records_dir: Path | None = Field(
        default=None,
        description="Directory holding retained records"
    )
    cluster_dir: Path | None = Field(
        default=None,
        description="Directory holding live object manifests"
    )
    log_dir: Path | None = Field(
        default=None,
        description="Directory for the JSONL lifecycle event log"
    )


class ConfigMapRef(BaseModel):
    """Location of the in-cluster configuration ConfigMap."""
    name: str = Field(default="trashedresources-config")
    namespace: str = Field(default="system")


class TrashedConfig(BaseModel):
    """
    Top-level trashed configuration.

    Example:
        >>> config = TrashedConfig()
        >>> config.kinds_to_observe
        ['Deployment', 'Secret', 'ConfigMap']
        >>> config.retention.minutes_to_keep
        60
    """
    kinds_to_observe: list[str] = Field(
        default_factory=lambda: ["Deployment", "Secret", "ConfigMap"],
        description="Kinds whose deletions are captured"
    )
    retention: RetentionSettings = Field(default_factory=RetentionSettings)
    naming: NamingStrategy = Field(
        default=NamingStrategy.DETERMINISTIC,
        description="Record name suffix strategy: 'deterministic' or 'random'"
    )
    namespace: str = Field(
        default="default",
        description="Namespace used when a command is not given one"
    )
    storage: StorageConfig = Field(default_factory=StorageConfig)
    config_map: ConfigMapRef = Field(default_factory=ConfigMapRef)
    event_log: bool = Field(
        default=True,
        description="Write lifecycle events to the JSONL event log"
    )

    model_config = ConfigDict(
        populate_by_name=True,
    )

    @field_validator("kinds_to_observe", mode="before")
    @classmethod
    def split_kinds(cls, v: object) -> object:
        """Accept a ';'-separated string as well as a list."""
        if isinstance(v, str):
            return v.replace(";", " ").split()
        return v
