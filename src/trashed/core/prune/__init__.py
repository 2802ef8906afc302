"""Prune engine and duration parsing."""

from trashed.core.prune.duration import parse_duration
from trashed.core.prune.engine import PruneEngine, PruneResult

__all__ = ["PruneEngine", "PruneResult", "parse_duration"]
