"""
Trashed Resources - a trash bin for cluster resources.

Captures deleted resources of watched kinds as retained records with an
expiration deadline, and lets operators restore or prune them.
"""

__version__ = "0.3.0"

# Re-export core models for convenience
from trashed.core.config.models import TrashedConfig
from trashed.core.records.models import RetainedRecord

__all__ = ["RetainedRecord", "TrashedConfig", "__version__"]
