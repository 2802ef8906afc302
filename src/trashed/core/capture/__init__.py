"""
Capture of deleted resources.

The controller filters watch events down to deletions of watched kinds; the
pipeline turns each one into a retained record.
"""

from trashed.core.capture.controller import CaptureController
from trashed.core.capture.pipeline import CaptureOutcome, CapturePipeline, CaptureResult

__all__ = ["CaptureController", "CaptureOutcome", "CapturePipeline", "CaptureResult"]
