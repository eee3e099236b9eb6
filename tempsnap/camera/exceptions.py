"""Custom exceptions for the capture pipeline."""

from tempsnap.errors import TempSnapError


class CaptureError(TempSnapError):
    """Base exception for capture pipeline failures."""


class BindError(CaptureError):
    """Raised when a camera device cannot be bound for the requested lens."""


class PhotoCaptureError(CaptureError):
    """Raised when a still frame cannot be written."""


class RecordingError(CaptureError):
    """Raised when a recording cannot be started or finalized."""


class DependencyMissingError(CaptureError):
    """Raised when required external tools are missing."""
