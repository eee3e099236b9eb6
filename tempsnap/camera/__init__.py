"""Camera integrations: capture pipeline contract and the ffmpeg backend."""

from .exceptions import (
    BindError,
    CaptureError,
    DependencyMissingError,
    PhotoCaptureError,
    RecordingError,
)
from .ffmpeg import FfmpegCapturePipeline, locator_for
from .naming import MEDIA_FOLDER, DestinationNamer, capture_file_name
from .pipeline import CameraHandle, CapturePipeline, RecordingHandle

__all__ = [
    "BindError",
    "CameraHandle",
    "CaptureError",
    "CapturePipeline",
    "DependencyMissingError",
    "DestinationNamer",
    "FfmpegCapturePipeline",
    "MEDIA_FOLDER",
    "PhotoCaptureError",
    "RecordingError",
    "RecordingHandle",
    "capture_file_name",
    "locator_for",
]
