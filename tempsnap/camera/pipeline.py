"""Capture pipeline contract consumed by the capture session."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Protocol

from tempsnap.enums import CaptureMode, LensFacing, VideoQuality


# (locator, duration_ms) for a recording finalized outside ``stop_recording``
FinalizedCallback = Callable[[str, int], Any]


@dataclass(frozen=True, slots=True)
class CameraHandle:
    """Bound camera for one lens; owned by a single session until released."""

    lens: LensFacing
    mode: CaptureMode
    device: str


@dataclass(slots=True)
class RecordingHandle:
    """In-flight recording started from a bound camera."""

    camera: CameraHandle
    destination: Path
    process: Any = field(default=None, repr=False)
    on_finalized: FinalizedCallback | None = field(default=None, repr=False)
    started_monotonic: float = 0.0


class CapturePipeline(Protocol):
    """Hardware-facing collaborator; failures raise ``CaptureError`` subclasses.

    The pipeline owns the recordings it starts. ``stop_recording`` finalizes
    one and returns its locator. Recordings still in flight when their camera
    is released are finalized by ``release`` and reported through the
    ``on_finalized`` callback given to ``start_recording``.
    """

    def bind(self, lens: LensFacing, mode: CaptureMode) -> CameraHandle: ...

    def release(self, handle: CameraHandle) -> None: ...

    def capture_photo(self, handle: CameraHandle, destination: Path) -> str: ...

    def start_recording(
        self,
        handle: CameraHandle,
        destination: Path,
        quality: VideoQuality,
        on_finalized: FinalizedCallback | None = None,
    ) -> RecordingHandle: ...

    def stop_recording(self, recording: RecordingHandle) -> str: ...
