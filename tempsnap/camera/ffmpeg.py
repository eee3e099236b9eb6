"""ffmpeg-backed capture pipeline for local video devices."""

from __future__ import annotations

from pathlib import Path
from typing import Final
import logging
import shutil
import subprocess
import threading
import time

from tempsnap.enums import CaptureMode, LensFacing, VideoQuality

from .exceptions import BindError, DependencyMissingError, PhotoCaptureError, RecordingError
from .pipeline import CameraHandle, FinalizedCallback, RecordingHandle


LOGGER = logging.getLogger(__name__)

DEFAULT_INPUT_FORMAT: Final[str] = "v4l2"
DEFAULT_STOP_TIMEOUT_SEC: Final[float] = 10.0


def locator_for(path: Path) -> str:
    """Locator string stored for a written file."""
    return path.resolve().as_uri()


class FfmpegCapturePipeline:
    """Grabs stills and records clips by shelling out to ffmpeg."""

    def __init__(
        self,
        devices: dict[LensFacing, str],
        ffmpeg_bin: str = "ffmpeg",
        input_format: str = DEFAULT_INPUT_FORMAT,
        timeout_sec: float = 30.0,
        jpeg_quality: int = 2,
    ) -> None:
        self._devices = dict(devices)
        self._ffmpeg_bin = ffmpeg_bin
        self._input_format = input_format
        self._timeout_sec = timeout_sec
        self._jpeg_quality = jpeg_quality
        self._lock = threading.Lock()
        self._in_flight: list[RecordingHandle] = []

    def bind(self, lens: LensFacing, mode: CaptureMode) -> CameraHandle:
        if shutil.which(self._ffmpeg_bin) is None:
            raise DependencyMissingError(f"Required binary not found in PATH: {self._ffmpeg_bin}")
        device = self._devices.get(lens)
        if device is None:
            raise BindError(f"No device configured for {lens.value} camera")
        if device.startswith("/dev/") and not Path(device).exists():
            raise BindError(f"Camera device not present: {device}")
        LOGGER.info("Bound %s camera %s for %s", lens.value, device, mode.value)
        return CameraHandle(lens=lens, mode=mode, device=device)

    def release(self, handle: CameraHandle) -> None:
        """Release ``handle``, finalizing any recording still running on it.

        Finalized recordings are reported through their ``on_finalized``
        callback; a recording that fails to finalize is logged and dropped.
        """
        with self._lock:
            orphans = [recording for recording in self._in_flight if recording.camera == handle]
            self._in_flight = [recording for recording in self._in_flight if recording.camera != handle]
        for recording in orphans:
            try:
                locator = self._finalize(recording)
            except RecordingError as exc:
                LOGGER.warning("Recording %s lost on release: %s", recording.destination.name, exc)
                continue
            duration_ms = max(0, int((time.monotonic() - recording.started_monotonic) * 1000))
            LOGGER.info("Finalized %s on release (%s ms)", recording.destination.name, duration_ms)
            if recording.on_finalized is not None:
                recording.on_finalized(locator, duration_ms)
        # ffmpeg opens the device per capture; nothing else stays open between calls
        LOGGER.debug("Released %s camera %s", handle.lens.value, handle.device)

    def capture_photo(self, handle: CameraHandle, destination: Path) -> str:
        destination.parent.mkdir(parents=True, exist_ok=True)
        command = [
            *self._input_args(handle),
            "-frames:v",
            "1",
            "-q:v",
            str(self._jpeg_quality),
            "-n",
            str(destination),
        ]
        try:
            subprocess.run(
                command,
                check=True,
                capture_output=True,
                text=True,
                timeout=self._timeout_sec,
            )
        except FileNotFoundError as exc:
            raise DependencyMissingError(f"Required binary not found in PATH: {self._ffmpeg_bin}") from exc
        except subprocess.TimeoutExpired as exc:
            raise PhotoCaptureError("ffmpeg timed out while capturing photo.") from exc
        except subprocess.CalledProcessError as exc:
            raise PhotoCaptureError(f"ffmpeg failed: {(exc.stderr or '').strip()}") from exc

        if not destination.exists() or destination.stat().st_size == 0:
            raise PhotoCaptureError("ffmpeg completed but output JPEG was not created.")
        return locator_for(destination)

    def start_recording(
        self,
        handle: CameraHandle,
        destination: Path,
        quality: VideoQuality,
        on_finalized: FinalizedCallback | None = None,
    ) -> RecordingHandle:
        destination.parent.mkdir(parents=True, exist_ok=True)
        width, height = quality.resolution
        command = [
            *self._input_args(handle, video_size=f"{width}x{height}"),
            "-c:v",
            "libx264",
            "-preset",
            "veryfast",
            "-pix_fmt",
            "yuv420p",
            "-n",
            str(destination),
        ]
        try:
            process = subprocess.Popen(
                command,
                stdin=subprocess.PIPE,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            raise DependencyMissingError(f"Required binary not found in PATH: {self._ffmpeg_bin}") from exc
        except OSError as exc:
            raise RecordingError(f"Unable to start ffmpeg: {exc}") from exc
        LOGGER.info("Recording %s at %sx%s", destination.name, width, height)
        recording = RecordingHandle(
            camera=handle,
            destination=destination,
            process=process,
            on_finalized=on_finalized,
            started_monotonic=time.monotonic(),
        )
        with self._lock:
            self._in_flight.append(recording)
        return recording

    def stop_recording(self, recording: RecordingHandle) -> str:
        with self._lock:
            self._in_flight = [active for active in self._in_flight if active is not recording]
        return self._finalize(recording)

    @property
    def in_flight(self) -> list[RecordingHandle]:
        with self._lock:
            return list(self._in_flight)

    def _finalize(self, recording: RecordingHandle) -> str:
        process = recording.process
        if process is None:
            raise RecordingError("Recording has no running process.")
        try:
            # "q" on stdin makes ffmpeg finalize the container cleanly
            _, stderr = process.communicate(input=b"q", timeout=DEFAULT_STOP_TIMEOUT_SEC)
        except subprocess.TimeoutExpired as exc:
            process.kill()
            process.communicate()
            raise RecordingError("ffmpeg did not stop in time; recording discarded.") from exc

        destination = recording.destination
        if not destination.exists() or destination.stat().st_size == 0:
            message = (stderr or b"").decode("utf-8", errors="replace").strip()
            raise RecordingError(f"ffmpeg produced no video file: {message}")
        return locator_for(destination)

    def _input_args(self, handle: CameraHandle, video_size: str | None = None) -> list[str]:
        args = [self._ffmpeg_bin, "-hide_banner", "-loglevel", "error"]
        if handle.device.startswith("/dev/"):
            args += ["-f", self._input_format]
        if video_size is not None:
            args += ["-video_size", video_size]
        args += ["-i", handle.device]
        return args
