"""Capture session state machine.

The session is the only producer of tracked records. It owns the bound
camera handle, reads camera defaults and retention from the policy, and
hands every finished capture to the retention store. Completion entry
points (``on_photo_captured``, ``on_recording_finalized``, ``on_captured``)
have no state precondition so that callbacks arriving after ``pause`` still
get recorded.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
import logging

from tempsnap.camera.exceptions import CaptureError
from tempsnap.camera.naming import DestinationNamer
from tempsnap.camera.pipeline import CameraHandle, CapturePipeline, RecordingHandle
from tempsnap.clock import Clock, to_epoch_ms, utc_now
from tempsnap.enums import CaptureMode, FlashMode, LensFacing, MediaKind
from tempsnap.errors import SessionStateError
from tempsnap.policy import PolicyStore
from tempsnap.service.records import RetentionStore


LOGGER = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    PHOTO_READY = "photo_ready"
    VIDEO_READY = "video_ready"
    RECORDING = "recording"


class CaptureSession:
    def __init__(
        self,
        pipeline: CapturePipeline,
        store: RetentionStore,
        policy: PolicyStore,
        namer: DestinationNamer,
        clock: Clock = utc_now,
    ) -> None:
        self._pipeline = pipeline
        self._store = store
        self._policy = policy
        self._namer = namer
        self._clock = clock

        self.state = SessionState.IDLE
        self.mode = CaptureMode.PHOTO
        self.lens = policy.last_lens_facing
        self.flash = policy.last_flash_mode
        self.handle: CameraHandle | None = None
        self.recording_started_at: datetime | None = None
        self._recording: RecordingHandle | None = None

    @property
    def is_recording(self) -> bool:
        return self.state is SessionState.RECORDING

    @property
    def ready_state(self) -> SessionState:
        if self.mode is CaptureMode.VIDEO:
            return SessionState.VIDEO_READY
        return SessionState.PHOTO_READY

    def bind(self) -> SessionState:
        """Bind the camera for the current lens and mode.

        A bind failure is logged and the session still becomes ready, with no
        handle; captures are then silent no-ops until the next bind.
        """
        self._require_not_recording("rebind the camera")
        self._release_handle()
        try:
            self.handle = self._pipeline.bind(self.lens, self.mode)
        except CaptureError as exc:
            LOGGER.warning("Camera bind failed for %s lens: %s", self.lens.value, exc)
            self.handle = None
        self.state = self.ready_state
        return self.state

    def set_mode(self, mode: CaptureMode) -> None:
        self._require_not_recording("change mode")
        mode = CaptureMode(mode)
        if mode is self.mode:
            return
        self.mode = mode
        # photo and video use different capture objects on the same lens
        if self.state is not SessionState.IDLE:
            self.bind()

    def toggle_mode(self) -> None:
        next_mode = CaptureMode.PHOTO if self.mode is CaptureMode.VIDEO else CaptureMode.VIDEO
        self.set_mode(next_mode)

    def toggle_lens(self) -> LensFacing:
        self._require_not_recording("switch lens")
        self.lens = self.lens.flipped()
        self._policy.set_last_lens_facing(self.lens)
        if self.state is not SessionState.IDLE:
            self.bind()
        return self.lens

    def toggle_flash(self) -> FlashMode:
        # kept across mode switches; only photos use it
        self.flash = self.flash.next()
        self._policy.set_last_flash_mode(self.flash)
        return self.flash

    def take_photo(self) -> int | None:
        """Capture a still; returns the new record id, or None when nothing was captured."""
        if self.state is not SessionState.PHOTO_READY:
            raise SessionStateError(f"Cannot take a photo while {self.state.value}")
        if self.handle is None:
            return None
        destination = self._namer.destination(MediaKind.PHOTO)
        try:
            locator = self._pipeline.capture_photo(self.handle, destination)
        except CaptureError as exc:
            LOGGER.warning("Photo capture failed: %s", exc)
            return None
        return self.on_photo_captured(locator)

    def start_recording(self) -> bool:
        if self.state is not SessionState.VIDEO_READY:
            raise SessionStateError(f"Cannot start recording while {self.state.value}")
        if self.handle is None:
            return False
        destination = self._namer.destination(MediaKind.VIDEO)
        try:
            self._recording = self._pipeline.start_recording(
                self.handle,
                destination,
                self._policy.video_quality,
                on_finalized=self.on_recording_finalized,
            )
        except CaptureError as exc:
            LOGGER.warning("Could not start recording: %s", exc)
            return False
        self.recording_started_at = self._clock()
        self.state = SessionState.RECORDING
        return True

    def stop_recording(self) -> int | None:
        """Finalize the recording; returns the new record id when the file was written."""
        if self.state is not SessionState.RECORDING:
            raise SessionStateError(f"Cannot stop recording while {self.state.value}")
        duration_ms = self.recording_elapsed_ms()
        recording = self._recording
        self._recording = None
        self.recording_started_at = None
        self.state = SessionState.VIDEO_READY
        if recording is None:
            return None
        try:
            locator = self._pipeline.stop_recording(recording)
        except CaptureError as exc:
            LOGGER.warning("Recording finalization failed: %s", exc)
            return None
        return self.on_recording_finalized(locator, duration_ms)

    def recording_elapsed_ms(self) -> int:
        """Elapsed recording time for display; 0 when not recording."""
        if self.recording_started_at is None:
            return 0
        return max(0, to_epoch_ms(self._clock()) - to_epoch_ms(self.recording_started_at))

    def on_photo_captured(self, locator: str) -> int:
        return self.on_captured(locator, MediaKind.PHOTO, 0)

    def on_recording_finalized(self, locator: str, duration_ms: int) -> int:
        return self.on_captured(locator, MediaKind.VIDEO, duration_ms)

    def on_captured(self, locator: str, kind: MediaKind, duration_ms: int) -> int:
        return self._store.insert(locator, kind, duration_ms)

    def pause(self) -> None:
        """Release the camera.

        An in-flight recording is handed back to the pipeline, which finalizes
        it on release and reports it through ``on_recording_finalized``.
        """
        if self.state is SessionState.IDLE:
            return
        if self._recording is not None:
            LOGGER.info("Paused while recording %s; the recorder finalizes it", self._recording.destination.name)
        self._recording = None
        self.recording_started_at = None
        self._release_handle()
        self.state = SessionState.IDLE

    def resume(self) -> SessionState:
        if self.state is not SessionState.IDLE:
            return self.state
        return self.bind()

    def _release_handle(self) -> None:
        if self.handle is None:
            return
        handle, self.handle = self.handle, None
        try:
            self._pipeline.release(handle)
        except CaptureError as exc:
            LOGGER.warning("Camera release failed: %s", exc)

    def _require_not_recording(self, action: str) -> None:
        if self.is_recording:
            raise SessionStateError(f"Cannot {action} while recording")
