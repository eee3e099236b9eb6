from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

from tempsnap.camera.exceptions import BindError, PhotoCaptureError, RecordingError
from tempsnap.camera.pipeline import CameraHandle, FinalizedCallback, RecordingHandle
from tempsnap.db.base import Base
from tempsnap.db.session import build_engine, build_session_factory
from tempsnap.enums import CaptureMode, LensFacing, VideoQuality
from tempsnap.media import DeletionOutcome
from tempsnap.policy import PolicyStore
from tempsnap.service.records import RetentionStore


T0 = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


def make_store(clock: FakeClock | None = None) -> tuple[RetentionStore, PolicyStore, FakeClock]:
    clock = clock or FakeClock()
    engine = build_engine("sqlite://")
    Base.metadata.create_all(engine)
    session_factory = build_session_factory(engine)
    policy = PolicyStore(session_factory)
    return RetentionStore(session_factory, policy, clock=clock), policy, clock


class RecordingDeleter:
    """Deleter returning scripted outcomes per locator."""

    def __init__(self, outcomes: dict[str, DeletionOutcome] | None = None, default=DeletionOutcome.SUCCESS):
        self.outcomes = outcomes or {}
        self.default = default
        self.calls: list[str] = []

    def delete(self, locator: str) -> DeletionOutcome:
        self.calls.append(locator)
        outcome = self.outcomes.get(locator, self.default)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class RecordingNotifier:
    def __init__(self) -> None:
        self.counts: list[int] = []

    def notify(self, count: int) -> None:
        self.counts.append(count)


class FakePipeline:
    """In-memory capture pipeline with switchable failures.

    Files are written when a capture starts, so destination naming sees them.
    Recordings still running when their camera is released are finalized and
    reported with ``release_duration_ms``.
    """

    def __init__(self) -> None:
        self.fail_bind = False
        self.fail_photo = False
        self.fail_stop = False
        self.release_duration_ms = 1200
        self.binds: list[tuple[LensFacing, CaptureMode]] = []
        self.released: list[CameraHandle] = []
        self.photos: list[Path] = []
        self.recordings: list[tuple[Path, VideoQuality]] = []
        self.in_flight: list[RecordingHandle] = []

    def bind(self, lens: LensFacing, mode: CaptureMode) -> CameraHandle:
        self.binds.append((lens, mode))
        if self.fail_bind:
            raise BindError(f"no {lens.value} camera")
        return CameraHandle(lens=lens, mode=mode, device=f"/dev/fake-{lens.value}")

    def release(self, handle: CameraHandle) -> None:
        self.released.append(handle)
        orphans = [recording for recording in self.in_flight if recording.camera == handle]
        self.in_flight = [recording for recording in self.in_flight if recording.camera != handle]
        for recording in orphans:
            if recording.on_finalized is not None:
                recording.on_finalized(recording.destination.as_uri(), self.release_duration_ms)

    def capture_photo(self, handle: CameraHandle, destination: Path) -> str:
        if self.fail_photo:
            raise PhotoCaptureError("sensor error")
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(f"shot-{len(self.photos)}".encode())
        self.photos.append(destination)
        return destination.as_uri()

    def start_recording(
        self,
        handle: CameraHandle,
        destination: Path,
        quality: VideoQuality,
        on_finalized: FinalizedCallback | None = None,
    ) -> RecordingHandle:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(b"mp4")
        self.recordings.append((destination, quality))
        recording = RecordingHandle(camera=handle, destination=destination, on_finalized=on_finalized)
        self.in_flight.append(recording)
        return recording

    def stop_recording(self, recording: RecordingHandle) -> str:
        self.in_flight = [active for active in self.in_flight if active is not recording]
        if self.fail_stop:
            raise RecordingError("muxer failed")
        return recording.destination.as_uri()
