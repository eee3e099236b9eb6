"""Process-wide wiring of the store, policy and collaborators."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache

from sqlalchemy.engine import Engine

from tempsnap.camera import DestinationNamer, FfmpegCapturePipeline
from tempsnap.config import AppSettings, load_settings
from tempsnap.db.base import Base
from tempsnap.db.session import SessionFactory, build_engine, build_session_factory
from tempsnap.enums import LensFacing
from tempsnap.media import FileMediaDeleter
from tempsnap.notify import LoggingNotifier
from tempsnap.policy import PolicyStore
from tempsnap.service import CleanupScheduler, RetentionStore, load_is_acceptable


@dataclass(frozen=True)
class AppContext:
    settings: AppSettings
    engine: Engine
    session_factory: SessionFactory
    policy: PolicyStore
    store: RetentionStore
    deleter: FileMediaDeleter
    notifier: LoggingNotifier
    namer: DestinationNamer
    scheduler: CleanupScheduler

    def capture_pipeline(self) -> FfmpegCapturePipeline:
        return FfmpegCapturePipeline(
            devices={
                LensFacing.BACK: self.settings.back_camera_device,
                LensFacing.FRONT: self.settings.front_camera_device,
            },
            ffmpeg_bin=self.settings.ffmpeg_bin,
            input_format=self.settings.capture_input_format,
            timeout_sec=float(self.settings.capture_timeout_seconds),
        )


def build_context(settings: AppSettings, create_schema: bool = True) -> AppContext:
    """Build the single long-lived store/policy pair for the given settings."""
    engine = build_engine(settings.database_url)
    if create_schema:
        Base.metadata.create_all(engine)
    session_factory = build_session_factory(engine)
    policy = PolicyStore(session_factory)
    store = RetentionStore(session_factory, policy)
    deleter = FileMediaDeleter(settings.media_root)
    notifier = LoggingNotifier()
    scheduler = CleanupScheduler(
        store=store,
        policy=policy,
        deleter=deleter,
        notifier=notifier,
        interval=timedelta(hours=settings.cleanup_interval_hours),
        constraint=load_is_acceptable(settings.cleanup_max_load),
    )
    return AppContext(
        settings=settings,
        engine=engine,
        session_factory=session_factory,
        policy=policy,
        store=store,
        deleter=deleter,
        notifier=notifier,
        namer=DestinationNamer(settings.media_root),
        scheduler=scheduler,
    )


@lru_cache(maxsize=1)
def get_context() -> AppContext:
    """Create and cache the context for the current environment."""
    return build_context(load_settings())
