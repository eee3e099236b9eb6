"""Process-wide retention policy backed by the policy_settings table.

Every field is read and written on its own, in its own transaction. A write
only affects records inserted afterwards; existing records keep the expiry
computed when they were captured.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import TypeVar

from sqlalchemy import select

from tempsnap.db.models import PolicySetting
from tempsnap.db.session import SessionFactory, session_scope
from tempsnap.enums import FlashMode, LensFacing, VideoQuality


LOGGER = logging.getLogger(__name__)

RETENTION_DAYS = "retention_days"
VIDEO_QUALITY = "video_quality"
NOTIFY_ON_CLEANUP = "notify_on_cleanup"
LAST_LENS_FACING = "last_lens_facing"
LAST_FLASH_MODE = "last_flash_mode"

DEFAULT_RETENTION_DAYS = 7
DEFAULT_VIDEO_QUALITY = VideoQuality.HIGH
DEFAULT_NOTIFY_ON_CLEANUP = False
DEFAULT_LENS_FACING = LensFacing.BACK
DEFAULT_FLASH_MODE = FlashMode.AUTO

E = TypeVar("E", bound=Enum)


@dataclass(frozen=True)
class RetentionPolicy:
    """Point-in-time view of all policy fields."""

    retention_days: int = DEFAULT_RETENTION_DAYS
    video_quality: VideoQuality = DEFAULT_VIDEO_QUALITY
    notify_on_cleanup: bool = DEFAULT_NOTIFY_ON_CLEANUP
    last_lens_facing: LensFacing = DEFAULT_LENS_FACING
    last_flash_mode: FlashMode = DEFAULT_FLASH_MODE


class PolicyStore:
    """Independently settable policy fields with documented defaults."""

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    @property
    def retention_days(self) -> int:
        raw = self._read(RETENTION_DAYS)
        if raw is None:
            return DEFAULT_RETENTION_DAYS
        try:
            days = int(raw)
        except ValueError:
            LOGGER.warning("Ignoring corrupt %s value %r", RETENTION_DAYS, raw)
            return DEFAULT_RETENTION_DAYS
        return days if days > 0 else DEFAULT_RETENTION_DAYS

    def set_retention_days(self, days: int) -> None:
        if isinstance(days, bool) or not isinstance(days, int) or days <= 0:
            raise ValueError(f"retention_days must be a positive integer, got {days!r}")
        self._write(RETENTION_DAYS, str(days))

    @property
    def video_quality(self) -> VideoQuality:
        return self._read_enum(VIDEO_QUALITY, VideoQuality, DEFAULT_VIDEO_QUALITY)

    def set_video_quality(self, quality: VideoQuality) -> None:
        self._write(VIDEO_QUALITY, VideoQuality(quality).value)

    @property
    def notify_on_cleanup(self) -> bool:
        raw = self._read(NOTIFY_ON_CLEANUP)
        if raw is None:
            return DEFAULT_NOTIFY_ON_CLEANUP
        return raw == "1"

    def set_notify_on_cleanup(self, enabled: bool) -> None:
        self._write(NOTIFY_ON_CLEANUP, "1" if enabled else "0")

    @property
    def last_lens_facing(self) -> LensFacing:
        return self._read_enum(LAST_LENS_FACING, LensFacing, DEFAULT_LENS_FACING)

    def set_last_lens_facing(self, facing: LensFacing) -> None:
        self._write(LAST_LENS_FACING, LensFacing(facing).value)

    @property
    def last_flash_mode(self) -> FlashMode:
        return self._read_enum(LAST_FLASH_MODE, FlashMode, DEFAULT_FLASH_MODE)

    def set_last_flash_mode(self, mode: FlashMode) -> None:
        self._write(LAST_FLASH_MODE, FlashMode(mode).value)

    def snapshot(self) -> RetentionPolicy:
        return RetentionPolicy(
            retention_days=self.retention_days,
            video_quality=self.video_quality,
            notify_on_cleanup=self.notify_on_cleanup,
            last_lens_facing=self.last_lens_facing,
            last_flash_mode=self.last_flash_mode,
        )

    def _read_enum(self, key: str, enum_type: type[E], default: E) -> E:
        raw = self._read(key)
        if raw is None:
            return default
        try:
            return enum_type(raw)
        except ValueError:
            LOGGER.warning("Ignoring corrupt %s value %r", key, raw)
            return default

    def _read(self, key: str) -> str | None:
        with session_scope(self._session_factory) as session:
            return session.execute(
                select(PolicySetting.value).where(PolicySetting.key == key)
            ).scalar_one_or_none()

    def _write(self, key: str, value: str) -> None:
        with session_scope(self._session_factory) as session:
            row = session.get(PolicySetting, key)
            if row is None:
                session.add(PolicySetting(key=key, value=value))
            else:
                row.value = value
        LOGGER.debug("Policy %s set to %s", key, value)
