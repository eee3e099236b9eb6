"""Enumerations shared by the store, policy and capture session."""

from __future__ import annotations

from enum import Enum


class MediaKind(str, Enum):
    PHOTO = "photo"
    VIDEO = "video"


class VideoQuality(str, Enum):
    """Recording quality; STD is 720p, HIGH is 1080p."""

    STD = "std"
    HIGH = "high"

    @property
    def resolution(self) -> tuple[int, int]:
        if self is VideoQuality.STD:
            return 1280, 720
        return 1920, 1080


class LensFacing(str, Enum):
    BACK = "back"
    FRONT = "front"

    def flipped(self) -> LensFacing:
        return LensFacing.FRONT if self is LensFacing.BACK else LensFacing.BACK


class FlashMode(str, Enum):
    AUTO = "auto"
    ON = "on"
    OFF = "off"

    def next(self) -> FlashMode:
        """Cycle AUTO -> ON -> OFF -> AUTO."""
        if self is FlashMode.AUTO:
            return FlashMode.ON
        if self is FlashMode.ON:
            return FlashMode.OFF
        return FlashMode.AUTO


class CaptureMode(str, Enum):
    PHOTO = "photo"
    VIDEO = "video"
