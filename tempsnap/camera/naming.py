"""Destination naming for new captures: ``DCIM/TempSnap/TEMP_<timestamp>.<ext>``."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Final

from tempsnap.clock import Clock, utc_now
from tempsnap.enums import MediaKind


MEDIA_FOLDER: Final[str] = "DCIM/TempSnap"
FILE_PREFIX: Final[str] = "TEMP_"
TIMESTAMP_FORMAT: Final[str] = "%Y%m%d_%H%M%S"
EXTENSIONS: Final[dict[MediaKind, str]] = {
    MediaKind.PHOTO: "jpg",
    MediaKind.VIDEO: "mp4",
}
MIME_TYPES: Final[dict[MediaKind, str]] = {
    MediaKind.PHOTO: "image/jpeg",
    MediaKind.VIDEO: "video/mp4",
}


def capture_file_name(kind: MediaKind, when: datetime, index: int = 0) -> str:
    stem = f"{FILE_PREFIX}{when.strftime(TIMESTAMP_FORMAT)}"
    if index:
        stem = f"{stem}_{index}"
    return f"{stem}.{EXTENSIONS[kind]}"


class DestinationNamer:
    """Builds destination paths for captures below a media root."""

    def __init__(self, media_root: str | Path, clock: Clock = utc_now) -> None:
        self.media_root = Path(media_root).expanduser()
        self._clock = clock

    @property
    def folder(self) -> Path:
        return self.media_root / MEDIA_FOLDER

    def destination(self, kind: MediaKind) -> Path:
        """First free ``TEMP_<timestamp>[_<n>]`` path for a capture taken now."""
        # local time, like a phone gallery
        when = self._clock().astimezone()
        index = 0
        candidate = self.folder / capture_file_name(kind, when)
        while candidate.exists():
            index += 1
            candidate = self.folder / capture_file_name(kind, when, index)
        return candidate
