"""Physical deletion of captured files."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Protocol
from urllib.parse import urlparse
from urllib.request import url2pathname
import logging


LOGGER = logging.getLogger(__name__)


class DeletionOutcome(str, Enum):
    SUCCESS = "success"
    PERMISSION_DENIED = "permission_denied"
    NOT_FOUND = "not_found"
    OTHER_ERROR = "other_error"


class MediaDeleter(Protocol):
    def delete(self, locator: str) -> DeletionOutcome: ...


def locator_to_path(locator: str) -> Path:
    """Resolve a ``file://`` URI or plain filesystem path."""
    parsed = urlparse(locator)
    if parsed.scheme == "file":
        return Path(url2pathname(parsed.path))
    if parsed.scheme and len(parsed.scheme) > 1:
        raise ValueError(f"Unsupported locator scheme: {parsed.scheme}")
    return Path(locator)


class FileMediaDeleter:
    """Deletes capture files that still live under the managed media root.

    A file that was moved out of the media root is no longer ours to delete
    and is reported as PERMISSION_DENIED.
    """

    def __init__(self, media_root: str | Path | None = None) -> None:
        self._media_root = Path(media_root).expanduser().resolve() if media_root is not None else None

    def delete(self, locator: str) -> DeletionOutcome:
        try:
            path = locator_to_path(locator)
        except ValueError as exc:
            LOGGER.warning("Cannot delete %s: %s", locator, exc)
            return DeletionOutcome.OTHER_ERROR

        if self._media_root is not None and not path.resolve().is_relative_to(self._media_root):
            return DeletionOutcome.PERMISSION_DENIED
        try:
            path.unlink()
        except FileNotFoundError:
            return DeletionOutcome.NOT_FOUND
        except PermissionError:
            return DeletionOutcome.PERMISSION_DENIED
        except OSError as exc:
            LOGGER.warning("Failed to delete %s: %s", path, exc)
            return DeletionOutcome.OTHER_ERROR
        return DeletionOutcome.SUCCESS
