"""Runtime configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass
import os


@dataclass(frozen=True)
class AppSettings:
    """Environment-backed settings for worker, scripts and web app."""

    database_url: str
    media_root: str
    cleanup_interval_hours: int
    cleanup_max_load: float
    ffmpeg_bin: str
    capture_input_format: str
    back_camera_device: str
    front_camera_device: str
    capture_timeout_seconds: int


DEFAULT_DATABASE_URL = "sqlite:///tempsnap.db"
DEFAULT_MEDIA_ROOT = "~/TempSnap"


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise RuntimeError(f"Invalid integer for {name}: {value}") from exc


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise RuntimeError(f"Invalid float for {name}: {value}") from exc


def load_settings() -> AppSettings:
    """Load all app settings from the environment."""
    return AppSettings(
        database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
        media_root=os.getenv("MEDIA_ROOT", DEFAULT_MEDIA_ROOT),
        cleanup_interval_hours=_env_int("CLEANUP_INTERVAL_HOURS", 6),
        cleanup_max_load=_env_float("CLEANUP_MAX_LOAD", 4.0),
        ffmpeg_bin=os.getenv("FFMPEG_BIN", "ffmpeg"),
        capture_input_format=os.getenv("CAPTURE_INPUT_FORMAT", "v4l2"),
        back_camera_device=os.getenv("BACK_CAMERA_DEVICE", "/dev/video0"),
        front_camera_device=os.getenv("FRONT_CAMERA_DEVICE", "/dev/video1"),
        capture_timeout_seconds=_env_int("CAPTURE_TIMEOUT_SECONDS", 30),
    )
