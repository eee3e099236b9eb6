"""Time helpers; the database keeps instants as epoch milliseconds."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, TypeAlias


Clock: TypeAlias = Callable[[], datetime]
MS_PER_DAY = 24 * 60 * 60 * 1000


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_epoch_ms(value: datetime) -> int:
    """Convert an aware (or UTC-naive) datetime to epoch milliseconds."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(round(value.timestamp() * 1000))


def from_epoch_ms(value: int) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
