"""Human-readable time left before a record is swept."""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum

from .records import MediaRecord


class Urgency(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    NORMAL = "normal"


def remaining_label(record: MediaRecord, now: datetime) -> str:
    remaining = record.remaining(now)
    if remaining <= timedelta(0):
        return "deleting soon"
    hours = int(remaining.total_seconds() // 3600)
    days = hours // 24
    if days > 0:
        return f"{days}d left"
    if hours > 0:
        return f"{hours}h left"
    minutes = int(remaining.total_seconds() // 60)
    return f"{minutes}m left"


def remaining_urgency(record: MediaRecord, now: datetime) -> Urgency:
    remaining = record.remaining(now)
    if remaining < timedelta(hours=1):
        return Urgency.CRITICAL
    if remaining < timedelta(hours=24):
        return Urgency.WARNING
    return Urgency.NORMAL
