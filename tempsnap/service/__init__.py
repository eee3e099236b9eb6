"""Service-layer business logic."""

from .cleanup import CleanupReport, run_cleanup
from .records import MediaRecord, RetentionStore
from .remaining import Urgency, remaining_label, remaining_urgency
from .scheduler import CleanupScheduler, load_is_acceptable
from .selection import KeepSelection

__all__ = [
    "CleanupReport",
    "CleanupScheduler",
    "KeepSelection",
    "MediaRecord",
    "RetentionStore",
    "Urgency",
    "load_is_acceptable",
    "remaining_label",
    "remaining_urgency",
    "run_cleanup",
]
