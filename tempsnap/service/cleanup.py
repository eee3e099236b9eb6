"""Expired media cleanup sweep."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
import logging

from tempsnap.clock import utc_now
from tempsnap.media import DeletionOutcome, MediaDeleter
from tempsnap.notify import CleanupNotifier
from tempsnap.policy import PolicyStore

from .records import RetentionStore


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class CleanupReport:
    """Result of one sweep; every expired record is untracked regardless of outcome."""

    swept_at: datetime
    expired: int = 0
    outcomes: dict[DeletionOutcome, int] = field(default_factory=dict)
    notified: bool = False

    @property
    def deleted(self) -> int:
        return self.outcomes.get(DeletionOutcome.SUCCESS, 0)

    @property
    def failed(self) -> int:
        return self.expired - self.deleted


def run_cleanup(
    store: RetentionStore,
    policy: PolicyStore,
    deleter: MediaDeleter,
    notifier: CleanupNotifier,
    now: datetime | None = None,
) -> CleanupReport:
    """Delete expired captures and stop tracking them.

    Each expired record is removed from the store after one deletion attempt,
    whatever the outcome, so an undeletable file is never retried. Only
    successful deletions are counted toward the notification.
    """
    now = now or utc_now()
    expired = store.expired_as_of(now)
    if not expired:
        return CleanupReport(swept_at=now)

    notify = policy.notify_on_cleanup
    outcomes: Counter[DeletionOutcome] = Counter()
    for record in expired:
        outcome = DeletionOutcome.OTHER_ERROR
        try:
            outcome = deleter.delete(record.locator)
        except Exception:
            LOGGER.exception("Deleting %s raised", record.locator)
        finally:
            store.delete_by_id(record.id)
        outcomes[outcome] += 1
        if outcome is not DeletionOutcome.SUCCESS:
            LOGGER.info("Untracked id=%s without deleting file (%s)", record.id, outcome.value)

    deleted = outcomes[DeletionOutcome.SUCCESS]
    notified = False
    if notify and deleted > 0:
        try:
            notifier.notify(deleted)
            notified = True
        except Exception:
            LOGGER.exception("Cleanup notification failed")

    LOGGER.info("Cleanup swept=%s deleted=%s", len(expired), deleted)
    return CleanupReport(
        swept_at=now,
        expired=len(expired),
        outcomes=dict(outcomes),
        notified=notified,
    )
