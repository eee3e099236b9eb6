"""Periodic scheduling of the cleanup sweep."""

from __future__ import annotations

from datetime import timedelta
import logging
import os
import threading
import time
from typing import Callable

from tempsnap.media import MediaDeleter
from tempsnap.notify import CleanupNotifier
from tempsnap.policy import PolicyStore

from .cleanup import CleanupReport, run_cleanup
from .records import RetentionStore


LOGGER = logging.getLogger(__name__)


def load_is_acceptable(max_load: float) -> Callable[[], bool]:
    """Constraint that holds while the 1-minute load average stays under ``max_load``."""

    def check() -> bool:
        try:
            load_1m, _, _ = os.getloadavg()
        except (AttributeError, OSError):
            return True
        return load_1m <= max_load

    return check


class CleanupScheduler:
    """Runs the cleanup sweep with at most one invocation in flight."""

    def __init__(
        self,
        store: RetentionStore,
        policy: PolicyStore,
        deleter: MediaDeleter,
        notifier: CleanupNotifier,
        interval: timedelta = timedelta(hours=6),
        constraint: Callable[[], bool] | None = None,
    ) -> None:
        self._store = store
        self._policy = policy
        self._deleter = deleter
        self._notifier = notifier
        self.interval = interval
        self._constraint = constraint or (lambda: True)
        self._running = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._running.locked()

    def trigger(self) -> CleanupReport | None:
        """Run one sweep now; returns None when another sweep is already running."""
        if not self._running.acquire(blocking=False):
            LOGGER.info("Cleanup already in progress; skipping")
            return None
        try:
            return run_cleanup(self._store, self._policy, self._deleter, self._notifier)
        finally:
            self._running.release()

    def run_once(self) -> CleanupReport | None:
        """Scheduled tick: sweep unless the host is resource constrained."""
        if not self._constraint():
            LOGGER.info("Host is resource constrained; deferring cleanup")
            return None
        return self.trigger()

    def run_forever(self, sleep: Callable[[float], None] = time.sleep) -> None:
        LOGGER.info("Starting cleanup worker with interval=%s", self.interval)
        while True:
            loop_started = time.monotonic()
            try:
                report = self.run_once()
                if report is not None and report.expired:
                    LOGGER.info(
                        "Cleanup done; expired=%s deleted=%s failed=%s",
                        report.expired,
                        report.deleted,
                        report.failed,
                    )
            except Exception as exc:
                LOGGER.exception("Cleanup iteration failed: %s", exc)

            elapsed = time.monotonic() - loop_started
            sleep(max(0.0, self.interval.total_seconds() - elapsed))

