"""Cleanup notifications."""

from __future__ import annotations

from typing import Protocol
import logging


LOGGER = logging.getLogger(__name__)


class CleanupNotifier(Protocol):
    def notify(self, count: int) -> None: ...


class LoggingNotifier:
    """Reports cleanup summaries through the application log."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or LOGGER

    def notify(self, count: int) -> None:
        self._logger.info("Cleaned up %s expired files", count)
