"""Selection and keep-forever for the record list."""

from __future__ import annotations

import logging
import threading

from .records import RetentionStore, Snapshot


LOGGER = logging.getLogger(__name__)


class KeepSelection:
    """Selected record ids for one list view.

    Keeping a record removes it from tracking without touching its file, so
    it falls out of the cleanup sweep for good.
    """

    def __init__(self, store: RetentionStore) -> None:
        self._store = store
        self._lock = threading.Lock()
        self._selected: set[int] = set()
        self.items: Snapshot = []
        self._unsubscribe = store.subscribe(self._on_snapshot)

    @property
    def selected(self) -> frozenset[int]:
        with self._lock:
            return frozenset(self._selected)

    def toggle(self, record_id: int) -> bool:
        """Flip selection of ``record_id``; returns whether it is now selected."""
        with self._lock:
            if record_id in self._selected:
                self._selected.discard(record_id)
                return False
            self._selected.add(record_id)
            return True

    def select(self, record_ids) -> None:
        with self._lock:
            self._selected.update(record_ids)

    def clear(self) -> None:
        with self._lock:
            self._selected.clear()

    def keep_selected(self) -> int:
        with self._lock:
            selected = sorted(self._selected)
            self._selected.clear()
        kept = sum(1 for record_id in selected if self._store.delete_by_id(record_id))
        LOGGER.info("Kept %s of %s selected items forever", kept, len(selected))
        return kept

    def close(self) -> None:
        self._unsubscribe()
        self.clear()

    def _on_snapshot(self, snapshot: Snapshot) -> None:
        self.items = snapshot
        present = {record.id for record in snapshot}
        with self._lock:
            self._selected &= present
