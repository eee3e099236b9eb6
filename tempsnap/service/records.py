"""Retention record store: tracked captures and their expiry."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
import logging
import threading
from typing import Callable, TypeAlias

from sqlalchemy import delete, desc, func, select

from tempsnap.clock import MS_PER_DAY, Clock, from_epoch_ms, to_epoch_ms, utc_now
from tempsnap.db.models import MediaItem
from tempsnap.db.session import SessionFactory, session_scope
from tempsnap.enums import MediaKind
from tempsnap.policy import PolicyStore


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MediaRecord:
    """Immutable, session-detached view of one tracked asset."""

    id: int
    locator: str
    kind: MediaKind
    created_at_ms: int
    expires_at_ms: int
    duration_ms: int = 0

    @property
    def created_at(self) -> datetime:
        return from_epoch_ms(self.created_at_ms)

    @property
    def expires_at(self) -> datetime:
        return from_epoch_ms(self.expires_at_ms)

    def remaining(self, now: datetime) -> timedelta:
        return timedelta(milliseconds=self.expires_at_ms - to_epoch_ms(now))

    @classmethod
    def from_row(cls, row: MediaItem) -> MediaRecord:
        return cls(
            id=row.id,
            locator=row.locator,
            kind=MediaKind(row.media_type),
            created_at_ms=row.created_at_ms,
            expires_at_ms=row.expires_at_ms,
            duration_ms=row.duration_ms,
        )


Snapshot: TypeAlias = list[MediaRecord]
Subscriber: TypeAlias = Callable[[Snapshot], None]


class RetentionStore:
    """Durable table of tracked captures.

    Records are only ever inserted or deleted, never updated. Each public
    operation runs in its own transaction. Subscribers receive the full
    newest-first list after every change that touched a row.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        policy: PolicyStore,
        clock: Clock = utc_now,
    ) -> None:
        self._session_factory = session_factory
        self._policy = policy
        self._clock = clock
        self._subscribers: list[Subscriber] = []
        # serialises write + publish so subscribers see snapshots in commit order
        self._write_lock = threading.RLock()

    def insert(self, locator: str, kind: MediaKind, duration_ms: int = 0) -> int:
        """Track a new capture; expiry uses the retention days in effect right now."""
        if duration_ms < 0:
            raise ValueError(f"duration_ms must be non-negative, got {duration_ms}")
        kind = MediaKind(kind)
        retention_days = self._policy.retention_days
        created_at_ms = to_epoch_ms(self._clock())
        expires_at_ms = created_at_ms + retention_days * MS_PER_DAY

        with self._write_lock:
            with session_scope(self._session_factory) as session:
                row = MediaItem(
                    locator=locator,
                    media_type=kind.value,
                    created_at_ms=created_at_ms,
                    expires_at_ms=expires_at_ms,
                    duration_ms=duration_ms,
                )
                session.add(row)
                session.flush()
                record_id = row.id
            LOGGER.info(
                "Tracking %s id=%s locator=%s retention_days=%s",
                kind.value,
                record_id,
                locator,
                retention_days,
            )
            self._publish()
        return record_id

    def all_ordered_by_created_desc(self) -> Snapshot:
        with session_scope(self._session_factory) as session:
            rows = session.execute(
                select(MediaItem).order_by(desc(MediaItem.created_at_ms), desc(MediaItem.id))
            ).scalars().all()
            return [MediaRecord.from_row(row) for row in rows]

    def latest(self) -> MediaRecord | None:
        with session_scope(self._session_factory) as session:
            row = session.execute(
                select(MediaItem)
                .order_by(desc(MediaItem.created_at_ms), desc(MediaItem.id))
                .limit(1)
            ).scalar_one_or_none()
            return MediaRecord.from_row(row) if row is not None else None

    def count(self) -> int:
        with session_scope(self._session_factory) as session:
            return int(session.execute(select(func.count(MediaItem.id))).scalar_one())

    def get(self, record_id: int) -> MediaRecord | None:
        with session_scope(self._session_factory) as session:
            row = session.get(MediaItem, record_id)
            return MediaRecord.from_row(row) if row is not None else None

    def expired_as_of(self, now: datetime) -> Snapshot:
        """Records whose expiry is strictly before ``now``; order is unspecified."""
        cutoff_ms = to_epoch_ms(now)
        with session_scope(self._session_factory) as session:
            rows = session.execute(
                select(MediaItem).where(MediaItem.expires_at_ms < cutoff_ms)
            ).scalars().all()
            return [MediaRecord.from_row(row) for row in rows]

    def delete_by_id(self, record_id: int) -> bool:
        """Stop tracking a record. Absent ids are a no-op; returns whether a row went away."""
        return self._delete(delete(MediaItem).where(MediaItem.id == record_id))

    def delete_by_locator(self, locator: str) -> bool:
        return self._delete(delete(MediaItem).where(MediaItem.locator == locator))

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register for snapshots; the current one is delivered immediately."""
        with self._write_lock:
            self._subscribers.append(callback)
            self._deliver(callback, self.all_ordered_by_created_desc())

        def unsubscribe() -> None:
            with self._write_lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def _delete(self, stmt) -> bool:
        with self._write_lock:
            with session_scope(self._session_factory) as session:
                result = session.execute(stmt)
                removed = int(result.rowcount or 0)
            if removed:
                self._publish()
        return removed > 0

    def _publish(self) -> None:
        if not self._subscribers:
            return
        snapshot = self.all_ordered_by_created_desc()
        for callback in list(self._subscribers):
            self._deliver(callback, list(snapshot))

    @staticmethod
    def _deliver(callback: Subscriber, snapshot: Snapshot) -> None:
        try:
            callback(snapshot)
        except Exception:
            LOGGER.exception("Record subscriber %r failed", callback)
