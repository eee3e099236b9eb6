from __future__ import annotations

from datetime import timedelta
import unittest

from tempsnap.enums import MediaKind
from tests.support import T0, make_store


class InsertTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store, self.policy, self.clock = make_store()

    def test_insert_uses_default_retention_of_seven_days(self) -> None:
        record_id = self.store.insert("file:///media/TEMP_1.jpg", MediaKind.PHOTO)

        record = self.store.get(record_id)
        self.assertEqual(record.created_at, T0)
        self.assertEqual(record.expires_at, T0 + timedelta(days=7))
        self.assertEqual(record.kind, MediaKind.PHOTO)
        self.assertEqual(record.duration_ms, 0)

    def test_expiry_is_fixed_at_insert_time(self) -> None:
        self.policy.set_retention_days(3)
        record_id = self.store.insert("file:///media/a.jpg", MediaKind.PHOTO)

        self.policy.set_retention_days(30)

        record = self.store.get(record_id)
        self.assertEqual(record.expires_at - record.created_at, timedelta(days=3))

    def test_later_policy_applies_only_to_later_inserts(self) -> None:
        self.policy.set_retention_days(1)
        first = self.store.insert("file:///media/a.jpg", MediaKind.PHOTO)
        self.policy.set_retention_days(14)
        second = self.store.insert("file:///media/b.mp4", MediaKind.VIDEO, 4200)

        self.assertEqual(self.store.get(first).expires_at, T0 + timedelta(days=1))
        self.assertEqual(self.store.get(second).expires_at, T0 + timedelta(days=14))
        self.assertEqual(self.store.get(second).duration_ms, 4200)

    def test_negative_duration_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            self.store.insert("file:///media/a.mp4", MediaKind.VIDEO, -1)

    def test_ids_are_not_reused_after_delete(self) -> None:
        first = self.store.insert("file:///media/a.jpg", MediaKind.PHOTO)
        self.store.delete_by_id(first)

        second = self.store.insert("file:///media/b.jpg", MediaKind.PHOTO)

        self.assertGreater(second, first)


class QueryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store, self.policy, self.clock = make_store()
        self.ids = []
        for name in ("a", "b", "c"):
            self.ids.append(self.store.insert(f"file:///media/{name}.jpg", MediaKind.PHOTO))
            self.clock.advance(minutes=1)

    def test_all_ordered_newest_first(self) -> None:
        records = self.store.all_ordered_by_created_desc()

        self.assertEqual([r.id for r in records], list(reversed(self.ids)))

    def test_latest_and_count(self) -> None:
        self.assertEqual(self.store.latest().id, self.ids[-1])
        self.assertEqual(self.store.count(), 3)

    def test_latest_is_none_when_empty(self) -> None:
        store, _, _ = make_store()

        self.assertIsNone(store.latest())
        self.assertEqual(store.count(), 0)

    def test_expired_as_of_is_strictly_before(self) -> None:
        first = self.store.get(self.ids[0])

        self.assertEqual(self.store.expired_as_of(first.expires_at), [])
        expired = self.store.expired_as_of(first.expires_at + timedelta(milliseconds=1))
        self.assertEqual([r.id for r in expired], [self.ids[0]])

    def test_expired_as_of_excludes_future_expiry(self) -> None:
        self.assertEqual(self.store.expired_as_of(T0 + timedelta(days=6)), [])
        self.assertEqual(len(self.store.expired_as_of(T0 + timedelta(days=8))), 3)


class DeleteTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store, _, _ = make_store()

    def test_delete_by_id_is_idempotent(self) -> None:
        keep = self.store.insert("file:///media/keep.jpg", MediaKind.PHOTO)
        gone = self.store.insert("file:///media/gone.jpg", MediaKind.PHOTO)

        self.assertTrue(self.store.delete_by_id(gone))
        state_after_once = self.store.all_ordered_by_created_desc()
        self.assertFalse(self.store.delete_by_id(gone))

        self.assertEqual(self.store.all_ordered_by_created_desc(), state_after_once)
        self.assertEqual([r.id for r in state_after_once], [keep])

    def test_delete_absent_id_is_noop(self) -> None:
        self.assertFalse(self.store.delete_by_id(12345))

    def test_delete_by_locator(self) -> None:
        self.store.insert("file:///media/a.jpg", MediaKind.PHOTO)
        self.store.insert("file:///media/b.jpg", MediaKind.PHOTO)

        self.assertTrue(self.store.delete_by_locator("file:///media/a.jpg"))
        self.assertFalse(self.store.delete_by_locator("file:///media/a.jpg"))

        self.assertEqual(
            [r.locator for r in self.store.all_ordered_by_created_desc()],
            ["file:///media/b.jpg"],
        )


class SubscribeTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store, _, self.clock = make_store()
        self.snapshots: list[list[int]] = []

    def _collect(self, snapshot) -> None:
        self.snapshots.append([r.id for r in snapshot])

    def test_subscriber_gets_current_snapshot_then_updates(self) -> None:
        first = self.store.insert("file:///media/a.jpg", MediaKind.PHOTO)
        self.store.subscribe(self._collect)
        self.clock.advance(seconds=5)

        second = self.store.insert("file:///media/b.jpg", MediaKind.PHOTO)
        self.store.delete_by_id(first)

        self.assertEqual(self.snapshots, [[first], [second, first], [second]])

    def test_noop_delete_does_not_publish(self) -> None:
        self.store.subscribe(self._collect)

        self.store.delete_by_id(999)

        self.assertEqual(self.snapshots, [[]])

    def test_unsubscribe_stops_updates(self) -> None:
        unsubscribe = self.store.subscribe(self._collect)
        unsubscribe()

        self.store.insert("file:///media/a.jpg", MediaKind.PHOTO)

        self.assertEqual(self.snapshots, [[]])

    def test_failing_subscriber_does_not_break_insert(self) -> None:
        def boom(snapshot) -> None:
            raise RuntimeError("render failed")

        self.store.subscribe(self._collect)
        with self.assertLogs("tempsnap.service.records", level="ERROR"):
            self.store.subscribe(boom)
            record_id = self.store.insert("file:///media/a.jpg", MediaKind.PHOTO)

        self.assertEqual(self.store.count(), 1)
        self.assertEqual(self.snapshots[-1], [record_id])


if __name__ == "__main__":
    unittest.main()
