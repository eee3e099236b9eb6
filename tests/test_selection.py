from __future__ import annotations

from datetime import timedelta
import unittest

from tempsnap.enums import MediaKind
from tempsnap.service import KeepSelection, Urgency, remaining_label, remaining_urgency, run_cleanup
from tests.support import T0, RecordingDeleter, RecordingNotifier, make_store


class KeepSelectionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store, self.policy, self.clock = make_store()
        self.deleter = RecordingDeleter()
        self.a = self.store.insert("file:///m/a.jpg", MediaKind.PHOTO)
        self.clock.advance(seconds=1)
        self.b = self.store.insert("file:///m/b.jpg", MediaKind.PHOTO)
        self.selection = KeepSelection(self.store)
        self.addCleanup(self.selection.close)

    def test_items_follow_store(self) -> None:
        self.assertEqual([r.id for r in self.selection.items], [self.b, self.a])
        self.clock.advance(seconds=1)
        c = self.store.insert("file:///m/c.jpg", MediaKind.PHOTO)

        self.assertEqual([r.id for r in self.selection.items], [c, self.b, self.a])

    def test_toggle(self) -> None:
        self.assertTrue(self.selection.toggle(self.a))
        self.assertEqual(self.selection.selected, {self.a})
        self.assertFalse(self.selection.toggle(self.a))
        self.assertEqual(self.selection.selected, set())

    def test_keep_selected_untracks_without_deleting(self) -> None:
        self.selection.toggle(self.a)

        kept = self.selection.keep_selected()

        self.assertEqual(kept, 1)
        self.assertIsNone(self.store.get(self.a))
        self.assertIsNotNone(self.store.get(self.b))
        self.assertEqual(self.selection.selected, set())
        self.assertEqual(self.deleter.calls, [])

    def test_kept_item_is_out_of_sweep(self) -> None:
        self.selection.toggle(self.a)
        self.selection.keep_selected()

        run_cleanup(
            self.store, self.policy, self.deleter, RecordingNotifier(), now=T0 + timedelta(days=30)
        )

        self.assertEqual(self.deleter.calls, ["file:///m/b.jpg"])

    def test_selection_drops_ids_removed_elsewhere(self) -> None:
        self.selection.select([self.a, self.b])

        self.store.delete_by_id(self.a)

        self.assertEqual(self.selection.selected, {self.b})

    def test_keep_with_already_removed_id_counts_only_present(self) -> None:
        self.selection.select([self.b, 999])

        self.assertEqual(self.selection.keep_selected(), 1)
        self.assertEqual(self.store.count(), 1)


class RemainingTests(unittest.TestCase):
    def setUp(self) -> None:
        store, _, _ = make_store()
        self.record = store.get(store.insert("file:///m/a.jpg", MediaKind.PHOTO))
        self.expires = self.record.expires_at

    def test_labels(self) -> None:
        cases = [
            (self.expires + timedelta(minutes=1), "deleting soon"),
            (self.expires, "deleting soon"),
            (self.expires - timedelta(days=2, hours=5), "2d left"),
            (self.expires - timedelta(hours=5, minutes=30), "5h left"),
            (self.expires - timedelta(minutes=42, seconds=10), "42m left"),
        ]
        for now, expected in cases:
            with self.subTest(expected=expected):
                self.assertEqual(remaining_label(self.record, now), expected)

    def test_urgency(self) -> None:
        self.assertIs(remaining_urgency(self.record, self.expires - timedelta(minutes=30)), Urgency.CRITICAL)
        self.assertIs(remaining_urgency(self.record, self.expires - timedelta(hours=3)), Urgency.WARNING)
        self.assertIs(remaining_urgency(self.record, self.expires - timedelta(days=3)), Urgency.NORMAL)


if __name__ == "__main__":
    unittest.main()
