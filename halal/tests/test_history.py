import json
import unittest
import tempfile
import shutil
from pathlib import Path

from halal.domain.ActivityRecord import ActivityRecord
from halal.events.Event_Bus import EventBus, HISTORY_CHANGED
from halal.infra.History_Repository import HistoryStore
from halal.infra.Json_Storage import JsonStorage
from halal.logic.classification.engine import classify
from halal.utilities.constants import MAX_HISTORY, STORAGE_KEYS


def make_record(code: str, ts: int, text: str = "water, salt") -> ActivityRecord:
    return ActivityRecord(code, {"product_name": f"Product {code}", "ingredients_text": text},
                          classify(text, [], []), ts)


class TestHistoryStore(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = Path(tempfile.mkdtemp())
        self.storage = JsonStorage(self.tmp_dir)
        self.history = HistoryStore(self.storage)

    def tearDown(self):
        shutil.rmtree(self.tmp_dir, ignore_errors=True)

    def test_starts_empty(self):
        self.assertEqual(self.history.get_items(), [])

    def test_dedup_and_promote(self):
        self.history.add(make_record("A", 1))
        self.history.add(make_record("B", 2))
        self.history.add(make_record("A", 3))
        items = self.history.get_items()
        self.assertEqual([(r.identifier, r.recorded_at) for r in items], [("A", 3), ("B", 2)])

    def test_same_identifier_twice_keeps_one_entry_first(self):
        self.history.add(make_record("A", 1))
        self.history.add(make_record("A", 2))
        items = self.history.get_items()
        self.assertEqual(len(items), 1)
        self.assertEqual(items[0].recorded_at, 2)

    def test_bounded_to_max_history(self):
        for i in range(MAX_HISTORY + 25):
            self.history.add(make_record(str(i), i))
            self.assertLessEqual(len(self.history), MAX_HISTORY)
        items = self.history.get_items()
        self.assertEqual(len(items), MAX_HISTORY)
        self.assertEqual(items[0].identifier, str(MAX_HISTORY + 24))
        self.assertEqual(items[-1].identifier, "25")

    def test_promoting_existing_entry_does_not_drop_tail(self):
        for i in range(MAX_HISTORY):
            self.history.add(make_record(str(i), i))
        self.history.add(make_record("0", 999))
        items = self.history.get_items()
        self.assertEqual(len(items), MAX_HISTORY)
        self.assertEqual(items[0].identifier, "0")
        self.assertEqual(items[-1].identifier, "1")

    def test_persists_and_reloads(self):
        self.history.add(make_record("A", 1))
        self.history.add(make_record("B", 2, "gelatin"))
        reloaded = HistoryStore(self.storage).get_items()
        self.assertEqual([r.identifier for r in reloaded], ["B", "A"])
        self.assertEqual(reloaded[0].classification.verdict, "haram")

    def test_persisted_shape(self):
        self.history.add(make_record("A", 5))
        stored = self.storage.get(STORAGE_KEYS["HISTORY"], [])
        self.assertEqual(set(stored[0]), {"code", "p", "cls", "additives", "timestamp"})
        self.assertEqual(stored[0]["code"], "A")
        self.assertEqual(stored[0]["timestamp"], 5)

    def test_clear(self):
        self.history.add(make_record("A", 1))
        self.history.clear()
        self.assertEqual(self.history.get_items(), [])
        self.assertFalse(self.storage.path_for(STORAGE_KEYS["HISTORY"]).exists())
        self.assertEqual(HistoryStore(self.storage).get_items(), [])

    def test_unreadable_records_are_skipped_on_load(self):
        good = make_record("A", 1).to_dict()
        self.storage.set(STORAGE_KEYS["HISTORY"], [good, {"code": ""}, "junk", {"code": "B", "cls": {"verdict": "?"}}])
        items = HistoryStore(self.storage).get_items()
        self.assertEqual([r.identifier for r in items], ["A"])

    def test_out_of_range_timestamps_load_as_zero(self):
        record = make_record("A", 1).to_dict()
        text = json.dumps([dict(record, code="A"), dict(record, code="B")])
        text = text.replace('"timestamp": 1}, {', '"timestamp": Infinity}, {', 1)
        text = text.replace('"timestamp": 1}]', '"timestamp": 1e400}]', 1)
        self.storage.path_for(STORAGE_KEYS["HISTORY"]).write_text(text, encoding="utf-8")
        items = HistoryStore(self.storage).get_items()
        self.assertEqual([(r.identifier, r.recorded_at) for r in items], [("A", 0), ("B", 0)])

    def test_get_items_returns_a_copy(self):
        self.history.add(make_record("A", 1))
        self.history.get_items().clear()
        self.assertEqual(len(self.history), 1)

    def test_publishes_changes(self):
        bus = EventBus()
        seen = []
        bus.subscribe(HISTORY_CHANGED, lambda name, payload: seen.append(payload))
        history = HistoryStore(self.storage, event_bus=bus)
        history.add(make_record("A", 1))
        history.clear()
        self.assertEqual(seen, [{"count": 1, "identifier": "A"}, {"count": 0, "identifier": None}])

    def test_failing_subscriber_does_not_break_add(self):
        bus = EventBus()

        def broken(name, payload):
            raise RuntimeError("boom")

        bus.subscribe(HISTORY_CHANGED, broken)
        history = HistoryStore(self.storage, event_bus=bus)
        history.add(make_record("A", 1))
        self.assertEqual(len(history), 1)


if __name__ == '__main__':
    unittest.main()
