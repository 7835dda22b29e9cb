import unittest
import tempfile
import shutil
from pathlib import Path

from halal.events.Event_Bus import EventBus, CACHE_CLEARED
from halal.infra.Json_Storage import JsonStorage
from halal.infra.Product_Cache import ProductCache
from halal.utilities.constants import CACHE_DURATION_MS, STORAGE_KEYS

HOUR = 60 * 60 * 1000


class FakeClock:
    def __init__(self, now: int = 1_700_000_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int):
        self.now += ms


class FailingStorage:
    def __init__(self, stored=None):
        self.stored = stored

    def get(self, key, default=None):
        return default if self.stored is None else self.stored

    def set(self, key, value):
        return False

    def remove(self, key):
        return False


class TestProductCache(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = Path(tempfile.mkdtemp())
        self.storage = JsonStorage(self.tmp_dir)
        self.clock = FakeClock()
        self.cache = ProductCache(self.storage, clock=self.clock)
        self.payload = {"product_name": "Biscuits", "ingredients_text": "flour, sugar"}

    def tearDown(self):
        shutil.rmtree(self.tmp_dir, ignore_errors=True)

    def test_miss_when_empty(self):
        self.assertIsNone(self.cache.get("123"))
        self.assertNotIn("123", self.cache)

    def test_fresh_within_ttl(self):
        self.cache.put("123", self.payload)
        self.clock.advance(1 * HOUR)
        self.assertEqual(self.cache.get("123"), self.payload)

    def test_stale_after_25_hours(self):
        self.cache.put("123", self.payload)
        self.clock.advance(25 * HOUR)
        self.assertIsNone(self.cache.get("123"))

    def test_exactly_24_hours_is_stale(self):
        self.cache.put("123", self.payload)
        self.clock.advance(CACHE_DURATION_MS)
        self.assertIsNone(self.cache.get("123"))
        self.clock.now -= 1
        self.assertEqual(self.cache.get("123"), self.payload)

    def test_stale_entries_are_not_swept(self):
        self.cache.put("123", self.payload)
        self.clock.advance(48 * HOUR)
        self.assertIsNone(self.cache.get("123"))
        self.assertEqual(len(self.cache), 1)

    def test_put_overwrites_and_refreshes(self):
        self.cache.put("123", self.payload)
        self.clock.advance(23 * HOUR)
        newer = dict(self.payload, product_name="Biscuits v2")
        self.cache.put("123", newer)
        self.clock.advance(23 * HOUR)
        self.assertEqual(self.cache.get("123"), newer)

    def test_put_persists_full_map(self):
        self.cache.put("1", {"a": 1})
        self.cache.put("2", {"b": 2})
        stored = self.storage.get(STORAGE_KEYS["CACHE"], {})
        self.assertEqual(set(stored), {"1", "2"})
        self.assertEqual(stored["1"], {"data": {"a": 1}, "timestamp": self.clock.now})

    def test_loaded_once_from_storage(self):
        self.cache.put("123", self.payload)
        reloaded = ProductCache(self.storage, clock=self.clock)
        self.assertEqual(reloaded.get("123"), self.payload)

    def test_malformed_persisted_entries_are_dropped(self):
        self.storage.set(STORAGE_KEYS["CACHE"], {
            "ok": {"data": {"x": 1}, "timestamp": self.clock.now},
            "no_ts": {"data": {"x": 2}},
            "junk": "string",
        })
        cache = ProductCache(self.storage, clock=self.clock)
        self.assertEqual(len(cache), 1)
        self.assertEqual(cache.get("ok"), {"x": 1})

    def test_non_finite_timestamps_are_dropped(self):
        self.storage.path_for(STORAGE_KEYS["CACHE"]).write_text(
            '{"ok": {"data": {"x": 1}, "timestamp": ' + str(self.clock.now) + '},'
            ' "nan": {"data": {}, "timestamp": NaN},'
            ' "inf": {"data": {}, "timestamp": Infinity},'
            ' "huge": {"data": {}, "timestamp": 1e400},'
            ' "list": [1, 2]}',
            encoding="utf-8")
        cache = ProductCache(self.storage, clock=self.clock)
        self.assertEqual(len(cache), 1)
        self.assertEqual(cache.get("ok"), {"x": 1})

    def test_non_dict_persisted_cache_starts_empty(self):
        self.storage.set(STORAGE_KEYS["CACHE"], ["not", "a", "map"])
        self.assertEqual(len(ProductCache(self.storage, clock=self.clock)), 0)

    def test_clear_removes_memory_and_persisted_entry(self):
        bus = EventBus()
        events = []
        bus.subscribe(CACHE_CLEARED, lambda name, payload: events.append(name))
        cache = ProductCache(self.storage, clock=self.clock, event_bus=bus)
        cache.put("123", self.payload)
        cache.clear()
        self.assertIsNone(cache.get("123"))
        self.assertFalse(self.storage.path_for(STORAGE_KEYS["CACHE"]).exists())
        self.assertEqual(events, [CACHE_CLEARED])

    def test_persistence_failure_keeps_memory_authoritative(self):
        cache = ProductCache(FailingStorage(), clock=self.clock)
        cache.put("123", self.payload)
        self.assertEqual(cache.get("123"), self.payload)
        cache.clear()
        self.assertIsNone(cache.get("123"))


if __name__ == '__main__':
    unittest.main()
