"""History repository: bounded, deduplicated, most-recent-first log of lookups."""
import logging
from typing import List, Optional

from halal.domain.ActivityRecord import ActivityRecord
from halal.events.Event_Bus import EventBus, HISTORY_CHANGED, publish_if_bound
from halal.utilities.constants import MAX_HISTORY, STORAGE_KEYS

logger = logging.getLogger(__name__)


def load_records(storage, key: str) -> List[ActivityRecord]:
    """Load a persisted record list, skipping entries that cannot be parsed."""
    stored = storage.get(key, [])
    if not isinstance(stored, list):
        logger.warning(f"Ignoring '{key}' with unexpected type {type(stored).__name__}")
        return []
    records: List[ActivityRecord] = []
    seen = set()
    for entry in stored:
        try:
            record = ActivityRecord.from_dict(entry)
        except ValueError as e:
            logger.warning(f"Skipping unreadable record in '{key}': {e}")
            continue
        if record.identifier in seen:
            continue
        seen.add(record.identifier)
        records.append(record)
    return records


class HistoryStore:
    def __init__(self, storage, max_items: int = MAX_HISTORY, event_bus: Optional[EventBus] = None):
        self._storage = storage
        self._key = STORAGE_KEYS["HISTORY"]
        self.max_items = max_items
        self._event_bus = event_bus
        self._records: List[ActivityRecord] = load_records(storage, self._key)[:max_items]

    def add(self, record: ActivityRecord) -> None:
        '''
        Dedup-and-promote: drops any record with the same identifier, puts this
        one first and truncates the log to max_items.
        '''
        records = [r for r in self._records if r.identifier != record.identifier]
        records.insert(0, record)
        self._records = records[:self.max_items]
        self._persist()
        publish_if_bound(self._event_bus, HISTORY_CHANGED, {
            "count": len(self._records),
            "identifier": record.identifier
        })

    def clear(self) -> None:
        self._records = []
        if not self._storage.remove(self._key):
            logger.warning("Persisted history could not be removed")
        publish_if_bound(self._event_bus, HISTORY_CHANGED, {"count": 0, "identifier": None})

    def get_items(self) -> List[ActivityRecord]:
        '''
        Returns the history, most recent first.
        '''
        return list(self._records)

    def _persist(self) -> None:
        if not self._storage.set(self._key, [r.to_dict() for r in self._records]):
            logger.warning("History could not be persisted; keeping it in memory only")

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self):
        return iter(list(self._records))
