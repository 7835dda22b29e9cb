"""Favorites repository: deduplicated, most-recently-added-first saved products."""
import logging
from typing import List, Optional

from halal.domain.ActivityRecord import ActivityRecord
from halal.events.Event_Bus import EventBus, FAVORITES_CHANGED, publish_if_bound
from halal.infra.History_Repository import load_records
from halal.utilities.constants import STORAGE_KEYS

logger = logging.getLogger(__name__)


class FavoritesStore:
    def __init__(self, storage, event_bus: Optional[EventBus] = None):
        self._storage = storage
        self._key = STORAGE_KEYS["FAVORITES"]
        self._event_bus = event_bus
        self._records: List[ActivityRecord] = load_records(storage, self._key)

    def add(self, record: ActivityRecord) -> None:
        records = [r for r in self._records if r.identifier != record.identifier]
        records.insert(0, record)
        self._records = records
        self._persist()
        self._notify(record.identifier, "added")

    def remove(self, identifier: str) -> None:
        self._records = [r for r in self._records if r.identifier != identifier]
        self._persist()
        self._notify(identifier, "removed")

    def contains(self, identifier: str) -> bool:
        return any(r.identifier == identifier for r in self._records)

    __contains__ = contains

    def get(self, identifier: str) -> Optional[ActivityRecord]:
        for record in self._records:
            if record.identifier == identifier:
                return record
        return None

    def get_items(self) -> List[ActivityRecord]:
        return list(self._records)

    def clear(self) -> None:
        self._records = []
        if not self._storage.remove(self._key):
            logger.warning("Persisted favorites could not be removed")
        publish_if_bound(self._event_bus, FAVORITES_CHANGED, {"count": 0, "identifier": None, "action": "cleared"})

    def _persist(self) -> None:
        if not self._storage.set(self._key, [r.to_dict() for r in self._records]):
            logger.warning("Favorites could not be persisted; keeping them in memory only")

    def _notify(self, identifier: str, action: str) -> None:
        publish_if_bound(self._event_bus, FAVORITES_CHANGED, {
            "count": len(self._records),
            "identifier": identifier,
            "action": action
        })

    def __len__(self) -> int:
        return len(self._records)
