"""Time-bounded product cache keyed by identifier (barcode).

Persisted under STORAGE_KEYS["CACHE"] as
    {identifier: {"data": <product payload>, "timestamp": <epoch ms>}}

The whole map is loaded once at construction and rewritten in full on every
put. Staleness is checked lazily when an entry is read.
"""
import logging
import math
from typing import Any, Dict, Optional

from halal.events.Event_Bus import EventBus, CACHE_CLEARED, publish_if_bound
from halal.utilities.clock import Clock, now_ms
from halal.utilities.constants import CACHE_DURATION_MS, STORAGE_KEYS

logger = logging.getLogger(__name__)


class ProductCache:
    def __init__(self, storage, ttl_ms: int = CACHE_DURATION_MS, clock: Clock = now_ms,
                 event_bus: Optional[EventBus] = None):
        self._storage = storage
        self._key = STORAGE_KEYS["CACHE"]
        self.ttl_ms = ttl_ms
        self._clock = clock
        self._event_bus = event_bus
        self._entries: Dict[str, Dict[str, Any]] = self._load()

    def _load(self) -> Dict[str, Dict[str, Any]]:
        stored = self._storage.get(self._key, {})
        if not isinstance(stored, dict):
            logger.warning(f"Ignoring product cache with unexpected type {type(stored).__name__}")
            return {}
        entries = {}
        for identifier, entry in stored.items():
            timestamp = entry.get("timestamp") if isinstance(entry, dict) else None
            if isinstance(timestamp, (int, float)) and math.isfinite(timestamp) and "data" in entry:
                entries[str(identifier)] = {"data": entry["data"], "timestamp": int(timestamp)}
            else:
                logger.warning(f"Dropping malformed cache entry for {identifier}")
        return entries

    def _is_fresh(self, entry: Dict[str, Any]) -> bool:
        return self._clock() - entry["timestamp"] < self.ttl_ms

    def get(self, identifier: str) -> Optional[Any]:
        '''Returns the cached payload if present and fresh, otherwise None (a miss).'''
        entry = self._entries.get(identifier)
        if entry is None:
            return None
        if not self._is_fresh(entry):
            logger.debug(f"Cache entry for {identifier} is stale")
            return None
        return entry["data"]

    def put(self, identifier: str, payload: Any) -> None:
        '''Stores the payload stamped with the current time and persists the full map.'''
        self._entries[identifier] = {"data": payload, "timestamp": self._clock()}
        if not self._storage.set(self._key, self._entries):
            logger.warning("Product cache could not be persisted; keeping it in memory only")

    def clear(self) -> None:
        self._entries = {}
        if not self._storage.remove(self._key):
            logger.warning("Persisted product cache could not be removed")
        publish_if_bound(self._event_bus, CACHE_CLEARED, {})

    def __contains__(self, identifier: str) -> bool:
        return self.get(identifier) is not None

    def __len__(self) -> int:
        return len(self._entries)
