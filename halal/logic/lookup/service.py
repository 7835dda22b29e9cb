"""Lookup orchestration: cache, product source, classification and history.

Only `lookup` awaits (on the product source); every store operation it
performs is synchronous. Overlapping lookups follow a latest-request-wins
rule: each call takes a token, and a result whose token is no longer the
latest is cached but otherwise discarded (LookupSuperseded).
"""
from __future__ import annotations
import logging
from typing import Optional

from halal.domain.ActivityRecord import ActivityRecord
from halal.domain.Errors import LookupSuperseded
from halal.domain.Product import ProductEvidence
from halal.events.Event_Bus import EventBus, LOOKUP_COMPLETED, LOOKUP_SUPERSEDED, publish_if_bound
from halal.infra.Favorites_Repository import FavoritesStore
from halal.infra.History_Repository import HistoryStore
from halal.infra.Product_Cache import ProductCache
from halal.infra.Product_Source import ProductSource
from halal.logic.classification.engine import classify_evidence, extract_harmful_additives
from halal.utilities.clock import Clock, now_ms
from halal.utilities.constants import DEFAULT_LANGUAGE

logger = logging.getLogger(__name__)


def build_record(identifier: str, product: dict, recorded_at: int,
                 language: str = DEFAULT_LANGUAGE) -> ActivityRecord:
    """Classify a product payload and wrap it in an ActivityRecord."""
    evidence = ProductEvidence.from_product(product, language)
    return ActivityRecord(
        identifier=identifier,
        payload=product,
        classification=classify_evidence(evidence),
        recorded_at=recorded_at,
        harmful_additives=extract_harmful_additives(evidence.additive_tags),
    )


class LookupService:
    def __init__(self, source: ProductSource, cache: ProductCache, history: HistoryStore,
                 favorites: Optional[FavoritesStore] = None, event_bus: Optional[EventBus] = None,
                 clock: Clock = now_ms, language: str = DEFAULT_LANGUAGE):
        self.source = source
        self.cache = cache
        self.history = history
        self.favorites = favorites
        self.language = language
        self._event_bus = event_bus
        self._clock = clock
        self._latest_token = 0
        self._current: Optional[ActivityRecord] = None

    @property
    def current(self) -> Optional[ActivityRecord]:
        """Record produced by the most recent lookup that was not superseded."""
        return self._current

    async def lookup(self, identifier: str) -> ActivityRecord:
        '''
        Looks a product up (cache first), classifies it and records it in history.

        ProductNotFound / ProductNetworkError from the source propagate unchanged.
        Raises LookupSuperseded when a newer lookup started while this one waited.
        '''
        code = (identifier or "").strip()
        if not code:
            raise ValueError("A product identifier is required")

        self._latest_token += 1
        token = self._latest_token

        product = self.cache.get(code)
        from_cache = product is not None
        if not from_cache:
            logger.info(f"Cache miss for {code}, querying product source")
            product = await self.source.fetch(code)
            self.cache.put(code, product)

        if token != self._latest_token:
            logger.info(f"Discarding result for {code}: lookup {token} superseded by {self._latest_token}")
            publish_if_bound(self._event_bus, LOOKUP_SUPERSEDED, {
                "identifier": code, "token": token, "latest_token": self._latest_token
            })
            raise LookupSuperseded(code, token, self._latest_token)

        record = build_record(code, product, self._clock(), self.language)
        self._current = record
        self.history.add(record)
        publish_if_bound(self._event_bus, LOOKUP_COMPLETED, {"record": record, "from_cache": from_cache})
        return record

    def is_favorite(self, identifier: str) -> bool:
        return self.favorites is not None and self.favorites.contains(identifier)

    def toggle_favorite(self, record: ActivityRecord) -> bool:
        '''Removes the record from favorites if present, adds it otherwise. Returns the new membership.'''
        if self.favorites is None:
            raise RuntimeError("No favorites store configured")
        if self.favorites.contains(record.identifier):
            self.favorites.remove(record.identifier)
            return False
        self.favorites.add(record.stamped(self._clock()))
        return True

    def clear_cache(self) -> None:
        self.cache.clear()
