"""Simple Event Bus / Observer implementation for store change notifications.

Event names used so far:
  history.changed     -> payload {"count": int, "identifier": str | None}
  favorites.changed   -> payload {"count": int, "identifier": str | None, "action": "added" | "removed" | "cleared"}
  cache.cleared       -> payload {}
  lookup.completed    -> payload {"record": ActivityRecord, "from_cache": bool}
  lookup.superseded   -> payload {"identifier": str, "token": int, "latest_token": int}
  preferences.changed -> payload {"key": str, "value": Any}

Subscribers are callables taking (event_name, payload). A bus instance is
created by the host and handed to the stores that should report mutations.
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
HISTORY_CHANGED = "history.changed"
FAVORITES_CHANGED = "favorites.changed"
CACHE_CLEARED = "cache.cleared"
LOOKUP_COMPLETED = "lookup.completed"
LOOKUP_SUPERSEDED = "lookup.superseded"
PREFERENCES_CHANGED = "preferences.changed"

Subscriber = Callable[[str, Any], None]


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Subscriber]] = defaultdict(list)

	def subscribe(self, event_name: str, callback: Subscriber):
		if callback not in self._subscribers[event_name]:
			self._subscribers[event_name].append(callback)

	def unsubscribe(self, event_name: str, callback: Subscriber):
		try:
			self._subscribers[event_name].remove(callback)
		except (ValueError, KeyError):
			pass

	def publish(self, event_name: str, payload: Any = None):
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				cb(event_name, payload)
			except Exception:
				logger.exception(f"Error delivering {event_name} to {cb!r}")


def publish_if_bound(bus: EventBus | None, event_name: str, payload: Any = None) -> None:
	"""Publish on the bus when the caller was given one."""
	if bus is not None:
		bus.publish(event_name, payload)


__all__ = [
	'EventBus', 'Subscriber', 'publish_if_bound',
	'HISTORY_CHANGED', 'FAVORITES_CHANGED', 'CACHE_CLEARED',
	'LOOKUP_COMPLETED', 'LOOKUP_SUPERSEDED', 'PREFERENCES_CHANGED'
]
