"""Language and theme preferences, each persisted under its own key."""
import logging
from typing import Optional

from pydantic import ValidationError

from halal.events.Event_Bus import EventBus, PREFERENCES_CHANGED, publish_if_bound
from halal.utilities.constants import DEFAULT_LANGUAGE, STORAGE_KEYS
from halal.utilities.validators import PreferencesInput

logger = logging.getLogger(__name__)


class PreferencesStore:
    def __init__(self, storage, event_bus: Optional[EventBus] = None):
        self._storage = storage
        self._event_bus = event_bus
        self._language = self._load_language()
        self._dark_mode = self._load_dark_mode()

    def _load_language(self) -> str:
        stored = self._storage.get(STORAGE_KEYS["LANG"], DEFAULT_LANGUAGE)
        try:
            return PreferencesInput(language=stored).language
        except ValidationError:
            logger.warning(f"Ignoring stored language {stored!r}")
            return DEFAULT_LANGUAGE

    def _load_dark_mode(self) -> bool:
        stored = self._storage.get(STORAGE_KEYS["THEME"], False)
        return stored if isinstance(stored, bool) else False

    @property
    def language(self) -> str:
        return self._language

    @property
    def dark_mode(self) -> bool:
        return self._dark_mode

    def set_language(self, language: str) -> None:
        '''Validates and persists the UI language. Raises ValueError for unsupported values.'''
        try:
            value = PreferencesInput(language=language, dark_mode=self._dark_mode).language
        except ValidationError as e:
            raise ValueError(str(e)) from e
        self._language = value
        if not self._storage.set(STORAGE_KEYS["LANG"], value):
            logger.warning("Language preference could not be persisted")
        publish_if_bound(self._event_bus, PREFERENCES_CHANGED, {"key": "language", "value": value})

    def set_dark_mode(self, enabled: bool) -> None:
        self._dark_mode = bool(enabled)
        if not self._storage.set(STORAGE_KEYS["THEME"], self._dark_mode):
            logger.warning("Theme preference could not be persisted")
        publish_if_bound(self._event_bus, PREFERENCES_CHANGED, {"key": "dark_mode", "value": self._dark_mode})
