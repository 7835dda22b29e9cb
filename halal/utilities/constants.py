from typing import Final

STORAGE_KEYS: Final[dict[str, str]] = {
    "LANG": "halal_lang",
    "THEME": "halal_theme",
    "FAVORITES": "halal_favorites",
    "HISTORY": "halal_history",
    "CACHE": "halal_cache",
}

CACHE_DURATION_MS: Final[int] = 24 * 60 * 60 * 1000  # 24 hours
MAX_HISTORY: Final[int] = 50

DEFAULT_LANGUAGE: Final[str] = "ar"
SUPPORTED_LANGUAGES: Final[tuple[str, ...]] = ("ar", "en")

VERDICT_HALAL: Final[str] = "halal"
VERDICT_DOUBTFUL: Final[str] = "doubtful"
VERDICT_HARAM: Final[str] = "haram"
VERDICTS: Final[tuple[str, ...]] = (VERDICT_HALAL, VERDICT_DOUBTFUL, VERDICT_HARAM)

CONFIDENCE_HIGH: Final[str] = "high"
CONFIDENCE_MEDIUM: Final[str] = "medium"
CONFIDENCE_LOW: Final[str] = "low"
CONFIDENCES: Final[tuple[str, ...]] = (CONFIDENCE_HIGH, CONFIDENCE_MEDIUM, CONFIDENCE_LOW)

EXPORT_FILENAME_TEMPLATE: Final[str] = "halal-data-{timestamp}.{ext}"
