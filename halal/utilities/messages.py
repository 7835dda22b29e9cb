"""Localized user-facing messages (Arabic / English)."""
from typing import Final

from halal.domain.Errors import ProductNetworkError, ProductNotFound
from halal.utilities.constants import DEFAULT_LANGUAGE

TRANSLATIONS: Final[dict[str, dict[str, str]]] = {
    "ar": {
        "title": "فاحص الحلال Pro",
        "halal": "حلال ✓",
        "doubtful": "مشكوك فيه ⚠",
        "haram": "حرام ✗",
        "harmfulAdditives": "مضافات ضارة",
        "addToFavorites": "إضافة للمفضلة",
        "removeFromFavorites": "إزالة من المفضلة",
        "noFavorites": "لا توجد منتجات مفضلة",
        "notInFavorites": "المنتج ليس في المفضلة",
        "noHistory": "لا يوجد سجل",
        "clearHistory": "مسح الكل",
        "exportData": "تصدير البيانات",
        "totalScans": "إجمالي الفحوصات",
        "favorites": "المفضلة",
        "cacheCleared": "تم مسح الذاكرة المؤقتة",
        "error": "حدث خطأ",
        "notFound": "المنتج غير موجود",
        "networkError": "خطأ في الاتصال",
        "disclaimer": "هذا تصنيف تجريبي وليس فتوى شرعية. يُنصح بالتحقق من الشهادات الرسمية.",
    },
    "en": {
        "title": "HalalCheck Pro",
        "halal": "Halal ✓",
        "doubtful": "Doubtful ⚠",
        "haram": "Haram ✗",
        "harmfulAdditives": "Harmful Additives",
        "addToFavorites": "Add to Favorites",
        "removeFromFavorites": "Remove from Favorites",
        "noFavorites": "No favorite products",
        "notInFavorites": "Product is not in favorites",
        "noHistory": "No history",
        "clearHistory": "Clear All",
        "exportData": "Export Data",
        "totalScans": "Total Scans",
        "favorites": "Favorites",
        "cacheCleared": "Cache cleared",
        "error": "Error occurred",
        "notFound": "Product not found",
        "networkError": "Network error",
        "disclaimer": "This is experimental classification, not a religious ruling. Verify with official halal certifications.",
    },
}


def translate(key: str, language: str = DEFAULT_LANGUAGE) -> str:
    """Return the message for key, falling back to the default language, then to the key itself."""
    table = TRANSLATIONS.get(language) or TRANSLATIONS[DEFAULT_LANGUAGE]
    return table.get(key) or TRANSLATIONS[DEFAULT_LANGUAGE].get(key, key)


def message_for_error(error: Exception, language: str = DEFAULT_LANGUAGE) -> str:
    if isinstance(error, ProductNotFound):
        return translate("notFound", language)
    if isinstance(error, ProductNetworkError):
        return translate("networkError", language)
    return translate("error", language)
