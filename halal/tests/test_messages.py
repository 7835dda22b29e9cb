from halal.domain.Errors import LookupSuperseded, ProductNetworkError, ProductNotFound
from halal.utilities.messages import message_for_error, translate


def test_translate_per_language():
    assert translate("notFound", "en") == "Product not found"
    assert translate("notFound", "ar") == "المنتج غير موجود"


def test_unknown_language_falls_back_to_arabic():
    assert translate("networkError", "de") == "خطأ في الاتصال"


def test_unknown_key_returns_key():
    assert translate("doesNotExist", "en") == "doesNotExist"


def test_error_messages():
    assert message_for_error(ProductNotFound("1"), "en") == "Product not found"
    assert message_for_error(ProductNetworkError("1", status_code=500), "en") == "Network error"
    assert message_for_error(LookupSuperseded("1", 1, 2), "en") == "Error occurred"
