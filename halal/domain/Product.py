"""Product payload helpers and the ProductEvidence handed to the classifier.

The payload is the product document returned by the product source
(Open Food Facts shape). Only a handful of fields are read here:

    product_name, product_name_<lang>, brands, image_small_url,
    ingredients_text, ingredients_text_<lang>, labels_tags, labels,
    additives_tags
"""
from typing import Any, Dict, List, Optional

from halal.utilities.constants import DEFAULT_LANGUAGE


def _as_text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _as_str_list(value: Any) -> List[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [v for v in value if isinstance(v, str) and v.strip()]


class ProductEvidence:
    def __init__(self, ingredients_text: str = "", labels: Optional[List[str]] = None,
                 additive_tags: Optional[List[str]] = None):
        self.ingredients_text = ingredients_text or ""
        self.labels = labels[:] if labels else []
        self.additive_tags = additive_tags[:] if additive_tags else []

    def __repr__(self) -> str:
        return (f"ProductEvidence(ingredients_text={self.ingredients_text!r}, "
                f"labels={self.labels!r}, additive_tags={self.additive_tags!r})")

    @staticmethod
    def from_product(product: Optional[Dict[str, Any]], language: str = DEFAULT_LANGUAGE) -> "ProductEvidence":
        '''Builds evidence from a product payload, preferring ingredients_text_<language>.'''
        p = product if isinstance(product, dict) else {}
        ingredients_text = _as_text(p.get(f"ingredients_text_{language}")) or _as_text(p.get("ingredients_text"))
        labels = _as_str_list(p.get("labels_tags"))
        raw_labels = p.get("labels")
        if isinstance(raw_labels, str):
            labels.extend(part.strip() for part in raw_labels.split(",") if part.strip())
        return ProductEvidence(ingredients_text, labels, _as_str_list(p.get("additives_tags")))


def display_name(product: Optional[Dict[str, Any]], language: str = DEFAULT_LANGUAGE) -> str:
    p = product if isinstance(product, dict) else {}
    return _as_text(p.get(f"product_name_{language}")) or _as_text(p.get("product_name")) or "—"


def brand(product: Optional[Dict[str, Any]]) -> str:
    p = product if isinstance(product, dict) else {}
    return _as_text(p.get("brands")) or "—"


def image_url(product: Optional[Dict[str, Any]]) -> str:
    p = product if isinstance(product, dict) else {}
    return _as_text(p.get("image_small_url")) or _as_text(p.get("image_url"))


__all__ = ['ProductEvidence', 'display_name', 'brand', 'image_url']
