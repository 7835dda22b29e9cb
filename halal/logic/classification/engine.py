"""Rule-based halal classification of ingredient evidence.

Rules are evaluated in priority order and the first one that decides wins:

  1. a vegan/vegetarian label          -> halal, high
  2. the first disallowed keyword found -> haram, high
  3. every doubtful keyword found       -> doubtful, medium
  4. harmful additive codes only add an informational reason
  5. otherwise                          -> halal, medium

Keyword matching is plain substring containment on the lowercased text,
not word-boundary matching ("lard" also matches "lardons", "e120" also
matches "e1200"). Existing results depend on that, keep it.
"""
import re
from typing import Iterable, List, Optional

from halal.domain.ClassificationResult import ClassificationResult
from halal.domain.Product import ProductEvidence
from halal.utilities.constants import (
    CONFIDENCE_HIGH, CONFIDENCE_MEDIUM,
    VERDICT_DOUBTFUL, VERDICT_HALAL, VERDICT_HARAM,
)

VEGAN_LABEL_PATTERN = re.compile(r"vegan|vegetarian|végane|végétarien|نباتي", re.IGNORECASE)

# Order matters: the first hit is the one reported.
HARAM_KEYWORDS = [
    "gelatin", "gélatine", "gelatina", "جلاتين", "جيلاتين",
    "e441", "pork", "porc", "خنزير", "lard", "saindoux",
    "alcohol", "alcool", "ethanol", "كحول", "wine", "نبيذ", "beer", "بيرة",
    "rennet", "présure", "منفحة حيوانية",
]

DOUBTFUL_KEYWORDS = [
    "e120", "cochineal", "carmine", "قرمزي",
    "e471", "e472", "e473", "e481", "e482",
    "emulsifier", "مستحلب", "flavour", "نكهة",
]

HARMFUL_ADDITIVES = [
    "E102", "E110", "E120", "E122", "E124", "E129",
    "E211", "E220", "E250", "E251", "E621",
]

REASON_VEGAN = "Vegan label detected"
REASON_HARMFUL = "Contains potentially harmful additives"
REASON_DEFAULT = "No haram/doubtful markers detected"


def _strings(values: Optional[Iterable]) -> List[str]:
    if values is None:
        return []
    if isinstance(values, str):
        return [values]
    try:
        return [v for v in values if isinstance(v, str)]
    except TypeError:
        return []


def _additive_code(tag: str) -> str:
    """'en:e250' -> 'E250'."""
    return tag.rsplit(":", 1)[-1].strip().upper()


def extract_harmful_additives(additive_tags: Optional[Iterable[str]]) -> List[str]:
    """Return the harmful additive codes present in the tags, de-duplicated, first-seen order."""
    found: List[str] = []
    for tag in _strings(additive_tags):
        code = _additive_code(tag)
        if code in HARMFUL_ADDITIVES and code not in found:
            found.append(code)
    return found


def classify(ingredients_text: Optional[str] = "", labels: Optional[Iterable[str]] = None,
             additive_tags: Optional[Iterable[str]] = None) -> ClassificationResult:
    """Classify ingredient evidence. Total: malformed input falls through to the default verdict."""
    if any(VEGAN_LABEL_PATTERN.search(label) for label in _strings(labels)):
        return ClassificationResult(VERDICT_HALAL, [REASON_VEGAN], CONFIDENCE_HIGH)

    text = ingredients_text.lower() if isinstance(ingredients_text, str) else ""

    for keyword in HARAM_KEYWORDS:
        if keyword.lower() in text:
            return ClassificationResult(VERDICT_HARAM, [f"Found: {keyword}"], CONFIDENCE_HIGH)

    doubtful = [k for k in DOUBTFUL_KEYWORDS if k.lower() in text]
    if doubtful:
        return ClassificationResult(VERDICT_DOUBTFUL, [f"Doubtful: {k}" for k in doubtful], CONFIDENCE_MEDIUM)

    reasons = []
    if extract_harmful_additives(additive_tags):
        reasons.append(REASON_HARMFUL)
    reasons.append(REASON_DEFAULT)
    return ClassificationResult(VERDICT_HALAL, reasons, CONFIDENCE_MEDIUM)


def classify_evidence(evidence: ProductEvidence) -> ClassificationResult:
    return classify(evidence.ingredients_text, evidence.labels, evidence.additive_tags)


__all__ = [
    'classify', 'classify_evidence', 'extract_harmful_additives',
    'HARAM_KEYWORDS', 'DOUBTFUL_KEYWORDS', 'HARMFUL_ADDITIVES', 'VEGAN_LABEL_PATTERN',
    'REASON_VEGAN', 'REASON_HARMFUL', 'REASON_DEFAULT'
]
