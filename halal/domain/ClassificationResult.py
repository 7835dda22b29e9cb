"""ClassificationResult value object: verdict, ordered reasons, confidence."""
from typing import Iterable, Tuple

from halal.utilities.constants import VERDICTS, CONFIDENCES


class ClassificationResult:
    __slots__ = ("_verdict", "_reasons", "_confidence")

    def __init__(self, verdict: str, reasons: Iterable[str], confidence: str):
        if verdict not in VERDICTS:
            raise ValueError(f"Unknown verdict: {verdict!r}")
        if confidence not in CONFIDENCES:
            raise ValueError(f"Unknown confidence: {confidence!r}")
        reasons = tuple(str(r) for r in reasons)
        if not reasons:
            raise ValueError("A classification needs at least one reason")
        object.__setattr__(self, "_verdict", verdict)
        object.__setattr__(self, "_reasons", reasons)
        object.__setattr__(self, "_confidence", confidence)

    def __setattr__(self, name, value):
        raise AttributeError("ClassificationResult is immutable")

    @property
    def verdict(self) -> str:
        return self._verdict

    @property
    def reasons(self) -> Tuple[str, ...]:
        return self._reasons

    @property
    def confidence(self) -> str:
        return self._confidence

    def __eq__(self, other) -> bool:
        if not isinstance(other, ClassificationResult):
            return NotImplemented
        return (self._verdict, self._reasons, self._confidence) == (other._verdict, other._reasons, other._confidence)

    def __hash__(self) -> int:
        return hash((self._verdict, self._reasons, self._confidence))

    def __str__(self) -> str:
        return f"{self._verdict} ({self._confidence}) - " + "; ".join(self._reasons)

    def __repr__(self) -> str:
        return f"ClassificationResult(verdict={self._verdict!r}, reasons={list(self._reasons)!r}, confidence={self._confidence!r})"

    @staticmethod
    def from_dict(data):
        '''Creates a ClassificationResult from its persisted form {verdict, reasons, confidence}.'''
        d = dict(data) if isinstance(data, dict) else {}
        return ClassificationResult(
            d.get("verdict", ""),
            d.get("reasons") or [],
            d.get("confidence", ""),
        )

    def to_dict(self):
        '''Converts the result to a dictionary for JSON persistence and export.'''
        return {
            "verdict": self._verdict,
            "reasons": list(self._reasons),
            "confidence": self._confidence,
        }
