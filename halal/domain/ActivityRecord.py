"""ActivityRecord domain entity: one completed lookup (history) or saved product (favorites)."""
from typing import Any, Dict, List, Optional

from halal.domain.ClassificationResult import ClassificationResult


class ActivityRecord:
    def __init__(self, identifier: str, payload: Optional[Dict[str, Any]],
                 classification: ClassificationResult, recorded_at: int,
                 harmful_additives: Optional[List[str]] = None):
        self.identifier = identifier
        self.payload = payload if payload is not None else {}
        self.classification = classification
        self.recorded_at = int(recorded_at)
        self.harmful_additives = harmful_additives[:] if harmful_additives else []

    def __str__(self) -> str:
        return f"{self.identifier} - {self.classification.verdict} - {self.recorded_at}"

    __repr__ = __str__

    def __eq__(self, other) -> bool:
        if not isinstance(other, ActivityRecord):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def stamped(self, recorded_at: int) -> "ActivityRecord":
        '''Returns a copy of this record carrying a new timestamp.'''
        return ActivityRecord(self.identifier, self.payload, self.classification,
                              recorded_at, self.harmful_additives)

    @staticmethod
    def from_dict(data):
        '''Creates an ActivityRecord from its persisted/exported form.

        Expected keys: code, p, cls, additives, timestamp. Raises ValueError
        when the identifier or classification is unusable.
        '''
        if not isinstance(data, dict):
            raise ValueError("Activity record must be a JSON object")
        code = data.get("code")
        if not isinstance(code, str) or not code:
            raise ValueError("Activity record without a product code")
        payload = data.get("p") if isinstance(data.get("p"), dict) else {}
        additives = data.get("additives") if isinstance(data.get("additives"), list) else []
        try:
            timestamp = int(data.get("timestamp") or 0)
        except (TypeError, ValueError, OverflowError):
            timestamp = 0
        return ActivityRecord(
            identifier=code,
            payload=payload,
            classification=ClassificationResult.from_dict(data.get("cls")),
            recorded_at=timestamp,
            harmful_additives=[str(a) for a in additives],
        )

    def to_dict(self):
        '''Converts the record to the dictionary shape used for persistence and export.'''
        return {
            "code": self.identifier,
            "p": self.payload,
            "cls": self.classification.to_dict(),
            "additives": list(self.harmful_additives),
            "timestamp": self.recorded_at,
        }
