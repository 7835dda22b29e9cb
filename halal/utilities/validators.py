"""
Input validation schemas using Pydantic for better data integrity.
"""
from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List

from halal.utilities.constants import CONFIDENCES, SUPPORTED_LANGUAGES, VERDICTS


class BarcodeInput(BaseModel):
    """Schema for a product identifier typed or scanned by the user."""
    code: str = Field(..., min_length=1, max_length=64)

    @field_validator('code', mode='before')
    @classmethod
    def strip_whitespace(cls, v):
        """Remove leading/trailing whitespace."""
        if isinstance(v, str):
            return v.strip()
        return v


class PreferencesInput(BaseModel):
    """Schema for language / theme preferences."""
    language: str = Field(default=SUPPORTED_LANGUAGES[0])
    dark_mode: bool = False

    @field_validator('language')
    @classmethod
    def validate_language(cls, v):
        v = v.strip().lower()
        if v not in SUPPORTED_LANGUAGES:
            raise ValueError(f"Unsupported language '{v}', expected one of {', '.join(SUPPORTED_LANGUAGES)}")
        return v


class ClassificationInput(BaseModel):
    verdict: str
    reasons: List[str] = Field(..., min_length=1)
    confidence: str

    @field_validator('verdict')
    @classmethod
    def validate_verdict(cls, v):
        if v not in VERDICTS:
            raise ValueError(f"Unknown verdict '{v}'")
        return v

    @field_validator('confidence')
    @classmethod
    def validate_confidence(cls, v):
        if v not in CONFIDENCES:
            raise ValueError(f"Unknown confidence '{v}'")
        return v


class ActivityRecordInput(BaseModel):
    """Schema for one exported history/favorites record."""
    code: str = Field(..., min_length=1)
    p: Dict[str, Any] = Field(default_factory=dict)
    cls: ClassificationInput
    additives: List[str] = Field(default_factory=list)
    timestamp: int = Field(default=0, ge=0)


class ExportDocumentInput(BaseModel):
    """Schema for an exported data document {history, favorites, timestamp}."""
    history: List[ActivityRecordInput] = Field(default_factory=list)
    favorites: List[ActivityRecordInput] = Field(default_factory=list)
    timestamp: int = Field(..., ge=0)
