"""
Contract models exchanged with the analysis service.

Field names follow the service's JSON contract; `red_flags` travels as `redFlags`.
"""

from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Verdict(str, Enum):
    """Categorical judgment returned by the analysis service"""
    REAL = "real"
    FAKE = "fake"
    UNCERTAIN = "uncertain"


class AnalysisRequest(BaseModel):
    """Request body sent to the analysis endpoint. Only built for non-blank text."""
    model_config = ConfigDict(frozen=True)

    text: str = Field(..., min_length=1, description="Trimmed candidate text")

    @field_validator("text", mode="before")
    @classmethod
    def strip_text(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    def to_payload(self) -> dict:
        return {"text": self.text}


class AnalysisResult(BaseModel):
    """Well-formed verdict returned by the analysis service"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    verdict: Verdict
    confidence: int = Field(..., ge=0, le=100, description="Certainty in the verdict, percent")
    explanation: str
    red_flags: List[str] = Field(default_factory=list, alias="redFlags")

    def to_payload(self) -> dict:
        """Serialize using the service's field names"""
        return self.model_dump(mode="json", by_alias=True)
