"""Result models for qualification outputs."""

from typing import Optional
from pydantic import BaseModel, Field

from lead_qualifier.models.enums import Intent, CallStatus, CallSentiment, QualificationTier


class QualificationResult(BaseModel):
    """BANT qualification record produced for a single call."""
    motivation: str = Field(..., min_length=1, description="Need or pain point")
    timeline: str = Field(..., min_length=1, description="Urgency")
    budget: str = Field(..., min_length=1, description="Budget status")
    authority: str = Field(..., min_length=1, description="Decision-making power")
    past_experience: str = Field(
        ...,
        min_length=1,
        alias="pastExperience",
        description="Prior attempts at similar solutions"
    )
    intent: Intent = Field(..., description="hot, warm or cold")
    qualification_score: int = Field(
        ...,
        ge=0,
        le=100,
        alias="qualificationScore",
        description="Qualification score (0-100)"
    )

    class Config:
        frozen = True
        populate_by_name = True


class ParseOutcome(BaseModel):
    """
    Tagged result of parsing an LLM response.

    Either ``ok`` is True and ``result`` holds the sanitized qualification, or
    ``ok`` is False and the caller must fall back to another tier.
    """
    ok: bool
    result: Optional[QualificationResult] = None

    class Config:
        frozen = True

    @classmethod
    def parsed(cls, result: QualificationResult) -> "ParseOutcome":
        return cls(ok=True, result=result)

    @classmethod
    def unparseable(cls) -> "ParseOutcome":
        return cls(ok=False, result=None)


class SentimentResult(BaseModel):
    """Sentiment read of a call transcript."""
    sentiment: CallSentiment = Field(CallSentiment.NEUTRAL, description="Overall sentiment")
    confidence: int = Field(0, ge=0, le=100, description="Confidence (0-100)")


class CallQualification(BaseModel):
    """Qualification of one call, ready for the caller to persist against a lead."""
    call_id: str = Field(..., description="Vapi call ID")
    lead_id: Optional[str] = Field(None, description="Lead ID from call metadata")
    call_status: CallStatus = Field(..., description="Derived call status")
    duration: Optional[int] = Field(None, description="Call duration in seconds")
    transcript: Optional[str] = Field(None, description="Transcript used for analysis")
    tier: QualificationTier = Field(..., description="Pipeline tier that produced the result")
    qualification: QualificationResult
