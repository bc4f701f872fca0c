"""Models package - All Pydantic models organized by domain."""

from lead_qualifier.models.enums import (
    Intent,
    EndedReason,
    CallStatus,
    CallSentiment,
    QualificationTier,
    TECHNICAL_FAILURE_REASONS,
)
from lead_qualifier.models.call import CallContext, CallMessage, VapiCall, VapiWebhookPayload
from lead_qualifier.models.results import (
    QualificationResult,
    ParseOutcome,
    SentimentResult,
    CallQualification,
)

__all__ = [
    # Enums
    "Intent",
    "EndedReason",
    "CallStatus",
    "CallSentiment",
    "QualificationTier",
    "TECHNICAL_FAILURE_REASONS",
    # Call models
    "CallContext",
    "CallMessage",
    "VapiCall",
    "VapiWebhookPayload",
    # Result models
    "QualificationResult",
    "ParseOutcome",
    "SentimentResult",
    "CallQualification",
]
