"""Enumeration types for the lead qualifier."""

from enum import Enum


class Intent(str, Enum):
    """Lead intent classification, from most to least ready to buy."""
    HOT = "hot"
    WARM = "warm"
    COLD = "cold"


class EndedReason(str, Enum):
    """Why an outbound call terminated, as reported by the voice platform."""
    ASSISTANT_ENDED_CALL = "assistant-ended-call"
    CUSTOMER_ENDED_CALL = "customer-ended-call"
    VOICEMAIL_REACHED = "voicemail-reached"
    SILENCE_TIMED_OUT = "silence-timed-out"
    PROVIDER_CLOSED_WEBSOCKET = "phone-call-provider-closed-websocket"
    PIPELINE_ERROR_MAX_RETRIES = "pipeline-error-exceeded-max-retries"
    UNKNOWN = "unknown"


# End reasons that mean the call never happened for technical reasons
TECHNICAL_FAILURE_REASONS = frozenset({
    EndedReason.PIPELINE_ERROR_MAX_RETRIES.value,
    EndedReason.PROVIDER_CLOSED_WEBSOCKET.value,
})


class CallStatus(str, Enum):
    """Status of the qualification call attached to a lead."""
    PENDING = "pending"
    CALLING = "calling"
    COMPLETED = "completed"
    FAILED = "failed"
    NO_ANSWER = "no_answer"


class CallSentiment(str, Enum):
    """Sentiment analysis result for calls."""
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class QualificationTier(str, Enum):
    """Which stage of the pipeline produced a qualification result."""
    COLD_SIGNAL = "cold_signal"
    NO_TRANSCRIPT = "no_transcript"
    LLM = "llm"
    FALLBACK = "fallback"
