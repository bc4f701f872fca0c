"""Heuristic fallback analyzer - keyword and duration scoring without AI."""

import logging
from typing import List, Tuple

from lead_qualifier.models import CallContext, EndedReason, Intent, QualificationResult

logger = logging.getLogger(__name__)

BASE_SCORE = 30

POSITIVE_SIGNALS = (
    "interested",
    "need",
    "want",
    "looking for",
    "excited",
    "great",
    "perfect",
    "yes",
    "tell me more",
)

NEGATIVE_SIGNALS = (
    "not interested",
    "maybe later",
    "not sure",
    "too expensive",
    "busy",
    "no thanks",
    "goodbye",
    "not right now",
)

POSITIVE_SIGNAL_POINTS = 5
NEGATIVE_SIGNAL_POINTS = -10

# Evaluated top to bottom, first threshold met wins
INTENT_THRESHOLDS: List[Tuple[int, Intent]] = [
    (60, Intent.HOT),
    (35, Intent.WARM),
]

NOT_DETERMINED = "Not determined"
FALLBACK_MOTIVATION = "Analysis performed without AI - limited data available"


def duration_adjustment(duration) -> int:
    """Score adjustment for call length; short calls are penalized heavily."""
    if duration is None:
        return 0
    if duration < 30:
        return -20
    if duration < 60:
        return -10
    if duration > 180:
        return 15
    if duration > 120:
        return 10
    return 0


def keyword_adjustment(transcript: str) -> int:
    """
    Score adjustment from buying and rejection phrases in the transcript.

    Each phrase counts once however often it appears. Phrases are matched as
    plain substrings, case-insensitively.
    """
    lowered = transcript.lower()
    score = 0
    for signal in POSITIVE_SIGNALS:
        if signal in lowered:
            score += POSITIVE_SIGNAL_POINTS
    for signal in NEGATIVE_SIGNALS:
        if signal in lowered:
            score += NEGATIVE_SIGNAL_POINTS
    return score


def intent_for_score(score: int) -> Intent:
    """Classify a heuristic score into hot, warm or cold."""
    for threshold, intent in INTENT_THRESHOLDS:
        if score >= threshold:
            return intent
    return Intent.COLD


def heuristic_score(context: CallContext) -> int:
    """Compute the clamped heuristic qualification score for a call."""
    score = BASE_SCORE
    score += duration_adjustment(context.duration)

    if context.ended_reason == EndedReason.CUSTOMER_ENDED_CALL.value:
        score -= 15

    if context.has_transcript():
        score += keyword_adjustment(context.transcript)
    else:
        # No transcript means no conversation
        score -= 20

    return max(0, min(100, score))


def fallback_analysis(context: CallContext) -> QualificationResult:
    """
    Qualify a call using only keyword matching and call signals.

    Used when the LLM provider is unconfigured, unreachable, or its output
    could not be parsed. Never raises.

    Args:
        context: Call metadata and transcript

    Returns:
        QualificationResult with placeholder text fields
    """
    score = heuristic_score(context)
    intent = intent_for_score(score)

    logger.info(f"Fallback analysis complete - score={score}, intent={intent.value}")

    return QualificationResult(
        motivation=FALLBACK_MOTIVATION,
        timeline=NOT_DETERMINED,
        budget=NOT_DETERMINED,
        authority=NOT_DETERMINED,
        past_experience=NOT_DETERMINED,
        intent=intent,
        qualification_score=score,
    )
