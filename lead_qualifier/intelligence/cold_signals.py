"""Cold-signal classifier - short-circuits disengaged calls from metadata alone."""

import logging
from typing import Callable, List, NamedTuple, Optional

from lead_qualifier.models import (
    CallContext,
    EndedReason,
    Intent,
    QualificationResult,
    TECHNICAL_FAILURE_REASONS,
)

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"

NO_CONVERSATION_MOTIVATION = "No conversation recorded"


def cold_lead_result(motivation: str, score: int = 10) -> QualificationResult:
    """
    Build a cold lead result with a custom motivation.

    Args:
        motivation: Why the lead is considered cold
        score: Qualification score to assign

    Returns:
        QualificationResult with every other text field set to "Unknown"
    """
    return QualificationResult(
        motivation=motivation,
        timeline=UNKNOWN,
        budget=UNKNOWN,
        authority=UNKNOWN,
        past_experience=UNKNOWN,
        intent=Intent.COLD,
        qualification_score=score,
    )


class ColdSignalRule(NamedTuple):
    """A named predicate over call metadata and the result it forces."""
    name: str
    matches: Callable[[CallContext], bool]
    motivation: str
    score: int

    def build(self) -> QualificationResult:
        return cold_lead_result(self.motivation, self.score)


def _is_immediate_hangup(context: CallContext) -> bool:
    return context.duration is not None and context.duration < 15


def _is_early_customer_hangup(context: CallContext) -> bool:
    return (
        context.ended_reason == EndedReason.CUSTOMER_ENDED_CALL.value
        and context.duration is not None
        and context.duration < 30
    )


def _is_silence_timeout(context: CallContext) -> bool:
    return context.ended_reason == EndedReason.SILENCE_TIMED_OUT.value


def _is_voicemail(context: CallContext) -> bool:
    return context.ended_reason == EndedReason.VOICEMAIL_REACHED.value


def _is_technical_failure(context: CallContext) -> bool:
    return context.ended_reason in TECHNICAL_FAILURE_REASONS


# Evaluated top to bottom, first match wins
COLD_SIGNAL_RULES: List[ColdSignalRule] = [
    ColdSignalRule(
        name="immediate_hangup",
        matches=_is_immediate_hangup,
        motivation="Call ended immediately - no engagement.",
        score=10,
    ),
    ColdSignalRule(
        name="customer_hung_up_early",
        matches=_is_early_customer_hangup,
        motivation="Customer hung up early - not interested.",
        score=10,
    ),
    ColdSignalRule(
        name="silence_timeout",
        matches=_is_silence_timeout,
        motivation="No engagement - call timed out due to silence.",
        score=5,
    ),
    ColdSignalRule(
        name="voicemail",
        matches=_is_voicemail,
        motivation="Could not reach - went to voicemail.",
        score=15,
    ),
    ColdSignalRule(
        name="technical_failure",
        matches=_is_technical_failure,
        motivation="Call failed due to technical issues.",
        score=10,
    ),
]


def match_rule(context: CallContext) -> Optional[ColdSignalRule]:
    """Return the first cold-signal rule matching the call, if any."""
    for rule in COLD_SIGNAL_RULES:
        if rule.matches(context):
            return rule
    return None


def check_cold_signals(context: CallContext) -> Optional[QualificationResult]:
    """
    Check for obvious cold lead signals that don't require AI analysis.

    Args:
        context: Call metadata and transcript

    Returns:
        A cold QualificationResult if a rule fired, None to continue analysis
    """
    rule = match_rule(context)
    if rule is None:
        return None

    logger.info(
        f"Cold lead detected from call signals: rule={rule.name}, "
        f"duration={context.duration}, ended_reason={context.ended_reason}"
    )
    return rule.build()
