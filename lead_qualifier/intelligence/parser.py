"""Response parser & sanitizer - turns free-text LLM output into a valid qualification."""

import json
import logging
import math
import re
from typing import Any, Dict, Optional

from lead_qualifier.models import Intent, ParseOutcome, QualificationResult

logger = logging.getLogger(__name__)

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```")
_OBJECT_SPAN = re.compile(r"\{[\s\S]*\}")

VALID_INTENTS = frozenset(intent.value for intent in Intent)

# (result field, response keys to try, default when missing or blank)
TEXT_FIELDS = (
    ("motivation", ("motivation",), "Not identified during call"),
    ("timeline", ("timeline",), "Not discussed"),
    ("budget", ("budget",), "Not discussed"),
    ("authority", ("authority",), "Unknown"),
    ("past_experience", ("pastExperience", "past_experience"), "Not discussed"),
)

SCORE_KEYS = ("qualificationScore", "qualification_score")


def _loads_object(text: str) -> Optional[Dict[str, Any]]:
    try:
        value = json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return None
    return value if isinstance(value, dict) else None


def parse_qualification_json(text: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Recover a JSON object from an LLM response.

    Tries, in order: the whole text, the first fenced code block, and the
    span from the first '{' to the last '}'.

    Args:
        text: Raw model output

    Returns:
        The parsed object, or None if nothing could be parsed
    """
    if not text:
        return None

    stripped = text.strip()

    data = _loads_object(stripped)
    if data is not None:
        return data

    fenced = _FENCED_BLOCK.search(stripped)
    if fenced:
        data = _loads_object(fenced.group(1).strip())
        if data is not None:
            return data
        logger.warning("Failed to parse JSON from code block")

    span = _OBJECT_SPAN.search(stripped)
    if span:
        data = _loads_object(span.group(0))
        if data is not None:
            return data
        logger.warning("Failed to parse JSON object pattern")

    logger.warning(f"Could not parse qualification JSON ({len(stripped)} chars)")
    return None


def _first_present(data: Dict[str, Any], keys) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def sanitize_score(value: Any) -> int:
    """Coerce a model-provided score into an integer in [0, 100]."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, int):
        # Arbitrarily large JSON integers do not fit in a float
        return max(0, min(100, value))
    if math.isnan(value):
        return 0
    if math.isinf(value):
        return 100 if value > 0 else 0
    # Round half up, as the scores are non-negative once clamped
    rounded = int(math.floor(value + 0.5))
    return max(0, min(100, rounded))


def sanitize_intent(value: Any) -> Intent:
    """Coerce a model-provided label into an Intent, defaulting to cold."""
    if isinstance(value, str) and value in VALID_INTENTS:
        return Intent(value)
    return Intent.COLD


def _sanitize_text(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value
    return default


def sanitize_qualification(data: Optional[Dict[str, Any]]) -> QualificationResult:
    """
    Validate and sanitize a possibly incomplete qualification object.

    Args:
        data: Parsed model output (may be missing fields or hold bad values)

    Returns:
        Complete, validated QualificationResult
    """
    data = data or {}

    fields = {
        name: _sanitize_text(_first_present(data, keys), default)
        for name, keys, default in TEXT_FIELDS
    }

    return QualificationResult(
        **fields,
        intent=sanitize_intent(data.get("intent")),
        qualification_score=sanitize_score(_first_present(data, SCORE_KEYS)),
    )


def parse_response(text: Optional[str]) -> ParseOutcome:
    """
    Parse and sanitize an LLM response in one step.

    Returns:
        ParseOutcome.parsed(...) when a JSON object was recovered,
        ParseOutcome.unparseable() otherwise
    """
    data = parse_qualification_json(text)
    if data is None:
        return ParseOutcome.unparseable()
    return ParseOutcome.parsed(sanitize_qualification(data))
