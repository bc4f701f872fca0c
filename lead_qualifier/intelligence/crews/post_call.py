"""Post-Call Crew - Orchestrates call qualification with async support."""

import logging
import asyncio
from typing import Optional, Tuple

from lead_qualifier.core.config import ConfigProvider, get_runtime_config
from lead_qualifier.core.errors import ExtractionError
from lead_qualifier.intelligence.cold_signals import (
    check_cold_signals,
    cold_lead_result,
    NO_CONVERSATION_MOTIVATION,
)
from lead_qualifier.intelligence.extractor import QualificationExtractor
from lead_qualifier.intelligence.fallback import fallback_analysis
from lead_qualifier.intelligence.parser import parse_response
from lead_qualifier.models import CallContext, QualificationResult, QualificationTier

logger = logging.getLogger(__name__)


class PostCallCrew:
    """
    Post-Call Qualification Crew with async support.

    Orchestrates, in one pass:
    1. Cold-signal check - short-circuit disengaged calls from metadata
    2. Config check - no LLM provider means heuristic fallback
    3. Extraction - one LLM request on the transcript
    4. Parsing - recover and sanitize the JSON answer
    5. Fallback - keyword/duration heuristics when any LLM step fails

    Never raises: every failure ends in a fallback result.
    """

    def __init__(
        self,
        config: Optional[ConfigProvider] = None,
        extractor: Optional[QualificationExtractor] = None
    ):
        """Initialize with an injected config provider and optional extractor."""
        self.config = config or get_runtime_config()
        self.extractor = extractor or QualificationExtractor(self.config)

    async def qualify_async(self, context: CallContext) -> QualificationResult:
        """
        Qualify a call asynchronously.

        The LLM request is blocking, so the whole pipeline runs in a
        worker thread.
        """
        return await asyncio.to_thread(self.qualify, context)

    def qualify(self, context: CallContext) -> QualificationResult:
        """Qualify a call (synchronous). For async contexts use qualify_async()."""
        result, _ = self.qualify_with_tier(context)
        return result

    def qualify_with_tier(
        self,
        context: CallContext
    ) -> Tuple[QualificationResult, QualificationTier]:
        """
        Qualify a call and report which tier produced the result.

        Args:
            context: Transcript, duration and end reason of the call

        Returns:
            (QualificationResult, QualificationTier)
        """
        cold_result = check_cold_signals(context)
        if cold_result:
            return self._done(cold_result, QualificationTier.COLD_SIGNAL)

        if not self.config.is_llm_configured():
            logger.warning("Anthropic API not configured, using fallback analysis")
            return self._fallback(context)

        if not context.has_transcript():
            logger.warning("Empty transcript provided, returning cold lead values")
            return self._done(
                cold_lead_result(NO_CONVERSATION_MOTIVATION),
                QualificationTier.NO_TRANSCRIPT
            )

        try:
            raw_text = self.extractor.extract(context)
        except ExtractionError as e:
            logger.error(f"Qualification extraction failed: {e}")
            return self._fallback(context)
        except Exception as e:
            logger.error(f"Unexpected error extracting qualification data: {e}", exc_info=True)
            return self._fallback(context)

        try:
            outcome = parse_response(raw_text)
        except Exception as e:
            logger.error(f"Unexpected error parsing qualification data: {e}", exc_info=True)
            return self._fallback(context)

        if not outcome.ok:
            logger.warning("LLM response could not be parsed, using fallback analysis")
            return self._fallback(context)

        return self._done(outcome.result, QualificationTier.LLM)

    def _fallback(self, context: CallContext) -> Tuple[QualificationResult, QualificationTier]:
        return self._done(fallback_analysis(context), QualificationTier.FALLBACK)

    def _done(
        self,
        result: QualificationResult,
        tier: QualificationTier
    ) -> Tuple[QualificationResult, QualificationTier]:
        logger.info(
            f"Qualification complete - tier={tier.value}, intent={result.intent.value}, "
            f"score={result.qualification_score}"
        )
        return result, tier


async def qualify_call_async(
    context: CallContext,
    config: Optional[ConfigProvider] = None
) -> QualificationResult:
    """Convenience function to qualify a call asynchronously."""
    crew = PostCallCrew(config=config)
    return await crew.qualify_async(context)
