"""Qualification extractor - the single LLM call behind transcript analysis."""

import logging

from lead_qualifier.core.config import ConfigProvider
from lead_qualifier.core.errors import ExtractionError
from lead_qualifier.intelligence.agents.qualification import (
    QualificationAgentFactory,
    prepare_transcript,
)
from lead_qualifier.models import CallContext

logger = logging.getLogger(__name__)


class QualificationExtractor:
    """
    Asks the LLM for BANT data on one call and returns its raw text.

    The response is not validated here; see intelligence.parser.
    """

    def __init__(self, config: ConfigProvider):
        self.config = config

    def extract(self, context: CallContext) -> str:
        """
        Run one qualification request against the provider.

        Args:
            context: Call context with a non-empty transcript

        Returns:
            Raw model output, expected to contain a JSON object

        Raises:
            ExtractionError: provider unconfigured, call failed, or empty output
        """
        if not self.config.is_llm_configured():
            raise ExtractionError("Anthropic API key not configured")

        if not context.has_transcript():
            raise ExtractionError("Cannot extract qualification from an empty transcript")

        transcript = prepare_transcript(context.transcript)
        messages = QualificationAgentFactory.create_messages(context, transcript)

        logger.info(
            f"Requesting qualification from {self.config.llm_model} "
            f"({len(transcript)} transcript chars)"
        )

        try:
            llm = QualificationAgentFactory.create(self.config)
            response = llm.call(messages)
        except Exception as e:
            raise ExtractionError(f"LLM provider call failed: {e}") from e

        text = response if isinstance(response, str) else str(response or "")
        if not text.strip():
            raise ExtractionError("LLM provider returned no text content")

        return text.strip()
