"""Insights Crew - Call summary and sentiment, best effort."""

import logging
import asyncio
from typing import Optional

from lead_qualifier.core.config import ConfigProvider, get_runtime_config
from lead_qualifier.intelligence.agents.insights import InsightsAgentFactory
from lead_qualifier.intelligence.parser import parse_qualification_json, sanitize_score
from lead_qualifier.models import CallSentiment, SentimentResult

logger = logging.getLogger(__name__)

NO_TRANSCRIPT_SUMMARY = "No transcript available for summary."
EMPTY_SUMMARY = "Unable to generate summary."
FAILED_SUMMARY = "Error generating summary."

VALID_SENTIMENTS = frozenset(sentiment.value for sentiment in CallSentiment)


class InsightsCrew:
    """
    Produces a short summary and a sentiment read for a call transcript.

    Both operations are optional enrichment: failures return neutral
    placeholder values instead of raising.
    """

    def __init__(self, config: Optional[ConfigProvider] = None):
        self.config = config or get_runtime_config()

    def summarize_call(self, transcript: Optional[str]) -> str:
        """
        Generate a 2-3 sentence summary of the call.

        Args:
            transcript: The full call transcript text

        Returns:
            Summary text, or a placeholder when it cannot be produced
        """
        if not transcript or not transcript.strip():
            return NO_TRANSCRIPT_SUMMARY

        if not self.config.is_llm_configured():
            logger.warning("Anthropic API not configured, skipping call summary")
            return FAILED_SUMMARY

        try:
            llm = InsightsAgentFactory.create_summary_llm(self.config)
            response = llm.call(InsightsAgentFactory.create_summary_messages(transcript))
        except Exception as e:
            logger.error(f"Error generating call summary: {e}")
            return FAILED_SUMMARY

        text = response.strip() if isinstance(response, str) else ""
        return text or EMPTY_SUMMARY

    def analyze_sentiment(self, transcript: Optional[str]) -> SentimentResult:
        """
        Analyze the overall sentiment of the call.

        Args:
            transcript: The full call transcript text

        Returns:
            SentimentResult; neutral with confidence 0 when undetermined
        """
        if not transcript or not transcript.strip():
            return SentimentResult()

        if not self.config.is_llm_configured():
            logger.warning("Anthropic API not configured, skipping sentiment analysis")
            return SentimentResult()

        try:
            llm = InsightsAgentFactory.create_sentiment_llm(self.config)
            response = llm.call(InsightsAgentFactory.create_sentiment_messages(transcript))
        except Exception as e:
            logger.error(f"Error analyzing sentiment: {e}")
            return SentimentResult()

        data = parse_qualification_json(response if isinstance(response, str) else None)
        if data is None:
            return SentimentResult()

        sentiment = data.get("sentiment")
        if not isinstance(sentiment, str) or sentiment not in VALID_SENTIMENTS:
            sentiment = CallSentiment.NEUTRAL.value

        return SentimentResult(
            sentiment=CallSentiment(sentiment),
            confidence=sanitize_score(data.get("confidence")),
        )

    async def summarize_call_async(self, transcript: Optional[str]) -> str:
        return await asyncio.to_thread(self.summarize_call, transcript)

    async def analyze_sentiment_async(self, transcript: Optional[str]) -> SentimentResult:
        return await asyncio.to_thread(self.analyze_sentiment, transcript)
