"""Insights Agent prompts for call summaries and sentiment."""

from typing import Dict, List
from crewai import LLM

from lead_qualifier.core.config import ConfigProvider
from lead_qualifier.intelligence.agents.qualification import build_llm

SUMMARY_TRANSCRIPT_CHARS = 10000
SENTIMENT_TRANSCRIPT_CHARS = 5000

SUMMARY_MAX_TOKENS = 256
SENTIMENT_MAX_TOKENS = 64


class InsightsAgentFactory:
    """Factory for the call insights LLMs and their prompts."""

    @staticmethod
    def create_summary_llm(config: ConfigProvider) -> LLM:
        return build_llm(config, max_tokens=SUMMARY_MAX_TOKENS)

    @staticmethod
    def create_sentiment_llm(config: ConfigProvider) -> LLM:
        return build_llm(config, max_tokens=SENTIMENT_MAX_TOKENS)

    @staticmethod
    def create_summary_messages(transcript: str) -> List[Dict[str, str]]:
        """Ask for a 2-3 sentence recap of the call."""
        return [{
            "role": "user",
            "content": (
                "Provide a 2-3 sentence summary of this sales qualification call. "
                "Focus on the lead's interest level, key concerns, and next steps if any."
                f"\n\nTranscript:\n{transcript[:SUMMARY_TRANSCRIPT_CHARS]}"
            ),
        }]

    @staticmethod
    def create_sentiment_messages(transcript: str) -> List[Dict[str, str]]:
        """Ask for a JSON sentiment read of the call."""
        return [{
            "role": "user",
            "content": (
                "Analyze the sentiment of this sales call transcript. Respond with JSON only: "
                '{"sentiment": "positive" | "neutral" | "negative", "confidence": 0-100}'
                f"\n\nTranscript:\n{transcript[:SENTIMENT_TRANSCRIPT_CHARS]}"
            ),
        }]
