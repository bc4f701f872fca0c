"""Agent factories for the qualification LLMs."""

from lead_qualifier.intelligence.agents.qualification import QualificationAgentFactory
from lead_qualifier.intelligence.agents.insights import InsightsAgentFactory

__all__ = [
    "QualificationAgentFactory",
    "InsightsAgentFactory",
]
