"""Intelligence module - Qualification tiers and crews."""

from lead_qualifier.intelligence.crews.post_call import PostCallCrew
from lead_qualifier.intelligence.crews.insights import InsightsCrew

__all__ = [
    "PostCallCrew",
    "InsightsCrew",
]
