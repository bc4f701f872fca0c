"""Lead Qualifier - post-call BANT qualification for AI voice calls."""

__version__ = "1.0.0"
