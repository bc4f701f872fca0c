"""Services package - Call processing orchestration."""

from lead_qualifier.services.call_processor import CallProcessor, call_processor

__all__ = [
    "CallProcessor",
    "call_processor",
]
