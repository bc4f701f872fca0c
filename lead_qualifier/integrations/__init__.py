"""Integrations module - External service connectors."""

from lead_qualifier.integrations.vapi import VapiService, vapi_service

__all__ = [
    "VapiService",
    "vapi_service",
]
