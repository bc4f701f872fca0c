"""Core module - Configuration and errors."""

from lead_qualifier.core.config import (
    get_settings,
    Settings,
    ConfigProvider,
    RuntimeConfig,
    get_runtime_config,
    reset_runtime_config,
)
from lead_qualifier.core.errors import QualifierError, ExtractionError, CallNotEndedError

__all__ = [
    "get_settings",
    "Settings",
    "ConfigProvider",
    "RuntimeConfig",
    "get_runtime_config",
    "reset_runtime_config",
    "QualifierError",
    "ExtractionError",
    "CallNotEndedError",
]
