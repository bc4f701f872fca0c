"""Configuration management for the Lead Qualifier service."""

import threading
from functools import lru_cache
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ===========================================
    # Anthropic Configuration (transcript analysis)
    # ===========================================
    ANTHROPIC_API_KEY: str = Field(default="", description="Anthropic API key")
    ANTHROPIC_MODEL: str = Field(
        default="claude-sonnet-4-20250514",
        description="Claude model used for transcript analysis"
    )
    LLM_TIMEOUT_SECONDS: float = Field(
        default=60.0,
        description="Timeout for a single LLM request"
    )
    LLM_MAX_TOKENS: int = Field(default=1024, description="Max tokens per LLM response")

    # ===========================================
    # Vapi Configuration
    # ===========================================
    VAPI_API_KEY: str = Field(default="", description="Vapi API key")
    VAPI_API_URL: str = Field(
        default="https://api.vapi.ai",
        description="Vapi API base URL"
    )

    # ===========================================
    # Server Configuration
    # ===========================================
    DEBUG: bool = Field(default=False, description="Debug mode")
    LOG_LEVEL: str = Field(default="INFO", description="Root log level")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


# ===========================================
# Runtime Configuration
# ===========================================

@runtime_checkable
class ConfigProvider(Protocol):
    """Read-only view of the configuration the qualification core needs."""

    @property
    def llm_api_key(self) -> Optional[str]: ...

    @property
    def llm_model(self) -> str: ...

    @property
    def llm_timeout(self) -> float: ...

    @property
    def llm_max_tokens(self) -> int: ...

    @property
    def vapi_api_key(self) -> Optional[str]: ...

    def is_llm_configured(self) -> bool: ...


class RuntimeConfig:
    """
    In-memory configuration store.

    Seeded from environment settings and updatable at runtime through the
    settings API. Values live only in process memory and are lost on restart.
    """

    def __init__(
        self,
        anthropic_api_key: Optional[str] = None,
        vapi_api_key: Optional[str] = None,
        model: str = "claude-sonnet-4-20250514",
        timeout: float = 60.0,
        max_tokens: int = 1024
    ):
        self._lock = threading.Lock()
        self._anthropic_api_key = anthropic_api_key or None
        self._vapi_api_key = vapi_api_key or None
        self._model = model
        self._timeout = timeout
        self._max_tokens = max_tokens

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "RuntimeConfig":
        """Create a runtime config seeded from environment settings."""
        settings = settings or get_settings()
        return cls(
            anthropic_api_key=settings.ANTHROPIC_API_KEY,
            vapi_api_key=settings.VAPI_API_KEY,
            model=settings.ANTHROPIC_MODEL,
            timeout=settings.LLM_TIMEOUT_SECONDS,
            max_tokens=settings.LLM_MAX_TOKENS,
        )

    @property
    def llm_api_key(self) -> Optional[str]:
        return self._anthropic_api_key

    @property
    def llm_model(self) -> str:
        return self._model

    @property
    def llm_timeout(self) -> float:
        return self._timeout

    @property
    def llm_max_tokens(self) -> int:
        return self._max_tokens

    @property
    def vapi_api_key(self) -> Optional[str]:
        return self._vapi_api_key

    def is_llm_configured(self) -> bool:
        """Check whether transcript analysis can use the LLM provider."""
        return bool(self._anthropic_api_key)

    def update(
        self,
        anthropic_api_key: Optional[str] = None,
        vapi_api_key: Optional[str] = None
    ) -> None:
        """
        Set API keys at runtime.

        Args:
            anthropic_api_key: New Anthropic key, left unchanged when None
            vapi_api_key: New Vapi key, left unchanged when None
        """
        with self._lock:
            if anthropic_api_key is not None:
                self._anthropic_api_key = anthropic_api_key or None
            if vapi_api_key is not None:
                self._vapi_api_key = vapi_api_key or None

    def clear(self) -> None:
        """Forget all runtime API keys."""
        with self._lock:
            self._anthropic_api_key = None
            self._vapi_api_key = None

    def missing_keys(self) -> List[str]:
        """List the names of keys that are not configured."""
        missing = []
        if not self._anthropic_api_key:
            missing.append("anthropicApiKey")
        if not self._vapi_api_key:
            missing.append("vapiApiKey")
        return missing

    def status(self) -> Dict[str, Any]:
        """Report which keys are set, without exposing their values."""
        return {
            "configured": self.is_llm_configured(),
            "missingKeys": self.missing_keys(),
            "hasAnthropicApiKey": bool(self._anthropic_api_key),
            "hasVapiApiKey": bool(self._vapi_api_key),
            "model": self._model,
        }


_runtime_config: Optional[RuntimeConfig] = None


def get_runtime_config() -> RuntimeConfig:
    """Get the process-wide runtime config, creating it from settings on first use."""
    global _runtime_config
    if _runtime_config is None:
        _runtime_config = RuntimeConfig.from_settings()
    return _runtime_config


def reset_runtime_config() -> None:
    """Drop the process-wide runtime config so it is re-seeded on next use."""
    global _runtime_config
    _runtime_config = None
