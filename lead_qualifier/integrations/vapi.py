"""Vapi integration for fetching finished calls."""

import logging
from typing import Optional
import httpx
from pydantic import ValidationError

from lead_qualifier.core.config import ConfigProvider, get_runtime_config, get_settings
from lead_qualifier.models import VapiCall

logger = logging.getLogger(__name__)


class VapiService:
    """
    Service for Vapi API operations.

    Only reads calls back for manual re-sync; placing calls is handled
    elsewhere.
    """

    def __init__(self, config: Optional[ConfigProvider] = None, api_url: Optional[str] = None):
        """Initialize service with lazily resolved config."""
        self._config = config
        self._api_url = api_url

    @property
    def config(self) -> ConfigProvider:
        """Lazy load runtime config."""
        if self._config is None:
            self._config = get_runtime_config()
        return self._config

    @property
    def api_url(self) -> str:
        if self._api_url is None:
            self._api_url = get_settings().VAPI_API_URL
        return self._api_url.rstrip("/")

    async def get_call(self, call_id: str) -> Optional[VapiCall]:
        """
        Fetch a call from the Vapi API.

        Args:
            call_id: Vapi call ID

        Returns:
            VapiCall if found, None otherwise
        """
        api_key = self.config.vapi_api_key
        if not api_key:
            logger.error("Vapi API key not configured")
            return None

        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json"
        }

        try:
            async with httpx.AsyncClient(timeout=30.0) as client:
                response = await client.get(
                    f"{self.api_url}/call/{call_id}",
                    headers=headers
                )

                if response.status_code == 200:
                    call = VapiCall(**response.json())
                    logger.info(f"Fetched Vapi call {call.id} (status={call.status})")
                    return call
                else:
                    logger.error(
                        f"Vapi API error: {response.status_code} - {response.text}"
                    )
                    return None

        except httpx.TimeoutException:
            logger.error("Vapi API timeout")
            return None
        except ValidationError as e:
            logger.error(f"Unexpected Vapi call payload: {e}")
            return None
        except Exception as e:
            logger.error(f"Vapi API error: {e}")
            return None


# Singleton instance
vapi_service = VapiService()
