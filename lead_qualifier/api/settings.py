"""Settings API Routes - Runtime API key management."""

import logging
from typing import Any, Dict, Optional
from fastapi import APIRouter
from pydantic import BaseModel, Field

from lead_qualifier.core.config import get_runtime_config

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["settings"])


class ConfigUpdate(BaseModel):
    """Runtime API keys; omitted keys are left unchanged."""
    anthropic_api_key: Optional[str] = Field(None, alias="anthropicApiKey", min_length=1)
    vapi_api_key: Optional[str] = Field(None, alias="vapiApiKey", min_length=1)

    class Config:
        populate_by_name = True


@router.get("/status")
async def get_status() -> Dict[str, Any]:
    """Report which API keys are configured, never their values."""
    return {"success": True, "data": get_runtime_config().status()}


@router.post("/config")
async def set_config(update: ConfigUpdate) -> Dict[str, Any]:
    """Set API keys at runtime."""
    config = get_runtime_config()
    config.update(
        anthropic_api_key=update.anthropic_api_key,
        vapi_api_key=update.vapi_api_key,
    )

    logger.info(
        f"Runtime config updated - anthropic={'set' if update.anthropic_api_key else 'unchanged'}, "
        f"vapi={'set' if update.vapi_api_key else 'unchanged'}"
    )

    return {
        "success": True,
        "data": {
            "configured": config.is_llm_configured(),
            "message": "Configuration updated successfully",
        },
    }


@router.delete("/config")
async def clear_config() -> Dict[str, Any]:
    """Clear all runtime API keys."""
    get_runtime_config().clear()
    logger.info("Runtime config cleared")
    return {"success": True, "data": {"message": "Configuration cleared"}}
