"""Webhook API Routes - Entry points for Vapi call events and manual re-sync."""

import asyncio
import logging
from typing import Dict, Any, Optional
from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, ValidationError

from lead_qualifier.core.errors import CallNotEndedError
from lead_qualifier.models import CallContext, CallQualification, VapiWebhookPayload
from lead_qualifier.services.call_processor import call_processor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhook", tags=["webhooks"])

# Vapi event types that carry a finished call
CALL_ENDED_EVENTS = frozenset({"call-ended", "end-of-call-report"})


class VapiWebhookResponse(BaseModel):
    """Response for Vapi webhook."""
    status: str
    message: str
    data: Optional[Dict[str, Any]] = None


class TestResponse(BaseModel):
    """Response for test endpoints."""
    status: str
    message: str
    data: Dict[str, Any] = {}


def _acknowledged() -> VapiWebhookResponse:
    return VapiWebhookResponse(
        status="acknowledged",
        message="Acknowledged but not processed"
    )


def _qualification_data(record: CallQualification) -> Dict[str, Any]:
    return {
        "callId": record.call_id,
        "leadId": record.lead_id,
        "callStatus": record.call_status.value,
        "duration": record.duration,
        "tier": record.tier.value,
        "qualification": record.qualification.model_dump(mode="json", by_alias=True),
    }


# ===========================================
# Vapi Webhook - Call Ended Entry Point
# ===========================================

@router.post(
    "/vapi",
    response_model=VapiWebhookResponse,
    summary="Process Vapi Call Event"
)
async def vapi_webhook(request: Request) -> VapiWebhookResponse:
    """
    Handle incoming Vapi server messages.

    Call-ended events are qualified and the result returned for the caller
    to store; every other event type is acknowledged and ignored, and
    payloads that fail validation are acknowledged without processing.
    """
    try:
        raw_data = await request.json()

        # Handle nested body structure
        if isinstance(raw_data, dict) and isinstance(raw_data.get("body"), dict):
            raw_data = raw_data["body"]

        # Invalid payloads are acknowledged with 200 and not processed
        if not isinstance(raw_data, dict):
            logger.warning(f"Invalid Vapi webhook payload: expected an object, got {type(raw_data).__name__}")
            return _acknowledged()

        try:
            payload = VapiWebhookPayload.from_request(raw_data)
        except ValidationError as e:
            logger.warning(f"Invalid Vapi webhook payload: {e.error_count()} errors")
            return _acknowledged()

        logger.info(f"Received Vapi webhook: type={payload.type}, call_id={payload.call.id}")

        if payload.type not in CALL_ENDED_EVENTS:
            return VapiWebhookResponse(
                status="ignored",
                message=f"Event '{payload.type}' ignored"
            )

        record = await call_processor.process_call_ended_async(payload.call)

        return VapiWebhookResponse(
            status="processed",
            message="Call qualified",
            data=_qualification_data(record)
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Vapi webhook error: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to process: {str(e)}")


# ===========================================
# Manual Re-Sync
# ===========================================

@router.post(
    "/sync/{call_id}",
    response_model=VapiWebhookResponse,
    summary="Re-Sync Call From Vapi"
)
async def sync_call(call_id: str) -> VapiWebhookResponse:
    """Fetch a call from Vapi and run qualification on it again."""
    try:
        record = await call_processor.sync_call(call_id)

        if record is None:
            raise HTTPException(status_code=404, detail=f"Call not found: {call_id}")

        return VapiWebhookResponse(
            status="synced",
            message="Call re-qualified",
            data=_qualification_data(record)
        )

    except CallNotEndedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Call sync error: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to process: {str(e)}")


# ===========================================
# Test Endpoints
# ===========================================

test_router = APIRouter(prefix="/test", tags=["testing"])


@test_router.post("/qualify", response_model=TestResponse)
async def test_qualify(request: Request) -> TestResponse:
    """Run the qualification pipeline on a raw call context."""
    try:
        data = await request.json()
        context = CallContext(**data)

        from lead_qualifier.intelligence.crews.post_call import PostCallCrew
        crew = PostCallCrew()
        result, tier = await asyncio.to_thread(crew.qualify_with_tier, context)

        return TestResponse(
            status="success",
            message="Qualification pipeline completed",
            data={
                "tier": tier.value,
                **result.model_dump(mode="json", by_alias=True)
            }
        )

    except Exception as e:
        logger.error(f"Test qualify error: {e}")
        return TestResponse(status="error", message=str(e), data={})


@test_router.post("/insights", response_model=TestResponse)
async def test_insights(request: Request) -> TestResponse:
    """Generate a summary and sentiment read for a transcript."""
    try:
        data = await request.json()
        transcript = data.get("transcript")

        from lead_qualifier.intelligence.crews.insights import InsightsCrew
        crew = InsightsCrew()
        summary = await crew.summarize_call_async(transcript)
        sentiment = await crew.analyze_sentiment_async(transcript)

        return TestResponse(
            status="success",
            message="Call insights generated",
            data={
                "summary": summary,
                **sentiment.model_dump(mode="json")
            }
        )

    except Exception as e:
        logger.error(f"Test insights error: {e}")
        return TestResponse(status="error", message=str(e), data={})


@test_router.get("/health")
async def health_check() -> Dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": "lead-qualifier"}
