"""Call Processor Service - Turns finished Vapi calls into qualification records."""

import asyncio
import logging
import math
from datetime import datetime
from typing import Optional

from lead_qualifier.core.errors import CallNotEndedError
from lead_qualifier.intelligence.crews.post_call import PostCallCrew
from lead_qualifier.integrations.vapi import VapiService, vapi_service
from lead_qualifier.models import (
    CallContext,
    CallQualification,
    CallStatus,
    EndedReason,
    VapiCall,
    TECHNICAL_FAILURE_REASONS,
)

logger = logging.getLogger(__name__)

SPEAKER_LABELS = {
    "assistant": "Agent",
    "user": "Lead",
}


def _parse_timestamp(value: str) -> Optional[datetime]:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return None


def calculate_call_duration(
    started_at: Optional[str],
    ended_at: Optional[str]
) -> Optional[int]:
    """
    Calculate call duration in whole seconds from ISO-8601 timestamps.

    Returns:
        Rounded duration, or None when either timestamp is missing or invalid
    """
    if not started_at or not ended_at:
        return None

    start = _parse_timestamp(started_at)
    end = _parse_timestamp(ended_at)
    if start is None or end is None:
        return None

    try:
        seconds = (end - start).total_seconds()
    except TypeError:
        # One timestamp is naive and the other is not
        return None
    return int(math.floor(seconds + 0.5))


def build_transcript(call: VapiCall) -> Optional[str]:
    """
    Use the call's transcript, or rebuild one from its message log.

    Only assistant and user turns are kept, labeled "Agent:" and "Lead:".
    """
    if call.transcript:
        return call.transcript

    lines = [
        f"{SPEAKER_LABELS[message.role]}: {message.text()}"
        for message in call.messages
        if message.role in SPEAKER_LABELS
    ]
    return "\n".join(lines) or None


def derive_call_status(ended_reason: Optional[str]) -> CallStatus:
    """Map a call's end reason onto the lead's call status."""
    if ended_reason == EndedReason.VOICEMAIL_REACHED.value:
        return CallStatus.NO_ANSWER
    if ended_reason in TECHNICAL_FAILURE_REASONS:
        return CallStatus.FAILED
    return CallStatus.COMPLETED


def build_call_context(call: VapiCall) -> CallContext:
    """Assemble the qualification input for a finished call."""
    return CallContext(
        transcript=build_transcript(call),
        duration=calculate_call_duration(call.started_at, call.ended_at),
        ended_reason=call.ended_reason or None,
    )


class CallProcessor:
    """
    Main orchestration service for finished calls.

    Handles both entry points:
    1. Vapi call-ended webhook -> qualification
    2. Manual re-sync -> fetch call from Vapi -> qualification

    Persisting the returned record against the lead is left to the caller.
    """

    def __init__(
        self,
        crew: Optional[PostCallCrew] = None,
        vapi: Optional[VapiService] = None
    ):
        """Initialize processor with lazy-loaded dependencies."""
        self._crew = crew
        self._vapi = vapi
        logger.info("Call processor initialized")

    @property
    def crew(self) -> PostCallCrew:
        """Lazy load the qualification crew."""
        if self._crew is None:
            self._crew = PostCallCrew()
        return self._crew

    @property
    def vapi(self) -> VapiService:
        if self._vapi is None:
            self._vapi = vapi_service
        return self._vapi

    def process_call_ended(self, call: VapiCall) -> CallQualification:
        """
        Qualify a call that has ended.

        Args:
            call: Vapi call object from a call-ended event or the API

        Returns:
            CallQualification with the derived status and BANT result
        """
        context = build_call_context(call)
        call_status = derive_call_status(context.ended_reason)

        logger.info(
            f"Call ended: call_id={call.id}, lead_id={call.get_lead_id()}, "
            f"duration={context.duration}, ended_reason={context.ended_reason}"
        )

        result, tier = self.crew.qualify_with_tier(context)

        logger.info(
            f"Qualification analysis complete for call {call.id}: "
            f"intent={result.intent.value}, score={result.qualification_score}, tier={tier.value}"
        )

        return CallQualification(
            call_id=call.id,
            lead_id=call.get_lead_id(),
            call_status=call_status,
            duration=context.duration,
            transcript=context.transcript,
            tier=tier,
            qualification=result,
        )

    async def process_call_ended_async(self, call: VapiCall) -> CallQualification:
        """Qualify an ended call without blocking the event loop."""
        return await asyncio.to_thread(self.process_call_ended, call)

    async def sync_call(self, call_id: str) -> Optional[CallQualification]:
        """
        Re-fetch a call from Vapi and qualify it again.

        Args:
            call_id: Vapi call ID

        Returns:
            CallQualification, or None if the call could not be fetched

        Raises:
            CallNotEndedError: the call is still in progress
        """
        logger.info(f"Syncing call {call_id} from Vapi")

        call = await self.vapi.get_call(call_id)
        if call is None:
            logger.error(f"Could not fetch call {call_id} from Vapi")
            return None

        if call.status != "ended":
            raise CallNotEndedError(call_id, call.status or "unknown")

        return await self.process_call_ended_async(call)


# Singleton instance
call_processor = CallProcessor()
