"""Call-related models - Call context and Vapi webhook payloads."""

from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field, field_validator


class CallContext(BaseModel):
    """Everything the qualifier knows about a finished call."""
    transcript: Optional[str] = Field(
        None,
        description="Full dialogue, speaker-labeled lines joined by newlines"
    )
    duration: Optional[int] = Field(None, description="Call length in seconds")
    ended_reason: Optional[str] = Field(
        None,
        alias="endedReason",
        description="Why the call terminated (e.g. 'customer-ended-call')"
    )

    class Config:
        frozen = True
        populate_by_name = True

    @field_validator("duration", mode="before")
    @classmethod
    def _round_duration(cls, value: Any) -> Any:
        if isinstance(value, float):
            return round(value)
        return value

    @field_validator("ended_reason", mode="before")
    @classmethod
    def _enum_to_str(cls, value: Any) -> Any:
        return getattr(value, "value", value)

    def has_transcript(self) -> bool:
        """Whether the transcript contains anything besides whitespace."""
        return bool(self.transcript and self.transcript.strip())


class CallMessage(BaseModel):
    """A single turn in a Vapi call's message log."""
    role: str = Field(..., description="assistant, user, system, ...")
    content: Optional[str] = Field(None, description="Message text")
    message: Optional[str] = Field(None, description="Alternate message text field")

    def text(self) -> str:
        return self.content or self.message or ""


class VapiCall(BaseModel):
    """The subset of a Vapi call object needed for qualification."""
    id: str = Field(..., description="Vapi call ID")
    status: Optional[str] = Field(None, description="queued, ringing, in-progress, ended")
    started_at: Optional[str] = Field(None, alias="startedAt")
    ended_at: Optional[str] = Field(None, alias="endedAt")
    ended_reason: Optional[str] = Field(None, alias="endedReason")
    transcript: Optional[str] = Field(None, description="Transcript as provided by Vapi")
    messages: List[CallMessage] = Field(default_factory=list)
    summary: Optional[str] = Field(None, description="Vapi-generated call summary")
    metadata: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        populate_by_name = True
        extra = "ignore"

    def get_lead_id(self) -> Optional[str]:
        """Extract the lead ID the call was placed for."""
        return (self.metadata or {}).get("leadId")


class VapiWebhookPayload(BaseModel):
    """Incoming server message from Vapi."""
    type: str = Field(..., description="Event type (e.g. 'call-ended')")
    call: VapiCall = Field(..., description="Call data")

    class Config:
        extra = "ignore"

    @classmethod
    def from_request(cls, raw_data: Dict[str, Any]) -> "VapiWebhookPayload":
        """Build a payload from a request body, unwrapping a nested 'message'."""
        if "message" in raw_data and isinstance(raw_data["message"], dict):
            raw_data = raw_data["message"]
        return cls(**raw_data)
