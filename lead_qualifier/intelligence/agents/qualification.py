"""Qualification Agent for BANT extraction from call transcripts."""

import logging
from typing import Dict, List, Optional
from crewai import LLM

from lead_qualifier.core.config import ConfigProvider
from lead_qualifier.models import CallContext

logger = logging.getLogger(__name__)

MAX_TRANSCRIPT_CHARS = 15000
TRUNCATION_MARKER = "\n...[transcript truncated]"

OUTPUT_SHAPE = """{
  "motivation": "string describing their motivation and need",
  "timeline": "string describing timeline",
  "budget": "string describing budget situation",
  "authority": "string describing authority level",
  "pastExperience": "string describing past experience with similar solutions",
  "intent": "hot" | "warm" | "cold",
  "qualificationScore": number between 0 and 100
}"""


def build_llm(config: ConfigProvider, max_tokens: Optional[int] = None) -> LLM:
    """Create a CrewAI LLM bound to the configured Anthropic model."""
    return LLM(
        model=f"anthropic/{config.llm_model}",
        api_key=config.llm_api_key,
        timeout=config.llm_timeout,
        max_tokens=max_tokens or config.llm_max_tokens,
        temperature=0,
    )


def prepare_transcript(transcript: str) -> str:
    """
    Trim the transcript and cut it down to the provider-safe length.

    Keeps the beginning of the call and marks the cut.
    """
    cleaned = transcript.strip()
    if len(cleaned) > MAX_TRANSCRIPT_CHARS:
        return cleaned[:MAX_TRANSCRIPT_CHARS] + TRUNCATION_MARKER
    return cleaned


def build_context_section(context: CallContext) -> str:
    """Render duration and end reason as hints for the model, or '' if neither is known."""
    lines: List[str] = []
    if context.duration is not None:
        lines.append(f"- Call Duration: {context.duration} seconds")
    if context.ended_reason:
        lines.append(f"- How Call Ended: {context.ended_reason}")

    if not lines:
        return ""
    return "\nCALL CONTEXT (Important for qualification):\n" + "\n".join(lines) + "\n"


def build_extraction_prompt(context: CallContext, transcript: str) -> str:
    """
    Build the full BANT extraction prompt for one call.

    Args:
        context: Call metadata used for scoring hints
        transcript: Transcript already passed through prepare_transcript()

    Returns:
        Prompt text ending with the delimited transcript
    """
    return f"""You are an expert lead qualification analyst. Analyze the following call transcript between a sales qualification assistant and a potential lead.
{build_context_section(context)}
CRITICAL RULES FOR QUALIFICATION:
- A very short call (under 30 seconds) or an early hang-up is a COLD lead with a LOW score, whatever was said
- "customer-ended-call" with a short duration means the lead was not interested: score 0-20
- "silence-timed-out" means there was no engagement: score 0-15
- "voicemail-reached" means the lead was never reached: score 10-25
- Only calls with a real conversation and genuine engagement may score above 40

Extract the following BANT (Budget, Authority, Need, Timeline) qualification data:

1. **Motivation/Need**: Their primary motivation or pain point. What problem are they trying to solve?

2. **Timeline**: When do they need a solution, and how urgent is it? (e.g. "Immediate", "1-3 months", "3-6 months", "6-12 months", "No specific timeline")

3. **Budget**: Their budget situation and whether funds are allocated. (e.g. "$0-5K", "$5K-25K", "$25K-100K", "$100K+", "Not discussed", "TBD")

4. **Authority**: Are they the decision maker, and who else is involved? (e.g. "Decision maker", "Influencer", "User/Evaluator", "Unknown")

5. **Past Experience**: Have they used similar solutions before, and how did it go?

Then determine:

6. **Intent**: "hot", "warm" or "cold".
   - HOT: clear need, budget available, decision maker, timeline within 3 months, engaged throughout the call
   - WARM: interested and had a meaningful conversation, but missing 1-2 key factors (unconfirmed budget, longer timeline, needs approval)
   - COLD: hung up early, very short call, no clear timeline, budget concerns, just exploring, little or no engagement

7. **Qualification Score (0-100)**: the sum of four components worth 25 points each:
   - Engagement (25): full conversation = 25, partial = 15, hung up early or no answer = 0
   - Urgency/Timeline (25): immediate = 25, 1-3 months = 20, 3-6 months = 15, 6-12 months = 10, no timeline = 5
   - Budget clarity (25): confirmed = 25, likely available = 20, TBD = 10, budget concerns = 5
   - Decision authority (25): decision maker = 25, strong influencer = 20, influencer = 15, user only = 10

Respond ONLY with a valid JSON object in exactly this format (no markdown, no explanation):
{OUTPUT_SHAPE}

--- TRANSCRIPT START ---
{transcript}
--- TRANSCRIPT END ---"""


class QualificationAgentFactory:
    """
    Factory for the qualification analyst.

    Qualification is a single provider request, made through a bare CrewAI
    LLM with the analyst persona as the system message.
    """

    ROLE = "Lead Qualification Analyst"

    BACKSTORY = """You are a sales operations analyst who has qualified
thousands of inbound leads from short discovery calls. You weigh how the
call actually went (length, engagement, how it ended) as heavily as what
was said, and you never inflate a score for a lead who barely spoke.
You always answer in strict JSON."""

    @staticmethod
    def create(config: ConfigProvider) -> LLM:
        """Create the analyst LLM bound to the configured Anthropic model."""
        return build_llm(config)

    @classmethod
    def create_messages(
        cls,
        context: CallContext,
        transcript: str
    ) -> List[Dict[str, str]]:
        """Create the chat messages for one qualification request."""
        return [
            {"role": "system", "content": f"You are a {cls.ROLE}. {cls.BACKSTORY}"},
            {"role": "user", "content": build_extraction_prompt(context, transcript)},
        ]
