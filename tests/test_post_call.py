"""Tests for the qualification orchestrator."""

import asyncio
import pytest
from unittest.mock import patch

from lead_qualifier.core.errors import ExtractionError
from lead_qualifier.intelligence.crews.post_call import PostCallCrew, qualify_call_async
from lead_qualifier.models import CallContext, Intent, QualificationTier


class TestScenarios:
    """End-to-end qualification scenarios."""

    def test_duration_rule_fires_before_end_reason(self, configured, stub_extractor):
        crew = PostCallCrew(config=configured, extractor=stub_extractor)
        context = CallContext(transcript="...", duration=8, ended_reason="customer-ended-call")

        result, tier = crew.qualify_with_tier(context)

        assert tier == QualificationTier.COLD_SIGNAL
        assert result.intent == Intent.COLD
        assert result.qualification_score == 10
        assert result.motivation == "Call ended immediately - no engagement."
        stub_extractor.extract.assert_not_called()

    def test_voicemail_without_transcript(self, configured, stub_extractor):
        crew = PostCallCrew(config=configured, extractor=stub_extractor)
        context = CallContext(duration=None, ended_reason="voicemail-reached", transcript=None)

        result = crew.qualify(context)

        assert result.intent == Intent.COLD
        assert result.qualification_score == 15
        assert result.motivation == "Could not reach - went to voicemail."

    def test_empty_transcript_when_configured(self, configured, stub_extractor):
        crew = PostCallCrew(config=configured, extractor=stub_extractor)
        context = CallContext(duration=240, ended_reason="assistant-ended-call", transcript="")

        result, tier = crew.qualify_with_tier(context)

        assert tier == QualificationTier.NO_TRANSCRIPT
        assert result.intent == Intent.COLD
        assert result.qualification_score == 10
        assert result.motivation == "No conversation recorded"
        assert result.budget == "Unknown"
        stub_extractor.extract.assert_not_called()

    def test_well_formed_llm_answer_passes_through(
        self, configured, stub_extractor, hot_transcript, hot_llm_response
    ):
        stub_extractor.extract.return_value = hot_llm_response
        crew = PostCallCrew(config=configured, extractor=stub_extractor)

        result, tier = crew.qualify_with_tier(
            CallContext(transcript=hot_transcript, duration=200)
        )

        assert tier == QualificationTier.LLM
        assert result.intent == Intent.HOT
        assert result.qualification_score == 92
        assert result.authority == "Decision maker"
        stub_extractor.extract.assert_called_once()

    def test_provider_error_uses_fallback(self, configured, stub_extractor, neutral_transcript):
        stub_extractor.extract.side_effect = ExtractionError("connection reset")
        crew = PostCallCrew(config=configured, extractor=stub_extractor)

        result, tier = crew.qualify_with_tier(
            CallContext(transcript=neutral_transcript, duration=200)
        )

        assert tier == QualificationTier.FALLBACK
        assert result.qualification_score == 45
        assert result.intent == Intent.WARM
        assert result.motivation == "Analysis performed without AI - limited data available"

    def test_fenced_answer_clamped(self, configured, stub_extractor, hot_transcript):
        stub_extractor.extract.return_value = (
            "Sure! Here's the analysis: ```json\n"
            '{"intent":"warm","qualificationScore":150,"motivation":"Needs triage"}\n```'
        )
        crew = PostCallCrew(config=configured, extractor=stub_extractor)

        result, tier = crew.qualify_with_tier(CallContext(transcript=hot_transcript, duration=200))

        assert tier == QualificationTier.LLM
        assert result.intent == Intent.WARM
        assert result.qualification_score == 100
        assert result.timeline == "Not discussed"


class TestDegradation:
    """Tests for every path into the heuristic fallback."""

    def test_unconfigured_uses_fallback(self, unconfigured, stub_extractor, hot_transcript):
        crew = PostCallCrew(config=unconfigured, extractor=stub_extractor)

        result, tier = crew.qualify_with_tier(CallContext(transcript=hot_transcript, duration=200))

        assert tier == QualificationTier.FALLBACK
        assert result.qualification_score == 65
        assert result.intent == Intent.HOT
        stub_extractor.extract.assert_not_called()

    def test_unconfigured_empty_transcript_uses_fallback(self, unconfigured, stub_extractor):
        crew = PostCallCrew(config=unconfigured, extractor=stub_extractor)

        result, tier = crew.qualify_with_tier(CallContext(transcript="", duration=240))

        # 30 + 15 (long call) - 20 (no transcript)
        assert tier == QualificationTier.FALLBACK
        assert result.qualification_score == 25

    def test_unparseable_answer_uses_fallback(self, configured, stub_extractor, hot_transcript):
        stub_extractor.extract.return_value = "I'm unable to analyze this call."
        crew = PostCallCrew(config=configured, extractor=stub_extractor)

        result, tier = crew.qualify_with_tier(CallContext(transcript=hot_transcript, duration=200))

        assert tier == QualificationTier.FALLBACK
        assert result.qualification_score == 65
        stub_extractor.extract.assert_called_once()

    def test_unexpected_exception_uses_fallback(self, configured, stub_extractor, hot_transcript):
        stub_extractor.extract.side_effect = RuntimeError("boom")
        crew = PostCallCrew(config=configured, extractor=stub_extractor)

        result, tier = crew.qualify_with_tier(CallContext(transcript=hot_transcript, duration=200))

        assert tier == QualificationTier.FALLBACK
        assert result.intent == Intent.HOT

    def test_huge_score_does_not_raise(self, configured, stub_extractor, hot_transcript):
        stub_extractor.extract.return_value = (
            '{"intent": "hot", "qualificationScore": 1' + "0" * 400 + "}"
        )
        crew = PostCallCrew(config=configured, extractor=stub_extractor)

        result, tier = crew.qualify_with_tier(CallContext(transcript=hot_transcript, duration=200))

        assert tier == QualificationTier.LLM
        assert result.intent == Intent.HOT
        assert result.qualification_score == 100

    def test_parser_error_uses_fallback(
        self, configured, stub_extractor, hot_transcript, hot_llm_response
    ):
        stub_extractor.extract.return_value = hot_llm_response
        crew = PostCallCrew(config=configured, extractor=stub_extractor)

        with patch(
            "lead_qualifier.intelligence.crews.post_call.parse_response",
            side_effect=ValueError("bad value"),
        ):
            result, tier = crew.qualify_with_tier(
                CallContext(transcript=hot_transcript, duration=200)
            )

        assert tier == QualificationTier.FALLBACK
        assert result.qualification_score == 65

    def test_key_added_at_runtime(self, unconfigured, stub_extractor, hot_transcript, hot_llm_response):
        """The crew reads the config on every call, not once at construction."""
        stub_extractor.extract.return_value = hot_llm_response
        crew = PostCallCrew(config=unconfigured, extractor=stub_extractor)
        context = CallContext(transcript=hot_transcript, duration=200)

        assert crew.qualify_with_tier(context)[1] == QualificationTier.FALLBACK

        unconfigured.update(anthropic_api_key="sk-ant-late")

        assert crew.qualify_with_tier(context)[1] == QualificationTier.LLM


class TestInvariants:
    """Tests for properties every result must hold."""

    @pytest.mark.parametrize("duration", [None, 0, 10, 29, 45, 90, 150, 200])
    @pytest.mark.parametrize("ended_reason", [
        None,
        "assistant-ended-call",
        "customer-ended-call",
        "silence-timed-out",
        "voicemail-reached",
        "pipeline-error-exceeded-max-retries",
    ])
    @pytest.mark.parametrize("transcript", [None, "", "Lead: not interested, goodbye", "Lead: yes, we need it"])
    def test_result_always_complete(self, unconfigured, duration, ended_reason, transcript):
        crew = PostCallCrew(config=unconfigured)

        result = crew.qualify(CallContext(
            transcript=transcript,
            duration=duration,
            ended_reason=ended_reason,
        ))

        assert 0 <= result.qualification_score <= 100
        assert result.intent in (Intent.HOT, Intent.WARM, Intent.COLD)
        for text in (
            result.motivation,
            result.timeline,
            result.budget,
            result.authority,
            result.past_experience,
        ):
            assert text

    def test_idempotent(self, configured, stub_extractor, hot_transcript, hot_llm_response):
        stub_extractor.extract.return_value = hot_llm_response
        crew = PostCallCrew(config=configured, extractor=stub_extractor)
        context = CallContext(transcript=hot_transcript, duration=200)

        assert crew.qualify(context) == crew.qualify(context)

    @pytest.mark.parametrize("duration", range(15))
    def test_short_calls_always_cold(self, configured, stub_extractor, hot_transcript, duration):
        """Anything under 15 seconds is cold whatever was said."""
        crew = PostCallCrew(config=configured, extractor=stub_extractor)

        result = crew.qualify(CallContext(transcript=hot_transcript, duration=duration))

        assert result.intent == Intent.COLD
        assert result.qualification_score == 10
        stub_extractor.extract.assert_not_called()


class TestAsync:
    """Tests for the async entry points."""

    def test_qualify_async(self, unconfigured, hot_transcript):
        crew = PostCallCrew(config=unconfigured)

        result = asyncio.run(crew.qualify_async(CallContext(transcript=hot_transcript, duration=200)))

        assert result.qualification_score == 65

    def test_qualify_call_async(self, unconfigured):
        context = CallContext(duration=40, ended_reason="voicemail-reached")

        result = asyncio.run(qualify_call_async(context, config=unconfigured))

        assert result.qualification_score == 15
