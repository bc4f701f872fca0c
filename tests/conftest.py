"""Pytest fixtures and configuration for Lead Qualifier tests."""

import os
import pytest
from typing import Dict, Any, Generator
from unittest.mock import AsyncMock, MagicMock, patch

from fastapi.testclient import TestClient

# Set test environment variables before importing app
os.environ.setdefault("ANTHROPIC_API_KEY", "")
os.environ.setdefault("VAPI_API_KEY", "")
os.environ.setdefault("DEBUG", "true")

from lead_qualifier.core.config import RuntimeConfig  # noqa: E402
from lead_qualifier.intelligence.extractor import QualificationExtractor  # noqa: E402


# ===========================================
# Sample Data Fixtures
# ===========================================

# Engaged call with need, budget, authority and urgency. Matches the
# fallback keywords "need", "yes", "perfect" and "great" and no negatives.
HOT_TRANSCRIPT = """Agent: Hi Dana, thanks for taking the call. What prompted your inquiry?
Lead: Our support team is drowning in tickets and we need to automate triage before our peak season in six weeks.
Agent: Do you have budget set aside for this?
Lead: Yes, we've approved forty thousand dollars for this quarter.
Agent: And who signs off on the purchase?
Lead: I do. I run operations and the budget is mine.
Agent: Have you tried anything similar before?
Lead: We piloted a chatbot last year but it could not integrate with our helpdesk.
Agent: Perfect, thanks. Someone from the team will follow up with next steps.
Lead: Sounds great, talk soon."""

# Matches no fallback keyword at all
NEUTRAL_TRANSCRIPT = """Agent: Hello, this is the follow-up call about your message.
Lead: Okay, go ahead.
Agent: Could you describe your current process?
Lead: We handle it by hand today."""


@pytest.fixture
def hot_transcript() -> str:
    return HOT_TRANSCRIPT


@pytest.fixture
def neutral_transcript() -> str:
    return NEUTRAL_TRANSCRIPT


@pytest.fixture
def hot_llm_response() -> str:
    """Well-formed model answer for the hot transcript."""
    return """{
  "motivation": "Support team overwhelmed by ticket volume; wants automated triage",
  "timeline": "Immediate - before peak season in six weeks",
  "budget": "$25K-100K - forty thousand approved this quarter",
  "authority": "Decision maker",
  "pastExperience": "Piloted a chatbot that failed to integrate with the helpdesk",
  "intent": "hot",
  "qualificationScore": 92
}"""


@pytest.fixture
def sample_vapi_call_ended() -> Dict[str, Any]:
    """Sample Vapi call-ended event with a message log instead of a transcript."""
    return {
        "type": "call-ended",
        "call": {
            "id": "call_test_12345",
            "orgId": "org_test",
            "assistantId": "asst_test",
            "metadata": {"leadId": "6f1c2b9e-7d4a-4f0e-9a51-2f1e3c4d5b6a"},
            "startedAt": "2025-03-04T15:00:00.000Z",
            "endedAt": "2025-03-04T15:03:20.000Z",
            "endedReason": "assistant-ended-call",
            "messages": [
                {"role": "system", "message": "You are a qualification assistant."},
                {"role": "assistant", "message": "Hi Dana, thanks for taking the call. What prompted your inquiry?"},
                {"role": "user", "message": "We need to automate triage before peak season."},
                {"role": "assistant", "message": "Do you have budget set aside for this?"},
                {"role": "user", "message": "Yes, forty thousand is approved."},
                {"role": "assistant", "message": "Perfect, someone will follow up."},
                {"role": "user", "message": "Sounds great."},
            ],
        },
        "timestamp": "2025-03-04T15:03:21.000Z",
    }


@pytest.fixture
def sample_vapi_voicemail() -> Dict[str, Any]:
    """Sample Vapi call-ended event for a call that reached voicemail."""
    return {
        "type": "call-ended",
        "call": {
            "id": "call_test_67890",
            "metadata": {"leadId": "0b7e1a52-3c9d-4e8f-b1a2-6d5c4b3a2f10"},
            "startedAt": "2025-03-04T15:00:00Z",
            "endedAt": "2025-03-04T15:00:40Z",
            "endedReason": "voicemail-reached",
            "transcript": "Agent: Hello, is this Dana?\nLead: You've reached Dana, leave a message.",
        },
    }


@pytest.fixture
def sample_vapi_status_update() -> Dict[str, Any]:
    """Sample Vapi event that carries no finished call."""
    return {
        "type": "status-update",
        "call": {"id": "call_test_12345", "status": "in-progress"},
    }


# ===========================================
# Config and Extractor Fixtures
# ===========================================

@pytest.fixture
def configured() -> RuntimeConfig:
    """Runtime config with an Anthropic key."""
    return RuntimeConfig(anthropic_api_key="sk-ant-test", vapi_api_key="vapi-test")


@pytest.fixture
def unconfigured() -> RuntimeConfig:
    """Runtime config with no keys at all."""
    return RuntimeConfig()


@pytest.fixture
def stub_extractor() -> MagicMock:
    """Extractor double; set .extract.return_value or .side_effect per test."""
    return MagicMock(spec=QualificationExtractor)


@pytest.fixture
def mock_llm():
    """Patch the qualification LLM factory so no provider request is made."""
    with patch(
        "lead_qualifier.intelligence.extractor.QualificationAgentFactory.create"
    ) as mock_create:
        llm = MagicMock()
        mock_create.return_value = llm
        yield llm


@pytest.fixture
def mock_vapi_http():
    """Mock the Vapi HTTP client; configure .get.return_value per test."""
    with patch("lead_qualifier.integrations.vapi.httpx.AsyncClient") as mock:
        mock_instance = AsyncMock()
        response = MagicMock()
        response.status_code = 200
        mock_instance.get.return_value = response
        mock.return_value.__aenter__.return_value = mock_instance
        mock.return_value.__aexit__.return_value = None
        yield mock_instance


@pytest.fixture
def global_runtime_config() -> Generator[RuntimeConfig, None, None]:
    """Replace the process-wide runtime config with an empty one."""
    config = RuntimeConfig()
    with patch("lead_qualifier.core.config._runtime_config", config):
        yield config


# ===========================================
# Client Fixtures
# ===========================================

@pytest.fixture
def client(global_runtime_config) -> Generator[TestClient, None, None]:
    """Test client with no provider keys, so no request leaves the process."""
    from lead_qualifier.intelligence.crews.post_call import PostCallCrew
    from lead_qualifier.services.call_processor import call_processor
    from lead_qualifier.main import app

    with patch.object(call_processor, "_crew", PostCallCrew(config=global_runtime_config)):
        with TestClient(app) as test_client:
            yield test_client


# ===========================================
# Pytest Configuration
# ===========================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
