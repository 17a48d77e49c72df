from unittest.mock import AsyncMock

import pytest

from agents.gateway import LLMGateway
from agents.orchestrator import Orchestrator
from utils.schemas import EvaluationResult, SessionStatus

SCENARIO = "A regional retailer is losing online customers at checkout and wants to know why."
FIRST_QUESTION = "How would you begin to approach this problem?"


@pytest.fixture
def gateway():
    gw = AsyncMock(spec=LLMGateway)
    gw.generate_scenario.return_value = SCENARIO
    gw.ask_first_question.return_value = FIRST_QUESTION
    gw.generate_sample_answer.return_value = "I would start by mapping the checkout funnel."
    return gw


@pytest.fixture
def evaluation():
    """Factory for EvaluationResult objects built from the LLM's JSON field names."""
    def _make(**overrides):
        data = {
            "feedback": "Good start.",
            "nextQuestion": "Q2",
            "nextQuestionCategory": "Elicitation and Collaboration",
            "isGameOver": False,
            "finalFeedback": "",
        }
        data.update(overrides)
        return EvaluationResult.model_validate(data)
    return _make


@pytest.fixture
def orchestrator(gateway):
    return Orchestrator(gateway, session_id="test-session")


def check_invariants(orchestrator: Orchestrator):
    session = orchestrator.session
    assert (session.status == SessionStatus.FINISHED) == (session.final_feedback != "")
    assert (session.status == SessionStatus.ERROR) == (session.last_error is not None)
    for turn in session.conversation[:-1]:
        assert turn.answer != ""
        assert turn.feedback != ""
    if session.settings is not None:
        assert len(session.conversation) <= session.settings.max_turns
