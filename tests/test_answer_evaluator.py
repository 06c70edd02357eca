"""
Tests for the AI-backed answer evaluator.
"""
import json

import pytest

from mathtutor.core.agents.evaluator import FALLBACK_FEEDBACK, AnswerEvaluatorAgent
from mathtutor.core.providers.base import TimeoutError


@pytest.fixture
def evaluator(gateway):
    return AnswerEvaluatorAgent(gateway)


@pytest.mark.asyncio
async def test_well_formed_verdict_is_returned(evaluator, scripted_provider):
    scripted_provider.responses = ['{"isCorrect": true, "feedback": "Nice work."}']

    evaluation = await evaluator.evaluate("What is 2+2?", "4")

    assert evaluation.is_correct is True
    assert evaluation.feedback == "Nice work."
    call = scripted_provider.calls[0]
    assert call["temperature"] == 0.3
    assert call["max_tokens"] == 500
    assert "Problem: What is 2+2?" in call["prompt"]
    assert "User's Answer: 4" in call["prompt"]


@pytest.mark.asyncio
async def test_missing_feedback_yields_fallback(evaluator, scripted_provider):
    scripted_provider.responses = ['{"isCorrect":true}']

    evaluation = await evaluator.evaluate("What is 2+2?", "4")

    assert evaluation.is_correct is False
    assert evaluation.feedback == FALLBACK_FEEDBACK


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [
    "",
    "Yes, that is right!",
    '{"isCorrect": "true", "feedback": "string flag"}',
    '{"isCorrect": true, "feedback": 42}',
    '{"feedback": "no verdict"}',
])
async def test_ambiguous_responses_resolve_to_incorrect(evaluator, scripted_provider, response):
    scripted_provider.responses = [response]

    evaluation = await evaluator.evaluate("p", "a")

    assert evaluation == evaluator.fallback()


@pytest.mark.asyncio
async def test_wrapped_and_case_insensitive_keys(evaluator, scripted_provider):
    scripted_provider.responses = ['Sure! ```json\n{"IsCorrect": false, "Feedback": "Check the sign."}\n```']

    evaluation = await evaluator.evaluate("p", "a")

    assert evaluation.is_correct is False
    assert evaluation.feedback == "Check the sign."


@pytest.mark.asyncio
async def test_timeout_yields_fallback(evaluator, scripted_provider):
    scripted_provider.responses = [TimeoutError("slow")]

    assert await evaluator.evaluate("p", "a") == evaluator.fallback()


def test_evaluation_serializes_with_camel_case_flag(evaluator):
    data = json.loads(evaluator.fallback().to_json())
    assert data == {"isCorrect": False, "feedback": FALLBACK_FEEDBACK}
