"""
Tests for problem generation and its repair/fallback paths.
"""
import pytest

from mathtutor.core.agents.generator import ProblemGeneratorAgent
from mathtutor.core.providers.base import ProviderError
from mathtutor.schemas.problem import GeneratedProblem


@pytest.fixture
def generator(gateway):
    return ProblemGeneratorAgent(gateway)


@pytest.mark.asyncio
async def test_json_extracted_from_surrounding_prose(generator, scripted_provider):
    scripted_provider.responses = [
        'Extra text {"statement":"Solve 2x=4","solution":"x=2","explanation":"divide by 2"} trailing text'
    ]

    problem = await generator.generate("Algebra", "medium")

    assert problem == GeneratedProblem(statement="Solve 2x=4", solution="x=2", explanation="divide by 2")


@pytest.mark.asyncio
async def test_prompt_uses_generation_sampling_and_difficulty(generator, scripted_provider):
    scripted_provider.responses = ['{"statement": "s", "solution": "1", "explanation": "e"}']

    await generator.generate("Fractions", "HARD")

    call = scripted_provider.calls[0]
    assert call["temperature"] == 0.7
    assert call["max_tokens"] == 800
    assert "topic of Fractions with Hard difficulty" in call["prompt"]
    assert '"statement": "The problem statement"' in call["prompt"]


@pytest.mark.asyncio
async def test_unknown_difficulty_defaults_to_medium(generator, scripted_provider):
    scripted_provider.responses = ['{"statement": "s", "solution": "1", "explanation": "e"}']

    await generator.generate("Fractions", "impossible")

    assert "with Medium difficulty" in scripted_provider.calls[0]["prompt"]


@pytest.mark.asyncio
async def test_empty_response_returns_fallback_with_topic(generator, scripted_provider):
    scripted_provider.responses = [""]

    problem = await generator.generate("Geometry", "Easy")

    assert "Geometry" in problem.statement
    assert problem.statement == "Basic Geometry problem: What is 5 + 7?"
    assert problem.solution == "12"
    assert generator.is_fallback(problem, "Geometry")


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [
    "   \n ",
    "I cannot do that.",
    '{"statement": "unterminated',
    '{"solution": "4", "explanation": "no statement"}',
    '{"statement": "", "solution": "4", "explanation": "blank statement"}',
    '["statement", "solution"]',
])
async def test_unusable_responses_return_fallback(generator, scripted_provider, response):
    scripted_provider.responses = [response]

    problem = await generator.generate("Algebra")

    assert problem == generator.fallback("Algebra")


@pytest.mark.asyncio
async def test_missing_fields_are_reconstructed(generator, scripted_provider):
    scripted_provider.responses = ['{"Statement": "What is 3 * 4?", "solution": 12}']

    problem = await generator.generate("Arithmetic")

    assert problem == GeneratedProblem(statement="What is 3 * 4?", solution="12", explanation="")


@pytest.mark.asyncio
async def test_code_fences_and_trailing_commas_tolerated(generator, scripted_provider):
    scripted_provider.responses = [
        '```json\n{"statement": "Find x: x + 1 = 3", "solution": "2", "explanation": "subtract 1",}\n```'
    ]

    problem = await generator.generate("Algebra")

    assert problem.statement == "Find x: x + 1 = 3"
    assert problem.explanation == "subtract 1"


@pytest.mark.asyncio
async def test_provider_failure_returns_fallback(generator, scripted_provider):
    scripted_provider.responses = [ProviderError("connection refused")]

    problem = await generator.generate("Calculus")

    assert problem == generator.fallback("Calculus")


def test_fallback_serializes_to_canonical_shape(generator):
    assert generator.fallback("Algebra").to_json().startswith('{"statement":"Basic Algebra problem')
