"""
Tests for the fixed prompt templates.
"""
import pytest
from pydantic import ValidationError

from mathtutor.core.agents.prompts import (
    EVALUATION_PROMPT,
    GENERATION_PROMPT,
    GUIDANCE_PROMPT,
    PromptSpec,
    get_evaluation_prompt,
    get_generation_prompt,
    get_guidance_prompt,
)


def test_sampling_parameters():
    assert (GENERATION_PROMPT.temperature, GENERATION_PROMPT.max_output_size) == (0.7, 800)
    assert (EVALUATION_PROMPT.temperature, EVALUATION_PROMPT.max_output_size) == (0.3, 500)
    assert (GUIDANCE_PROMPT.temperature, GUIDANCE_PROMPT.max_output_size) == (0.5, 600)


def test_generation_prompt_embeds_topic_and_difficulty():
    prompt = get_generation_prompt("Fractions {and} decimals", "Hard")

    assert "on the topic of Fractions {and} decimals with Hard difficulty level" in prompt
    assert '"statement"' in prompt
    assert "The first character should be '{' and the last character should be '}'." in prompt


def test_evaluation_prompt_fields():
    prompt = get_evaluation_prompt("What is 2 + 2?", "4")

    assert "Problem: What is 2 + 2?\nUser's Answer: 4" in prompt
    assert '"isCorrect": true/false' in prompt


def test_guidance_prompt_fields():
    prompt = get_guidance_prompt("x + 1 = 3", "x = 2", "x = 4", "What did I miss?")

    assert "Correct Solution: x = 2" in prompt
    assert "Student's Answer: x = 4" in prompt
    assert "Student's Question: What did I miss?" in prompt


def test_prompt_spec_is_immutable():
    with pytest.raises(ValidationError):
        GENERATION_PROMPT.temperature = 1.0
    with pytest.raises(ValidationError):
        PromptSpec(template="t", temperature=3.0, max_output_size=10)
