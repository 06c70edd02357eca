"""Prompt templates and their sampling settings, one per generator task."""

from .evaluate_prompt import EVALUATION_PROMPT, get_evaluation_prompt
from .generation_prompt import GENERATION_PROMPT, get_generation_prompt
from .guidance_prompt import GUIDANCE_PROMPT, get_guidance_prompt
from .prompt_spec import PromptSpec

__all__ = [
    "PromptSpec",
    "EVALUATION_PROMPT",
    "GENERATION_PROMPT",
    "GUIDANCE_PROMPT",
    "get_evaluation_prompt",
    "get_generation_prompt",
    "get_guidance_prompt",
]
