"""
Guidance agent.

Guidance is advisory, so any text the generator produced is worth more to a
student than a hard failure. Extraction walks an ordered chain of strategies
and only an empty response (or a failed call) yields the fixed fallback.
"""
import json
import re
from typing import Callable, List, Optional

from mathtutor.core.agents.base import AbstractAgent
from mathtutor.core.agents.prompts.guidance_prompt import GUIDANCE_PROMPT
from mathtutor.core.agents.prompts.prompt_spec import PromptSpec
from mathtutor.core.gateway import GeneratorGateway
from mathtutor.schemas.problem import Guidance
from mathtutor.utils.json_tools import extract_json_object, get_property, loads_permissive
from mathtutor.utils.logging import get_logger

logger = get_logger(__name__)

FALLBACK_GUIDANCE = (
    "I recommend reviewing the problem step-by-step. Break it down into smaller parts and solve "
    "each part separately. Check your calculations carefully and make sure you understand the "
    "concepts involved."
)

MAX_GUIDANCE_LENGTH = 500

_GUIDANCE_FIELD_RE = re.compile(r'"guidance"\s*:\s*"((?:[^"\\]|\\.)*)"', re.IGNORECASE | re.DOTALL)
_GUIDANCE_LOOSE_RE = re.compile(r"guidance.*?:.*?[\"'](.+?)[\"']", re.IGNORECASE | re.DOTALL)


def _unescape(value: str) -> str:
    try:
        return json.loads(f'"{value}"')
    except ValueError:
        return value


def from_strict_json(text: str) -> Optional[str]:
    """The whole response is a JSON object carrying ``guidance``."""
    try:
        data = loads_permissive(text.strip())
    except ValueError:
        return None
    value = get_property(data, "guidance")
    return value if isinstance(value, str) else None


def from_embedded_json(text: str) -> Optional[str]:
    """A JSON object wrapped in fences or prose carries ``guidance``."""
    candidate = extract_json_object(text)
    if not candidate.startswith("{"):
        return None
    return from_strict_json(candidate)


def from_field_pattern(text: str) -> Optional[str]:
    """A ``"guidance": "..."`` pair appears somewhere in otherwise broken text."""
    match = _GUIDANCE_FIELD_RE.search(text)
    return _unescape(match.group(1)) if match else None


def from_loose_pattern(text: str) -> Optional[str]:
    """Anything shaped like ``guidance ... : ... "value"``, single quotes allowed."""
    match = _GUIDANCE_LOOSE_RE.search(text)
    return match.group(1) if match else None


def truncate(text: str, limit: int = MAX_GUIDANCE_LENGTH) -> str:
    """Use the raw text itself, cut to at most ``limit`` characters."""
    text = text.strip()
    if len(text) <= limit:
        return text
    return text[:limit - 3].rstrip() + "..."


EXTRACTION_STRATEGIES: List[Callable[[str], Optional[str]]] = [
    from_strict_json,
    from_embedded_json,
    from_field_pattern,
    from_loose_pattern,
]


def extract_guidance(text: str) -> str:
    """Run the extraction chain; the first non-blank result wins."""
    for strategy in EXTRACTION_STRATEGIES:
        value = strategy(text)
        if value and value.strip():
            logger.debug(f"Guidance extracted via {strategy.__name__}")
            return value.strip()
    logger.warning("No structured guidance found, using truncated raw response")
    return truncate(text)


class GuidanceAgent(AbstractAgent):
    """Answers a student's question about a problem."""

    def __init__(
        self,
        gateway: GeneratorGateway,
        prompt_spec: PromptSpec = GUIDANCE_PROMPT,
    ):
        super().__init__(role="guidance", gateway=gateway, prompt_spec=prompt_spec)

    def fallback(self) -> Guidance:
        return Guidance(guidance=FALLBACK_GUIDANCE)

    async def get_guidance(
        self,
        problem: str,
        solution: str,
        user_answer: str,
        question: str,
    ) -> Guidance:
        prompt = self.prompt_spec.render(
            problem=problem,
            solution=solution,
            user_answer=user_answer,
            question=question,
        )

        try:
            response = await self._generate(prompt)
        except Exception as e:
            logger.error(f"Guidance generation failed: {type(e).__name__}: {e}")
            return self.fallback()

        if not response or not response.strip():
            logger.warning("Empty guidance response, using fallback guidance")
            return self.fallback()

        return Guidance(guidance=extract_guidance(response))
