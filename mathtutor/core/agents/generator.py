"""
Problem generator agent.
"""
from mathtutor.core.agents.base import AbstractAgent
from mathtutor.core.agents.prompts.generation_prompt import GENERATION_PROMPT
from mathtutor.core.agents.prompts.prompt_spec import PromptSpec
from mathtutor.core.gateway import GeneratorGateway
from mathtutor.schemas.problem import Difficulty, GeneratedProblem
from mathtutor.utils.json_tools import (
    as_text,
    extract_json_object,
    get_property,
    has_properties,
    is_well_formed,
    loads_permissive,
    reconstruct,
)
from mathtutor.utils.logging import get_logger

logger = get_logger(__name__)

FALLBACK_STATEMENT = "Basic {topic} problem: What is 5 + 7?"
FALLBACK_SOLUTION = "12"
FALLBACK_EXPLANATION = (
    "Add the numbers: 5 + 7 = 12. This is a fallback problem because the system "
    "could not generate a custom problem."
)


class ProblemGeneratorAgent(AbstractAgent):
    """Generates a math problem for a topic and difficulty."""

    def __init__(
        self,
        gateway: GeneratorGateway,
        prompt_spec: PromptSpec = GENERATION_PROMPT,
    ):
        super().__init__(role="generator", gateway=gateway, prompt_spec=prompt_spec)

    def fallback(self, topic: str) -> GeneratedProblem:
        return GeneratedProblem(
            statement=FALLBACK_STATEMENT.format(topic=topic),
            solution=FALLBACK_SOLUTION,
            explanation=FALLBACK_EXPLANATION,
        )

    def is_fallback(self, problem: GeneratedProblem, topic: str) -> bool:
        """True if problem is exactly the fallback for topic."""
        return problem == self.fallback(topic)

    async def generate(self, topic: str, difficulty: str = "Medium") -> GeneratedProblem:
        """
        Generate a problem.

        Args:
            topic: Topic name, embedded verbatim in the prompt
            difficulty: Easy, Medium or Hard; anything else means Medium

        Returns:
            The generated problem, a repaired version of it, or the fallback
        """
        level = Difficulty.parse(difficulty)
        prompt = self.prompt_spec.render(topic=topic, difficulty=level.value)

        try:
            response = await self._generate(prompt)
        except Exception as e:
            logger.error(f"Problem generation failed for topic '{topic}': {type(e).__name__}: {e}")
            return self.fallback(topic)

        return self.parse_response(response, topic)

    def parse_response(self, response: str, topic: str) -> GeneratedProblem:
        """Validate raw generator text, repairing it where a statement survives."""
        if not response or not response.strip():
            logger.warning(f"Empty generator response for topic '{topic}', using fallback problem")
            return self.fallback(topic)

        candidate = extract_json_object(response)
        if not is_well_formed(candidate):
            logger.warning(f"Generator response for topic '{topic}' is not valid JSON, using fallback problem")
            return self.fallback(topic)

        data = loads_permissive(candidate)
        statement = as_text(get_property(data, "statement"))
        if not has_properties(candidate, "statement") or not statement.strip():
            logger.warning(f"Generator response for topic '{topic}' has no statement, using fallback problem")
            return self.fallback(topic)

        if not has_properties(candidate, "solution", "explanation"):
            logger.warning(f"Generator response for topic '{topic}' is missing fields, reconstructing")
            return GeneratedProblem.model_validate_json(reconstruct(candidate))

        return GeneratedProblem(
            statement=statement,
            solution=as_text(get_property(data, "solution")),
            explanation=as_text(get_property(data, "explanation")),
        )
