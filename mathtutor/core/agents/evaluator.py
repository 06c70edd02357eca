"""
AI-backed answer evaluator agent.

Used for free-form problems that have no stored canonical solution. A verdict
of "correct" is only ever taken from a well-formed generator response; any
doubt resolves to the incorrect fallback.
"""
from mathtutor.core.agents.base import AbstractAgent
from mathtutor.core.agents.prompts.evaluate_prompt import EVALUATION_PROMPT
from mathtutor.core.agents.prompts.prompt_spec import PromptSpec
from mathtutor.core.gateway import GeneratorGateway
from mathtutor.schemas.problem import Evaluation
from mathtutor.utils.json_tools import extract_json_object, get_property, has_properties, loads_permissive
from mathtutor.utils.logging import get_logger

logger = get_logger(__name__)

FALLBACK_FEEDBACK = "Your answer appears to be incorrect. Please check your work and try again."


class AnswerEvaluatorAgent(AbstractAgent):
    """Asks the generator whether an answer solves a problem."""

    def __init__(
        self,
        gateway: GeneratorGateway,
        prompt_spec: PromptSpec = EVALUATION_PROMPT,
    ):
        super().__init__(role="evaluator", gateway=gateway, prompt_spec=prompt_spec)

    def fallback(self) -> Evaluation:
        return Evaluation(is_correct=False, feedback=FALLBACK_FEEDBACK)

    async def evaluate(self, problem: str, user_answer: str) -> Evaluation:
        prompt = self.prompt_spec.render(problem=problem, user_answer=user_answer)

        try:
            response = await self._generate(prompt)
        except Exception as e:
            logger.error(f"Answer evaluation failed: {type(e).__name__}: {e}")
            return self.fallback()

        return self.parse_response(response)

    def parse_response(self, response: str) -> Evaluation:
        if not response or not response.strip():
            logger.warning("Empty evaluator response, using fallback evaluation")
            return self.fallback()

        candidate = extract_json_object(response)
        if not has_properties(candidate, "isCorrect", "feedback"):
            logger.warning("Evaluator response is malformed or incomplete, using fallback evaluation")
            return self.fallback()

        data = loads_permissive(candidate)
        is_correct = get_property(data, "isCorrect")
        feedback = get_property(data, "feedback")
        if not isinstance(is_correct, bool) or not isinstance(feedback, str):
            logger.warning(
                f"Evaluator response has wrong field types "
                f"(isCorrect={type(is_correct).__name__}, feedback={type(feedback).__name__}), using fallback"
            )
            return self.fallback()

        return Evaluation(is_correct=is_correct, feedback=feedback)
