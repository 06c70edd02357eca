"""
Answer-evaluation orchestrator.

Stored problems carry a canonical solution, so their answers are graded
deterministically by the symbolic oracle and the generator is never called.
Free-form problems go to the AI-backed evaluator, except polynomial
equations, which the oracle can solve on its own.
"""
import math
import re
from typing import Any, Iterator, List, Optional, Sequence

from starlette.concurrency import run_in_threadpool

from mathtutor.core.agents.evaluator import AnswerEvaluatorAgent
from mathtutor.core.agents.generator import ProblemGeneratorAgent
from mathtutor.core.agents.guidance import GuidanceAgent
from mathtutor.core.exceptions import ProblemNotFoundError
from mathtutor.core.gateway import GeneratorGateway
from mathtutor.core.tools.symbolic import SymbolicMathOracle
from mathtutor.repositories.base import ProblemRepository
from mathtutor.repositories.memory import InMemoryProblemRepository
from mathtutor.schemas.problem import AttemptResult, Difficulty, Evaluation, GeneratedProblem, Guidance
from mathtutor.settings import settings
from mathtutor.utils.logging import get_logger

logger = get_logger(__name__)

NON_ANSWER_FEEDBACK = (
    "Please provide a mathematical answer. If you're unsure, try to work through the problem step by step."
)
INVALID_EXPRESSION_FEEDBACK = (
    "Your answer is not a valid mathematical expression. Please check your input and try again."
)
CORRECT_PREFIX = "Correct! "
INCORRECT_PREFIX = "Incorrect. The correct answer is: "
EXPLANATION_PREFIX = ". Here's why: "
SAVED_PROBLEM_NAME = "{topic} Problem"

HEDGE_PHRASES = (
    "i don't know",
    "idk",
    "dont know",
    "don't know",
    "no idea",
    "not sure",
    "unsure",
    "maybe",
    "probably",
    "perhaps",
)

ROOT_TOLERANCE = 1e-6

_LEADING_ASSIGNMENT_RE = re.compile(r"^[a-z]\s*[=≈~]\s*")
_EQUATION_TERM = r"[-−+*/^().\d\sx²³]"
_EQUATION_RE = re.compile(_EQUATION_TERM + r"*x" + _EQUATION_TERM + r"*=" + _EQUATION_TERM + r"+")
_ANSWER_SPLIT_RE = re.compile(r",|;|\bor\b|\band\b", re.IGNORECASE)
_ANSWER_ASSIGNMENT_RE = re.compile(r"^[a-zA-Z]\w*\s*=\s*")
_PLUS_MINUS_RE = re.compile(r"^(±|\+/-|\+-)\s*")


def normalize_answer(answer: Optional[str]) -> str:
    """
    Canonicalise a raw student answer.

    Trims and lowercases, drops a leading single-variable assignment
    (``x = 3`` becomes ``3``), removes spaces and ``=``/``≈``/``~``, then
    writes ``pi`` and ``sqrt`` as ``π`` and ``√``. Applying it twice gives
    the same result as applying it once.
    """
    text = (answer or "").strip().lower()
    text = _LEADING_ASSIGNMENT_RE.sub("", text)
    for char in (" ", "=", "≈", "~"):
        text = text.replace(char, "")
    return text.replace("pi", "π").replace("sqrt", "√")


_NORMALIZED_HEDGES = frozenset(normalize_answer(phrase) for phrase in HEDGE_PHRASES)


def is_non_answer(normalized: str) -> bool:
    """True for an answer that is only a hedge phrase."""
    return normalized in _NORMALIZED_HEDGES


def _format_root(value: float) -> str:
    if abs(value - round(value)) < ROOT_TOLERANCE:
        return str(int(round(value)))
    return f"{value:.6g}"


def _join_roots(values: Sequence[float], variable: str = "x") -> str:
    parts = [f"{variable} = {_format_root(v)}" for v in values]
    if len(parts) == 1:
        return parts[0]
    return ", ".join(parts[:-1]) + " and " + parts[-1]


class AnswerEvaluationOrchestrator:
    """Entry point for generating problems, grading answers and giving guidance."""

    def __init__(
        self,
        oracle: Optional[SymbolicMathOracle] = None,
        repository: Optional[ProblemRepository] = None,
        gateway: Optional[GeneratorGateway] = None,
        generator: Optional[ProblemGeneratorAgent] = None,
        evaluator: Optional[AnswerEvaluatorAgent] = None,
        guidance: Optional[GuidanceAgent] = None,
        polynomial_markers: Optional[List[str]] = None,
    ):
        gateway = gateway or GeneratorGateway()
        self.oracle = oracle or SymbolicMathOracle()
        self.repository = repository or InMemoryProblemRepository()
        self.generator = generator or ProblemGeneratorAgent(gateway)
        self.evaluator = evaluator or AnswerEvaluatorAgent(gateway)
        self.guidance = guidance or GuidanceAgent(gateway)
        self.polynomial_markers = (
            polynomial_markers if polynomial_markers is not None else settings.get_polynomial_markers()
        )

    # Stored problems

    def evaluate_stored(self, problem: Any, user_answer: str) -> Evaluation:
        """
        Grade an answer against a problem's canonical solution.

        ``problem`` only needs ``solution`` and ``explanation`` attributes.
        Hedges are rejected before the oracle sees anything, and the oracle
        compares only after the answer has parsed. An empty answer does not
        parse and gets the invalid-expression message.
        """
        normalized = normalize_answer(user_answer)

        if is_non_answer(normalized):
            logger.info(f"Non-answer received: {user_answer!r}")
            return Evaluation(is_correct=False, feedback=NON_ANSWER_FEEDBACK)

        if not self.oracle.validate(normalized):
            logger.info(f"Answer is not a valid expression: {user_answer!r}")
            return Evaluation(is_correct=False, feedback=INVALID_EXPRESSION_FEEDBACK)

        if self.oracle.are_equivalent(normalized, normalize_answer(problem.solution)):
            return Evaluation(is_correct=True, feedback=CORRECT_PREFIX + problem.explanation)

        return Evaluation(
            is_correct=False,
            feedback=INCORRECT_PREFIX + problem.solution + EXPLANATION_PREFIX + problem.explanation,
        )

    async def evaluate_by_id(self, problem_id: int, user_answer: str) -> Evaluation:
        """
        Grade an answer against a stored problem.

        Raises:
            ProblemNotFoundError: If the repository has no such problem
        """
        problem = await self.repository.get_problem(problem_id)
        if problem is None:
            raise ProblemNotFoundError(problem_id)
        return await run_in_threadpool(self.evaluate_stored, problem, user_answer)

    async def evaluate_and_record(self, problem_id: int, user_id: str, user_answer: str) -> AttemptResult:
        """
        Grade an answer to a stored problem and record the attempt.

        A student is credited once per problem: after a correct attempt
        exists, later answers are still graded but nothing is stored.
        Otherwise earlier incorrect attempts are replaced by this one, which
        earns the difficulty's points when it is correct.

        Raises:
            ProblemNotFoundError: If the repository has no such problem
        """
        problem = await self.repository.get_problem(problem_id)
        if problem is None:
            raise ProblemNotFoundError(problem_id)
        evaluation = await run_in_threadpool(self.evaluate_stored, problem, user_answer)

        previous = await self.repository.list_attempts(user_id, problem_id)
        if any(attempt.is_correct for attempt in previous):
            logger.info(f"User {user_id} already solved problem {problem_id}; attempt not recorded")
            return AttemptResult(
                is_correct=evaluation.is_correct,
                feedback=evaluation.feedback,
                has_existing_correct_attempt=True,
            )

        for attempt in previous:
            await self.repository.delete_attempt(attempt.id)

        points = problem.difficulty.points if evaluation.is_correct else 0
        await self.repository.create_attempt({
            "user_id": user_id,
            "problem_id": problem_id,
            "user_answer": user_answer,
            "is_correct": evaluation.is_correct,
            "points_earned": points,
        })
        return AttemptResult(
            is_correct=evaluation.is_correct,
            feedback=evaluation.feedback,
            recorded=True,
            points_earned=points,
        )

    # Free-form problems

    async def evaluate_free_form(self, statement: str, user_answer: str) -> Evaluation:
        """Grade an answer to a problem that has no stored solution."""
        normalized = normalize_answer(user_answer)
        if not normalized:
            return Evaluation(is_correct=False, feedback=INVALID_EXPRESSION_FEEDBACK)
        if is_non_answer(normalized):
            logger.info(f"Non-answer received: {user_answer!r}")
            return Evaluation(is_correct=False, feedback=NON_ANSWER_FEEDBACK)

        verdict = await run_in_threadpool(self.grade_polynomial, statement, user_answer)
        if verdict is not None:
            return verdict

        return await self.evaluator.evaluate(statement, user_answer)

    def is_polynomial_problem(self, statement: str) -> bool:
        lowered = statement.lower()
        compact = lowered.replace(" ", "")
        if any(marker.replace(" ", "") in compact for marker in self.polynomial_markers):
            return True
        return "quadratic" in lowered and "equation" in lowered

    @staticmethod
    def extract_equations(statement: str) -> Iterator[str]:
        """Candidate ``... x ... = ...`` equations appearing in a statement."""
        for match in _EQUATION_RE.finditer(statement):
            candidate = match.group(0).strip().rstrip(".")
            if candidate:
                yield candidate

    def answer_values(self, user_answer: str) -> List[float]:
        """
        Numeric values listed in an answer such as ``x = 2 or x = 3`` or ``±3``.

        Empty when any listed part is not a plain number.
        """
        values: List[float] = []
        for part in _ANSWER_SPLIT_RE.split(user_answer):
            part = _ANSWER_ASSIGNMENT_RE.sub("", part.strip()).strip()
            if not part:
                continue

            sign = _PLUS_MINUS_RE.match(part)
            value = self.oracle.evaluate(part[sign.end():] if sign else part)
            if math.isnan(value):
                return []
            values.append(value)
            if sign:
                values.append(-value)
        return values

    def grade_polynomial(self, statement: str, user_answer: str) -> Optional[Evaluation]:
        """
        Grade a polynomial equation problem by solving it.

        Returns None when the statement is not such a problem or the answer is
        not a list of numbers, so the caller can fall back to the generator.
        """
        if not self.is_polynomial_problem(statement):
            return None

        roots: List[float] = []
        for equation in self.extract_equations(statement):
            roots = self.oracle.solve_polynomial(equation)
            if roots:
                break
        if not roots:
            logger.debug("Polynomial marker found but no solvable equation in statement")
            return None

        values = self.answer_values(user_answer)
        if not values:
            return None

        def is_root(value: float) -> bool:
            return any(abs(value - root) <= ROOT_TOLERANCE for root in roots)

        if not all(is_root(value) for value in values):
            return Evaluation(
                is_correct=False,
                feedback=f"{INCORRECT_PREFIX}{_join_roots(roots)}.",
            )

        found = [root for root in roots if any(abs(value - root) <= ROOT_TOLERANCE for value in values)]
        remaining = [root for root in roots if root not in found]

        if not remaining:
            if len(roots) == 1:
                feedback = f"Correct! The solution is {_join_roots(roots)}."
            else:
                feedback = f"Correct! The solutions are {_join_roots(roots)}."
        else:
            found_text = "is one of the solutions" if len(found) == 1 else "are among the solutions"
            other_text = "The other solution is" if len(remaining) == 1 else "The other solutions are"
            feedback = f"Correct! {_join_roots(found)} {found_text}. {other_text} {_join_roots(remaining)}."

        return Evaluation(is_correct=True, feedback=feedback)

    # Generation and guidance

    async def generate_problem(
        self,
        topic: str,
        difficulty: str = "Medium",
        save: bool = False,
        topic_id: Optional[int] = None,
    ) -> GeneratedProblem:
        """Generate a problem, saving it under topic_id when asked to."""
        problem = await self.generator.generate(topic, difficulty)

        if save and topic_id is not None:
            if self.generator.is_fallback(problem, topic):
                logger.warning(f"Not saving fallback problem for topic '{topic}'")
            else:
                stored = await self.repository.create_problem({
                    "name": SAVED_PROBLEM_NAME.format(topic=topic),
                    "statement": problem.statement,
                    "solution": problem.solution,
                    "explanation": problem.explanation,
                    "difficulty": Difficulty.parse(difficulty),
                    "topic_id": topic_id,
                })
                logger.info(f"Saved generated problem {stored.id} for topic {topic_id}")

        return problem

    async def get_guidance(
        self,
        problem: str,
        solution: str,
        user_answer: str,
        question: str,
    ) -> Guidance:
        return await self.guidance.get_guidance(problem, solution, user_answer, question)
