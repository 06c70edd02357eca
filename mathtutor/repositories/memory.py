"""
In-process problem repository.
"""
import asyncio
from typing import Any, Dict, List, Optional

from mathtutor.repositories.base import ProblemRepository
from mathtutor.schemas.problem import ProblemAttempt, StoredProblem


class InMemoryProblemRepository(ProblemRepository):
    """Dict-backed repository; ids start at 1 and are never reused."""

    def __init__(self):
        self._problems: Dict[int, StoredProblem] = {}
        self._next_id = 1
        self._attempts: Dict[int, ProblemAttempt] = {}
        self._next_attempt_id = 1
        self._lock = asyncio.Lock()

    async def get_problem(self, problem_id: int) -> Optional[StoredProblem]:
        return self._problems.get(problem_id)

    async def list_problems(self, topic_id: Optional[int] = None) -> List[StoredProblem]:
        problems = sorted(self._problems.values(), key=lambda p: p.id)
        if topic_id is None:
            return problems
        return [p for p in problems if p.topic_id == topic_id]

    async def create_problem(self, data: Dict[str, Any]) -> StoredProblem:
        async with self._lock:
            problem = StoredProblem.model_validate({**data, "id": self._next_id})
            self._problems[problem.id] = problem
            self._next_id += 1
        return problem

    async def delete_problem(self, problem_id: int) -> bool:
        return self._problems.pop(problem_id, None) is not None

    async def list_attempts(self, user_id: str, problem_id: Optional[int] = None) -> List[ProblemAttempt]:
        return [
            attempt
            for attempt in sorted(self._attempts.values(), key=lambda a: a.id)
            if attempt.user_id == user_id and (problem_id is None or attempt.problem_id == problem_id)
        ]

    async def create_attempt(self, data: Dict[str, Any]) -> ProblemAttempt:
        async with self._lock:
            attempt = ProblemAttempt.model_validate({**data, "id": self._next_attempt_id})
            self._attempts[attempt.id] = attempt
            self._next_attempt_id += 1
        return attempt

    async def delete_attempt(self, attempt_id: int) -> bool:
        return self._attempts.pop(attempt_id, None) is not None
