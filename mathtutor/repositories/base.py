"""
Problem and attempt repository contract.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from mathtutor.schemas.problem import ProblemAttempt, StoredProblem


class ProblemRepository(ABC):
    """Persistence seam for problems and attempts. Absent ids are reported as None/False."""

    @abstractmethod
    async def get_problem(self, problem_id: int) -> Optional[StoredProblem]:
        pass

    @abstractmethod
    async def list_problems(self, topic_id: Optional[int] = None) -> List[StoredProblem]:
        pass

    @abstractmethod
    async def create_problem(self, data: Dict[str, Any]) -> StoredProblem:
        """
        Store a new problem.

        Args:
            data: StoredProblem fields without ``id``

        Returns:
            The stored problem with its assigned id
        """
        pass

    @abstractmethod
    async def delete_problem(self, problem_id: int) -> bool:
        pass

    @abstractmethod
    async def list_attempts(self, user_id: str, problem_id: Optional[int] = None) -> List[ProblemAttempt]:
        """A student's attempts, oldest first, optionally for one problem."""
        pass

    @abstractmethod
    async def create_attempt(self, data: Dict[str, Any]) -> ProblemAttempt:
        pass

    @abstractmethod
    async def delete_attempt(self, attempt_id: int) -> bool:
        pass

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        pass
