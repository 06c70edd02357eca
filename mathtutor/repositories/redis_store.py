"""
Redis-backed problem repository.

Layout:
    problem:next_id         INCR counter for ids
    problem:{id}            hash of StoredProblem fields
    topic:{topic_id}:problems  set of problem ids per topic
    problems                set of all problem ids
    attempt:next_id         INCR counter for attempt ids
    attempt:{id}            hash of ProblemAttempt fields
    user:{user_id}:attempts set of attempt ids per student
"""
from typing import Any, Dict, List, Optional

import redis.asyncio as redis

from mathtutor.repositories.base import ProblemRepository
from mathtutor.schemas.problem import ProblemAttempt, StoredProblem
from mathtutor.utils.logging import get_logger

logger = get_logger(__name__)

NEXT_ID_KEY = "problem:next_id"
ALL_PROBLEMS_KEY = "problems"
NEXT_ATTEMPT_ID_KEY = "attempt:next_id"


def _problem_key(problem_id: int) -> str:
    return f"problem:{problem_id}"


def _topic_key(topic_id: int) -> str:
    return f"topic:{topic_id}:problems"


def _to_hash(problem: StoredProblem) -> Dict[str, str]:
    data = problem.model_dump(mode="json")
    # redis hashes cannot hold None
    return {key: "" if value is None else str(value) for key, value in data.items()}


def _from_hash(data: Dict[str, str]) -> StoredProblem:
    topic_id = data.get("topic_id")
    return StoredProblem(
        id=int(data["id"]),
        name=data.get("name", ""),
        statement=data.get("statement", ""),
        solution=data.get("solution", ""),
        explanation=data.get("explanation", ""),
        difficulty=data.get("difficulty"),
        topic_id=int(topic_id) if topic_id else None,
    )


def _attempt_key(attempt_id: int) -> str:
    return f"attempt:{attempt_id}"


def _user_attempts_key(user_id: str) -> str:
    return f"user:{user_id}:attempts"


def _attempt_to_hash(attempt: ProblemAttempt) -> Dict[str, str]:
    data = attempt.model_dump(mode="json")
    data["is_correct"] = "1" if attempt.is_correct else "0"
    return {key: str(value) for key, value in data.items()}


def _attempt_from_hash(data: Dict[str, str]) -> ProblemAttempt:
    return ProblemAttempt(
        id=int(data["id"]),
        user_id=data["user_id"],
        problem_id=int(data["problem_id"]),
        user_answer=data.get("user_answer", ""),
        is_correct=data.get("is_correct") == "1",
        points_earned=int(data.get("points_earned") or 0),
        attempted_at=data["attempted_at"],
    )


class RedisProblemRepository(ProblemRepository):
    """Stores problems as Redis hashes."""

    def __init__(self, client: redis.Redis):
        self.client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisProblemRepository":
        return cls(redis.from_url(url, encoding="utf-8", decode_responses=True))

    async def get_problem(self, problem_id: int) -> Optional[StoredProblem]:
        data = await self.client.hgetall(_problem_key(problem_id))
        if not data:
            return None
        return _from_hash(data)

    async def list_problems(self, topic_id: Optional[int] = None) -> List[StoredProblem]:
        key = ALL_PROBLEMS_KEY if topic_id is None else _topic_key(topic_id)
        ids = sorted(int(member) for member in await self.client.smembers(key))

        problems = []
        for problem_id in ids:
            problem = await self.get_problem(problem_id)
            if problem is not None:
                problems.append(problem)
        return problems

    async def create_problem(self, data: Dict[str, Any]) -> StoredProblem:
        problem_id = await self.client.incr(NEXT_ID_KEY)
        problem = StoredProblem.model_validate({**data, "id": problem_id})

        async with self.client.pipeline(transaction=True) as pipe:
            pipe.hset(_problem_key(problem_id), mapping=_to_hash(problem))
            pipe.sadd(ALL_PROBLEMS_KEY, problem_id)
            if problem.topic_id is not None:
                pipe.sadd(_topic_key(problem.topic_id), problem_id)
            await pipe.execute()

        logger.info(f"Stored problem {problem_id} (topic={problem.topic_id})")
        return problem

    async def delete_problem(self, problem_id: int) -> bool:
        problem = await self.get_problem(problem_id)
        if problem is None:
            return False

        async with self.client.pipeline(transaction=True) as pipe:
            pipe.delete(_problem_key(problem_id))
            pipe.srem(ALL_PROBLEMS_KEY, problem_id)
            if problem.topic_id is not None:
                pipe.srem(_topic_key(problem.topic_id), problem_id)
            await pipe.execute()
        return True

    async def get_attempt(self, attempt_id: int) -> Optional[ProblemAttempt]:
        data = await self.client.hgetall(_attempt_key(attempt_id))
        if not data:
            return None
        return _attempt_from_hash(data)

    async def list_attempts(self, user_id: str, problem_id: Optional[int] = None) -> List[ProblemAttempt]:
        ids = sorted(int(member) for member in await self.client.smembers(_user_attempts_key(user_id)))

        attempts = []
        for attempt_id in ids:
            attempt = await self.get_attempt(attempt_id)
            if attempt is not None and (problem_id is None or attempt.problem_id == problem_id):
                attempts.append(attempt)
        return attempts

    async def create_attempt(self, data: Dict[str, Any]) -> ProblemAttempt:
        attempt_id = await self.client.incr(NEXT_ATTEMPT_ID_KEY)
        attempt = ProblemAttempt.model_validate({**data, "id": attempt_id})

        async with self.client.pipeline(transaction=True) as pipe:
            pipe.hset(_attempt_key(attempt_id), mapping=_attempt_to_hash(attempt))
            pipe.sadd(_user_attempts_key(attempt.user_id), attempt_id)
            await pipe.execute()

        logger.info(f"Stored attempt {attempt_id} (user={attempt.user_id}, problem={attempt.problem_id})")
        return attempt

    async def delete_attempt(self, attempt_id: int) -> bool:
        attempt = await self.get_attempt(attempt_id)
        if attempt is None:
            return False

        async with self.client.pipeline(transaction=True) as pipe:
            pipe.delete(_attempt_key(attempt_id))
            pipe.srem(_user_attempts_key(attempt.user_id), attempt_id)
            await pipe.execute()
        return True

    async def ping(self) -> bool:
        try:
            return bool(await self.client.ping())
        except redis.RedisError as e:
            logger.warning(f"Redis ping failed: {e}")
            return False

    async def close(self) -> None:
        await self.client.close()
