"""Problem persistence adapters."""
from mathtutor.repositories.base import ProblemRepository
from mathtutor.repositories.memory import InMemoryProblemRepository
from mathtutor.settings import settings


def create_repository(backend: str = None) -> ProblemRepository:
    """Build the repository named by ``backend`` (default from settings)."""
    backend = backend or settings.repository_backend
    if backend == "memory":
        return InMemoryProblemRepository()
    elif backend == "redis":
        from mathtutor.repositories.redis_store import RedisProblemRepository
        return RedisProblemRepository.from_url(settings.redis_url)
    else:
        raise ValueError(f"Unknown repository backend: {backend}")


__all__ = ["ProblemRepository", "InMemoryProblemRepository", "create_repository"]
