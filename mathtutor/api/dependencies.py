"""
Dependency injection for FastAPI endpoints.
"""
import uuid
from typing import Optional

from fastapi import Request

from mathtutor.core.gateway import GeneratorGateway
from mathtutor.core.orchestrators.evaluation import AnswerEvaluationOrchestrator
from mathtutor.repositories import create_repository
from mathtutor.repositories.base import ProblemRepository
from mathtutor.utils.logging import get_logger

logger = get_logger(__name__)

# Global instances (initialized in lifespan)
repository: Optional[ProblemRepository] = None
gateway: Optional[GeneratorGateway] = None
orchestrator: Optional[AnswerEvaluationOrchestrator] = None


def init_services() -> AnswerEvaluationOrchestrator:
    """Build the repository, gateway and orchestrator shared by all requests."""
    global repository, gateway, orchestrator

    repository = create_repository()
    gateway = GeneratorGateway()
    orchestrator = AnswerEvaluationOrchestrator(repository=repository, gateway=gateway)
    return orchestrator


async def shutdown_services() -> None:
    global repository, gateway, orchestrator

    if gateway is not None:
        await gateway.close()
    if repository is not None:
        await repository.close()
    repository = gateway = orchestrator = None


async def get_repository() -> ProblemRepository:
    """Get problem repository."""
    if repository is None:
        raise RuntimeError("Repository not initialized")
    return repository


async def get_orchestrator() -> AnswerEvaluationOrchestrator:
    """Get answer-evaluation orchestrator."""
    if orchestrator is None:
        raise RuntimeError("Orchestrator not initialized")
    return orchestrator


async def get_request_id(
    request: Request,
) -> str:
    """Get or generate request ID."""
    if hasattr(request.state, "request_id"):
        return request.state.request_id

    request_id = f"req_{uuid.uuid4().hex[:12]}"
    request.state.request_id = request_id
    return request_id
