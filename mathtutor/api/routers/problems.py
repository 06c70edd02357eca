"""
Problem endpoints: generation, evaluation, attempts and guidance.
"""
from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException, status

from mathtutor.api.dependencies import get_orchestrator, get_repository, get_request_id
from mathtutor.core.exceptions import ProblemNotFoundError
from mathtutor.core.orchestrators.evaluation import AnswerEvaluationOrchestrator
from mathtutor.repositories.base import ProblemRepository
from mathtutor.schemas.problem import (
    AttemptResult,
    Evaluation,
    GeneratedProblem,
    Guidance,
    ProblemAttempt,
    StoredProblem,
)
from mathtutor.schemas.request import (
    DirectEvaluationRequest,
    EvaluateAnswerRequest,
    GenerateProblemRequest,
    GuidanceRequest,
    RecordAttemptRequest,
)
from mathtutor.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/problems",
    tags=["problems"],
)


@router.post("/generate", response_model=GeneratedProblem)
async def generate_problem(
    request: GenerateProblemRequest,
    orchestrator: Annotated[AnswerEvaluationOrchestrator, Depends(get_orchestrator)],
    request_id: Annotated[str, Depends(get_request_id)],
) -> GeneratedProblem:
    """
    Generate a problem for a topic.

    With ``saveToDatabase`` and a ``topicId`` the problem is also stored,
    unless generation fell back to the fixed placeholder problem.
    """
    logger.info(
        f"Generate request: topic={request.topic!r} difficulty={request.difficulty!r} "
        f"save={request.save_to_database} [request_id={request_id}]"
    )
    return await orchestrator.generate_problem(
        topic=request.topic,
        difficulty=request.difficulty,
        save=request.save_to_database,
        topic_id=request.topic_id,
    )


@router.post("/evaluate", response_model=Evaluation)
async def evaluate_answer(
    request: EvaluateAnswerRequest,
    orchestrator: Annotated[AnswerEvaluationOrchestrator, Depends(get_orchestrator)],
    request_id: Annotated[str, Depends(get_request_id)],
) -> Evaluation:
    """Grade an answer against a stored problem's solution."""
    logger.info(f"Evaluate request: problem_id={request.problem_id} [request_id={request_id}]")
    try:
        return await orchestrator.evaluate_by_id(request.problem_id, request.user_answer)
    except ProblemNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post("/evaluate-and-save", response_model=AttemptResult)
async def evaluate_and_save(
    request: RecordAttemptRequest,
    orchestrator: Annotated[AnswerEvaluationOrchestrator, Depends(get_orchestrator)],
    request_id: Annotated[str, Depends(get_request_id)],
) -> AttemptResult:
    """Grade an answer to a stored problem and record it as the student's attempt."""
    logger.info(
        f"Evaluate-and-save request: problem_id={request.problem_id} user={request.user_id} "
        f"[request_id={request_id}]"
    )
    try:
        return await orchestrator.evaluate_and_record(request.problem_id, request.user_id, request.user_answer)
    except ProblemNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post("/evaluate-direct", response_model=Evaluation)
async def evaluate_direct(
    request: DirectEvaluationRequest,
    orchestrator: Annotated[AnswerEvaluationOrchestrator, Depends(get_orchestrator)],
    request_id: Annotated[str, Depends(get_request_id)],
) -> Evaluation:
    """Grade an answer to a free-form problem statement."""
    logger.info(f"Direct evaluate request: {request.problem[:100]}... [request_id={request_id}]")
    return await orchestrator.evaluate_free_form(request.problem, request.user_answer)


@router.post("/guidance", response_model=Guidance)
async def get_guidance(
    request: GuidanceRequest,
    orchestrator: Annotated[AnswerEvaluationOrchestrator, Depends(get_orchestrator)],
    request_id: Annotated[str, Depends(get_request_id)],
) -> Guidance:
    """Answer a student's question about a problem."""
    logger.info(f"Guidance request: {request.question[:100]} [request_id={request_id}]")
    return await orchestrator.get_guidance(
        problem=request.problem,
        solution=request.solution,
        user_answer=request.user_answer,
        question=request.question,
    )


@router.get("/attempts/{user_id}", response_model=List[ProblemAttempt])
async def list_attempts(
    user_id: str,
    repository: Annotated[ProblemRepository, Depends(get_repository)],
) -> List[ProblemAttempt]:
    return await repository.list_attempts(user_id)


@router.get("/{problem_id}", response_model=StoredProblem)
async def get_problem(
    problem_id: int,
    repository: Annotated[ProblemRepository, Depends(get_repository)],
) -> StoredProblem:
    """Fetch a stored problem."""
    problem = await repository.get_problem(problem_id)
    if problem is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(ProblemNotFoundError(problem_id)),
        )
    return problem
