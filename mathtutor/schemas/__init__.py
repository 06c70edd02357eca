"""Request, response and domain schemas for the math tutor pipeline."""

from .problem import (
    Difficulty,
    Evaluation,
    GeneratedProblem,
    Guidance,
    StoredProblem,
)
from .request import (
    DirectEvaluationRequest,
    EvaluateAnswerRequest,
    GenerateProblemRequest,
    GuidanceRequest,
)
from .response import ErrorResponse, HealthResponse

__all__ = [
    # Domain models
    "Difficulty",
    "Evaluation",
    "GeneratedProblem",
    "Guidance",
    "StoredProblem",

    # Request schemas
    "DirectEvaluationRequest",
    "EvaluateAnswerRequest",
    "GenerateProblemRequest",
    "GuidanceRequest",

    # Response schemas
    "ErrorResponse",
    "HealthResponse",
]
