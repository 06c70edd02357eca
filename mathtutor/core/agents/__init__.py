"""Generator-backed agents."""

from .base import AbstractAgent
from .evaluator import AnswerEvaluatorAgent
from .generator import ProblemGeneratorAgent
from .guidance import GuidanceAgent

__all__ = [
    "AbstractAgent",
    "AnswerEvaluatorAgent",
    "GuidanceAgent",
    "ProblemGeneratorAgent",
]
