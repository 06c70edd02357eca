"""Orchestrators combining agents, the oracle and persistence."""

from .evaluation import AnswerEvaluationOrchestrator, is_non_answer, normalize_answer

__all__ = ["AnswerEvaluationOrchestrator", "is_non_answer", "normalize_answer"]
