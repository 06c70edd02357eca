"""Deterministic math tools used for grading."""

from .symbolic import SymbolicMathOracle

__all__ = ["SymbolicMathOracle"]
