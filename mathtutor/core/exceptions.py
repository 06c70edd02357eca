"""
Domain exceptions raised by the evaluation pipeline.
"""


class MathTutorError(Exception):
    """Base exception for pipeline errors that callers are expected to handle."""
    pass


class ProblemNotFoundError(MathTutorError):
    """A stored problem was requested by id and does not exist."""

    def __init__(self, problem_id: int):
        self.problem_id = problem_id
        super().__init__(f"Problem with ID {problem_id} not found")
