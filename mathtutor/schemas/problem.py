"""
Domain models shared by the agents, the orchestrator and the API.

Every value the pipeline hands back to a caller is one of these models, so
its shape is guaranteed whether it came from the generator, from repair or
from a fixed fallback.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Difficulty(str, Enum):
    """Problem difficulty level."""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"

    @classmethod
    def parse(cls, value: Any) -> "Difficulty":
        """Case-insensitive lookup; anything unrecognised is Medium."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in cls:
                if member.value.lower() == wanted:
                    return member
        return cls.MEDIUM

    @property
    def points(self) -> int:
        """Points credited for the first correct attempt."""
        return DIFFICULTY_POINTS[self]


DIFFICULTY_POINTS = {
    Difficulty.EASY: 1,
    Difficulty.MEDIUM: 2,
    Difficulty.HARD: 3,
}


class GeneratedProblem(BaseModel):
    """A math problem as produced by the generator (or its fallback)."""

    model_config = ConfigDict(frozen=True)

    statement: str = Field(..., min_length=1, description="Problem statement")
    solution: str = Field("", description="Correct answer")
    explanation: str = Field("", description="Short worked explanation")

    def to_json(self) -> str:
        return self.model_dump_json()


class Evaluation(BaseModel):
    """Verdict on a student's answer."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    is_correct: bool = Field(..., alias="isCorrect", description="Whether the answer is correct")
    feedback: str = Field(..., description="Feedback shown to the student")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class Guidance(BaseModel):
    """Tutoring hint answering a student's question."""

    model_config = ConfigDict(frozen=True)

    guidance: str = Field(..., description="Guidance text")

    def to_json(self) -> str:
        return self.model_dump_json()


class StoredProblem(BaseModel):
    """A problem persisted through a repository."""

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., description="Repository-assigned identifier")
    name: str = Field(..., description="Display name")
    statement: str = Field(..., description="Problem statement")
    solution: str = Field("", description="Correct answer")
    explanation: str = Field("", description="Worked explanation")
    difficulty: Difficulty = Field(Difficulty.MEDIUM, description="Difficulty level")
    topic_id: Optional[int] = Field(None, alias="topicId", description="Owning topic")

    @field_validator("difficulty", mode="before")
    @classmethod
    def parse_difficulty(cls, v: Any) -> Difficulty:
        return Difficulty.parse(v)


class ProblemAttempt(BaseModel):
    """A student's recorded answer to a stored problem."""

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., description="Repository-assigned identifier")
    user_id: str = Field(..., alias="userId", description="Student identifier")
    problem_id: int = Field(..., alias="problemId", description="Attempted problem")
    user_answer: str = Field("", alias="userAnswer", description="Answer as the student typed it")
    is_correct: bool = Field(False, alias="isCorrect", description="Verdict at the time of the attempt")
    points_earned: int = Field(0, ge=0, alias="pointsEarned", description="Points credited for this attempt")
    attempted_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        alias="attemptedAt",
        description="When the attempt was recorded",
    )


class AttemptResult(BaseModel):
    """Verdict on an answer plus what happened to the attempt record."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    is_correct: bool = Field(..., alias="isCorrect")
    feedback: str = Field(...)
    has_existing_correct_attempt: bool = Field(
        False,
        alias="hasExistingCorrectAttempt",
        description="The student had already solved this problem before this answer",
    )
    recorded: bool = Field(False, description="Whether a new attempt was stored")
    points_earned: int = Field(0, alias="pointsEarned")
