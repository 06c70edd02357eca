"""
Request schemas for API endpoints.

Field names follow the camelCase JSON used by the tutor front-end; the Python
attributes stay snake_case.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GenerateProblemRequest(BaseModel):
    """Request to generate (and optionally save) a problem."""

    model_config = ConfigDict(populate_by_name=True)

    topic: str = Field(..., description="Topic the problem should cover", min_length=1)
    difficulty: str = Field("Medium", description="Easy, Medium or Hard (case-insensitive)")
    save_to_database: bool = Field(False, alias="saveToDatabase", description="Persist the generated problem")
    topic_id: Optional[int] = Field(None, alias="topicId", description="Topic to attach a saved problem to")

    @field_validator("topic")
    @classmethod
    def validate_topic(cls, v: str) -> str:
        """Ensure topic is not empty."""
        v = v.strip()
        if not v:
            raise ValueError("Topic cannot be empty")
        return v


class EvaluateAnswerRequest(BaseModel):
    """Evaluate an answer against a stored problem."""

    model_config = ConfigDict(populate_by_name=True)

    problem_id: int = Field(..., alias="problemId", description="Stored problem identifier")
    user_answer: str = Field("", alias="userAnswer", description="The student's answer")


class DirectEvaluationRequest(BaseModel):
    """Evaluate an answer against a free-form problem statement."""

    model_config = ConfigDict(populate_by_name=True)

    problem: str = Field(..., description="Problem statement")
    user_answer: str = Field(..., alias="userAnswer", description="The student's answer")

    @field_validator("problem", "user_answer")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Both the problem and the answer are required."""
        if not v.strip():
            raise ValueError("Problem and answer are required")
        return v


class GuidanceRequest(BaseModel):
    """Ask for a hint on a problem."""

    model_config = ConfigDict(populate_by_name=True)

    problem: str = Field(..., min_length=1, description="Problem statement")
    solution: str = Field("", description="Correct solution")
    user_answer: str = Field("", alias="userAnswer", description="The student's current answer")
    question: str = Field(..., min_length=1, description="What the student is asking")


class RecordAttemptRequest(BaseModel):
    """Evaluate an answer to a stored problem and record the student's attempt."""

    model_config = ConfigDict(populate_by_name=True)

    problem_id: int = Field(..., alias="problemId", description="Stored problem identifier")
    user_id: str = Field(..., alias="userId", min_length=1, description="Student identifier")
    user_answer: str = Field("", alias="userAnswer", description="The student's answer")
