"""
Response schemas for API endpoints.
"""
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    detail: Optional[Any] = Field(None, description="Additional error details")
    request_id: Optional[str] = Field(None, description="Request ID for debugging")

    class Config:
        json_schema_extra = {
            "example": {
                "error": "ProblemNotFoundError",
                "message": "Problem with ID 42 not found",
                "detail": None,
                "request_id": "req_123456",
            }
        }


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="API version")
    timestamp: datetime = Field(..., description="Current timestamp")
    provider: str = Field(..., description="Configured generator provider")
    provider_configured: bool = Field(..., description="Whether the generator provider can be created")
    repository: str = Field(..., description="Problem repository backend")
    repository_ok: bool = Field(..., description="Repository connectivity")
