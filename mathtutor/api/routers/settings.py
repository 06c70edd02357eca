"""
Settings endpoint exposing the active (non-secret) configuration.
"""
from fastapi import APIRouter
from pydantic import BaseModel

from mathtutor.settings import settings

router = APIRouter(
    prefix="/settings",
    tags=["settings"],
)


class SettingsResponse(BaseModel):
    """Response containing current settings."""

    llm_provider: str
    model_name: str
    available_providers: list[str] = ["openai", "openrouter"]
    generator_timeout: float
    default_temperature: float
    default_max_tokens: int
    max_expression_length: int
    polynomial_markers: list[str]
    repository_backend: str


@router.get("", response_model=SettingsResponse)
async def get_settings() -> SettingsResponse:
    """Get current system settings."""
    return SettingsResponse(
        llm_provider=settings.llm_provider,
        model_name=settings.get_model_name(),
        generator_timeout=settings.generator_timeout,
        default_temperature=settings.default_temperature,
        default_max_tokens=settings.default_max_tokens,
        max_expression_length=settings.max_expression_length,
        polynomial_markers=settings.get_polynomial_markers(),
        repository_backend=settings.repository_backend,
    )
