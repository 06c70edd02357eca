"""
Application settings using Pydantic BaseSettings for environment variable management.
"""
from typing import Optional
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="mathtutor-pipeline", description="Application name")
    env: str = Field(default="development", description="Environment (development/staging/production)")
    debug: bool = Field(default=False, description="Debug mode")

    # API Settings
    api_v1_str: str = Field(default="/api/v1", description="API version prefix")

    # Generator (LLM provider) settings
    llm_provider: str = Field(default="openai", description="LLM provider to use")
    model_openai: str = Field(default="gpt-4o-mini", description="OpenAI model name")
    model_openrouter: str = Field(default="google/gemini-2.0-flash-001", description="OpenRouter model name")
    openai_api_key: Optional[SecretStr] = Field(default=None, description="OpenAI API key")
    openrouter_api_key: Optional[SecretStr] = Field(default=None, description="OpenRouter API key")
    openrouter_base_url: str = Field(
        default="https://openrouter.ai/api/v1",
        description="Base URL of the OpenRouter (or any OpenAI-compatible) endpoint",
    )

    # Sampling defaults used when a caller does not pass its own
    default_temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Default sampling temperature")
    default_max_tokens: int = Field(default=1024, ge=1, description="Default maximum output tokens")
    generator_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Request-level timeout for one generator call in seconds (timeout counts as an empty response)",
    )

    # Symbolic math oracle
    max_expression_length: int = Field(default=200, ge=1, description="Longest expression the oracle will parse")
    polynomial_markers: str = Field(
        default="x^2,x²,x**2,x^3,x³",
        description="Statement markers routing free-form problems to the polynomial solver (comma-separated)",
    )

    # Persistence
    repository_backend: str = Field(default="memory", description="Problem repository backend (memory/redis)")
    redis_url: str = Field(default="redis://localhost:6379/0", description="Redis connection URL")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="plain", description="Log format (json/plain)")

    # CORS Configuration
    cors_origins: str = Field(default="http://localhost:3000", description="CORS allowed origins (comma-separated)")

    @field_validator("llm_provider")
    @classmethod
    def validate_llm_provider(cls, v: str) -> str:
        """Validate LLM provider is supported."""
        supported = ["openai", "openrouter"]
        if v not in supported:
            raise ValueError(f"LLM provider must be one of {supported}")
        return v

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        allowed = ["development", "staging", "production"]
        if v not in allowed:
            raise ValueError(f"Environment must be one of {allowed}")
        return v

    @field_validator("repository_backend")
    @classmethod
    def validate_repository_backend(cls, v: str) -> str:
        """Validate repository backend name."""
        allowed = ["memory", "redis"]
        if v not in allowed:
            raise ValueError(f"Repository backend must be one of {allowed}")
        return v

    def get_model_name(self) -> str:
        """Get the model name for the configured LLM provider."""
        if self.llm_provider == "openai":
            return self.model_openai
        elif self.llm_provider == "openrouter":
            return self.model_openrouter
        else:
            raise ValueError(f"Unknown LLM provider: {self.llm_provider}")

    def get_polynomial_markers(self) -> list[str]:
        """Get the statement markers that identify polynomial equations."""
        return [marker.strip().lower() for marker in self.polynomial_markers.split(",") if marker.strip()]


# Global settings instance
settings = Settings()
