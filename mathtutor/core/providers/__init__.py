"""Generator provider implementations."""

from .base import BaseProvider, ProviderError, RateLimitError, TimeoutError
from .factory import create_provider
from .openai import OpenAIProvider
from .openrouter import OpenRouterProvider

__all__ = [
    "BaseProvider",
    "ProviderError",
    "RateLimitError",
    "TimeoutError",
    "create_provider",
    "OpenAIProvider",
    "OpenRouterProvider",
]
