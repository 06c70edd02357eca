"""
Base provider interface for generator (LLM) interactions.
"""
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

from mathtutor.utils.logging import get_logger

logger = get_logger(__name__)


class ProviderError(Exception):
    """Base exception for provider errors."""
    pass


class RateLimitError(ProviderError):
    """Rate limit exceeded error."""
    pass


class TimeoutError(ProviderError):
    """Request timeout error."""
    pass


class BaseProvider(ABC):
    """Abstract base class for generator providers.

    A provider performs exactly one request per call. Failures surface as
    ``ProviderError`` subclasses and are never retried here; the agents
    decide what a failure means for their output.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        timeout: float = 60,
    ):
        """
        Initialize provider.

        Args:
            api_key: API key for authentication
            model: Model name to use
            timeout: Transport timeout in seconds
        """
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    async def _ensure_client(self) -> None:
        """Ensure HTTP client is initialized."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _make_request(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Make a single HTTP request.

        Args:
            method: HTTP method
            url: Request URL
            **kwargs: Additional request arguments

        Returns:
            HTTP response

        Raises:
            TimeoutError: If the request times out
            RateLimitError: If rate limit exceeded (HTTP 429)
            ProviderError: For other HTTP or transport errors
        """
        await self._ensure_client()

        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
            return response
        except httpx.TimeoutException as e:
            logger.error(f"Request timeout: {e}")
            raise TimeoutError(f"Request timed out after {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 429:
                logger.warning("Rate limit exceeded")
                raise RateLimitError("Rate limit exceeded") from e
            logger.error(f"HTTP error: {e}")
            raise ProviderError(f"HTTP {e.response.status_code}: {e.response.text}") from e
        except httpx.HTTPError as e:
            logger.error(f"Transport error: {e}")
            raise ProviderError(f"Transport error: {str(e)}") from e

    @abstractmethod
    async def complete(
        self,
        *,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        system_prompt: Optional[str] = None,
        **kwargs: Any,
    ) -> Optional[str]:
        """
        Generate a completion for the given prompt.

        Args:
            prompt: User prompt
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            system_prompt: System prompt to prepend
            **kwargs: Provider-specific parameters

        Returns:
            Generated text, or None when the backend produced no content
        """
        pass

    def count_tokens(self, text: str) -> int:
        """
        Estimate token count for text.

        Rough estimation of ~4 characters per token.
        """
        return len(text) // 4
