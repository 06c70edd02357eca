"""
OpenRouter provider implementation.

Speaks the OpenAI-compatible chat completions protocol over httpx, so it also
serves local OpenAI-compatible servers when ``base_url`` points at them.
"""
from typing import Any, Dict, Optional

from mathtutor.core.providers.base import BaseProvider, ProviderError
from mathtutor.utils.logging import get_logger, preview

logger = get_logger(__name__)


class OpenRouterProvider(BaseProvider):
    """OpenRouter API provider implementation."""

    def __init__(
        self,
        api_key: str,
        model: str = "google/gemini-2.0-flash-001",
        timeout: float = 60,
        base_url: str = "https://openrouter.ai/api/v1",
        site_url: Optional[str] = None,
        app_name: Optional[str] = None,
    ):
        """
        Initialize OpenRouter provider.

        Args:
            api_key: OpenRouter API key
            model: Model identifier (e.g., "google/gemini-2.0-flash-001")
            timeout: Request timeout in seconds
            base_url: API root; ``/chat/completions`` is appended
            site_url: Your site URL (optional, for better rate limits)
            app_name: Your app name (optional, for analytics)
        """
        super().__init__(api_key, model, timeout)
        self.base_url = base_url.rstrip("/")
        self.site_url = site_url
        self.app_name = app_name

    def _get_headers(self) -> Dict[str, str]:
        """Get request headers including authentication and optional metadata."""
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

        if self.site_url:
            headers["HTTP-Referer"] = self.site_url
        if self.app_name:
            headers["X-Title"] = self.app_name

        return headers

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
        Generate completion using the OpenRouter API.

        Args:
            prompt: User prompt
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            system_prompt: System prompt
            **kwargs: Additional payload parameters

        Returns:
            Generated text, or None when the response carries no content

        Raises:
            ProviderError: If the response body is not a chat completion
        """
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "stream": False,
        }
        if max_tokens:
            payload["max_tokens"] = max_tokens
        payload.update(kwargs)

        logger.debug(f"Calling OpenRouter API with model={self.model}")
        response = await self._make_request(
            "POST",
            f"{self.base_url}/chat/completions",
            headers=self._get_headers(),
            json=payload,
        )

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"OpenRouter returned a non-JSON body: {preview(response.text, 200)}")
            raise ProviderError("Invalid response format") from e

        if not isinstance(data, dict) or "choices" not in data:
            logger.error(f"Unexpected OpenRouter response: {preview(str(data), 200)}")
            raise ProviderError("Invalid response format")

        choices = data.get("choices") or []
        if not choices:
            return None

        message = choices[0].get("message") or {}
        usage = data.get("usage") or {}
        logger.debug(
            f"OpenRouter summary model={self.model} "
            f"usage(prompt={usage.get('prompt_tokens')}, completion={usage.get('completion_tokens')})"
        )
        return message.get("content")
