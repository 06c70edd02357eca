"""
OpenAI provider implementation.
"""
from typing import Any, List, Optional

from openai import AsyncOpenAI
from openai.types.chat import ChatCompletionMessageParam

from mathtutor.core.providers.base import BaseProvider, ProviderError
from mathtutor.utils.logging import get_logger

logger = get_logger(__name__)


class OpenAIProvider(BaseProvider):
    """OpenAI chat completions provider."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        timeout: float = 60,
    ):
        super().__init__(api_key, model, timeout)
        # the SDK retries by default; one call means one request
        self.client = AsyncOpenAI(
            api_key=api_key,
            timeout=timeout,
            max_retries=0,
        )

    async def close(self) -> None:
        """Close the SDK client and its connection pool."""
        await self.client.close()
        await super().close()

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
        Generate completion using the OpenAI chat completions API.

        Args:
            prompt: User prompt
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            system_prompt: System prompt
            **kwargs: Additional OpenAI-specific parameters

        Returns:
            Generated text, or None when the response carries no content
        """
        messages: List[ChatCompletionMessageParam] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        params = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
        }
        if max_tokens:
            params["max_tokens"] = max_tokens
        params.update(kwargs)

        try:
            logger.debug(f"Calling OpenAI API with model={self.model}, temperature={temperature}")
            response = await self.client.chat.completions.create(**params)
        except Exception as e:
            logger.error(f"OpenAI API error: {e}")
            raise ProviderError(f"OpenAI API error: {str(e)}") from e

        if not response.choices:
            return None

        content = response.choices[0].message.content
        logger.debug(f"OpenAI response received, tokens used: {response.usage}")
        return content
