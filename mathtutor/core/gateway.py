"""
Generator gateway: the single seam between the pipeline and a text generator.
"""
import asyncio
from typing import Optional

from mathtutor.core.providers.base import BaseProvider, TimeoutError
from mathtutor.core.providers.factory import create_provider
from mathtutor.settings import settings
from mathtutor.utils.logging import get_logger

logger = get_logger(__name__)


class GeneratorGateway:
    """
    Sends one prompt to the configured provider and returns its raw text.

    Sampling defaults come from settings when a caller omits them. Every call
    is bounded by ``generator_timeout``. Provider failures propagate unchanged
    and nothing is retried.
    """

    def __init__(
        self,
        provider: Optional[BaseProvider] = None,
        timeout: Optional[float] = None,
    ):
        self._provider = provider
        self.timeout = timeout if timeout is not None else settings.generator_timeout

    @property
    def provider(self) -> BaseProvider:
        # created on first use so a missing API key only fails the call that needs it
        if self._provider is None:
            self._provider = create_provider()
        return self._provider

    async def invoke(
        self,
        prompt: str,
        temperature: Optional[float] = None,
        max_output_size: Optional[int] = None,
    ) -> str:
        """
        Send prompt to the generator.

        Args:
            prompt: Fully rendered prompt text
            temperature: Sampling temperature (settings default when None)
            max_output_size: Output token cap (settings default when None)

        Returns:
            The generator's raw text, "" when it produced nothing

        Raises:
            TimeoutError: If the call exceeds the request-level timeout
            ProviderError: For any transport or backend failure
        """
        if temperature is None:
            temperature = settings.default_temperature
        if max_output_size is None:
            max_output_size = settings.default_max_tokens

        provider = self.provider
        logger.debug(
            f"Invoking generator model={provider.model} temperature={temperature} "
            f"max_output_size={max_output_size} prompt_tokens~{provider.count_tokens(prompt)}"
        )

        try:
            result = await asyncio.wait_for(
                provider.complete(
                    prompt=prompt,
                    temperature=temperature,
                    max_tokens=max_output_size,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error(f"Generator call exceeded {self.timeout}s")
            raise TimeoutError(f"Generator call timed out after {self.timeout}s") from e

        return result or ""

    async def close(self) -> None:
        """Release the provider's transport, if one was created."""
        if self._provider is not None:
            await self._provider.close()
