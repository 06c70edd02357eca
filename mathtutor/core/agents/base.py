"""
Base agent interface.
"""
from abc import ABC, abstractmethod
from typing import Any

from mathtutor.core.agents.prompts.prompt_spec import PromptSpec
from mathtutor.core.gateway import GeneratorGateway
from mathtutor.utils.logging import get_logger, preview

logger = get_logger(__name__)


class AbstractAgent(ABC):
    """Abstract base class for generator-backed agents.

    An agent owns one fixed PromptSpec and turns the generator's free text
    into a validated model, substituting its fallback whenever the text
    cannot be trusted.
    """

    def __init__(
        self,
        role: str,
        gateway: GeneratorGateway,
        prompt_spec: PromptSpec,
    ):
        """
        Initialize agent.

        Args:
            role: Agent role/name, used in log lines
            gateway: Generator gateway
            prompt_spec: Fixed prompt template and sampling parameters
        """
        self.role = role
        self.gateway = gateway
        self.prompt_spec = prompt_spec

    @abstractmethod
    def fallback(self, *args: Any) -> Any:
        """Return the fixed canonical result used when generation fails."""
        pass

    async def _generate(self, prompt: str) -> str:
        """
        Send a rendered prompt with this agent's sampling parameters.

        Raises whatever the gateway raises.
        """
        logger.debug(f"[{self.role}] prompt: {preview(prompt, 300)}")
        response = await self.gateway.invoke(
            prompt,
            temperature=self.prompt_spec.temperature,
            max_output_size=self.prompt_spec.max_output_size,
        )
        logger.info(f"[{self.role}] response({len(response)} chars): {preview(response)}")
        return response

    def __repr__(self) -> str:
        """String representation."""
        return f"{self.__class__.__name__}(role='{self.role}')"
