"""
Shared fixtures.
"""
from typing import List, Optional, Union

import pytest

from mathtutor.core.gateway import GeneratorGateway
from mathtutor.core.providers.base import BaseProvider
from mathtutor.core.tools.symbolic import SymbolicMathOracle


class ScriptedProvider(BaseProvider):
    """Provider that replays canned responses and records every call."""

    def __init__(self, responses: Optional[List[Union[str, None, Exception]]] = None):
        super().__init__(api_key="test-key", model="scripted-model", timeout=5)
        self.responses = list(responses or [])
        self.calls: List[dict] = []

    async def complete(self, *, prompt, temperature=0.7, max_tokens=None, system_prompt=None, **kwargs):
        self.calls.append({"prompt": prompt, "temperature": temperature, "max_tokens": max_tokens})
        if not self.responses:
            return ""
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def scripted_provider():
    return ScriptedProvider()


@pytest.fixture
def gateway(scripted_provider):
    return GeneratorGateway(provider=scripted_provider, timeout=5)


@pytest.fixture
def oracle():
    return SymbolicMathOracle()
