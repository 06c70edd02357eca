"""
Tests for the generator gateway.
"""
import asyncio

import pytest

from mathtutor.core.gateway import GeneratorGateway
from mathtutor.core.providers.base import BaseProvider, ProviderError, TimeoutError
from mathtutor.settings import settings


@pytest.mark.asyncio
async def test_invoke_passes_sampling_parameters(gateway, scripted_provider):
    scripted_provider.responses = ["hello"]

    result = await gateway.invoke("prompt", temperature=0.3, max_output_size=500)

    assert result == "hello"
    assert scripted_provider.calls == [{"prompt": "prompt", "temperature": 0.3, "max_tokens": 500}]


@pytest.mark.asyncio
async def test_invoke_uses_settings_defaults(gateway, scripted_provider):
    scripted_provider.responses = ["ok"]

    await gateway.invoke("prompt")

    call = scripted_provider.calls[0]
    assert call["temperature"] == settings.default_temperature
    assert call["max_tokens"] == settings.default_max_tokens


@pytest.mark.asyncio
async def test_invoke_maps_none_to_empty_string(gateway, scripted_provider):
    scripted_provider.responses = [None]
    assert await gateway.invoke("prompt") == ""


@pytest.mark.asyncio
async def test_invoke_propagates_provider_errors_without_retry(gateway, scripted_provider):
    scripted_provider.responses = [ProviderError("HTTP 500: boom"), "never reached"]

    with pytest.raises(ProviderError):
        await gateway.invoke("prompt")

    assert len(scripted_provider.calls) == 1


@pytest.mark.asyncio
async def test_invoke_times_out():
    class SlowProvider(BaseProvider):
        async def complete(self, **kwargs):
            await asyncio.sleep(1)
            return "late"

    gateway = GeneratorGateway(provider=SlowProvider(api_key="k", model="slow"), timeout=0.01)

    with pytest.raises(TimeoutError):
        await gateway.invoke("prompt")
