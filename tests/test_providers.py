"""
Tests for generator providers and the provider factory.
"""
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from mathtutor.core.providers.base import ProviderError, RateLimitError, TimeoutError
from mathtutor.core.providers.factory import create_provider
from mathtutor.core.providers.openai import OpenAIProvider
from mathtutor.core.providers.openrouter import OpenRouterProvider


def make_openrouter(handler) -> OpenRouterProvider:
    provider = OpenRouterProvider(api_key="or-key", model="test/model", base_url="https://example.test/api/v1/")
    provider._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return provider


@pytest.mark.asyncio
async def test_openrouter_posts_chat_completion():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["payload"] = json.loads(request.content)
        return httpx.Response(200, json={"choices": [{"message": {"content": '{"guidance": "hi"}'}}]})

    provider = make_openrouter(handler)
    result = await provider.complete(prompt="Explain", temperature=0.5, max_tokens=600)

    assert result == '{"guidance": "hi"}'
    assert seen["url"] == "https://example.test/api/v1/chat/completions"
    assert seen["auth"] == "Bearer or-key"
    assert seen["payload"]["temperature"] == 0.5
    assert seen["payload"]["max_tokens"] == 600
    assert seen["payload"]["messages"] == [{"role": "user", "content": "Explain"}]
    await provider.close()


@pytest.mark.asyncio
async def test_openrouter_empty_choices_returns_none():
    provider = make_openrouter(lambda request: httpx.Response(200, json={"choices": []}))
    assert await provider.complete(prompt="p") is None


@pytest.mark.asyncio
async def test_openrouter_rejects_unexpected_body():
    provider = make_openrouter(lambda request: httpx.Response(200, json={"error": "nope"}))
    with pytest.raises(ProviderError, match="Invalid response format"):
        await provider.complete(prompt="p")


@pytest.mark.asyncio
async def test_make_request_maps_rate_limit():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(429, text="slow down")

    provider = make_openrouter(handler)
    with pytest.raises(RateLimitError):
        await provider.complete(prompt="p")
    # no retries
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_make_request_maps_server_error():
    provider = make_openrouter(lambda request: httpx.Response(503, text="unavailable"))
    with pytest.raises(ProviderError, match="HTTP 503"):
        await provider.complete(prompt="p")


@pytest.mark.asyncio
async def test_make_request_maps_timeout():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    provider = make_openrouter(handler)
    with pytest.raises(TimeoutError):
        await provider.complete(prompt="p")


@pytest.mark.asyncio
async def test_openai_provider_uses_chat_completions():
    provider = OpenAIProvider(api_key="sk-test", model="gpt-4o-mini")
    response = SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content="answer"))],
        usage=None,
    )

    with patch.object(provider.client.chat.completions, "create", new=AsyncMock(return_value=response)) as create:
        result = await provider.complete(prompt="p", temperature=0.3, max_tokens=500)

    assert result == "answer"
    kwargs = create.await_args.kwargs
    assert kwargs["model"] == "gpt-4o-mini"
    assert kwargs["temperature"] == 0.3
    assert kwargs["max_tokens"] == 500


@pytest.mark.asyncio
async def test_openai_provider_wraps_sdk_errors():
    provider = OpenAIProvider(api_key="sk-test")

    with patch.object(provider.client.chat.completions, "create", new=AsyncMock(side_effect=RuntimeError("boom"))):
        with pytest.raises(ProviderError, match="boom"):
            await provider.complete(prompt="p")


def test_openai_client_does_not_retry():
    provider = OpenAIProvider(api_key="sk-test")
    assert provider.client.max_retries == 0


@pytest.mark.asyncio
async def test_openai_close_closes_sdk_client():
    provider = OpenAIProvider(api_key="sk-test")

    with patch.object(provider.client, "close", new=AsyncMock()) as close:
        await provider.close()

    close.assert_awaited_once()


def test_factory_builds_configured_providers():
    assert isinstance(create_provider("openai", api_key="sk-test"), OpenAIProvider)
    provider = create_provider("openrouter", model="some/model", api_key="or-test")
    assert isinstance(provider, OpenRouterProvider)
    assert provider.model == "some/model"


def test_factory_rejects_unknown_provider():
    with pytest.raises(ValueError, match="Unknown provider"):
        create_provider("lmstudio", api_key="x")


def test_count_tokens_estimate():
    provider = OpenRouterProvider(api_key="k")
    assert provider.count_tokens("a" * 40) == 10
