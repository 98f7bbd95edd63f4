"""Unit tests for AnthropicClient (httpx.MockTransport, no network)."""

import json

import httpx
import pytest

from transcript_labeler.llm.anthropic_client import AnthropicClient
from transcript_labeler.llm.exceptions import (
    LLMConfigurationError,
    LLMConnectionError,
    LLMGenerationError,
    LLMRateLimitError,
    LLMTimeoutError,
)
from transcript_labeler.models.llm_models import LLMGenerationRequest


MESSAGE_BODY = {
    "id": "msg_01",
    "type": "message",
    "model": "claude-3-5-sonnet-20240620",
    "content": [{"type": "text", "text": '[{"text": "a", "category": "PROB"}]'}],
    "stop_reason": "end_turn",
    "usage": {"input_tokens": 250, "output_tokens": 120},
}


@pytest.fixture
def generation_request():
    return LLMGenerationRequest(
        prompt="Please categorize the following transcription snippets.",
        system_prompt="Respond with a JSON array only.",
        model="claude-3-5-sonnet-20240620",
        max_tokens=500,
    )


def make_client(handler, **kwargs) -> AnthropicClient:
    return AnthropicClient(
        api_key="test-key",
        base_url="https://anthropic.test",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


class TestAnthropicClientGenerate:
    """Test suite for AnthropicClient.generate."""

    @pytest.mark.asyncio
    async def test_success(self, generation_request):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=MESSAGE_BODY)

        async with make_client(handler) as client:
            response = await client.generate(generation_request)

        assert response.content == '[{"text": "a", "category": "PROB"}]'
        assert response.model_version == "claude-3-5-sonnet-20240620"
        assert response.finish_reason == "end_turn"
        assert response.prompt_tokens == 250
        assert response.completion_tokens == 120
        assert response.raw_metadata == {"id": "msg_01"}

        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == "/v1/messages"
        assert request.headers["x-api-key"] == "test-key"
        assert request.headers["anthropic-version"] == "2023-06-01"

        payload = json.loads(request.content)
        assert payload["model"] == "claude-3-5-sonnet-20240620"
        assert payload["max_tokens"] == 500
        assert payload["system"] == "Respond with a JSON array only."
        assert payload["messages"] == [
            {"role": "user", "content": "Please categorize the following transcription snippets."}
        ]
        assert "temperature" not in payload

    @pytest.mark.asyncio
    async def test_temperature_forwarded_when_set(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(json.loads(request.content))
            return httpx.Response(200, json=MESSAGE_BODY)

        request = LLMGenerationRequest(prompt="p", model="m", temperature=0.2, stop_sequences=["]"])

        async with make_client(handler) as client:
            await client.generate(request)

        assert seen[0]["temperature"] == 0.2
        assert seen[0]["stop_sequences"] == ["]"]
        assert "system" not in seen[0]

    @pytest.mark.asyncio
    async def test_first_text_block_used(self, generation_request):
        body = dict(MESSAGE_BODY, content=[
            {"type": "tool_use", "id": "t1", "name": "x", "input": {}},
            {"type": "text", "text": "[]"},
        ])

        async with make_client(lambda request: httpx.Response(200, json=body)) as client:
            response = await client.generate(generation_request)

        assert response.content == "[]"

    @pytest.mark.parametrize(
        "body",
        [
            {"model": "m", "content": []},
            {"model": "m"},
            {"model": "m", "content": [{"type": "text"}]},
            {"model": "m", "content": "not a list"},
            [],
        ],
    )
    @pytest.mark.asyncio
    async def test_missing_text_raises(self, generation_request, body):
        async with make_client(lambda request: httpx.Response(200, json=body)) as client:
            with pytest.raises(LLMGenerationError, match="Unexpected Anthropic response"):
                await client.generate(generation_request)

    @pytest.mark.asyncio
    async def test_non_json_body_raises(self, generation_request):
        handler = lambda request: httpx.Response(200, text="<html>gateway</html>")

        async with make_client(handler) as client:
            with pytest.raises(LLMGenerationError, match="Invalid JSON"):
                await client.generate(generation_request)

    @pytest.mark.asyncio
    async def test_client_error_not_retryable(self, generation_request):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(400, json={"type": "error", "error": {"message": "bad request"}})

        async with make_client(handler) as client:
            with pytest.raises(LLMGenerationError) as exc_info:
                await client.generate(generation_request)

        assert len(calls) == 1
        assert exc_info.value.details["status"] == 400
        assert exc_info.value.retryable is False

    @pytest.mark.asyncio
    async def test_server_error_raised_as_retryable(self, generation_request):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(529, text="overloaded")

        async with make_client(handler) as client:
            with pytest.raises(LLMGenerationError) as exc_info:
                await client.generate(generation_request)

        assert len(calls) == 1
        assert exc_info.value.details["status"] == 529
        assert exc_info.value.retryable is True

    @pytest.mark.asyncio
    async def test_rate_limit_raised_once(self, generation_request):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(429, text="rate limited")

        async with make_client(handler) as client:
            with pytest.raises(LLMRateLimitError) as exc_info:
                await client.generate(generation_request)

        assert len(calls) == 1
        assert exc_info.value.retryable is True

    @pytest.mark.asyncio
    async def test_timeout(self, generation_request):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        async with make_client(handler) as client:
            with pytest.raises(LLMTimeoutError) as exc_info:
                await client.generate(generation_request)

        assert exc_info.value.retryable is True

    @pytest.mark.asyncio
    async def test_network_error(self, generation_request):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with make_client(handler) as client:
            with pytest.raises(LLMConnectionError) as exc_info:
                await client.generate(generation_request)

        assert not isinstance(exc_info.value, LLMTimeoutError)
        assert exc_info.value.details["error_type"] == "ConnectError"
        assert exc_info.value.retryable is True


class TestAnthropicClientSetup:
    """Test suite for construction and health checks."""

    def test_missing_api_key_rejected(self):
        with pytest.raises(LLMConfigurationError):
            AnthropicClient(api_key="")

    def test_repr_hides_key(self):
        client = AnthropicClient(api_key="sk-secret", base_url="https://anthropic.test/")

        assert "sk-secret" not in repr(client)
        assert client.base_url == "https://anthropic.test"

    @pytest.mark.asyncio
    async def test_health_check_ok(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/v1/models"
            return httpx.Response(200, json={"data": []})

        async with make_client(handler) as client:
            assert await client.health_check() is True

    @pytest.mark.asyncio
    async def test_health_check_failure_returns_false(self):
        async with make_client(lambda request: httpx.Response(401, text="unauthorized")) as client:
            assert await client.health_check() is False
