"""
Tests for the generation backend clients
"""
import json

import httpx
import pytest

from jobassist.config import Settings
from jobassist.services.generation_client import (
    ChatCompletionClient,
    GenerationOptions,
    OllamaClient,
    create_generation_client,
)
from jobassist.utils.deadline import Deadline
from jobassist.utils.exceptions import BackendUnavailable, DeadlineExceeded, GenerationFailed


def _ollama(handler, **kwargs):
    return OllamaClient("http://ollama.test/", "llama3", transport=httpx.MockTransport(handler), **kwargs)


class TrackingTransport(httpx.MockTransport):
    """MockTransport that counts how often its owning client is closed"""

    def __init__(self, handler):
        super().__init__(handler)
        self.closed = 0

    async def aclose(self):
        self.closed += 1


def _chat_client(handler, api_key="sk-test", transport=None):
    return ChatCompletionClient(api_key=api_key, model="gpt-4o-mini", base_url="http://openai.test/v1",
                                transport=transport or httpx.MockTransport(handler))


def _completion(content):
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 0,
        "model": "gpt-4o-mini",
        "choices": [{"index": 0, "finish_reason": "stop",
                     "message": {"role": "assistant", "content": content}}],
    }


class TestOllamaAvailability:
    """Test the Ollama liveness probe"""

    @pytest.mark.asyncio
    async def test_available(self):
        """Test a 200 from /api/tags reports available"""
        def handler(request):
            assert request.url.path == "/api/tags"
            return httpx.Response(200, json={"models": []})

        result = await _ollama(handler).check_availability()
        assert result.is_available is True
        assert result.error is None
        assert result.response_time is not None

    @pytest.mark.asyncio
    async def test_connection_refused(self):
        """Test connection errors are reported, not raised"""
        def handler(request):
            raise httpx.ConnectError("Connection refused")

        result = await _ollama(handler).check_availability()
        assert result.is_available is False
        assert result.error.startswith("Cannot connect")

    @pytest.mark.asyncio
    async def test_timeout(self):
        """Test a probe timeout names the timeout"""
        def handler(request):
            raise httpx.ReadTimeout("timed out")

        result = await _ollama(handler, probe_timeout=5).check_availability()
        assert result.is_available is False
        assert result.error == "Server timeout - no response within 5 seconds"

    @pytest.mark.asyncio
    async def test_non_success_status(self):
        """Test non-2xx responses carry the status code"""
        result = await _ollama(lambda request: httpx.Response(500, text="boom")).check_availability()
        assert result.is_available is False
        assert result.error == "HTTP 500: boom"

    @pytest.mark.asyncio
    async def test_ensure_available_raises(self):
        """Test ensure_available turns a failed probe into BackendUnavailable"""
        def handler(request):
            raise httpx.ConnectError("Connection refused")

        with pytest.raises(BackendUnavailable) as exc_info:
            await _ollama(handler).ensure_available()
        assert "not available" in exc_info.value.message
        assert exc_info.value.details["provider"] == "ollama"


class TestOllamaGenerate:
    """Test Ollama content generation"""

    @pytest.mark.asyncio
    async def test_payload_and_response(self):
        """Test the request body and returned text"""
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"response": '{"summary": "ok"}'})

        client = _ollama(handler, options=GenerationOptions(temperature=0.2, max_tokens=512))
        assert await client.generate("PROMPT") == '{"summary": "ok"}'
        assert seen["path"] == "/api/generate"
        assert seen["body"]["model"] == "llama3"
        assert seen["body"]["stream"] is False
        assert seen["body"]["format"] == "json"
        assert seen["body"]["options"] == {"temperature": 0.2, "num_predict": 512}

    @pytest.mark.asyncio
    async def test_http_error(self):
        """Test non-2xx raises GenerationFailed with an excerpt"""
        client = _ollama(lambda request: httpx.Response(500, text="model crashed"))
        with pytest.raises(GenerationFailed) as exc_info:
            await client.generate("PROMPT")
        assert exc_info.value.reason == "HTTP 500"
        assert exc_info.value.details["excerpt"] == "model crashed"

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        """Test an unparseable body raises GenerationFailed"""
        client = _ollama(lambda request: httpx.Response(200, text="<html>proxy</html>"))
        with pytest.raises(GenerationFailed) as exc_info:
            await client.generate("PROMPT")
        assert exc_info.value.reason == "response body is not JSON"

    @pytest.mark.asyncio
    async def test_empty_response(self):
        """Test blank model output raises GenerationFailed"""
        client = _ollama(lambda request: httpx.Response(200, json={"response": "   "}))
        with pytest.raises(GenerationFailed) as exc_info:
            await client.generate("PROMPT")
        assert exc_info.value.reason == "empty response from model"

    @pytest.mark.asyncio
    async def test_expired_deadline(self):
        """Test no request is sent once the deadline has passed"""
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={"response": "{}"})

        with pytest.raises(DeadlineExceeded):
            await _ollama(handler).generate("PROMPT", deadline=Deadline(0))
        assert calls == []


class TestChatCompletionClient:
    """Test the OpenAI-compatible client"""

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        """Test an unconfigured key reports unavailable without a request"""
        def handler(request):
            raise AssertionError("no request expected")

        result = await _chat_client(handler, api_key=None).check_availability()
        assert result.is_available is False
        assert "API key is not configured" in result.error

    @pytest.mark.asyncio
    async def test_generate(self):
        """Test message content is returned"""
        def handler(request):
            body = json.loads(request.content)
            assert body["messages"][-1] == {"role": "user", "content": "PROMPT"}
            return httpx.Response(200, json=_completion('{"summary": "ok"}'))

        assert await _chat_client(handler).generate("PROMPT") == '{"summary": "ok"}'

    @pytest.mark.asyncio
    async def test_generate_status_error(self):
        """Test API status errors become GenerationFailed"""
        client = _chat_client(lambda request: httpx.Response(500, json={"error": {"message": "down"}}))
        with pytest.raises(GenerationFailed) as exc_info:
            await client.generate("PROMPT")
        assert exc_info.value.reason == "HTTP 500"

    @pytest.mark.asyncio
    async def test_generate_empty_content(self):
        """Test empty message content becomes GenerationFailed"""
        client = _chat_client(lambda request: httpx.Response(200, json=_completion("")))
        with pytest.raises(GenerationFailed):
            await client.generate("PROMPT")

    @pytest.mark.asyncio
    async def test_probe_closes_client(self):
        """Test the availability probe closes its HTTP client"""
        transport = TrackingTransport(lambda request: httpx.Response(200, json={"object": "list", "data": []}))
        result = await _chat_client(None, transport=transport).check_availability()
        assert result.is_available is True
        assert transport.closed == 1

    @pytest.mark.asyncio
    async def test_generate_closes_client(self):
        """Test every generate call closes its HTTP client, on success and failure"""
        transport = TrackingTransport(lambda request: httpx.Response(200, json=_completion('{"a": 1}')))
        client = _chat_client(None, transport=transport)
        await client.generate("PROMPT")
        await client.generate("PROMPT")
        assert transport.closed == 2

        failing = TrackingTransport(lambda request: httpx.Response(500, json={"error": {"message": "down"}}))
        with pytest.raises(GenerationFailed):
            await _chat_client(None, transport=failing).generate("PROMPT")
        assert failing.closed == 1


class TestCreateGenerationClient:
    """Test provider selection"""

    def test_default_is_ollama(self):
        """Test Ollama is used by default"""
        client = create_generation_client(Settings())
        assert isinstance(client, OllamaClient)
        assert client.provider == "ollama"

    @pytest.mark.parametrize("provider", ["openai", "gemini"])
    def test_chat_providers(self, provider):
        """Test OpenAI and Gemini share the chat client"""
        client = create_generation_client(Settings(generation_provider=provider, generation_timeout=7))
        assert isinstance(client, ChatCompletionClient)
        assert client.provider == provider
        assert client.options.timeout == 7
