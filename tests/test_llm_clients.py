"""Tests for LLM clients, JSON extraction and prompts."""

import json
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from sheetcraft.config import Settings
from sheetcraft.errors import AIProcessingError, ConfigurationError
from sheetcraft.llm import (
    AnthropicClient,
    CompletionOptions,
    OpenAICompatibleClient,
    build_generation_prompt,
    create_llm_client,
    extract_json_object,
)
from sheetcraft.llm.prompts import format_rows


def _client(handler) -> OpenAICompatibleClient:
    return OpenAICompatibleClient(
        api_key="gsk-test",
        base_url="https://llm.test/v1/",
        provider="groq",
        transport=httpx.MockTransport(handler),
    )


def _completion(content, usage=None) -> dict:
    data = {"choices": [{"message": {"role": "assistant", "content": content}, "finish_reason": "stop"}]}
    if usage:
        data["usage"] = usage
    return data


class TestOpenAICompatibleClient:
    """Tests for OpenAICompatibleClient."""

    @pytest.mark.asyncio
    async def test_complete_sends_chat_request(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["auth"] = request.headers["Authorization"]
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json=_completion('{"rows": []}'))

        client = _client(handler)
        options = CompletionOptions(model="llama-3.3-70b-versatile", temperature=0.1, max_tokens=256)

        text = await client.complete("hello", options)

        assert text == '{"rows": []}'
        assert captured["url"] == "https://llm.test/v1/chat/completions"
        assert captured["auth"] == "Bearer gsk-test"
        body = captured["body"]
        assert body["model"] == "llama-3.3-70b-versatile"
        assert body["messages"] == [{"role": "user", "content": "hello"}]
        assert body["temperature"] == 0.1
        assert body["max_tokens"] == 256
        assert body["response_format"] == {"type": "json_object"}

    @pytest.mark.asyncio
    async def test_json_mode_off_omits_response_format(self):
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json=_completion("plain"))

        await _client(handler).complete("hi", CompletionOptions(model="m", json_mode=False))

        assert "response_format" not in bodies[0]

    @pytest.mark.asyncio
    async def test_records_usage(self):
        def handler(request):
            return httpx.Response(
                200, json=_completion("{}", usage={"prompt_tokens": 12, "completion_tokens": 3})
            )

        client = _client(handler)
        await client.complete("hi", CompletionOptions(model="m"))

        assert client.last_usage.input_tokens == 12
        assert client.last_usage.output_tokens == 3

    @pytest.mark.asyncio
    async def test_http_error_raises_ai_processing_error(self):
        def handler(request):
            return httpx.Response(401, json={"error": {"message": "Invalid API key"}})

        with pytest.raises(AIProcessingError, match="HTTP 401") as exc_info:
            await _client(handler).complete("hi", CompletionOptions(model="m"))

        assert isinstance(exc_info.value.cause, httpx.HTTPStatusError)

    @pytest.mark.asyncio
    async def test_transport_error_raises_ai_processing_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(AIProcessingError, match="request failed"):
            await _client(handler).complete("hi", CompletionOptions(model="m"))

    @pytest.mark.asyncio
    async def test_missing_content_raises(self):
        def handler(request):
            return httpx.Response(200, json=_completion(None))

        with pytest.raises(AIProcessingError, match="No content"):
            await _client(handler).complete("hi", CompletionOptions(model="m"))

    @pytest.mark.asyncio
    async def test_missing_choices_raises(self):
        def handler(request):
            return httpx.Response(200, json={"choices": []})

        with pytest.raises(AIProcessingError, match="No content"):
            await _client(handler).complete("hi", CompletionOptions(model="m"))

    def test_openrouter_sends_title_header(self):
        client = OpenAICompatibleClient(api_key="k", provider="openrouter")

        assert client._headers()["X-Title"] == "SheetCraft"


class TestAnthropicClient:
    """Tests for AnthropicClient."""

    @pytest.mark.asyncio
    async def test_complete_joins_text_blocks(self):
        client = AnthropicClient(api_key="sk-ant-test")
        response = Mock()
        response.content = [Mock(type="text", text='{"rows": '), Mock(type="text", text="[]}")]
        response.usage = Mock(input_tokens=10, output_tokens=4)
        client.client = Mock()
        client.client.messages.create = AsyncMock(return_value=response)

        text = await client.complete("hi", CompletionOptions(model="claude-3-5-haiku-latest", temperature=0.2))

        assert text == '{"rows": []}'
        kwargs = client.client.messages.create.call_args.kwargs
        assert kwargs["model"] == "claude-3-5-haiku-latest"
        assert kwargs["temperature"] == 0.2
        assert "JSON" in kwargs["system"]
        assert client.last_usage.output_tokens == 4

    @pytest.mark.asyncio
    async def test_empty_response_raises(self):
        client = AnthropicClient(api_key="sk-ant-test")
        response = Mock(content=[], usage=Mock(input_tokens=1, output_tokens=0))
        client.client = Mock()
        client.client.messages.create = AsyncMock(return_value=response)

        with pytest.raises(AIProcessingError):
            await client.complete("hi", CompletionOptions(model="m"))


class TestCreateLLMClient:
    """Tests for provider selection."""

    def test_groq(self, mock_settings):
        client = create_llm_client(mock_settings)

        assert isinstance(client, OpenAICompatibleClient)
        assert client.provider == "groq"
        assert client.base_url == mock_settings.groq_base_url.rstrip("/")

    def test_openrouter(self):
        client = create_llm_client(Settings(llm_provider="openrouter", openrouter_api_key="sk-or-1"))

        assert client.provider == "openrouter"

    def test_anthropic(self):
        client = create_llm_client(Settings(llm_provider="anthropic", anthropic_api_key="sk-ant-1"))

        assert isinstance(client, AnthropicClient)

    def test_missing_key(self):
        with pytest.raises(ConfigurationError, match="GROQ_API_KEY"):
            create_llm_client(Settings(llm_provider="groq", groq_api_key=None))

    def test_unknown_provider(self):
        with pytest.raises(ConfigurationError, match="Unknown"):
            create_llm_client(Settings(llm_provider="mystery"))


class TestExtractJsonObject:
    """Tests for reading JSON from completion text."""

    def test_plain_json(self):
        assert extract_json_object('{"a": 1}') == {"a": 1}

    def test_code_fence(self):
        assert extract_json_object('```json\n{"a": 1}\n```') == {"a": 1}

    def test_embedded_object(self):
        assert extract_json_object('Sure! {"a": {"b": 2}} Done.') == {"a": {"b": 2}}

    @pytest.mark.parametrize("text", ["", "   ", "no braces here", "{not: valid}"])
    def test_unparseable(self, text):
        with pytest.raises(AIProcessingError):
            extract_json_object(text)


class TestPrompts:
    """Tests for prompt construction."""

    def test_generation_prompt(self):
        prompt = build_generation_prompt("student marks", 2, ["Student", "Marks"])

        assert 'User\'s request: "student marks"' in prompt
        assert "Column names: Student, Marks" in prompt
        assert "exactly 2 columns" in prompt
        assert '"isData"' in prompt

    def test_format_rows_renders_empty_cells(self):
        assert format_rows(["A", "B"], [["x", None], [1.5, ""]]) == "Row 1: A=x, B=\nRow 2: A=1.5, B="
