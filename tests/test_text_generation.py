"""
Tests for the text generation layer.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from script_feedback.config import LLMSettings
from script_feedback.errors import MalformedPayloadError, RemoteCallError
from script_feedback.text_generation import (
    TextGenerationError,
    create_provider_from_settings,
    generate_text_async,
    parse_json_payload,
)
from script_feedback.types.providers import (
    AnthropicConfig,
    GenerationOptions,
    LLMProvider,
    OpenAIConfig,
)


@pytest.fixture
def mock_async_openai():
    """Mock the async OpenAI client."""
    with patch("script_feedback.text_generation.core.AsyncOpenAI") as mock:
        mock_instance = MagicMock()
        mock_instance.chat.completions.create = AsyncMock(
            return_value=MagicMock(choices=[MagicMock(message=MagicMock(content='{"ok": true}'))])
        )
        mock.return_value = mock_instance
        yield mock


@pytest.fixture
def mock_async_anthropic():
    """Mock the async Anthropic client."""
    with patch("script_feedback.text_generation.core.AsyncAnthropic") as mock:
        mock_instance = MagicMock()
        mock_instance.messages.create = AsyncMock(
            return_value=MagicMock(content=[MagicMock(type="text", text="Generated content")])
        )
        mock.return_value = mock_instance
        yield mock


class TestGenerateText:
    """Tests for provider dispatch."""

    @pytest.mark.asyncio
    async def test_openai_request_shape(self, mock_async_openai):
        provider = LLMProvider(type="openai", config=OpenAIConfig(api_key="sk-test-1234567890"))
        options = GenerationOptions(temperature=0.7, max_tokens=500, timeout=30)

        text = await generate_text_async("Evaluate this.", provider, options, system_prompt="Return JSON.")

        assert text == '{"ok": true}'
        mock_async_openai.assert_called_once_with(api_key="sk-test-1234567890", timeout=30)
        kwargs = mock_async_openai.return_value.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-3.5-turbo"
        assert kwargs["temperature"] == 0.7
        assert kwargs["max_tokens"] == 500
        assert kwargs["messages"] == [
            {"role": "system", "content": "Return JSON."},
            {"role": "user", "content": "Evaluate this."},
        ]

    @pytest.mark.asyncio
    async def test_anthropic_request_shape(self, mock_async_anthropic):
        provider = LLMProvider(type="anthropic", config=AnthropicConfig(api_key="sk-ant-test-123456"))

        text = await generate_text_async("Refine this.", provider, system_prompt="Script only.")

        assert text == "Generated content"
        kwargs = mock_async_anthropic.return_value.messages.create.call_args.kwargs
        assert kwargs["system"] == "Script only."
        assert kwargs["max_tokens"] == 600
        assert kwargs["messages"] == [{"role": "user", "content": "Refine this."}]

    @pytest.mark.asyncio
    async def test_empty_response_raises(self, mock_async_openai):
        mock_async_openai.return_value.chat.completions.create.return_value = MagicMock(
            choices=[MagicMock(message=MagicMock(content=None))]
        )
        provider = LLMProvider(type="openai", config=OpenAIConfig(api_key="sk-test-1234567890"))

        with pytest.raises(TextGenerationError, match="Empty response"):
            await generate_text_async("Evaluate this.", provider)

    @pytest.mark.asyncio
    async def test_unexpected_errors_are_wrapped(self, mock_async_openai):
        mock_async_openai.return_value.chat.completions.create.side_effect = RuntimeError("socket closed")
        provider = LLMProvider(type="openai", config=OpenAIConfig(api_key="sk-test-1234567890"))

        with pytest.raises(RemoteCallError, match="socket closed"):
            await generate_text_async("Evaluate this.", provider)

    @pytest.mark.asyncio
    async def test_unsupported_provider(self):
        provider = LLMProvider(type="mistral", config=OpenAIConfig(api_key="x"))

        with pytest.raises(TextGenerationError, match="Unsupported provider"):
            await generate_text_async("Evaluate this.", provider)


class TestParseJsonPayload:
    """Tests for structured payload parsing."""

    def test_plain_object(self):
        assert parse_json_payload('{"comfort_score": 7}') == {"comfort_score": 7}

    def test_fenced_object_with_prose(self):
        text = 'Sure! Here you go:\n```json\n{"humor_score": 4}\n```\nHope that helps.'
        assert parse_json_payload(text) == {"humor_score": 4}

    def test_invalid_json(self):
        with pytest.raises(MalformedPayloadError) as exc_info:
            parse_json_payload('{"comfort_score": 7,')

        assert exc_info.value.payload == '{"comfort_score": 7,'

    def test_non_object_payload(self):
        with pytest.raises(MalformedPayloadError, match="Expected a JSON object"):
            parse_json_payload("[1, 2, 3]")

    def test_empty_text(self):
        with pytest.raises(MalformedPayloadError):
            parse_json_payload("")


class TestCreateProvider:
    """Tests for provider creation from settings."""

    def test_no_keys_returns_none(self):
        assert create_provider_from_settings(LLMSettings(_env_file=None)) is None

    def test_preferred_provider_wins(self):
        settings = LLMSettings(
            _env_file=None,
            openai_api_key="sk-test-1234567890",
            gemini_api_key="AIza-test-key",
            llm_provider="gemini",
        )
        provider = create_provider_from_settings(settings)

        assert provider.type == "gemini"
        assert provider.config.api_key == "AIza-test-key"
        assert provider.config.model == "gemini-1.5-flash-latest"

    def test_first_available_provider(self):
        settings = LLMSettings(_env_file=None, anthropic_api_key="sk-ant-test-123456")
        provider = create_provider_from_settings(settings)

        assert provider.type == "anthropic"
        assert provider.config.model == "claude-3-5-haiku-latest"

    def test_forced_provider_without_key(self):
        settings = LLMSettings(_env_file=None, openai_api_key="sk-test-1234567890")
        with pytest.raises(TextGenerationError, match="anthropic"):
            create_provider_from_settings(settings, "anthropic")
