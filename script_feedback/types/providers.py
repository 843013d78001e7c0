"""
Type definitions for text-generation providers.
"""
from typing import Literal, Optional, Union


class ProviderConfig:
    """Base configuration for LLM providers."""
    api_key: str
    model: str

    def __init__(self, api_key: str, model: str):
        self.api_key = api_key
        self.model = model

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model={self.model!r})"


class OpenAIConfig(ProviderConfig):
    """Configuration for OpenAI provider."""

    def __init__(self, api_key: str, model: str = "gpt-3.5-turbo"):
        super().__init__(api_key, model)


class AnthropicConfig(ProviderConfig):
    """Configuration for Anthropic provider."""

    def __init__(self, api_key: str, model: str = "claude-3-5-haiku-latest"):
        super().__init__(api_key, model)


class GeminiConfig(ProviderConfig):
    """Configuration for Google's Gemini provider."""

    def __init__(self, api_key: str, model: str = "gemini-1.5-flash-latest"):
        super().__init__(api_key, model)


ProviderType = Literal["openai", "anthropic", "gemini"]


class LLMProvider:
    """LLM provider configuration."""
    type: ProviderType
    config: Union[OpenAIConfig, AnthropicConfig, GeminiConfig]

    def __init__(self, type: ProviderType, config: Union[OpenAIConfig, AnthropicConfig, GeminiConfig]):
        self.type = type
        self.config = config

    def __repr__(self) -> str:
        return f"LLMProvider(type={self.type!r}, config={self.config!r})"


class GenerationOptions:
    """Options for a single chat-style generation call."""
    temperature: float
    max_tokens: int
    top_p: float
    timeout: Optional[float]

    def __init__(
        self,
        temperature: float = 0.7,
        max_tokens: int = 600,
        top_p: float = 1.0,
        timeout: Optional[float] = None,
    ):
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.top_p = top_p
        self.timeout = timeout

    def with_max_tokens(self, max_tokens: int) -> "GenerationOptions":
        """Return a copy bounded to a different output length."""
        return GenerationOptions(
            temperature=self.temperature,
            max_tokens=max_tokens,
            top_p=self.top_p,
            timeout=self.timeout,
        )
